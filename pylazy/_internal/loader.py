"""Error reporter discovery via Python entry points.

This module loads ErrorReporter implementations registered under the
``pylazy.reporters`` entry point group, so an application can change how
lazy-handle failures are rendered without registering a reporter in code.
"""
from __future__ import annotations

import logging
import os
from importlib.metadata import entry_points
from typing import cast

from ..interfaces import ErrorReporter

logger = logging.getLogger(__name__)

REPORTER_GROUP = "pylazy.reporters"
REPORTER_ENV_VAR = "PYLAZY_REPORTER"

# Shipped with pylazy; selectable by name but never auto-detected.
_BUILTIN_REPORTERS = frozenset({"logging"})


def load_reporter(name: str | None = None) -> ErrorReporter | None:
    """Load an error reporter by name using entry points.

    Discovery order:
    1. PYLAZY_REPORTER environment variable (override)
    2. Explicit ``name`` argument
    3. Auto-detect via entry points if exactly one third-party reporter is installed

    Returns:
        The loaded reporter instance, or None if no reporters are installed.

    Raises:
        ValueError: If the requested reporter is not found or discovery is ambiguous.
    """
    override = os.environ.get(REPORTER_ENV_VAR)
    if override:
        logger.debug("Using reporter override: %s", override)
        name = override

    eps_obj = entry_points()
    if hasattr(eps_obj, "select"):
        eps_list = list(eps_obj.select(group=REPORTER_GROUP))
    else:
        eps_list = list(eps_obj)

    if name:
        matches = [ep for ep in eps_list if ep.name == name]
        if not matches:
            available = [ep.name for ep in eps_list]
            raise ValueError(f"Reporter '{name}' not found. Available: {available}")
        if len(matches) > 1:
            raise ValueError(f"Multiple reporters registered as '{name}'")
        reporter_cls = matches[0].load()
        logger.info("[PyLazy][Loader] Loaded reporter via entry point: %s", name)
        return cast(ErrorReporter, reporter_cls())

    eps_list = [ep for ep in eps_list if ep.name not in _BUILTIN_REPORTERS]
    if not eps_list:
        logger.debug("No reporters found via entry points")
        return None

    if len(eps_list) == 1:
        ep = eps_list[0]
        logger.info("[PyLazy][Loader] Auto-detected reporter: %s", ep.name)
        reporter_cls = ep.load()
        return cast(ErrorReporter, reporter_cls())

    available = [ep.name for ep in eps_list]
    raise ValueError(f"Multiple reporters found, set {REPORTER_ENV_VAR} to one of: {available}")
