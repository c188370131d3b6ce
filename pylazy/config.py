from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TypedDict

import yaml

logger = logging.getLogger(__name__)


class LazyProxyConfig(TypedDict, total=False):
    """Process-wide defaults for lazy handles."""

    reentrant_callers: list[str]
    """Modules allowed to read a handle while it is still being created.

    A read made while the handle's creator is running, from code in one of
    these modules (exact name or dotted prefix) anywhere between the read and
    the creator, reports the attribute as missing instead of invoking the
    creator again.
    """

    log_materialization: bool
    """If True, log each materialization at INFO instead of DEBUG."""


_DEFAULTS: LazyProxyConfig = {
    "reentrant_callers": [],
    "log_materialization": False,
}

_config: LazyProxyConfig = {
    "reentrant_callers": [],
    "log_materialization": False,
}


def _validate(overrides: dict[str, Any]) -> LazyProxyConfig:
    unknown = set(overrides) - set(LazyProxyConfig.__annotations__)
    if unknown:
        raise ValueError(f"Unknown pylazy config keys: {sorted(unknown)}")

    validated: LazyProxyConfig = {}
    if "reentrant_callers" in overrides:
        callers = overrides["reentrant_callers"]
        if isinstance(callers, str) or not all(isinstance(c, str) and c for c in callers):
            raise ValueError("reentrant_callers must be a list of non-empty module names")
        validated["reentrant_callers"] = list(callers)
    if "log_materialization" in overrides:
        flag = overrides["log_materialization"]
        if not isinstance(flag, bool):
            raise ValueError("log_materialization must be a boolean")
        validated["log_materialization"] = flag
    return validated


def configure(**overrides: Any) -> LazyProxyConfig:
    """Update the process-wide configuration and return a copy of it."""
    _config.update(_validate(overrides))
    logger.debug("[PyLazy][Config] Configuration updated: %s", _config)
    return get_config()


def get_config() -> LazyProxyConfig:
    """Return a copy of the current configuration."""
    return {
        "reentrant_callers": list(_config["reentrant_callers"]),
        "log_materialization": _config["log_materialization"],
    }


def reset_config() -> None:
    """Restore the built-in defaults."""
    _config.clear()
    _config.update(
        {
            "reentrant_callers": list(_DEFAULTS["reentrant_callers"]),
            "log_materialization": _DEFAULTS["log_materialization"],
        }
    )


def load_config(path: str | Path) -> LazyProxyConfig:
    """Load configuration from a YAML file and apply it.

    The file holds either the settings at top level or under a ``pylazy`` key::

        pylazy:
          reentrant_callers:
            - web3.providers
          log_materialization: true
    """
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"pylazy config file {path} must contain a mapping")
    if "pylazy" in data:
        data = data["pylazy"] or {}
        if not isinstance(data, dict):
            raise ValueError(f"'pylazy' section in {path} must be a mapping")
    logger.info("[PyLazy][Config] Loading configuration from %s", path)
    return configure(**data)


def reentrant_callers() -> tuple[str, ...]:
    """Current allow-list, as a tuple for cheap membership checks."""
    return tuple(_config["reentrant_callers"])


def log_materialization() -> bool:
    return _config["log_materialization"]
