"""Reporter registry and the failure entry point used by lazy handles."""

from __future__ import annotations

import logging
from typing import Any, NoReturn

from typing_extensions import override

from ..errors import error_for
from ..interfaces import ErrorReporter

logger = logging.getLogger(__name__)


class DefaultReporter:
    """Reporter that raises the typed error for each failure kind."""

    @property
    def identifier(self) -> str:
        return "default"

    def report(self, kind: str, payload: dict[str, Any]) -> NoReturn:
        raise error_for(kind, payload)


class LoggingReporter(DefaultReporter):
    """Reporter that logs the rendered failure at ERROR before raising it."""

    @property
    @override
    def identifier(self) -> str:
        return "logging"

    @override
    def report(self, kind: str, payload: dict[str, Any]) -> NoReturn:
        error = error_for(kind, payload)
        logger.error("[PyLazy][Reporter] %s", error)
        raise error


class ReporterRegistry:
    """Singleton registry for the active error reporter."""

    _instance: ErrorReporter | None = None
    _discovered: ErrorReporter | None = None

    @classmethod
    def register(cls, reporter: ErrorReporter) -> None:
        """Register reporter instance.

        Raises:
            RuntimeError: If a different reporter is already registered.
        """
        if cls._instance is not None:
            if cls._instance is reporter:
                return
            raise RuntimeError(f"Reporter already registered: {cls._instance}. Call unregister() first.")
        cls._instance = reporter

    @classmethod
    def get(cls) -> ErrorReporter | None:
        """Get registered reporter. Returns None if no reporter registered."""
        return cls._instance

    @classmethod
    def get_required(cls) -> ErrorReporter:
        """Return the reporter to use for a failure.

        Resolution order: explicitly registered reporter, then a reporter
        discovered through entry points (looked up once), then
        :class:`DefaultReporter`.
        """
        if cls._instance is not None:
            return cls._instance
        if cls._discovered is None:
            from .loader import load_reporter

            cls._discovered = load_reporter() or DefaultReporter()
        return cls._discovered

    @classmethod
    def unregister(cls) -> None:
        """Clear registered and discovered reporters (for testing/cleanup)."""
        cls._instance = None
        cls._discovered = None


def report_failure(kind: str, payload: dict[str, Any]) -> NoReturn:
    """Hand a symbolic failure to the active reporter.

    Always raises: if the reporter returns normally the default error for
    *kind* is raised in its place.
    """
    reporter = ReporterRegistry.get_required()
    logger.debug("[PyLazy][Reporter] %s reporting %s %s", reporter.identifier, kind, payload)
    reporter.report(kind, payload)
    logger.warning(
        "[PyLazy][Reporter] Reporter %r returned from report(); raising default error",
        reporter.identifier,
    )
    raise error_for(kind, payload)
