"""Public reporter protocol for PyLazy plugins.

Lazy handles do not render failures themselves. They hand a symbolic failure
to an :class:`ErrorReporter`, which decides how it is presented (an exception,
a log record, a process exit). Reporters are structurally typed so
applications can provide one without inheriting from a concrete base class.
"""

from __future__ import annotations

from typing import Any, NoReturn, Protocol, runtime_checkable


@runtime_checkable
class ErrorReporter(Protocol):
    """Reporter interface for failures detected during materialization."""

    @property
    def identifier(self) -> str:
        """Unique reporter identifier (e.g., "default")."""

    def report(self, kind: str, payload: dict[str, Any]) -> NoReturn:
        """Report a failure of *kind* with its structured *payload*.

        Implementations must not return normally. If one does, the caller
        raises the default :class:`~pylazy.errors.LazyProxyError` instead.
        """
        ...
