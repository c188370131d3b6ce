"""Reporter lifecycle management utilities.

This module provides a context manager for temporarily swapping the active
error reporter, mostly useful in tests that need to observe or silence the
failures lazy handles report.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from ..interfaces import ErrorReporter


@contextmanager
def reporter_scope(reporter: ErrorReporter | None = None) -> Generator[None, None, None]:
    """Context manager for an isolated reporter scope.

    Saves the registry state on entry, optionally installs *reporter* for the
    duration of the block, and restores the previous state on exit, even if
    the block raises.

    Example:
        >>> from pylazy._internal.reporter_context import reporter_scope
        >>>
        >>> with reporter_scope(MyReporter()):
        ...     handle = lazy_object(lambda: print)
        ...     handle.__name__  # reported through MyReporter
        >>> # On exit, previous reporter is restored
    """
    from .reporter_registry import ReporterRegistry

    previous = (ReporterRegistry._instance, ReporterRegistry._discovered)
    try:
        if reporter is not None:
            ReporterRegistry._instance = reporter
        yield
    finally:
        ReporterRegistry._instance, ReporterRegistry._discovered = previous
