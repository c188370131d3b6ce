"""
pylazy - Deferred objects, functions and classes behind transparent handles.

pylazy lets you hold a reference to the eventual result of an expensive or
side-effecting computation, such as importing a heavy dependency, without
paying for it until the result is actually used. The handle forwards every
attribute access, item access, operator, call and class construction to the
real value, so callers do not need to know the value is deferred.

Key Features:
    - lazy_object / lazy_callable: one creator call, on first use, at most once
    - lazy_import: module imports that happen on first attribute access
    - Pluggable error reporting for wrongly shaped values
    - Opt-in guard for libraries that read a handle while it is being created

Basic Usage:
    >>> import pylazy
    >>> settings = pylazy.lazy_object(lambda: load_settings("app.yaml"))
    >>> settings.debug  # load_settings runs here
    False
    >>> Client = pylazy.lazy_callable(lambda: importlib.import_module("httpx").Client)
    >>> client = Client(timeout=5)
"""

from typing import TYPE_CHECKING

from .config import LazyProxyConfig, configure, get_config, load_config, reset_config
from .errors import LazyProxyError, UnsupportedOperationError
from .lazy import (
    is_lazy,
    is_materialized,
    lazy_callable,
    lazy_import,
    lazy_import_callable,
    lazy_object,
    resolve,
)

if TYPE_CHECKING:
    from .interfaces import ErrorReporter

__version__ = "0.1.0"

__all__ = [
    "lazy_object",
    "lazy_callable",
    "lazy_import",
    "lazy_import_callable",
    "is_lazy",
    "is_materialized",
    "resolve",
    "LazyProxyConfig",
    "configure",
    "get_config",
    "load_config",
    "reset_config",
    "LazyProxyError",
    "UnsupportedOperationError",
    "register_reporter",
    "get_reporter",
]

def register_reporter(reporter: "ErrorReporter") -> None:
    """Register the error reporter lazy handles report failures to."""
    from ._internal.reporter_registry import ReporterRegistry
    ReporterRegistry.register(reporter)

def get_reporter() -> "ErrorReporter | None":
    """Get the registered reporter, or None if not registered."""
    from ._internal.reporter_registry import ReporterRegistry
    return ReporterRegistry.get()
