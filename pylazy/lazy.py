"""Public factories for lazy objects, functions and classes.

Each factory receives a creator that is not called until someone interacts
with the returned handle. This also gives a lazy ``import``: a handle that
does not import the module until it is needed.

    >>> np = lazy_import("numpy")
    >>> DataFrame = lazy_import_callable("pandas", "DataFrame")

The handle is typed as the creator's return type, so annotations written for
the real value keep working.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable
from types import ModuleType
from typing import Any, TypeVar, cast

from ._internal.proxy import (
    LazyCallableProxy,
    LazyObjectProxy,
    LazyProxy,
    _resolve,
    _Resolved,
    build_lazy_proxy,
)
from ._internal.reporter_registry import report_failure
from .errors import UNSUPPORTED_OPERATION

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

# Values that are not objects in the record sense.
_PRIMITIVE_TYPES = (bool, int, float, complex, str, bytes)


def _validate_object(value: Any) -> None:
    if callable(value):
        report_failure(
            UNSUPPORTED_OPERATION,
            {"operation": "Creating lazy functions or classes with lazy_object"},
        )

    if value is None or isinstance(value, _PRIMITIVE_TYPES):
        report_failure(
            UNSUPPORTED_OPERATION,
            {"operation": "Using lazy_object with anything other than objects"},
        )


def _validate_callable(value: Any) -> None:
    if not callable(value):
        report_failure(
            UNSUPPORTED_OPERATION,
            {"operation": "Using lazy_callable with anything other than functions or classes"},
        )


def lazy_object(creator: Callable[[], T], *, reentrant_callers: Iterable[str] | None = None) -> T:
    """Return a handle that stands in for the object ``creator()`` returns.

    The creator runs on the first attribute, item or other structural access
    and at most once. Returning a function, class, ``None`` or a scalar
    (``int``, ``str`` ...) is reported as an unsupported operation at that
    point, never here.
    """
    return cast(
        T,
        build_lazy_proxy(
            creator,
            LazyObjectProxy,
            _validate_object,
            reentrant_callers=reentrant_callers,
        ),
    )


def lazy_callable(creator: Callable[[], F], *, reentrant_callers: Iterable[str] | None = None) -> F:
    """Return a handle that stands in for the function or class ``creator()`` returns.

    Calling the handle calls the function or constructs the class.
    """
    return cast(
        F,
        build_lazy_proxy(
            creator,
            LazyCallableProxy,
            _validate_callable,
            reentrant_callers=reentrant_callers,
        ),
    )


def lazy_import(module_name: str) -> ModuleType:
    """Import *module_name* on first use."""
    return lazy_object(lambda: importlib.import_module(module_name))


def lazy_import_callable(module_name: str, attribute: str) -> Any:
    """Return a lazy handle for ``module_name.attribute`` (a function or class)."""
    return lazy_callable(lambda: getattr(importlib.import_module(module_name), attribute))


def is_lazy(obj: Any) -> bool:
    """Return True if *obj* is a lazy handle. Never materializes it."""
    return issubclass(type(obj), LazyProxy)


def is_materialized(obj: Any) -> bool:
    """Return True if the lazy handle *obj* already holds its real value."""
    if not is_lazy(obj):
        raise TypeError(f"Expected a lazy handle, got {type(obj).__name__}")
    return type(object.__getattribute__(obj, "_lazy_state")) is _Resolved


def resolve(obj: Any) -> Any:
    """Return the real value behind *obj*, materializing it if needed.

    Values that are not lazy handles are returned unchanged.
    """
    if is_lazy(obj):
        return _resolve(obj)
    return obj
