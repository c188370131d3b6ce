"""Failure kinds and exception types raised by lazy handles.

The core never formats messages itself. It reports a symbolic failure
(a kind plus a small payload) to the active error reporter, and the default
reporter turns it into one of the exceptions below using the descriptors in
:data:`ERRORS`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypedDict

UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"


class ErrorDescriptor(TypedDict):
    """Static description of a failure kind."""

    number: int
    """Stable error number, rendered as ``PL<number>``."""

    title: str
    """Short human readable title."""

    message: str
    """Message template, formatted with the failure payload."""


ERRORS: dict[str, ErrorDescriptor] = {
    UNSUPPORTED_OPERATION: {
        "number": 3,
        "title": "Unsupported operation",
        "message": "{operation} is not supported.",
    },
}


class LazyProxyError(Exception):
    """Base class for failures reported by lazy handles."""

    def __init__(self, kind: str, payload: dict[str, Any] | None = None) -> None:
        if kind not in ERRORS:
            raise ValueError(f"Unknown failure kind: {kind!r}")
        self.kind = kind
        self.payload: dict[str, Any] = dict(payload or {})
        self.descriptor = ERRORS[kind]
        super().__init__(self._render())

    @property
    def number(self) -> int:
        return self.descriptor["number"]

    @property
    def code(self) -> str:
        return f"PL{self.number}"

    def _render(self) -> str:
        try:
            message = self.descriptor["message"].format(**self.payload)
        except KeyError as exc:
            raise ValueError(
                f"Missing payload field {exc.args[0]!r} for failure kind {self.kind}"
            ) from exc
        return f"{self.code}: {message}"


class UnsupportedOperationError(LazyProxyError):
    """A lazy handle was asked to wrap a value of the wrong shape."""

    def __init__(self, payload: dict[str, Any] | None = None) -> None:
        super().__init__(UNSUPPORTED_OPERATION, payload)

    @property
    def operation(self) -> str:
        return str(self.payload.get("operation", ""))


_ERROR_CLASSES: dict[str, Callable[[dict[str, Any] | None], LazyProxyError]] = {
    UNSUPPORTED_OPERATION: UnsupportedOperationError,
}


def error_for(kind: str, payload: dict[str, Any] | None = None) -> LazyProxyError:
    """Build the exception matching *kind*."""
    if kind not in _ERROR_CLASSES:
        raise ValueError(f"Unknown failure kind: {kind!r}")
    return _ERROR_CLASSES[kind](payload)
