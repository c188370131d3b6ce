"""
Lazy proxy forwarding engine.

This module contains:
- the pending/resolved handle state
- materialization (`_resolve`), run by every forwarded operation
- LazyProxy and its two shapes, LazyObjectProxy and LazyCallableProxy
- build_lazy_proxy, the constructor shared by the public factories

A handle keeps its state in slots and reaches them with
``object.__getattribute__``; every other attribute access, and every special
method defined below, is forwarded to the real value.
"""

from __future__ import annotations

import copy
import logging
import math
import operator
import os
import sys
from collections.abc import Callable, Iterable
from types import FrameType
from typing import Any

from .. import config
from ..errors import UNSUPPORTED_OPERATION
from .reporter_registry import report_failure

logger = logging.getLogger(__name__)

Validator = Callable[[Any], None]


# ---------------------------------------------------------------------------
# Handle state
# ---------------------------------------------------------------------------

class _Pending:
    __slots__ = ("creator", "depth")

    def __init__(self, creator: Callable[[], Any]) -> None:
        self.creator = creator
        # Number of creator invocations currently on the stack.
        self.depth = 0

    @property
    def materializing(self) -> bool:
        return self.depth > 0


class _Resolved:
    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value


def _identity(value: Any) -> Any:
    return value


def _module_matches(module: str, callers: Iterable[str]) -> bool:
    return any(module == caller or module.startswith(caller + ".") for caller in callers)


def _is_reentrant_caller(frame: FrameType | None, callers: Iterable[str]) -> bool:
    """Return True if a frame between *frame* and the running creation belongs to *callers*.

    Walks outwards from the reading frame and stops at the innermost
    ``_resolve`` frame, so only code the creator itself runs is considered.
    """
    callers = tuple(callers)
    if not callers:
        return False
    while frame is not None and frame.f_code is not _resolve.__code__:
        if _module_matches(frame.f_globals.get("__name__", ""), callers):
            return True
        frame = frame.f_back
    return False


def _resolve(proxy: LazyProxy) -> Any:
    """Return the real value behind *proxy*, creating it on first use."""
    state = object.__getattribute__(proxy, "_lazy_state")
    if type(state) is _Resolved:
        return state.value

    state.depth += 1
    try:
        value = state.creator()
    finally:
        state.depth -= 1

    # A reentrant call may have finished materialization while the creator ran.
    current = object.__getattribute__(proxy, "_lazy_state")
    if type(current) is _Resolved:
        return current.value

    object.__getattribute__(proxy, "_lazy_validator")(value)

    # Without a class there is nothing to forward __class__ or isinstance to.
    if getattr(value, "__class__", None) is None:
        report_failure(
            UNSUPPORTED_OPERATION,
            {
                "operation": "Using lazy_callable or lazy_object to construct "
                "objects/functions without a class",
            },
        )

    object.__setattr__(proxy, "_lazy_state", _Resolved(value))
    level = logging.INFO if config.log_materialization() else logging.DEBUG
    logger.log(
        level,
        "[PyLazy][Proxy] Materialized lazy %s as %s",
        type(proxy)._lazy_kind,
        type(value).__qualname__,
    )
    return value


# ---------------------------------------------------------------------------
# Proxy classes
# ---------------------------------------------------------------------------

class LazyProxy:
    """Base class for deferred handles.

    Not instantiated directly; see :func:`build_lazy_proxy`.
    """

    __slots__ = ("_lazy_state", "_lazy_validator", "_lazy_callers", "__weakref__")

    _lazy_kind = "value"
    # Attributes served by the handle itself instead of the real value.
    _lazy_own_attributes = frozenset(
        {
            "_lazy_state",
            "_lazy_validator",
            "_lazy_callers",
            "__copy__",
            "__deepcopy__",
            "__reduce__",
            "__reduce_ex__",
        }
    )

    def __init__(
        self,
        creator: Callable[[], Any],
        validator: Validator,
        reentrant_callers: Iterable[str] | None = None,
    ) -> None:
        object.__setattr__(self, "_lazy_state", _Pending(creator))
        object.__setattr__(self, "_lazy_validator", validator)
        object.__setattr__(
            self,
            "_lazy_callers",
            None if reentrant_callers is None else tuple(reentrant_callers),
        )

    # Attribute access -------------------------------------------------

    def __getattribute__(self, name: str) -> Any:
        if name in type(self)._lazy_own_attributes:
            return object.__getattribute__(self, name)

        state = object.__getattribute__(self, "_lazy_state")
        if type(state) is _Pending and state.materializing:
            callers = object.__getattribute__(self, "_lazy_callers")
            if callers is None:
                callers = config.reentrant_callers()
            if _is_reentrant_caller(sys._getframe(1), callers):
                logger.debug(
                    "[PyLazy][Proxy] Reentrant read of %r while materializing; reporting it as missing",
                    name,
                )
                raise AttributeError(name)

        return getattr(_resolve(self), name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in type(self)._lazy_own_attributes:
            object.__setattr__(self, name, value)
        else:
            setattr(_resolve(self), name, value)

    def __delattr__(self, name: str) -> None:
        if name in type(self)._lazy_own_attributes:
            object.__delattr__(self, name)
        else:
            delattr(_resolve(self), name)

    def __dir__(self) -> list[str]:
        return dir(_resolve(self))

    # Representation ---------------------------------------------------

    def __repr__(self) -> str:
        return repr(_resolve(self))

    def __str__(self) -> str:
        return str(_resolve(self))

    def __format__(self, format_spec: str) -> str:
        return format(_resolve(self), format_spec)

    def __bytes__(self) -> bytes:
        return bytes(_resolve(self))

    # Truth, hashing, comparison ---------------------------------------

    def __bool__(self) -> bool:
        return bool(_resolve(self))

    def __hash__(self) -> int:
        return hash(_resolve(self))

    def __eq__(self, other: Any) -> Any:
        return _resolve(self) == other

    def __ne__(self, other: Any) -> Any:
        return _resolve(self) != other

    # Containers -------------------------------------------------------

    def __len__(self) -> int:
        return len(_resolve(self))

    def __iter__(self) -> Any:
        return iter(_resolve(self))

    def __reversed__(self) -> Any:
        return reversed(_resolve(self))

    def __contains__(self, item: Any) -> bool:
        return item in _resolve(self)

    def __getitem__(self, key: Any) -> Any:
        return _resolve(self)[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        _resolve(self)[key] = value

    def __delitem__(self, key: Any) -> None:
        del _resolve(self)[key]

    # Context managers -------------------------------------------------

    def __enter__(self) -> Any:
        real = _resolve(self)
        return type(real).__enter__(real)

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> Any:
        real = _resolve(self)
        return type(real).__exit__(real, exc_type, exc, tb)

    async def __aenter__(self) -> Any:
        real = _resolve(self)
        return await type(real).__aenter__(real)

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> Any:
        real = _resolve(self)
        return await type(real).__aexit__(real, exc_type, exc, tb)

    def __await__(self) -> Any:
        return _resolve(self).__await__()

    def __aiter__(self) -> Any:
        return aiter(_resolve(self))

    async def __anext__(self) -> Any:
        return await anext(_resolve(self))

    # Iterators --------------------------------------------------------

    def __next__(self) -> Any:
        return next(_resolve(self))

    # Numbers ----------------------------------------------------------

    def __round__(self, ndigits: int | None = None) -> Any:
        if ndigits is None:
            return round(_resolve(self))
        return round(_resolve(self), ndigits)

    def __pow__(self, other: Any, mod: Any = None) -> Any:
        if mod is None:
            return pow(_resolve(self), other)
        return pow(_resolve(self), other, mod)

    # Copying and pickling produce the real value ----------------------

    def __copy__(self) -> Any:
        return copy.copy(_resolve(self))

    def __deepcopy__(self, memo: dict[int, Any]) -> Any:
        return copy.deepcopy(_resolve(self), memo)

    def __reduce__(self) -> tuple[Any, ...]:
        return (_identity, (_resolve(self),))

    def __reduce_ex__(self, protocol: int) -> tuple[Any, ...]:
        return (_identity, (_resolve(self),))


def _define_operators() -> None:
    def forward_unary(name: str, op: Callable[[Any], Any]) -> None:
        def method(self: LazyProxy) -> Any:
            return op(_resolve(self))
        method.__name__ = name
        setattr(LazyProxy, name, method)

    def forward_binary(name: str, op: Callable[[Any, Any], Any]) -> None:
        def method(self: LazyProxy, other: Any) -> Any:
            return op(_resolve(self), other)
        method.__name__ = name
        setattr(LazyProxy, name, method)

    def forward_reflected(name: str, op: Callable[[Any, Any], Any]) -> None:
        def method(self: LazyProxy, other: Any) -> Any:
            return op(other, _resolve(self))
        method.__name__ = name
        setattr(LazyProxy, name, method)

    def forward_inplace(name: str, op: Callable[[Any, Any], Any]) -> None:
        def method(self: LazyProxy, other: Any) -> Any:
            real = _resolve(self)
            result = op(real, other)
            # Mutated in place: keep the caller bound to the handle.
            return self if result is real else result
        method.__name__ = name
        setattr(LazyProxy, name, method)

    for name in ("lt", "le", "gt", "ge"):
        forward_binary(f"__{name}__", getattr(operator, name))

    binary_ops = {
        "add": operator.add,
        "sub": operator.sub,
        "mul": operator.mul,
        "matmul": operator.matmul,
        "truediv": operator.truediv,
        "floordiv": operator.floordiv,
        "mod": operator.mod,
        "divmod": divmod,
        "lshift": operator.lshift,
        "rshift": operator.rshift,
        "and": operator.and_,
        "xor": operator.xor,
        "or": operator.or_,
    }
    for name, op in binary_ops.items():
        forward_binary(f"__{name}__", op)
        forward_reflected(f"__r{name}__", op)
    forward_reflected("__rpow__", pow)

    inplace_ops = {
        "add": operator.iadd,
        "sub": operator.isub,
        "mul": operator.imul,
        "matmul": operator.imatmul,
        "truediv": operator.itruediv,
        "floordiv": operator.ifloordiv,
        "mod": operator.imod,
        "pow": operator.ipow,
        "lshift": operator.ilshift,
        "rshift": operator.irshift,
        "and": operator.iand,
        "xor": operator.ixor,
        "or": operator.ior,
    }
    for name, op in inplace_ops.items():
        forward_inplace(f"__i{name}__", op)

    unary_ops = {
        "__neg__": operator.neg,
        "__pos__": operator.pos,
        "__abs__": abs,
        "__invert__": operator.invert,
        "__int__": int,
        "__float__": float,
        "__complex__": complex,
        "__index__": operator.index,
        "__length_hint__": operator.length_hint,
        "__trunc__": math.trunc,
        "__floor__": math.floor,
        "__ceil__": math.ceil,
        "__fspath__": os.fspath,
    }
    for name, op in unary_ops.items():
        forward_unary(name, op)


_define_operators()
del _define_operators


class LazyObjectProxy(LazyProxy):
    """Handle for an object-shaped value. Not callable."""

    __slots__ = ()

    _lazy_kind = "object"


class LazyCallableProxy(LazyProxy):
    """Handle for a function or class.

    Calling the handle invokes the function or constructs an instance of the
    class. A lazy class also works as the second argument of ``isinstance``
    and ``issubclass`` and as a base class in a ``class`` statement.
    """

    __slots__ = ()

    _lazy_kind = "callable"
    _lazy_own_attributes = LazyProxy._lazy_own_attributes | {"__mro_entries__"}

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return _resolve(self)(*args, **kwargs)

    def __instancecheck__(self, instance: Any) -> bool:
        return isinstance(instance, _resolve(self))

    def __subclasscheck__(self, subclass: Any) -> bool:
        return issubclass(subclass, _resolve(self))

    def __get__(self, instance: Any, owner: Any = None) -> Any:
        real = _resolve(self)
        binder = getattr(type(real), "__get__", None)
        if binder is None:
            return self
        return binder(real, instance, owner)

    def __mro_entries__(self, bases: tuple[Any, ...]) -> tuple[Any, ...]:
        return (_resolve(self),)


def build_lazy_proxy(
    creator: Callable[[], Any],
    proxy_class: type[LazyProxy],
    validator: Validator,
    *,
    reentrant_callers: Iterable[str] | None = None,
) -> LazyProxy:
    """Build a deferred handle of shape *proxy_class* around *creator*.

    *creator* is not called here. The first forwarded operation calls it,
    passes the result to *validator* and caches it. ``reentrant_callers``
    overrides the configured allow-list of modules whose reads during
    creation are reported as missing attributes.
    """
    if not callable(creator):
        raise TypeError(f"creator must be callable, got {type(creator).__name__}")
    if not (isinstance(proxy_class, type) and issubclass(proxy_class, LazyProxy)):
        raise TypeError(f"proxy_class must be a LazyProxy subclass, got {proxy_class!r}")
    return proxy_class(creator, validator, reentrant_callers)
