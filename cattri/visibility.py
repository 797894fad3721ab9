"""
Declared-visibility tracking and runtime access checks.

The visibility a declaration gets by default is an explicit, context-local
value rather than something inferred from the class body. Wrap declarations
in ``declared_visibility()`` (or the ``public``/``protected``/``private``
shorthands) to change it:

    class Account(Cattri):
        owner = cattri("")

        with private():
            token = cattri(None)

Python has no access modifiers, so generated accessors check their caller.
The caller's receiver is the first positional argument of the calling frame
when it is named ``self`` or ``cls``:

- PROTECTED: the receiver must be an instance or a subclass of the owning class
- PRIVATE: the receiver must be the accessed object itself (or, for
  type-scoped attributes, an instance of the accessed class)

Code outside a method (module level, plain functions, other classes) never
has a qualifying receiver.
"""

from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from types import FrameType
from typing import Any

from .exceptions import ValidationError, VisibilityError
from .options import Visibility

_current_visibility: ContextVar[Visibility] = ContextVar(
    "cattri_declared_visibility", default=Visibility.PUBLIC
)

RECEIVER_NAMES = frozenset({"self", "cls"})

# Sentinel for frames without a method receiver
_NO_RECEIVER = object()


def current_visibility() -> Visibility:
    """Return the visibility in effect for new declarations."""
    return _current_visibility.get()


@contextmanager
def declared_visibility(
    visibility: Visibility | str,
) -> Generator[Visibility, None, None]:
    """
    Set the default visibility for declarations made inside the block.

    Args:
        visibility: Visibility member or its string value

    Raises:
        ValidationError: If visibility is not a known level
    """
    try:
        value = Visibility(visibility)
    except ValueError as e:
        raise ValidationError(f"Invalid visibility {visibility!r}") from e

    token = _current_visibility.set(value)
    try:
        yield value
    finally:
        _current_visibility.reset(token)


def public() -> Any:
    return declared_visibility(Visibility.PUBLIC)


def protected() -> Any:
    return declared_visibility(Visibility.PROTECTED)


def private() -> Any:
    return declared_visibility(Visibility.PRIVATE)


def caller_receiver(frame: FrameType | None) -> Any:
    """Return the ``self``/``cls`` argument of a frame, if it has one."""
    if frame is None:
        return _NO_RECEIVER
    code = frame.f_code
    if code.co_argcount == 0 or code.co_varnames[0] not in RECEIVER_NAMES:
        return _NO_RECEIVER
    return frame.f_locals.get(code.co_varnames[0], _NO_RECEIVER)


def is_accessible(
    visibility: Visibility, owner: type, accessed: Any, receiver: Any
) -> bool:
    """
    Decide whether a receiver may use an accessor.

    Args:
        visibility: Effective visibility of the accessor
        owner: Class the accessor was installed on
        accessed: Object being read or written (instance or class)
        receiver: Receiver of the calling frame
    """
    if visibility is Visibility.PUBLIC:
        return True
    if receiver is _NO_RECEIVER:
        return False
    if visibility is Visibility.PRIVATE:
        if receiver is accessed:
            return True
        return isinstance(accessed, type) and isinstance(receiver, accessed)
    if isinstance(receiver, type):
        return issubclass(receiver, owner)
    return isinstance(receiver, owner)


def ensure_accessible(
    visibility: Visibility,
    owner: type,
    accessed: Any,
    frame: FrameType | None,
    name: str,
) -> None:
    """
    Raise unless the calling frame may use the accessor.

    Raises:
        VisibilityError: If the caller is outside the allowed scope
    """
    if visibility is Visibility.PUBLIC:
        return
    if is_accessible(visibility, owner, accessed, caller_receiver(frame)):
        return
    raise VisibilityError(
        f"{visibility.value} attribute '{name}' of {owner.__qualname__} "
        "is not accessible here",
        attribute=name,
        visibility=visibility.value,
    )
