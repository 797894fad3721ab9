"""
Custom assertions and validation helpers for tests.

Provides specialized assertion functions that make tests more readable
and provide better error messages.
"""

import re
from collections.abc import Callable

from cattri.accessor import Accessor, OperationKind
from cattri.options import Visibility
from cattri.store import store_for


def assert_raises_with_message(
    exception_class: type[Exception],
    message_pattern: str,
    callable_func: Callable,
    *args,
    **kwargs,
) -> None:
    """
    Assert that a function raises an exception with a message matching a pattern.

    Args:
        exception_class: Expected exception type
        message_pattern: Regex pattern for exception message
        callable_func: Function to call
        *args: Positional arguments for callable_func
        **kwargs: Keyword arguments for callable_func

    Raises:
        AssertionError: If exception not raised or message doesn't match
    """
    try:
        callable_func(*args, **kwargs)
    except exception_class as e:
        if not re.search(message_pattern, str(e)):
            raise AssertionError(
                f"Exception message '{str(e)}' does not match pattern '{message_pattern}'"
            )
        return
    except Exception as e:
        raise AssertionError(
            f"Expected {exception_class.__name__}, but got {type(e).__name__}: {e}"
        )
    raise AssertionError(
        f"Expected {exception_class.__name__} to be raised, but no exception was raised"
    )


def assert_accessor(
    cls: type,
    name: str,
    kinds: set[OperationKind],
    visibility: dict[OperationKind, Visibility] | None = None,
) -> Accessor:
    """
    Assert that cls defines an accessor carrying exactly the given operations.

    Args:
        cls: Class expected to hold the accessor in its own namespace
        name: Python attribute name
        kinds: Expected operation kinds
        visibility: Optional expected effective visibility per kind

    Returns:
        Accessor: The accessor found

    Raises:
        AssertionError: If the accessor is missing or differs
    """
    accessor = vars(cls).get(name)
    if not isinstance(accessor, Accessor):
        raise AssertionError(f"{cls.__qualname__}.{name} is not an accessor")
    if set(accessor.operations) != kinds:
        raise AssertionError(
            f"{cls.__qualname__}.{name} has operations {set(accessor.operations)}, "
            f"expected {kinds}"
        )
    for kind, expected in (visibility or {}).items():
        actual = accessor.operations[kind].visibility
        if actual is not expected:
            raise AssertionError(
                f"{cls.__qualname__}.{name} {kind.value} is {actual.value}, "
                f"expected {expected.value}"
            )
    return accessor


def assert_stored(owner: object, key: str, value: object, locked: bool) -> None:
    """
    Assert the raw store entry of an owner.

    Raises:
        AssertionError: If the entry is missing or differs
    """
    store = store_for(owner, create=False)
    entry = store.entry(key) if store is not None else None
    if entry is None:
        raise AssertionError(f"No stored value for '{key}'")
    if entry.value != value or entry.locked is not locked:
        raise AssertionError(
            f"Stored '{key}' is ({entry.value!r}, locked={entry.locked}), "
            f"expected ({value!r}, locked={locked})"
        )
