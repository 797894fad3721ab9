"""
Namespaced value storage with write-once enforcement.

Each owner (an instance for instance-scoped attributes, a class for
type-scoped ones) gets its own InternalStore, kept in the owner's own
``__dict__`` so a class never reads a store inherited from its parent.
A store assumes a single writer; callers that mutate one owner from several
threads must guard ``set``/``memoize`` themselves.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from .constants import STORE_ATTRIBUTE, TRACE
from .exceptions import CattriError, FinalAttributeError

lg = logging.getLogger(__name__)


@dataclass
class StoreEntry:
    """A stored value and whether it is permanently locked."""

    value: Any
    locked: bool = False


class InternalStore:
    """
    Key/value storage for attribute values.

    Entries are created lazily, on first default materialization or first
    explicit write. Once an entry is stored with ``final=True`` it is locked
    and every later write raises FinalAttributeError.
    """

    def __init__(self) -> None:
        self._entries: dict[str, StoreEntry] = {}

    def has(self, key: str) -> bool:
        """
        Check whether a value is stored under key.

        Args:
            key: Storage key

        Returns:
            bool: True if an entry exists
        """
        return key in self._entries

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or default when nothing is stored."""
        entry = self._entries.get(key)
        return default if entry is None else entry.value

    def set(self, key: str, value: Any, final: bool = False) -> Any:
        """
        Store a value.

        Args:
            key: Storage key
            value: Value to store
            final: Lock the entry after storing

        Returns:
            The stored value

        Raises:
            FinalAttributeError: If the existing entry is locked
        """
        existing = self._entries.get(key)
        if existing is not None and existing.locked:
            raise FinalAttributeError(
                f"Cannot modify final attribute '{key}'", key=key
            )
        self._entries[key] = StoreEntry(value, final)
        return value

    def memoize(self, key: str, final: bool, compute: Callable[[], Any]) -> Any:
        """
        Return the stored value, computing and storing it on first use.

        The computed value is locked immediately when final is True.
        """
        entry = self._entries.get(key)
        if entry is not None:
            return entry.value

        value = compute()
        lg.log(TRACE, "materialized value", extra={"key": key, "final": final})
        return self.set(key, value, final=final)

    def discard(self, key: str) -> None:
        """Drop an entry, locked or not (used when a subclass redeclares a name)."""
        self._entries.pop(key, None)

    def is_locked(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.locked

    def entry(self, key: str) -> StoreEntry | None:
        return self._entries.get(key)

    def put_entry(self, key: str, entry: StoreEntry) -> None:
        """Install a prepared entry (used when propagating to subclasses)."""
        if self.is_locked(key):
            raise FinalAttributeError(
                f"Cannot modify final attribute '{key}'", key=key
            )
        self._entries[key] = entry

    def keys(self) -> list[str]:
        return list(self._entries)

    def items(self) -> list[tuple[str, Any]]:
        return [(key, entry.value) for key, entry in self._entries.items()]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"InternalStore({self.keys()!r})"


def store_for(owner: Any, create: bool = True) -> InternalStore | None:
    """
    Resolve the store held directly by owner.

    Args:
        owner: Instance or class owning the values
        create: Install an empty store when none exists yet

    Returns:
        The owner's store, or None when absent and create is False

    Raises:
        CattriError: If the owner has no ``__dict__`` to hold a store
    """
    try:
        namespace = vars(owner)
    except TypeError as e:
        raise CattriError(
            f"{type(owner).__qualname__} instances cannot hold attribute values "
            "(no __dict__)"
        ) from e

    store = namespace.get(STORE_ATTRIBUTE)
    if store is None and create:
        store = InternalStore()
        if isinstance(owner, type):
            # class namespaces are read-only proxies
            type.__setattr__(owner, STORE_ATTRIBUTE, store)
        else:
            namespace[STORE_ATTRIBUTE] = store
    return store
