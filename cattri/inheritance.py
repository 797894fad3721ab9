"""
Propagation of attribute metadata and type-level values to subclasses.
"""

import copy
import logging
from typing import Any

from .attribute import AttributeSpec
from .constants import STORE_ATTRIBUTE
from .exceptions import DuplicationError
from .registry import AttributeRegistry, find_registry, registry_for
from .store import StoreEntry, store_for

lg = logging.getLogger(__name__)


def duplicate_value(spec: AttributeSpec, value: Any, subclass: type) -> Any:
    """
    Copy an inherited type-level value for a subclass.

    Values that cannot be deep-copied are shared by reference instead.

    Raises:
        DuplicationError: If copying fails for any other reason
    """
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error) as e:
        lg.debug(
            "sharing non-clonable value",
            extra={
                "attribute": spec.name,
                "target": subclass.__qualname__,
                "value_type": type(value).__name__,
                "exception": e,
            },
        )
        return value
    except Exception as e:
        raise DuplicationError(
            f"Failed to duplicate inherited value of '{spec.name}' for "
            f"{subclass.__qualname__}: {e}",
            attribute=spec.name,
        ) from e


def _nearest_entry(subclass: type, key: str) -> StoreEntry | None:
    for base in subclass.__mro__[1:]:
        store = vars(base).get(STORE_ATTRIBUTE)
        if store is not None and store.has(key):
            return store.entry(key)
    return None


def propagate(subclass: type) -> AttributeRegistry:
    """
    Copy attribute metadata from every cattri base into subclass.

    Specs are shared by reference. Type-scoped values already materialized by
    the nearest ancestor are duplicated into the subclass store with the same
    lock flag, so later writes on either class stay isolated.

    Returns:
        AttributeRegistry: The subclass registry
    """
    registry = registry_for(subclass)

    for base in reversed(subclass.__mro__[1:]):
        base_registry = find_registry(base)
        if base_registry is None:
            continue
        for spec in base_registry.defined_attributes(include_ancestors=True).values():
            registry.inherit(spec)
        if base_registry.composition_unit:
            continue
        for unit in base_registry.composed_units:
            registry.record_composition(unit)

    if registry.composition_unit:
        return registry

    duplicated = 0
    for spec in registry.inherited_attributes.values():
        if not spec.type_scoped:
            continue
        entry = _nearest_entry(subclass, spec.storage_key)
        if entry is None:
            continue
        value = duplicate_value(spec, entry.value, subclass)
        store_for(subclass).put_entry(spec.storage_key, StoreEntry(value, entry.locked))
        duplicated += 1

    lg.debug(
        "propagated attributes",
        extra={
            "target": subclass.__qualname__,
            "inherited": len(registry.inherited_attributes),
            "duplicated": duplicated,
        },
    )
    return registry
