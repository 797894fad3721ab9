"""
Library-wide constants for attribute declaration and storage.
"""

import enum

# Suffix of the generated boolean query for `predicate=True` attributes.
# Attribute names may not end with it.
PREDICATE_SUFFIX = "_p"

# Per-object slots holding cattri state (never resolved through the MRO)
STORE_ATTRIBUTE = "__cattri_store__"
REGISTRY_ATTRIBUTE = "__cattri_registry__"

# Values that are safe to hand out as defaults without copying
SAFE_VALUE_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    range,
    enum.Enum,
)

# Custom log level below DEBUG for per-operation tracing
TRACE = 5
