import logging
from importlib.metadata import PackageNotFoundError, version

from .attribute import AttributeSpec
from .constants import PREDICATE_SUFFIX, TRACE
from .deferred import compose, is_composition_unit
from .dsl import cattri, define_attribute, final_cattri
from .exceptions import (
    AttributeAlreadyDefinedError,
    AttributeDefinitionError,
    AttributeNotDefinedError,
    CattriError,
    DuplicationError,
    EvaluationError,
    FinalAttributeError,
    MethodAlreadyDefinedError,
    ReadonlyAttributeError,
    ValidationError,
    VisibilityError,
)
from .introspection import (
    attribute_defined,
    attribute_methods,
    attribute_names,
    attribute_source,
    defined_attributes,
    installed_names,
)
from .meta import Cattri, CattriMeta
from .options import AttributeOptions, Exposure, Scope, Visibility
from .registry import AttributeRegistry, registry_for
from .store import InternalStore
from .visibility import (
    current_visibility,
    declared_visibility,
    private,
    protected,
    public,
)

# Register the custom level so records render as "TRACE"
logging.addLevelName(TRACE, "TRACE")

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("cattri")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

# Explicit public API
__all__ = [
    # Version
    "__version__",
    # Declaration
    "Cattri",
    "CattriMeta",
    "cattri",
    "final_cattri",
    "define_attribute",
    "compose",
    "is_composition_unit",
    # Visibility
    "current_visibility",
    "declared_visibility",
    "public",
    "protected",
    "private",
    # Metadata
    "AttributeSpec",
    "AttributeOptions",
    "AttributeRegistry",
    "InternalStore",
    "Scope",
    "Exposure",
    "Visibility",
    "registry_for",
    # Introspection
    "attribute_defined",
    "attribute_methods",
    "attribute_names",
    "attribute_source",
    "defined_attributes",
    "installed_names",
    # Constants
    "PREDICATE_SUFFIX",
    "TRACE",
    # Exceptions
    "CattriError",
    "ValidationError",
    "AttributeAlreadyDefinedError",
    "AttributeNotDefinedError",
    "AttributeDefinitionError",
    "DuplicationError",
    "EvaluationError",
    "FinalAttributeError",
    "MethodAlreadyDefinedError",
    "ReadonlyAttributeError",
    "VisibilityError",
]
