"""
Immutable metadata describing one declared attribute.

An AttributeSpec is built once per declaration and shared by reference
between a class, its subclasses and the classes a mixin is composed into.
Defaults and transformers are normalized to callables at build time so the
generated accessors never need to inspect raw option values.
"""

import copy
import dataclasses
import keyword
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .constants import PREDICATE_SUFFIX, SAFE_VALUE_TYPES
from .exceptions import (
    CattriError,
    EvaluationError,
    FinalAttributeError,
    ReadonlyAttributeError,
    ValidationError,
)
from .options import AttributeOptions, Exposure, Scope, Visibility, parse_options


def is_immutable(value: Any) -> bool:
    """Check whether a value can be shared without copying."""
    if isinstance(value, SAFE_VALUE_TYPES):
        return True
    if isinstance(value, tuple | frozenset):
        return all(is_immutable(item) for item in value)
    return False


def normalize_default(default: Any) -> Callable[[], Any]:
    """
    Turn a declared default into a zero-argument provider.

    Callables (including classes such as `list`) are used as-is and invoked on
    every materialization. Immutable values are returned directly; anything
    else is deep-copied per materialization so owners never share it.
    """
    if callable(default):
        return default
    if is_immutable(default):
        return lambda: default
    return lambda: copy.deepcopy(default)


def default_transformer(*args: Any, **kwargs: Any) -> Any:
    """
    Coerce assignment arguments when no transformer was declared.

    No positional arguments yields the keyword dict, a single positional
    argument is returned unwrapped, anything else becomes a list (with the
    keyword dict appended when present).
    """
    if not args:
        return kwargs
    if len(args) == 1 and not kwargs:
        return args[0]
    return [*args, kwargs] if kwargs else list(args)


def validate_name(name: Any) -> str:
    """
    Validate an attribute name.

    Raises:
        ValidationError: If the name is not a usable identifier
    """
    if not isinstance(name, str) or not name.isidentifier():
        raise ValidationError(f"Attribute name {name!r} is not a valid identifier")
    if keyword.iskeyword(name):
        raise ValidationError(f"Attribute name '{name}' is a reserved keyword")
    if name.endswith(PREDICATE_SUFFIX):
        raise ValidationError(
            f"Attribute name '{name}' ends with '{PREDICATE_SUFFIX}'; "
            "use predicate=True instead",
            attribute=name,
        )
    return name


@dataclass(frozen=True, eq=False)
class AttributeSpec:
    """
    Frozen metadata for a single attribute.

    Attributes:
        name: Attribute name, unique per declaring type
        storage_key: Key of the value in the owner's internal store
        scope: Whether values live on the type or on each instance
        exposure: Publicly reachable operations
        visibility: Declared visibility of the generated accessors
        final: Write-once flag
        predicate: Whether a `<name>_p` boolean query is generated
        default: Zero-argument default provider
        transformer: Coercion applied to assigned values
        defined_in: Class the declaration belongs to (None if free-standing)
    """

    name: str
    storage_key: str
    scope: Scope
    exposure: Exposure
    visibility: Visibility
    final: bool
    predicate: bool
    default: Callable[[], Any]
    transformer: Callable[..., Any]
    defined_in: type | None = None

    @classmethod
    def build(
        cls,
        name: str,
        default: Any = None,
        transformer: Callable[..., Any] | None = None,
        defined_in: type | None = None,
        **options: Any,
    ) -> "AttributeSpec":
        """
        Validate a declaration and build its spec.

        Args:
            name: Attribute name
            default: Default value or zero-argument provider
            transformer: Optional coercion applied on assignment
            defined_in: Declaring class
            **options: scope, expose, visibility, final, predicate, storage_key

        Returns:
            AttributeSpec: Frozen metadata

        Raises:
            ValidationError: If the name or any option is invalid
        """
        name = validate_name(name)
        return cls.from_options(
            name, parse_options(name, options), default, transformer, defined_in
        )

    @classmethod
    def from_options(
        cls,
        name: str,
        options: AttributeOptions,
        default: Any = None,
        transformer: Callable[..., Any] | None = None,
        defined_in: type | None = None,
    ) -> "AttributeSpec":
        """Build a spec from already validated options."""
        if transformer is not None and not callable(transformer):
            raise ValidationError(
                f"Transformer for '{name}' must be callable", attribute=name
            )
        return cls(
            name=name,
            storage_key=options.storage_key or name,
            scope=options.scope,
            exposure=options.expose,
            visibility=options.visibility or Visibility.PUBLIC,
            final=options.final,
            predicate=options.predicate,
            default=normalize_default(default),
            transformer=transformer or default_transformer,
            defined_in=defined_in,
        )

    def with_transformer(self, transformer: Callable[..., Any]) -> "AttributeSpec":
        """Return a copy using another transformer; the identity is unchanged."""
        if not callable(transformer):
            raise ValidationError(
                f"Transformer for '{self.name}' must be callable", attribute=self.name
            )
        return dataclasses.replace(self, transformer=transformer)

    @property
    def identity(self) -> tuple[type | None, str]:
        return (self.defined_in, self.name)

    @property
    def type_scoped(self) -> bool:
        return self.scope is Scope.TYPE

    @property
    def predicate_name(self) -> str:
        return f"{self.name}{PREDICATE_SUFFIX}"

    @property
    def readable(self) -> bool:
        return self.exposure.readable

    @property
    def writable(self) -> bool:
        """Whether a regular (repeatable) writer is generated."""
        return self.exposure.writable and not self.final

    @property
    def readonly(self) -> bool:
        if self.exposure is Exposure.NONE:
            return False
        return self.exposure is Exposure.READ or self.final

    @property
    def write_once(self) -> bool:
        """Final instance attributes may still be assigned exactly once."""
        return self.final and self.exposure.writable and self.scope is Scope.INSTANCE

    @property
    def internal_reader(self) -> bool:
        return not self.exposure.readable

    @property
    def internal_writer(self) -> bool:
        return not self.exposure.writable

    @property
    def allowed_methods(self) -> tuple[str, ...]:
        """Python attribute names generated for this spec."""
        if self.exposure is Exposure.NONE:
            return ()
        if self.predicate:
            return (self.name, self.predicate_name)
        return (self.name,)

    def validate_assignment(self) -> None:
        """
        Reject an assignment this attribute does not allow.

        Raises:
            FinalAttributeError: If the attribute is final
            ReadonlyAttributeError: If the exposure forbids writing
        """
        if self.final:
            raise FinalAttributeError(
                f"Cannot assign to final attribute '{self.name}'", attribute=self.name
            )
        if not self.writable:
            raise ReadonlyAttributeError(
                f"Cannot assign to readonly attribute '{self.name}'",
                attribute=self.name,
            )

    def evaluate_default(self) -> Any:
        """Invoke the default provider, wrapping its failures."""
        try:
            return self.default()
        except CattriError:
            raise
        except Exception as e:
            raise EvaluationError(
                f"Failed to evaluate the default value for '{self.name}': {e}",
                attribute=self.name,
            ) from e

    def process_assignment(self, *args: Any, **kwargs: Any) -> Any:
        """Run the transformer over incoming assignment arguments."""
        try:
            return self.transformer(*args, **kwargs)
        except CattriError:
            raise
        except Exception as e:
            raise EvaluationError(
                f"Failed to transform the value assigned to '{self.name}': {e}",
                attribute=self.name,
            ) from e

    def to_dict(self) -> dict[str, Any]:
        """Plain dict view of the spec for introspection."""
        return {
            "name": self.name,
            "storage_key": self.storage_key,
            "scope": self.scope,
            "exposure": self.exposure,
            "visibility": self.visibility,
            "final": self.final,
            "predicate": self.predicate,
            "default": self.default,
            "transformer": self.transformer,
            "defined_in": self.defined_in,
        }
