"""
Declaration options and the enumerations they draw from.

Options passed to a declaration are validated by a pydantic schema so that
unknown keys and out-of-range values are rejected before any metadata is
built. Enumeration values may be given as members or as their string values.
"""

from enum import Enum
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from .exceptions import ValidationError


class Scope(str, Enum):
    """Where an attribute's value is stored."""

    TYPE = "type"  # one value per class, shared by its instances
    INSTANCE = "instance"  # one value per instance


class Exposure(str, Enum):
    """Which accessor operations are publicly reachable."""

    READ = "read"
    WRITE = "write"
    READ_WRITE = "read_write"
    NONE = "none"

    @property
    def readable(self) -> bool:
        return self in (Exposure.READ, Exposure.READ_WRITE)

    @property
    def writable(self) -> bool:
        return self in (Exposure.WRITE, Exposure.READ_WRITE)


class Visibility(str, Enum):
    """Access level applied to generated accessors."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


# Accepted spellings for Scope.TYPE besides its value
_SCOPE_ALIASES = {"class": Scope.TYPE}


class AttributeOptions(BaseModel):
    """
    Validated option set of a single declaration.

    Field names mirror AttributeSpec. `visibility` stays None when the
    declaration did not choose one, so the ambient visibility can fill it in.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    scope: Scope = Field(default=Scope.INSTANCE, description="Storage scope")
    expose: Exposure = Field(
        default=Exposure.READ_WRITE, description="Publicly reachable operations"
    )
    visibility: Visibility | None = Field(
        default=None, description="Declared accessor visibility"
    )
    final: StrictBool = Field(default=False, description="Write-once attribute")
    predicate: StrictBool = Field(
        default=False, description="Generate a boolean query accessor"
    )
    storage_key: str | None = Field(
        default=None, description="Key in the value store (defaults to the name)"
    )

    @field_validator("scope", mode="before")
    @classmethod
    def resolve_scope_alias(cls, v: Any) -> Any:
        """Accept 'class' as a spelling of the type scope."""
        if isinstance(v, str) and not isinstance(v, Scope):
            return _SCOPE_ALIASES.get(v, v)
        return v

    @field_validator("storage_key")
    @classmethod
    def validate_storage_key(cls, v: str | None) -> str | None:
        """Storage keys must be non-empty strings."""
        if v is not None and not v.strip():
            raise ValueError("storage_key must not be empty")
        return v


def parse_options(name: str, options: dict[str, Any]) -> AttributeOptions:
    """
    Validate raw declaration options.

    Args:
        name: Attribute name (used for error context)
        options: Raw keyword options from the declaration

    Returns:
        AttributeOptions: Validated, frozen option set

    Raises:
        ValidationError: If any option is unknown or invalid
    """
    try:
        return AttributeOptions(**options)
    except pydantic.ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'options'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(
            f"Invalid options for attribute '{name}': {problems}", attribute=name
        ) from e
