"""
Read-only queries over declared attributes.

Every function accepts a cattri class or one of its instances and never
touches value stores or registries beyond reading them.
"""

from collections.abc import Mapping
from typing import Any

from .attribute import AttributeSpec
from .options import Scope
from .registry import registry_for


def defined_attributes(
    target: Any, include_ancestors: bool = True
) -> Mapping[str, AttributeSpec]:
    """Specs known to target by name, inherited ones included by default."""
    return registry_for(target).defined_attributes(include_ancestors)


def attribute_defined(target: Any, name: str) -> bool:
    """Check whether target declares or inherits an attribute called name."""
    return name in defined_attributes(target)


def attribute_source(target: Any, name: str) -> type | None:
    """
    Return the class that declared an attribute.

    Raises:
        AttributeNotDefinedError: If target does not know the attribute
    """
    return registry_for(target).fetch(name, include_ancestors=True).defined_in


def attribute_methods(target: Any) -> dict[str, tuple[str, ...]]:
    """Python names exposed for each attribute of target."""
    return {
        name: spec.allowed_methods
        for name, spec in defined_attributes(target).items()
    }


def attribute_names(target: Any, scope: Scope | str | None = None) -> list[str]:
    """
    List attribute names, optionally restricted to one scope.

    Args:
        target: Cattri class or instance
        scope: Scope member, "type"/"instance", or None for all
    """
    wanted = None if scope is None else Scope("type" if scope == "class" else scope)
    return [
        name
        for name, spec in defined_attributes(target).items()
        if wanted is None or spec.scope is wanted
    ]


def installed_names(target: Any) -> frozenset[str]:
    """Names the class's own context installed (excluding ancestors)."""
    return registry_for(target).context.installed_names
