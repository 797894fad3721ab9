"""
Composition units: attribute declarations applied to classes that include them.

A unit is declared with ``mixin=True``. Its attributes are registered on the
unit but compile nothing there; ``compose`` compiles them onto each concrete
class the unit is applied to.

    class Timestamps(Cattri, mixin=True):
        created_at = cattri(time.time)

    class Record(Timestamps, Cattri):
        pass  # composed automatically by CattriMeta

    compose(Other, Timestamps)  # or explicitly
"""

import logging

from .compiler import AttributeCompiler
from .exceptions import ValidationError
from .registry import find_registry, registry_for

lg = logging.getLogger(__name__)


def is_composition_unit(cls: object) -> bool:
    """Check whether cls is a cattri class declared with ``mixin=True``."""
    if not isinstance(cls, type):
        return False
    registry = find_registry(cls)
    return registry is not None and registry.composition_unit


def compose(target: type, *units: type) -> tuple[str, ...]:
    """
    Apply composition units to target.

    Units are applied after the units they derive from. Each unit's own specs
    are recorded as inherited on target and, unless target is itself a
    unit, compiled onto it. Names declared directly on target win over unit
    specs. Units already applied to target are skipped.

    Args:
        target: Cattri class receiving the attributes
        *units: Composition units, applied in order

    Returns:
        tuple[str, ...]: Attribute names compiled onto target

    Raises:
        ValidationError: If a unit is not a composition unit
        CattriError: If target is not a cattri class
    """
    registry = registry_for(target)
    compiled: list[str] = []

    for unit in units:
        if not is_composition_unit(unit):
            raise ValidationError(
                f"{getattr(unit, '__qualname__', unit)!r} is not a composition unit",
                target=target.__qualname__,
            )

    for unit in _expand(units):
        if unit is target or unit in registry.composed_units:
            continue

        unit_registry = registry_for(unit)
        for name, spec in unit_registry.registered_attributes.items():
            if registry.lookup(name) is not None:
                continue
            if name in registry.inherited_attributes:
                registry.context.remove_methods(name)
            registry.inherit(spec)
            if not registry.composition_unit:
                AttributeCompiler.compile(spec, registry.context)
                compiled.append(name)

        registry.record_composition(unit)
        lg.debug(
            "composed unit",
            extra={
                "unit": unit.__qualname__,
                "target": target.__qualname__,
                "attributes": list(unit_registry.registered_attributes),
            },
        )

    return tuple(compiled)


def _expand(units: tuple[type, ...]) -> list[type]:
    """Order units after the units they derive from or were composed with."""
    ordered: list[type] = []

    def visit(unit: type) -> None:
        if unit in ordered:
            return
        for base in reversed(unit.__mro__[1:]):
            if is_composition_unit(base):
                visit(base)
        for composed in registry_for(unit).composed_units:
            visit(composed)
        ordered.append(unit)

    for unit in units:
        visit(unit)
    return ordered
