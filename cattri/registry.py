"""
Per-class catalog of attribute specs.

The registry enforces local name uniqueness, compiles specs as they are
registered (or queues them on composition units), and answers lookups that
merge inherited entries with local ones.
"""

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from .attribute import AttributeSpec
from .compiler import AttributeCompiler
from .constants import REGISTRY_ATTRIBUTE
from .context import Context
from .exceptions import (
    AttributeAlreadyDefinedError,
    AttributeNotDefinedError,
    CattriError,
)
from .store import StoreEntry, store_for
from .visibility import current_visibility

lg = logging.getLogger(__name__)


class AttributeRegistry:
    """
    Attribute specs declared on, inherited by, or composed into one class.

    Local entries are the ones declared on the class itself and are the only
    ones checked for uniqueness; redeclaring an inherited name shadows it.
    Inherited entries are shared spec references copied in at class creation
    or composition time.
    """

    def __init__(self, context: Context) -> None:
        self.context = context
        self._local: dict[str, AttributeSpec] = {}
        self._inherited: dict[str, AttributeSpec] = {}
        self._composed_units: list[type] = []

    @property
    def target(self) -> type:
        return self.context.target

    @property
    def composition_unit(self) -> bool:
        return self.context.defer_definitions

    @property
    def registered_attributes(self) -> Mapping[str, AttributeSpec]:
        """Specs declared directly on this class."""
        return MappingProxyType(dict(self._local))

    @property
    def inherited_attributes(self) -> Mapping[str, AttributeSpec]:
        """Specs received from base classes and composed units."""
        return MappingProxyType(dict(self._inherited))

    @property
    def composed_units(self) -> tuple[type, ...]:
        return tuple(self._composed_units)

    def defined_attributes(
        self, include_ancestors: bool = False
    ) -> Mapping[str, AttributeSpec]:
        """
        Return known specs by name.

        Args:
            include_ancestors: Merge inherited specs under the local ones

        Returns:
            Read-only mapping of attribute name to spec
        """
        if not include_ancestors:
            return self.registered_attributes
        return MappingProxyType({**self._inherited, **self._local})

    def lookup(
        self, name: str, include_ancestors: bool = False
    ) -> AttributeSpec | None:
        """Return the spec for name, or None."""
        return self.defined_attributes(include_ancestors).get(name)

    def fetch(self, name: str, include_ancestors: bool = False) -> AttributeSpec:
        """
        Return the spec for name.

        Raises:
            AttributeNotDefinedError: If no such attribute is known
        """
        spec = self.lookup(name, include_ancestors)
        if spec is None:
            raise AttributeNotDefinedError(name, target=self.target.__qualname__)
        return spec

    def define_attribute(
        self,
        name: str,
        default: Any = None,
        transformer: Callable[..., Any] | None = None,
        **options: Any,
    ) -> tuple[str, ...]:
        """
        Build a spec from a declaration and register it.

        When no visibility is given, the ambient declared visibility applies.

        Returns:
            tuple[str, ...]: Python names exposed for the attribute
        """
        if options.get("visibility") is None:
            options["visibility"] = current_visibility()
        spec = AttributeSpec.build(
            name, default, transformer, defined_in=self.target, **options
        )
        return self.register(spec)

    def register(self, spec: AttributeSpec) -> tuple[str, ...]:
        """
        Register spec locally and compile it, or queue it on composition units.

        A failed compilation leaves neither the entry, any accessor nor any
        class-level value behind, and restores what a shadowing declaration
        replaced.

        Raises:
            AttributeAlreadyDefinedError: If the name is already declared locally
        """
        if spec.name in self._local:
            raise AttributeAlreadyDefinedError(
                spec.name, target=self.target.__qualname__
            )

        inherited = self._inherited.get(spec.name)
        snapshot = self._snapshot_values(spec, inherited)
        shadowed = (
            inherited if spec.name in self.context.defined_methods else None
        )
        if inherited is not None:
            # shadowing: drop accessors and values left by the inherited spec
            self.context.remove_methods(spec.name)
            if inherited.type_scoped and not self.composition_unit:
                self._drop_inherited_value(inherited)

        self._local[spec.name] = spec
        if self.composition_unit:
            lg.debug(
                "deferred attribute",
                extra={"attribute": spec.name, "target": self.target.__qualname__},
            )
            return spec.allowed_methods

        try:
            return AttributeCompiler.compile(spec, self.context)
        except CattriError:
            self._rollback(spec, shadowed, snapshot)
            raise

    def replace_transformer(
        self, name: str, transformer: Callable[..., Any]
    ) -> AttributeSpec:
        """
        Swap the transformer of a local attribute and recompile it.

        Returns:
            AttributeSpec: The new spec (same identity as the old one)

        Raises:
            AttributeNotDefinedError: If name is not declared on this class
        """
        spec = self._local.get(name)
        if spec is None:
            raise AttributeNotDefinedError(name, target=self.target.__qualname__)

        replacement = spec.with_transformer(transformer)
        self._local[name] = replacement
        if not self.composition_unit:
            self.context.remove_methods(name)
            AttributeCompiler.compile(replacement, self.context)
        return replacement

    def inherit(self, spec: AttributeSpec) -> None:
        """Record a spec received from a base class or composed unit."""
        self._inherited[spec.name] = spec

    def record_composition(self, unit: type) -> None:
        if unit not in self._composed_units:
            self._composed_units.append(unit)

    def _drop_inherited_value(self, spec: AttributeSpec) -> None:
        store = store_for(self.target, create=False)
        if store is not None:
            store.discard(spec.storage_key)

    def _snapshot_values(
        self, spec: AttributeSpec, inherited: AttributeSpec | None
    ) -> dict[str, StoreEntry | None]:
        """Capture the class-level entries a registration may touch."""
        if self.composition_unit:
            return {}
        store = store_for(self.target, create=False)
        return {
            s.storage_key: store.entry(s.storage_key) if store is not None else None
            for s in (spec, inherited)
            if s is not None and s.type_scoped
        }

    def _rollback(
        self,
        spec: AttributeSpec,
        shadowed: AttributeSpec | None,
        snapshot: dict[str, StoreEntry | None],
    ) -> None:
        """Undo a failed registration, restoring what it replaced."""
        del self._local[spec.name]
        self.context.remove_methods(spec.name)

        store = store_for(self.target, create=False)
        if store is not None:
            for key, entry in snapshot.items():
                store.discard(key)
                if entry is not None:
                    store.put_entry(key, entry)

        if shadowed is not None:
            AttributeCompiler.compile(shadowed, self.context)

    def __repr__(self) -> str:
        return f"AttributeRegistry({self.target.__qualname__}, {list(self._local)})"


def find_registry(cls: type) -> AttributeRegistry | None:
    """Return the registry installed directly on cls, if any."""
    registry = vars(cls).get(REGISTRY_ATTRIBUTE)
    return registry if isinstance(registry, AttributeRegistry) else None


def install_registry(cls: type, composition_unit: bool = False) -> AttributeRegistry:
    """Create and attach a fresh registry (and context) to cls."""
    registry = AttributeRegistry(Context(cls, composition_unit=composition_unit))
    type.__setattr__(cls, REGISTRY_ATTRIBUTE, registry)
    return registry


def registry_for(target: Any) -> AttributeRegistry:
    """
    Resolve the registry of a cattri class (or of an instance's class).

    Raises:
        CattriError: If the class was not created by CattriMeta
    """
    cls = target if isinstance(target, type) else type(target)
    registry = find_registry(cls)
    if registry is None:
        raise CattriError(
            f"{cls.__qualname__} does not support cattri attributes; "
            "derive it from cattri.Cattri"
        )
    return registry
