"""
Metaclass wiring attribute declarations into ordinary Python classes.
"""

import logging
import sys
from typing import Any

from .accessor import Accessor
from .compiler import AttributeCompiler
from .deferred import compose, is_composition_unit
from .dsl import Declaration
from .exceptions import ReadonlyAttributeError
from .inheritance import propagate
from .registry import AttributeRegistry, find_registry, install_registry

lg = logging.getLogger(__name__)


class CattriMeta(type):
    """
    Metaclass for classes with cattri attributes.

    Class creation runs in this order: install a fresh registry, propagate
    metadata and type-level values from the bases, compose the composition
    units found in the MRO, then register the declarations of the class body
    in definition order. Pass ``mixin=True`` to declare a composition unit.
    """

    def __new__(
        mcls,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        mixin: bool = False,
        **kwargs: Any,
    ) -> "CattriMeta":
        namespace = dict(namespace)
        declarations = {
            key: value
            for key, value in namespace.items()
            if isinstance(value, Declaration)
        }
        for key in declarations:
            del namespace[key]

        cls = super().__new__(mcls, name, bases, namespace, **kwargs)
        install_registry(cls, composition_unit=mixin)
        registry = propagate(cls)

        if not mixin:
            units = [
                base
                for base in reversed(cls.__mro__[1:])
                if is_composition_unit(base)
            ]
            if units:
                compose(cls, *units)

        for attr_name, declaration in declarations.items():
            declaration.register(registry, attr_name)

        lg.debug(
            "created cattri class",
            extra={
                "target": cls.__qualname__,
                "mixin": mixin,
                "declared": list(declarations),
            },
        )
        return cls

    def __init__(
        cls,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        mixin: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, bases, namespace, **kwargs)

    def __setattr__(cls, name: str, value: Any) -> None:
        accessor = _find_accessor(cls, name)
        if accessor is not None and accessor.spec.type_scoped:
            accessor.assign(cls, sys._getframe(1), value)
            return
        if accessor is not None:
            raise ReadonlyAttributeError(
                f"'{name}' is an instance attribute of {cls.__qualname__}; "
                "assign it on an instance",
                attribute=accessor.spec.name,
            )
        super().__setattr__(name, value)

    def __delattr__(cls, name: str) -> None:
        if isinstance(vars(cls).get(name), Accessor):
            raise ReadonlyAttributeError(
                f"Cannot delete generated accessor '{name}' from {cls.__qualname__}",
                attribute=vars(cls)[name].spec.name,
            )
        super().__delattr__(name)

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        instance = super().__call__(*args, **kwargs)
        registry = find_registry(cls)
        if registry is not None and not registry.composition_unit:
            _lock_final_instance_attributes(registry, instance)
        return instance


def _find_accessor(cls: type, name: str) -> Accessor | None:
    for klass in cls.__mro__:
        if name in vars(klass):
            value = vars(klass)[name]
            return value if isinstance(value, Accessor) else None
    return None


def _lock_final_instance_attributes(
    registry: AttributeRegistry, instance: Any
) -> None:
    """Store and lock the defaults of final instance attributes left unset."""
    for spec in registry.defined_attributes(include_ancestors=True).values():
        if spec.final and not spec.type_scoped:
            AttributeCompiler.materialize(spec, instance)


class Cattri(metaclass=CattriMeta):
    """
    Base class enabling cattri declarations.

    Example:
        class Server(Cattri):
            host = cattri("localhost")
            port = cattri(8080, transformer=int)
            started = cattri(False, predicate=True)

        server = Server()
        server.port = "9000"
        server.port  # 9000
    """
