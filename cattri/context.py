"""
Installation target for generated accessors.

A Context wraps one class. It installs operations into Accessor descriptors,
refuses to overwrite anything it did not install itself, records what it
installed, and applies the effective visibility of each operation.
"""

import logging
from collections.abc import Callable
from typing import Any

from .accessor import Accessor, Operation, OperationKind
from .attribute import AttributeSpec
from .constants import TRACE
from .exceptions import MethodAlreadyDefinedError
from .options import Visibility

lg = logging.getLogger(__name__)

_MISSING = object()


def effective_visibility(spec: AttributeSpec, kind: OperationKind) -> Visibility:
    """
    Compute the visibility an operation actually gets.

    A reader or predicate of an attribute not exposed for reading, or a writer
    of one not exposed for writing, stays internal: protected for type-scoped
    attributes, private for instance-scoped ones. Everything else keeps the
    declared visibility.
    """
    if kind is OperationKind.WRITER:
        internal = spec.internal_writer
    else:
        internal = spec.internal_reader
    if internal:
        return Visibility.PROTECTED if spec.type_scoped else Visibility.PRIVATE
    return spec.visibility


class Context:
    """
    Safe accessor installation for one class.

    Attributes:
        target: Class receiving the accessors
        defer_definitions: True when the target is a composition unit whose
            attributes compile only once it is composed into a concrete class
    """

    def __init__(self, target: type, composition_unit: bool = False) -> None:
        self.target = target
        self.defer_definitions = composition_unit
        self._installed: set[str] = set()
        self._defined: dict[str, set[str]] = {}

    @property
    def installed_names(self) -> frozenset[str]:
        """Names this context installed on the target."""
        return frozenset(self._installed)

    @property
    def defined_methods(self) -> dict[str, frozenset[str]]:
        """Installed names grouped by attribute name."""
        return {name: frozenset(methods) for name, methods in self._defined.items()}

    def method_defined(self, name: str) -> bool:
        """Check whether name is defined directly on the target (not inherited)."""
        return name in vars(self.target)

    def define_method(
        self,
        spec: AttributeSpec,
        kind: OperationKind,
        body: Callable[..., Any],
        name: str | None = None,
    ) -> Accessor:
        """
        Install an operation on the target.

        Args:
            spec: Attribute the operation belongs to
            kind: Reader, writer or predicate
            body: Operation implementation
            name: Python name to install under (defaults to spec.name)

        Returns:
            Accessor: Descriptor holding the operation

        Raises:
            MethodAlreadyDefinedError: If name exists on the target and was not
                installed by this context, or the operation is already installed
        """
        name = name or spec.name
        existing = vars(self.target).get(name, _MISSING)

        if existing is not _MISSING and name not in self._installed:
            raise MethodAlreadyDefinedError(name, self.target, attribute=spec.name)

        if isinstance(existing, Accessor) and existing.spec is spec:
            if existing.has(kind):
                raise MethodAlreadyDefinedError(
                    name, self.target, attribute=spec.name, operation=kind.value
                )
            accessor = existing
        else:
            # first operation for this name, or a newer spec replacing ours
            accessor = Accessor(name, spec, self.target)
            type.__setattr__(self.target, name, accessor)

        operation = Operation(kind, body, spec.visibility)
        accessor.install(operation)
        self._installed.add(name)
        self._defined.setdefault(spec.name, set()).add(name)

        self.apply_visibility(operation, spec)
        lg.log(
            TRACE,
            "installed operation",
            extra={
                "attribute": spec.name,
                "method": name,
                "operation": kind.value,
                "visibility": operation.visibility.value,
                "target": self.target.__qualname__,
            },
        )
        return accessor

    def apply_visibility(self, operation: Operation, spec: AttributeSpec) -> None:
        """Set the operation's effective visibility."""
        operation.visibility = effective_visibility(spec, operation.kind)

    def remove_methods(self, attribute_name: str) -> None:
        """Remove everything this context installed for an attribute."""
        for name in self._defined.pop(attribute_name, set()):
            if isinstance(vars(self.target).get(name), Accessor):
                type.__delattr__(self.target, name)
            self._installed.discard(name)

    def __repr__(self) -> str:
        return f"Context({self.target.__qualname__})"
