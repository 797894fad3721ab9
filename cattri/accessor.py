"""
Descriptor carrying the generated operations of one attribute name.

A class gets one Accessor per generated name: the attribute itself (reader
and, when allowed, writer) and, for predicate attributes, the ``<name>_p``
query. Each operation keeps its own effective visibility, checked against the
calling frame on every use.
"""

import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from types import FrameType
from typing import Any

from .attribute import AttributeSpec
from .exceptions import ReadonlyAttributeError
from .options import Visibility
from .visibility import ensure_accessible


class OperationKind(str, Enum):
    """Kind of generated operation held by an Accessor."""

    READER = "reader"
    WRITER = "writer"
    PREDICATE = "predicate"


@dataclass
class Operation:
    """An installed operation and the visibility applied to it."""

    kind: OperationKind
    body: Callable[..., Any]
    visibility: Visibility = Visibility.PUBLIC


class Accessor:
    """
    Data descriptor dispatching reads and writes to installed operations.

    Instance-scoped accessors act on the instance and return themselves when
    looked up on the class. Type-scoped accessors act on the class, also when
    read through an instance; assigning them goes through the class (see
    CattriMeta.__setattr__).
    """

    def __init__(self, name: str, spec: AttributeSpec, owner: type) -> None:
        self.name = name
        self.spec = spec
        self.owner = owner
        self.operations: dict[OperationKind, Operation] = {}

    def install(self, operation: Operation) -> None:
        self.operations[operation.kind] = operation

    def has(self, kind: OperationKind) -> bool:
        return kind in self.operations

    def _read_operation(self) -> Operation | None:
        return self.operations.get(OperationKind.READER) or self.operations.get(
            OperationKind.PREDICATE
        )

    def __get__(self, obj: Any, objtype: type | None = None) -> Any:
        if self.spec.type_scoped:
            accessed = objtype if obj is None else type(obj)
        elif obj is None:
            return self
        else:
            accessed = obj
        return self.read(accessed, sys._getframe(1))

    def __set__(self, obj: Any, value: Any) -> None:
        if self.spec.type_scoped:
            raise ReadonlyAttributeError(
                f"'{self.name}' is a type-level attribute; "
                f"assign it on {type(obj).__qualname__}",
                attribute=self.spec.name,
            )
        self.assign(obj, sys._getframe(1), value)

    def __delete__(self, obj: Any) -> None:
        raise ReadonlyAttributeError(
            f"Cannot delete attribute '{self.name}'", attribute=self.spec.name
        )

    def read(self, accessed: Any, frame: FrameType | None) -> Any:
        """Run the read operation for accessed after checking the caller."""
        operation = self._read_operation()
        if operation is None:
            raise AttributeError(f"'{self.name}' is not readable")
        ensure_accessible(operation.visibility, self.owner, accessed, frame, self.name)
        return operation.body(accessed)

    def assign(
        self, accessed: Any, frame: FrameType | None, *args: Any, **kwargs: Any
    ) -> None:
        """Run the write operation for accessed after checking the caller."""
        operation = self.operations.get(OperationKind.WRITER)
        if operation is None:
            if OperationKind.PREDICATE in self.operations:
                raise ReadonlyAttributeError(
                    f"Cannot assign to predicate '{self.name}'",
                    attribute=self.spec.name,
                )
            self.spec.validate_assignment()
            raise ReadonlyAttributeError(
                f"Cannot assign to attribute '{self.name}'", attribute=self.spec.name
            )
        ensure_accessible(operation.visibility, self.owner, accessed, frame, self.name)
        operation.body(accessed, *args, **kwargs)

    def __repr__(self) -> str:
        kinds = ", ".join(kind.value for kind in self.operations)
        return f"<Accessor {self.owner.__qualname__}.{self.name} [{kinds}]>"
