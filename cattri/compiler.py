"""
Turns attribute specs into installed reader, writer and predicate operations.
"""

import logging
from typing import Any

from .accessor import OperationKind
from .attribute import AttributeSpec
from .context import Context
from .exceptions import AttributeDefinitionError, CattriError, FinalAttributeError
from .options import Exposure
from .store import store_for

lg = logging.getLogger(__name__)


class AttributeCompiler:
    """
    Generates accessor operations for an AttributeSpec through a Context.

    Values are always read and written through the owner's InternalStore:
    the instance for instance-scoped attributes, the accessed class for
    type-scoped ones.
    """

    @classmethod
    def compile(cls, spec: AttributeSpec, context: Context) -> tuple[str, ...]:
        """
        Compile spec onto the context's target.

        Final type-scoped values are materialized and locked immediately.
        Attributes exposed as NONE get no accessors at all.

        Returns:
            tuple[str, ...]: Python names exposed for the attribute

        Raises:
            AttributeDefinitionError: If generation fails for a non-cattri reason
        """
        try:
            if spec.type_scoped and spec.final:
                cls.materialize(spec, context.target)

            if spec.exposure is Exposure.NONE:
                lg.debug(
                    "attribute has no accessors",
                    extra={
                        "attribute": spec.name,
                        "target": context.target.__qualname__,
                    },
                )
                return ()

            cls.define_reader(spec, context)
            if spec.writable:
                cls.define_writer(spec, context)
            elif spec.write_once:
                cls.define_write_once_writer(spec, context)
            if spec.predicate:
                cls.define_predicate(spec, context)
        except CattriError:
            raise
        except Exception as e:
            raise AttributeDefinitionError(
                f"Attribute '{spec.name}' could not be defined on "
                f"{context.target.__qualname__}: {e}",
                attribute=spec.name,
            ) from e

        lg.debug(
            "compiled attribute",
            extra={
                "attribute": spec.name,
                "target": context.target.__qualname__,
                "scope": spec.scope.value,
                "exposure": spec.exposure.value,
            },
        )
        return spec.allowed_methods

    @staticmethod
    def materialize(spec: AttributeSpec, owner: Any) -> Any:
        """Store the default for owner unless a value exists, locking finals."""
        return store_for(owner).memoize(
            spec.storage_key, spec.final, spec.evaluate_default
        )

    @classmethod
    def read_value(cls, spec: AttributeSpec, owner: Any) -> Any:
        """
        Return the current value, materializing the default on first read.

        Raises:
            FinalAttributeError: If an instance-scoped final was never assigned
        """
        if spec.final:
            store = store_for(owner)
            if store.has(spec.storage_key):
                return store.get(spec.storage_key)
            if not spec.type_scoped:
                raise FinalAttributeError(
                    f"Final attribute '{spec.name}' must be assigned before it is read",
                    attribute=spec.name,
                )
        return cls.materialize(spec, owner)

    @classmethod
    def define_reader(cls, spec: AttributeSpec, context: Context) -> None:
        def reader(owner: Any) -> Any:
            return cls.read_value(spec, owner)

        context.define_method(spec, OperationKind.READER, reader)

    @staticmethod
    def define_writer(spec: AttributeSpec, context: Context) -> None:
        def writer(owner: Any, *args: Any, **kwargs: Any) -> None:
            spec.validate_assignment()
            value = spec.process_assignment(*args, **kwargs)
            store_for(owner).set(spec.storage_key, value, final=spec.final)

        context.define_method(spec, OperationKind.WRITER, writer)

    @staticmethod
    def define_write_once_writer(spec: AttributeSpec, context: Context) -> None:
        """Writer for final instance attributes: the first assignment locks."""

        def writer(owner: Any, *args: Any, **kwargs: Any) -> None:
            store = store_for(owner)
            if store.is_locked(spec.storage_key):
                raise FinalAttributeError(
                    f"Cannot assign to final attribute '{spec.name}' more than once",
                    attribute=spec.name,
                )
            value = spec.process_assignment(*args, **kwargs)
            store.set(spec.storage_key, value, final=True)

        context.define_method(spec, OperationKind.WRITER, writer)

    @classmethod
    def define_predicate(cls, spec: AttributeSpec, context: Context) -> None:
        def predicate(owner: Any) -> bool:
            return bool(cls.read_value(spec, owner))

        context.define_method(
            spec, OperationKind.PREDICATE, predicate, name=spec.predicate_name
        )
