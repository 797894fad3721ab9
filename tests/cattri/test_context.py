"""
Tests for Context accessor installation and effective visibility.
"""

import pytest

from cattri.accessor import Accessor, OperationKind
from cattri.attribute import AttributeSpec
from cattri.context import Context, effective_visibility
from cattri.exceptions import MethodAlreadyDefinedError
from cattri.options import Visibility


def reader(owner):
    return "value"


def writer(owner, value):
    pass


@pytest.mark.unit
class TestEffectiveVisibility:
    """Test effective_visibility()."""

    def test_exposed_operations_keep_declared(self):
        """Test exposed operations keep the declared visibility."""
        spec = AttributeSpec.build("x", visibility="protected")
        assert effective_visibility(spec, OperationKind.READER) is Visibility.PROTECTED
        assert effective_visibility(spec, OperationKind.WRITER) is Visibility.PROTECTED

    def test_instance_internal_reader_private(self):
        """Test an unexposed instance reader becomes private."""
        spec = AttributeSpec.build("x", expose="write")
        assert effective_visibility(spec, OperationKind.READER) is Visibility.PRIVATE
        assert effective_visibility(spec, OperationKind.PREDICATE) is Visibility.PRIVATE
        assert effective_visibility(spec, OperationKind.WRITER) is Visibility.PUBLIC

    def test_type_internal_reader_protected(self):
        """Test an unexposed type reader becomes protected."""
        spec = AttributeSpec.build("x", expose="write", scope="type")
        assert effective_visibility(spec, OperationKind.READER) is Visibility.PROTECTED

    def test_internal_writer(self):
        """Test an unexposed writer is escalated as well."""
        spec = AttributeSpec.build("x", expose="read")
        assert effective_visibility(spec, OperationKind.WRITER) is Visibility.PRIVATE


@pytest.mark.unit
class TestDefineMethod:
    """Test Context.define_method()."""

    def test_installs_accessor(self):
        """Test the first operation creates an accessor on the target."""

        class Host:
            pass

        context = Context(Host)
        spec = AttributeSpec.build("x")
        accessor = context.define_method(spec, OperationKind.READER, reader)
        assert vars(Host)["x"] is accessor
        assert isinstance(accessor, Accessor)
        assert accessor.owner is Host
        assert context.installed_names == frozenset({"x"})
        assert context.defined_methods == {"x": frozenset({"x"})}
        assert context.method_defined("x")

    def test_second_operation_shares_accessor(self):
        """Test reader and writer of one spec share the accessor."""

        class Host:
            pass

        context = Context(Host)
        spec = AttributeSpec.build("x")
        first = context.define_method(spec, OperationKind.READER, reader)
        second = context.define_method(spec, OperationKind.WRITER, writer)
        assert first is second
        assert first.has(OperationKind.READER)
        assert first.has(OperationKind.WRITER)

    def test_refuses_foreign_method(self):
        """Test names not installed by the context are never overwritten."""

        class Host:
            def x(self):
                return "mine"

        context = Context(Host)
        with pytest.raises(MethodAlreadyDefinedError) as exc_info:
            context.define_method(AttributeSpec.build("x"), OperationKind.READER, reader)
        assert exc_info.value.target is Host
        assert Host().x() == "mine"

    def test_refuses_duplicate_operation(self):
        """Test installing the same operation twice fails."""

        class Host:
            pass

        context = Context(Host)
        spec = AttributeSpec.build("x")
        context.define_method(spec, OperationKind.READER, reader)
        with pytest.raises(MethodAlreadyDefinedError):
            context.define_method(spec, OperationKind.READER, reader)

    def test_inherited_names_are_not_conflicts(self):
        """Test only names defined directly on the target conflict."""

        class Base:
            def x(self):
                return "base"

        class Host(Base):
            pass

        context = Context(Host)
        context.define_method(AttributeSpec.build("x"), OperationKind.READER, reader)
        assert Host().x == "value"
        assert not Context(Base).method_defined("y")

    def test_new_spec_replaces_accessor(self):
        """Test a newer spec for an installed name gets a fresh accessor."""

        class Host:
            pass

        context = Context(Host)
        old = context.define_method(
            AttributeSpec.build("x"), OperationKind.READER, reader
        )
        new = context.define_method(
            AttributeSpec.build("x", 2), OperationKind.READER, reader
        )
        assert new is not old
        assert vars(Host)["x"] is new

    def test_applies_effective_visibility(self):
        """Test the installed operation gets its effective visibility."""

        class Host:
            pass

        context = Context(Host)
        spec = AttributeSpec.build("x", expose="write")
        accessor = context.define_method(spec, OperationKind.READER, reader)
        assert accessor.operations[OperationKind.READER].visibility is Visibility.PRIVATE

    def test_logs_install(self, trace_logs):
        """Test installs are traced with structured fields."""

        class Host:
            pass

        Context(Host).define_method(AttributeSpec.build("x"), OperationKind.READER, reader)
        records = [r for r in trace_logs.records if r.getMessage() == "installed operation"]
        assert records[0].method == "x"
        assert records[0].operation == "reader"


@pytest.mark.unit
class TestRemoveMethods:
    """Test Context.remove_methods()."""

    def test_removes_installed_names(self):
        """Test every name installed for the attribute is removed."""

        class Host:
            pass

        context = Context(Host)
        spec = AttributeSpec.build("ready", predicate=True)
        context.define_method(spec, OperationKind.READER, reader)
        context.define_method(
            spec, OperationKind.PREDICATE, reader, name=spec.predicate_name
        )
        context.remove_methods("ready")
        assert "ready" not in vars(Host)
        assert "ready_p" not in vars(Host)
        assert context.installed_names == frozenset()

    def test_unknown_attribute_is_noop(self):
        """Test removing an attribute with no methods does nothing."""

        class Host:
            def keep(self):
                pass

        Context(Host).remove_methods("keep")
        assert "keep" in vars(Host)
