"""Tests for proxy dispatch: slot store, defaults, terminal, identity."""
from __future__ import annotations

import pytest

from builderproxy.core.defaults import NUL
from builderproxy.core.dispatcher import (
    BuilderState,
    builder_state,
    handler_of,
    proxy_class_for,
    slot_store,
)
from builderproxy.errors import (
    BuilderConsumedError,
    BuilderUsageError,
    UnclassifiableOperationError,
)
from builderproxy.factory import create
from builderproxy.policy.naming import NamingConvention
from builderproxy.tests.pizzas import (
    BareNameSetterBuilder,
    CallRecorder,
    PizzaBuilder,
    ProtocolPizzaBuilder,
)


@pytest.fixture
def builder(recorder):
    return create(PizzaBuilder, recorder, NamingConvention.GETTER_SETTER)


# ═══════════════════════════════════════════════════════════════════════════════
# Writers and readers
# ═══════════════════════════════════════════════════════════════════════════════


class TestSlotStore:

    def test_reader_returns_written_value(self, builder):
        builder.set_name("margherita")
        assert builder.get_name() == "margherita"

    def test_last_write_wins(self, builder):
        builder.set_size(10).set_size(12).set_size(14)
        assert builder.get_size() == 14

    def test_writer_returns_same_instance(self, builder):
        assert builder.set_size(10) is builder
        assert builder.set_cheese(True).set_weight(1.5) is builder

    def test_no_type_conversion(self, builder):
        builder.set_size("large")
        assert builder.get_size() == "large"

    def test_explicit_none_is_stored(self, builder):
        builder.set_size(None)
        assert builder.get_size() is None

    def test_keyword_argument(self, builder):
        builder.set_size(size=16)
        assert builder.get_size() == 16

    def test_instances_do_not_share_slots(self, recorder):
        a = create(PizzaBuilder, recorder)
        b = create(PizzaBuilder, recorder)
        a.set_size(8)
        assert b.get_size() == 0
        assert dict(slot_store(b)) == {}


class TestReaderDefaults:

    @pytest.mark.parametrize("reader,expected", [
        ("get_size", 0),
        ("get_cheese", False),
        ("get_weight", 0.0),
        ("get_crust", "\u0000"),
        ("get_slices", 0),
    ])
    def test_primitive_zero_values(self, builder, reader, expected):
        value = getattr(builder, reader)()
        assert value == expected
        assert type(value) is type(expected)

    def test_non_primitive_is_none(self, builder):
        assert builder.get_name() is None

    def test_optional_primitive_is_none(self, builder):
        assert builder.get_note() is None

    def test_reading_does_not_populate(self, builder):
        builder.get_size()
        assert dict(slot_store(builder)) == {}
        assert builder_state(builder) is BuilderState.FRESH


# ═══════════════════════════════════════════════════════════════════════════════
# Terminal
# ═══════════════════════════════════════════════════════════════════════════════


class TestTerminal:

    def test_callback_called_once_with_builder(self, builder, recorder):
        result = builder.set_size(10).build()
        assert result is recorder.result
        assert recorder.calls == [builder]
        assert recorder.calls[0] is builder

    def test_callback_sees_slot_values(self):
        product = create(PizzaBuilder, lambda b: (b.get_size(), b.get_name())) \
            .set_size(12).set_name("diavola").build()
        assert product == (12, "diavola")

    def test_callback_error_propagates_unwrapped(self, failing_recorder):
        b = create(PizzaBuilder, failing_recorder)
        with pytest.raises(RuntimeError) as exc_info:
            b.build()
        assert exc_info.value is failing_recorder.error
        assert not isinstance(exc_info.value, BuilderUsageError)
        assert len(failing_recorder.calls) == 1

    def test_failed_build_leaves_builder_open(self, failing_recorder):
        b = create(PizzaBuilder, failing_recorder).set_size(9)
        with pytest.raises(RuntimeError):
            b.build()
        assert builder_state(b) is BuilderState.POPULATED
        failing_recorder.error = None
        assert b.build() is failing_recorder.result


class TestSingleUse:

    def test_state_transitions(self, builder):
        assert builder_state(builder) is BuilderState.FRESH
        builder.set_size(10)
        assert builder_state(builder) is BuilderState.POPULATED
        builder.build()
        assert builder_state(builder) is BuilderState.CONSUMED

    def test_write_after_build_rejected(self, builder):
        builder.build()
        with pytest.raises(BuilderConsumedError, match="set_size"):
            builder.set_size(1)

    def test_second_build_rejected(self, builder, recorder):
        builder.build()
        with pytest.raises(BuilderConsumedError) as exc_info:
            builder.build()
        assert exc_info.value.operation == "build"
        assert len(recorder.calls) == 1

    def test_reads_allowed_after_build(self, builder):
        builder.set_size(11).build()
        assert builder.get_size() == 11

    def test_permissive_mode(self):
        rec = CallRecorder()
        b = create(PizzaBuilder, rec, single_use=False)
        b.set_size(1).build()
        b.set_size(2).build()
        assert len(rec.calls) == 2
        assert b.get_size() == 2
        assert builder_state(b) is BuilderState.POPULATED


# ═══════════════════════════════════════════════════════════════════════════════
# Invalid operations
# ═══════════════════════════════════════════════════════════════════════════════


class TestInvalidOperations:

    def test_unmatched_operation_fails_loudly(self, builder):
        with pytest.raises(UnclassifiableOperationError, match="'reset'") as exc_info:
            builder.reset(True, False)
        assert exc_info.value.operation == "reset"
        assert exc_info.value.arg_count == 2

    def test_writer_called_as_reader(self, builder):
        with pytest.raises(UnclassifiableOperationError, match="set_size"):
            builder.set_size()

    def test_void_setter(self, builder):
        with pytest.raises(UnclassifiableOperationError, match="set_color"):
            builder.set_color("red")

    def test_failure_does_not_touch_store(self, builder):
        builder.set_size(3)
        with pytest.raises(UnclassifiableOperationError):
            builder.get_size(4)
        assert dict(slot_store(builder)) == {"size": 3}

    def test_unknown_attribute(self, builder):
        with pytest.raises(AttributeError):
            builder.not_an_operation()


# ═══════════════════════════════════════════════════════════════════════════════
# Identity and representation
# ═══════════════════════════════════════════════════════════════════════════════


class TestIdentity:

    def test_equal_only_to_itself(self, recorder):
        a = create(PizzaBuilder, recorder).set_size(10)
        b = create(PizzaBuilder, recorder).set_size(10)
        assert a == a
        assert a != b
        assert not (a == b)

    def test_hash_is_identity_based(self, recorder):
        a = create(PizzaBuilder, recorder)
        b = create(PizzaBuilder, recorder)
        assert len({a, b, a}) == 2
        assert hash(a) == hash(a)

    def test_repr_shows_slots(self, builder):
        builder.set_size(10).set_name("funghi")
        text = repr(builder)
        assert text.startswith("PizzaBuilder")
        assert "'size': 10" in text
        assert "'name': 'funghi'" in text
        assert str(builder) == text

    def test_is_instance_of_contract(self, builder):
        assert isinstance(builder, PizzaBuilder)

    def test_proxy_class_cached(self):
        assert proxy_class_for(PizzaBuilder) is proxy_class_for(PizzaBuilder)

    def test_slot_store_is_read_only(self, builder):
        with pytest.raises(TypeError):
            slot_store(builder)["size"] = 1  # type: ignore[index]

    def test_handler_of_rejects_plain_objects(self):
        with pytest.raises(TypeError, match="not a synthesized builder"):
            handler_of(object())


# ═══════════════════════════════════════════════════════════════════════════════
# Other contract shapes
# ═══════════════════════════════════════════════════════════════════════════════


class TestProtocolContract:

    def test_build_end_to_end(self, recorder):
        b = create(ProtocolPizzaBuilder, recorder, NamingConvention.GETTER_SETTER)
        assert b.set_size(3).set_name("marinara") is b
        assert b.build() is recorder.result
        assert recorder.calls == [b]
        assert (b.get_size(), b.get_name()) == (3, "marinara")

    def test_proxy_subclasses_protocol(self):
        cls = proxy_class_for(ProtocolPizzaBuilder)
        assert ProtocolPizzaBuilder in cls.__mro__

    def test_defaults(self, recorder):
        b = create(ProtocolPizzaBuilder, recorder)
        assert b.get_size() == 0
        assert b.get_name() is None


class TestTaggedBareNameWriters:

    @pytest.fixture
    def tagged(self, recorder):
        return create(BareNameSetterBuilder, recorder, NamingConvention.SIMPLE_SETTER)

    def test_write_then_read(self, tagged):
        assert tagged.optional1(7) is tagged
        tagged.optional2("x")
        assert tagged.get_optional1() == 7
        assert tagged.get_optional2() == "x"

    def test_unwritten_slots_read_defaults(self, tagged):
        assert tagged.get_optional1() == 0
        assert tagged.get_optional2() == NUL

    def test_writer_name_is_not_a_reader(self, tagged):
        with pytest.raises(UnclassifiableOperationError):
            tagged.optional1()
