"""Unit tests for the options model and its value types."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from nanopb_options import (
    EnumValue,
    FieldType,
    IntSize,
    Known,
    NanoPbOptions,
    ResolutionError,
    Unrecognized,
    UnknownField,
)
from nanopb_options.codec.schema import FieldSchema
from nanopb_options.codec.wire import WireType
from nanopb_options.exceptions import SchemaError
from nanopb_options.models.fields import FieldKind


class TestProtoEnum:
    """Test .proto name helpers on the enum types."""

    def test_str_name(self) -> None:
        """Member names are the .proto names."""
        assert FieldType.FT_POINTER.as_str_name() == "FT_POINTER"
        assert FieldType.from_str_name("FT_INLINE") is FieldType.FT_INLINE
        assert FieldType.from_str_name("FT_NOPE") is None

    def test_from_number(self) -> None:
        """Numbers are looked up by value, not by position."""
        assert IntSize.from_number(16) is IntSize.IS_16
        assert IntSize.from_number(2) is None


class TestEnumValue:
    """Test the Known/Unrecognized variants."""

    def test_from_number(self) -> None:
        """Declared numbers wrap as Known, others as Unrecognized."""
        assert EnumValue.from_number(FieldType, 4) == Known(FieldType.FT_POINTER)
        assert EnumValue.from_number(FieldType, 6) == Unrecognized(6)

    def test_raw(self) -> None:
        """Both variants expose the wire number."""
        assert Known(IntSize.IS_64).raw == 64
        assert Unrecognized(-3).raw == -3

    def test_equality(self) -> None:
        """Known values compare by enum type and member."""
        assert Known(FieldType.FT_CALLBACK) == Known(FieldType.FT_CALLBACK)
        assert Known(FieldType.FT_DEFAULT) != Known(IntSize.IS_DEFAULT)
        assert Known(FieldType.FT_STATIC) != Unrecognized(2)
        assert len({Unrecognized(9), Unrecognized(9)}) == 1

    def test_invalid_construction(self) -> None:
        """Variants reject values of the wrong type."""
        with pytest.raises(TypeError):
            Known(2)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            Unrecognized(True)

    def test_base_is_abstract(self) -> None:
        """Only the two variants can be instantiated."""
        with pytest.raises(TypeError):
            EnumValue()  # type: ignore[abstract]

    def test_repr(self) -> None:
        """Test readable representations."""
        assert repr(Known(FieldType.FT_STATIC)) == "Known(FieldType.FT_STATIC)"
        assert repr(Unrecognized(7)) == "Unrecognized(7)"


class TestUnknownField:
    """Test unknown-field records."""

    def test_immutable(self) -> None:
        """Unknown fields cannot be modified after construction."""
        field = UnknownField(30, WireType.VARINT, b"\x01")

        with pytest.raises(AttributeError):
            field.tag = 31  # type: ignore[misc]

    def test_bytearray_payload_is_copied(self) -> None:
        """Mutable payloads are copied to bytes."""
        buffer = bytearray(b"ab")
        field = UnknownField(30, WireType.LEN, buffer)
        buffer[0] = 0

        assert field.payload == b"ab"
        assert not field.is_borrowed()

    def test_rejects_end_group(self) -> None:
        """An end-group record is never a field on its own."""
        with pytest.raises(ValueError):
            UnknownField(30, WireType.EGROUP, b"")

    def test_tag_range(self) -> None:
        """Tags must be valid field numbers."""
        with pytest.raises(ValueError, match="tag"):
            UnknownField(0, WireType.VARINT, b"\x01")
        with pytest.raises(ValueError, match="tag"):
            UnknownField(1 << 29, WireType.VARINT, b"\x01")

    @pytest.mark.parametrize(
        ("wire_type", "payload"),
        [
            (WireType.VARINT, b"\x96"),
            (WireType.VARINT, b"\x01\x02"),
            (WireType.I32, b"\x00\x00\x00"),
            (WireType.I64, b"\x00" * 9),
            (WireType.SGROUP, b"\x08"),
            (WireType.SGROUP, b"\xf4\x01"),
        ],
    )
    def test_malformed_payload(self, wire_type: WireType, payload: bytes) -> None:
        """Payloads that would not re-encode as one record are rejected."""
        with pytest.raises(ValueError):
            UnknownField(30, wire_type, payload)

    def test_borrowed_equals_owned(self) -> None:
        """Equality compares payload bytes, however they are held."""
        borrowed = UnknownField(30, WireType.LEN, memoryview(b"xyz"))
        owned = borrowed.to_owned()

        assert borrowed.is_borrowed()
        assert isinstance(owned.payload, bytes)
        assert borrowed == owned
        assert hash(borrowed) == hash(owned)


class TestNanoPbOptions:
    """Test model construction and validation."""

    def test_all_absent(self) -> None:
        """A fresh value has no field set."""
        opts = NanoPbOptions()

        assert opts.max_size is None
        assert opts.include == ()
        assert opts.present_fields() == []

    def test_enum_coercion(self) -> None:
        """Members, names and numbers are stored as EnumValue variants."""
        assert NanoPbOptions(type=FieldType.FT_STATIC).type == Known(FieldType.FT_STATIC)
        assert NanoPbOptions(type="FT_POINTER").type == Known(FieldType.FT_POINTER)
        assert NanoPbOptions(type=1).type == Known(FieldType.FT_CALLBACK)
        assert NanoPbOptions(int_size=7).int_size == Unrecognized(7)

    def test_enum_wrong_type(self) -> None:
        """Members of another enum are rejected."""
        with pytest.raises(ValidationError):
            NanoPbOptions(type=IntSize.IS_8)
        with pytest.raises(ValidationError):
            NanoPbOptions(type=Known(IntSize.IS_8))

    def test_enum_bad_name(self) -> None:
        """Unknown .proto names are rejected."""
        with pytest.raises(ValidationError):
            NanoPbOptions(mangle_names="M_BOGUS")

    def test_integer_ranges(self) -> None:
        """int32 and uint32 fields are range checked."""
        NanoPbOptions(max_size=-(1 << 31), msgid=(1 << 32) - 1)

        with pytest.raises(ValidationError):
            NanoPbOptions(max_size=1 << 31)
        with pytest.raises(ValidationError):
            NanoPbOptions(msgid=-1)

    def test_extra_forbidden(self) -> None:
        """Names outside the field table are rejected."""
        with pytest.raises(ValidationError):
            NanoPbOptions(max_bytes=10)

    def test_frozen(self) -> None:
        """Options values are immutable."""
        opts = NanoPbOptions(max_size=10)

        with pytest.raises(ValidationError):
            opts.max_size = 20  # type: ignore[misc]

    def test_model_copy(self) -> None:
        """Modified copies leave the original untouched."""
        opts = NanoPbOptions(max_size=10)
        changed = opts.model_copy(update={"max_size": 20})

        assert opts.max_size == 10
        assert changed.max_size == 20

    def test_has(self) -> None:
        """Presence ignores the value, including defaults and False."""
        opts = NanoPbOptions(sort_by_tag=True, skip_message=False, exclude=["x.h"])

        assert opts.has("sort_by_tag")
        assert opts.has("skip_message")
        assert opts.has("exclude")
        assert not opts.has("include")
        assert not opts.has("max_count")

    def test_has_unknown_name(self) -> None:
        """Asking for a name outside the field table is an error."""
        with pytest.raises(ResolutionError):
            NanoPbOptions().has("max_bytes")

    def test_present_fields_tag_order(self) -> None:
        """Present fields are listed in tag order, not declaration order."""
        opts = NanoPbOptions(max_length=5, max_count=3, max_size=1)

        assert opts.present_fields() == ["max_size", "max_count", "max_length"]

    def test_descriptions(self) -> None:
        """Field docstrings are available as descriptions."""
        description = NanoPbOptions.model_fields["max_count"].description

        assert description is not None
        assert "repeated" in description


class TestFieldSchema:
    """Test field table records."""

    def test_require_enum_type(self) -> None:
        """Enum fields expose their enum class."""
        field_schema = FieldSchema(
            name="type",
            tag=3,
            kind=FieldKind.ENUM,
            default=FieldType.FT_DEFAULT,
            enum_type=FieldType,
            repeated=False,
        )

        assert field_schema.require_enum_type() is FieldType

    def test_require_enum_type_missing(self) -> None:
        """An enum field without an enum class is a schema error."""
        field_schema = FieldSchema(
            name="broken", tag=30, kind=FieldKind.ENUM, default=None, enum_type=None, repeated=False
        )

        with pytest.raises(SchemaError, match="broken"):
            field_schema.require_enum_type()
