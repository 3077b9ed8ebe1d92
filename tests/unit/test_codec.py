"""Unit tests for encoding/decoding."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from nanopb_options import (
    CodecOption,
    DecodeError,
    DescriptorSize,
    EncodeError,
    FieldDescriptorType,
    FieldType,
    IntSize,
    Known,
    MalformedRecordError,
    MalformedVarintError,
    NanoPbOptions,
    TruncatedInputError,
    TypenameMangling,
    Unrecognized,
    UnknownField,
    WireTypeMismatchError,
    decode,
    encode,
)
from nanopb_options.codec.wire import WireType


class TestEncodeDecode:
    """Test basic encode/decode functionality."""

    def test_empty_message(self) -> None:
        """An empty buffer decodes to options with every field absent."""
        opts = decode(b"")

        assert opts == NanoPbOptions()
        assert opts.present_fields() == []
        assert encode(opts) == b""

    def test_concrete_scenario(self, scenario_options: NanoPbOptions) -> None:
        """Encode/decode the documented three-field scenario."""
        decoded = decode(encode(scenario_options))

        assert decoded.max_size == 64
        assert decoded.long_names is False
        assert decoded.include == ("a.h", "b.h")
        assert decoded.present_fields() == ["max_size", "long_names", "include"]
        for name in ("max_length", "max_count", "msgid", "type", "sort_by_tag", "package"):
            assert getattr(decoded, name) is None
        assert decoded.exclude == ()
        assert decoded.unknown_fields == ()

    def test_scenario_wire_bytes(
        self, scenario_options: NanoPbOptions, scenario_bytes: bytes
    ) -> None:
        """Known fields are emitted in ascending tag order."""
        assert encode(scenario_options) == scenario_bytes

    def test_all_fields(self) -> None:
        """Every field of the table survives a round trip."""
        opts = NanoPbOptions(
            max_size=16,
            max_length=15,
            max_count=8,
            int_size=IntSize.IS_16,
            type=FieldType.FT_STATIC,
            long_names=True,
            packed_struct=True,
            packed_enum=True,
            skip_message=False,
            no_unions=True,
            msgid=4000000000,
            anonymous_oneof=True,
            proto3=True,
            proto3_singular_msgs=True,
            enum_to_string=True,
            fixed_length=True,
            fixed_count=True,
            submsg_callback=True,
            mangle_names=TypenameMangling.M_PACKAGE_INITIALS,
            callback_datatype="my_cb_t",
            callback_function="my_cb",
            descriptorsize=DescriptorSize.DS_8,
            default_has=True,
            include=["x.h"],
            exclude=["y.pb.h", "z.pb.h"],
            package="pkg",
            type_override=FieldDescriptorType.TYPE_SINT32,
            sort_by_tag=False,
            fallback_type=FieldType.FT_POINTER,
        )

        decoded = decode(encode(opts))

        assert decoded == opts
        assert len(decoded.present_fields()) == 29

    def test_negative_int32(self) -> None:
        """Negative int32 values round trip through the ten-byte form."""
        opts = NanoPbOptions(max_size=-1)
        data = encode(opts)

        assert data == b"\x08" + b"\xff" * 9 + b"\x01"
        assert decode(data).max_size == -1

    def test_non_ascii_strings(self) -> None:
        """Strings are UTF-8 on the wire."""
        opts = NanoPbOptions(package="größe", include=["日本.h"])

        assert decode(encode(opts)) == opts


class TestPresence:
    """Presence is independent of the documented default."""

    def test_explicit_default_is_present(self) -> None:
        """A field set to its default is still encoded and reported present."""
        opts = NanoPbOptions(
            long_names=True, type=FieldType.FT_DEFAULT, callback_datatype="pb_callback_t"
        )
        decoded = decode(encode(opts))

        assert decoded.has("long_names")
        assert decoded.long_names is True
        assert decoded.type == Known(FieldType.FT_DEFAULT)
        assert decoded.callback_datatype == "pb_callback_t"

    def test_explicit_false_is_present(self) -> None:
        """A present False is encoded as one record."""
        assert encode(NanoPbOptions(packed_struct=False)) == b"\x28\x00"

    def test_absent_emits_nothing(self) -> None:
        """Absent fields contribute no bytes."""
        assert encode(NanoPbOptions(msgid=None)) == b""


class TestMergeRules:
    """Test how repeated records are combined during decode."""

    def test_last_scalar_wins(self) -> None:
        """long_names false then true decodes to true."""
        assert decode(b"\x20\x00\x20\x01").long_names is True

    def test_last_enum_wins(self) -> None:
        """Later enum records overwrite earlier ones."""
        opts = decode(b"\x18\x01\x18\x02")

        assert opts.type == Known(FieldType.FT_STATIC)

    def test_repeated_appends_in_order(self) -> None:
        """Repeated records append without dedup, in wire order."""
        data = b"\xc2\x01\x03b.h\xc2\x01\x03a.h\xc2\x01\x03b.h"

        assert decode(data).include == ("b.h", "a.h", "b.h")

    def test_interleaved_repeated_fields(self) -> None:
        """Interleaved include/exclude records keep per-field order."""
        data = b"\xc2\x01\x01a\xd2\x01\x01x\xc2\x01\x01b\xd2\x01\x01y"
        opts = decode(data)

        assert opts.include == ("a", "b")
        assert opts.exclude == ("x", "y")


class TestEnumTolerance:
    """Undeclared enum numbers are kept, not rejected or coerced."""

    def test_unrecognized_value(self) -> None:
        """int_size = 7 is not declared and decodes to Unrecognized(7)."""
        opts = decode(b"\x38\x07")

        assert opts.int_size == Unrecognized(7)
        assert opts.has("int_size")
        assert not opts.int_size.is_known()

    def test_unrecognized_reencodes(self) -> None:
        """Unrecognized numbers are written back unchanged."""
        assert encode(decode(b"\x18\x63")) == b"\x18\x63"

    def test_negative_enum_number(self) -> None:
        """Negative enum numbers are int32 and survive a round trip."""
        data = encode(NanoPbOptions(fallback_type=Unrecognized(-5)))

        assert decode(data).fallback_type == Unrecognized(-5)

    def test_known_value(self) -> None:
        """Declared numbers, including non-sequential ones, are Known."""
        opts = decode(b"\x18\x04")

        assert opts.type == Known(FieldType.FT_POINTER)
        assert opts.type.raw == 4


class TestUnknownFields:
    """Unknown tags are retained verbatim and in order."""

    def test_unknown_preserved(self, unknown_varint_record: bytes) -> None:
        """An unknown record is re-encoded byte for byte."""
        opts = decode(unknown_varint_record)

        assert opts.unknown_fields == (UnknownField(30, WireType.VARINT, b"\x96\x01"),)
        assert encode(opts) == unknown_varint_record

    def test_unknown_order(self) -> None:
        """Unknown fields keep encounter order and are never coalesced."""
        data = b"\xf2\x01\x01b\x20\x01\xf0\x01\x05\xf2\x01\x01a"
        opts = decode(data)

        assert [f.tag for f in opts.unknown_fields] == [30, 30, 30]
        assert [bytes(f.payload) for f in opts.unknown_fields] == [b"b", b"\x05", b"a"]
        assert opts.long_names is True

    def test_unknown_group(self) -> None:
        """Group records are captured whole."""
        data = b"\xc3\x02\x08\x01\x12\x00\xc4\x02"
        opts = decode(data)

        assert opts.unknown_fields == (UnknownField(40, WireType.SGROUP, b"\x08\x01\x12\x00"),)
        assert encode(opts) == data

    def test_known_tag_inside_group_is_not_decoded(self) -> None:
        """Records nested in an unknown group do not set known fields."""
        opts = decode(b"\xc3\x02\x08\x01\xc4\x02")

        assert opts.max_size is None

    def test_zero_copy(self, unknown_varint_record: bytes) -> None:
        """ZERO_COPY payloads borrow the input buffer until to_owned()."""
        buffer = bytearray(unknown_varint_record)
        opts = decode(buffer, option=CodecOption.ZERO_COPY)
        unknown = opts.unknown_fields[0]

        assert unknown.is_borrowed()
        assert unknown.payload == b"\x96\x01"

        owned = opts.to_owned()
        assert not owned.unknown_fields[0].is_borrowed()
        assert owned == opts

    def test_default_copies(self, unknown_varint_record: bytes) -> None:
        """Without ZERO_COPY, payloads are owned bytes."""
        opts = decode(unknown_varint_record)

        assert isinstance(opts.unknown_fields[0].payload, bytes)
        assert opts.to_owned() is opts

    def test_discard_unknown(self, unknown_varint_record: bytes) -> None:
        """DISCARD_UNKNOWN drops unknown records on decode and encode."""
        data = b"\x08\x01" + unknown_varint_record

        assert decode(data, option=CodecOption.DISCARD_UNKNOWN).unknown_fields == ()
        full = decode(data)
        assert encode(full, option=CodecOption.DISCARD_UNKNOWN) == b"\x08\x01"


class TestDecodeErrors:
    """Test decoding error handling."""

    def test_wire_type_mismatch(self) -> None:
        """long_names carried as a length-delimited record."""
        with pytest.raises(WireTypeMismatchError) as excinfo:
            decode(b"\x22\x01\x00")

        err = excinfo.value
        assert (err.tag, err.expected, err.actual) == (4, 0, 2)
        assert err.offset == 0

    def test_string_field_as_varint(self) -> None:
        """callback_datatype carried as a varint record."""
        with pytest.raises(WireTypeMismatchError):
            decode(b"\x90\x01\x01")

    def test_mismatch_after_valid_records(self) -> None:
        """Errors abort decode even after valid records."""
        with pytest.raises(WireTypeMismatchError) as excinfo:
            decode(b"\x08\x40\x22\x01\x00")
        assert excinfo.value.offset == 2

    def test_truncated_value(self) -> None:
        """A key with no value."""
        with pytest.raises(TruncatedInputError):
            decode(b"\x08")

    def test_truncated_string(self) -> None:
        """A length prefix longer than the remaining data."""
        with pytest.raises(TruncatedInputError):
            decode(b"\x92\x01\x05ab")

    def test_truncated_unknown(self) -> None:
        """Unknown length-delimited records are bounds-checked too."""
        with pytest.raises(TruncatedInputError):
            decode(b"\xf2\x01\x09abc")

    def test_malformed_varint(self) -> None:
        """A varint value longer than ten bytes."""
        with pytest.raises(MalformedVarintError):
            decode(b"\x08" + b"\xff" * 10)

    def test_invalid_utf8(self) -> None:
        """String fields must hold valid UTF-8."""
        with pytest.raises(MalformedRecordError):
            decode(b"\xca\x01\x01\xff")

    def test_all_are_decode_errors(self) -> None:
        """Every structural error is a DecodeError."""
        for data in (b"\x08", b"\x08" + b"\xff" * 10, b"\x22\x00", b"\x00"):
            with pytest.raises(DecodeError):
                decode(data)


class TestEncodeErrors:
    """Test encoding error handling."""

    def test_int32_out_of_range(self) -> None:
        """Out-of-range integers (bypassing validation)."""
        opts = NanoPbOptions.model_construct(max_size=1 << 31)

        with pytest.raises(EncodeError, match="int32"):
            encode(opts)

    def test_wrong_type(self) -> None:
        """Values of the wrong Python type (bypassing validation)."""
        opts = NanoPbOptions.model_construct(long_names="yes")

        with pytest.raises(EncodeError, match="expected bool"):
            encode(opts)

    def test_unrecognized_out_of_range(self) -> None:
        """Enum numbers must fit in int32 (bypassing validation)."""
        opts = NanoPbOptions.model_construct(type=Unrecognized(1 << 40))

        with pytest.raises(EncodeError, match="int32"):
            encode(opts)


class TestConstructedValues:
    """Explicitly constructed values survive a round trip unchanged."""

    def test_unrecognized_declared_number(self) -> None:
        """Unrecognized(2) on a FieldType field is stored as FT_STATIC."""
        opts = NanoPbOptions(type=Unrecognized(2))

        assert opts.type == Known(FieldType.FT_STATIC)
        assert decode(encode(opts)) == opts

    def test_unrecognized_out_of_int32(self) -> None:
        """Enum numbers outside int32 are rejected at construction."""
        with pytest.raises(ValidationError, match="int32"):
            NanoPbOptions(type=Unrecognized(1 << 40))
        with pytest.raises(ValidationError, match="int32"):
            NanoPbOptions(int_size=-(1 << 31) - 1)

    def test_unknown_field_with_known_tag(self) -> None:
        """An unknown field may not reuse a tag from the field table."""
        with pytest.raises(ValidationError, match="max_size"):
            NanoPbOptions(unknown_fields=(UnknownField(1, WireType.VARINT, b"\x05"),))
        with pytest.raises(ValidationError, match="long_names"):
            NanoPbOptions(unknown_fields=(UnknownField(4, WireType.LEN, b"x"),))

    def test_unknown_field_malformed_varint(self) -> None:
        """A varint payload must be exactly one terminated varint."""
        with pytest.raises(ValueError, match="VARINT"):
            UnknownField(30, WireType.VARINT, b"")

    def test_valid_unknown_fields_round_trip(self) -> None:
        """Well-formed unknown fields of every wire type round trip."""
        opts = NanoPbOptions(
            max_size=5,
            unknown_fields=(
                UnknownField(30, WireType.VARINT, b"\x80\x01"),
                UnknownField(31, WireType.I32, b"\x00\x00\x80\x3f"),
                UnknownField(32, WireType.LEN, b""),
                UnknownField(40, WireType.SGROUP, b"\x08\x01"),
            ),
        )

        assert decode(encode(opts)) == opts
