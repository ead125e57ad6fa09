import struct
from dataclasses import dataclass

import pytest

from mediautil.amf import (
    AMF,
    AMF0_LONG_STRING,
    AMF0_NULL,
    AMF0_OBJECT,
    AMF0_UNSUPPORTED,
    AMF0_DATE,
    END_OBJ,
    UNDEFINED,
    AMFError,
    EcmaArray,
    marshal_amfs,
)


def test_null_wire_format():
    assert marshal_amfs(None) == bytes([AMF0_NULL])


def test_object_wire_format():
    expected = bytes([AMF0_OBJECT]) + b"\x00\x01a" + bytes([AMF0_NULL]) + END_OBJ
    assert marshal_amfs({"a": None}) == expected


def test_ecma_array_example():
    raw = bytes(
        [8, 0, 0, 0, 13, 0, 8, 100, 117, 114, 97, 116, 105, 111, 110, 0, 0, 0, 0, 0, 0, 0, 0, 0,
         0, 5, 119, 105, 100, 116, 104, 0, 64, 158, 0, 0, 0, 0, 0, 0,
         0, 6, 104, 101, 105, 103, 104, 116, 0, 64, 144, 224, 0, 0, 0, 0, 0]
    ) + END_OBJ
    amf = AMF(raw)
    result = amf.unmarshal()
    assert isinstance(result, EcmaArray)
    assert result == {"duration": 0.0, "width": 1920.0, "height": 1080.0}
    assert len(amf) == 0


@pytest.mark.parametrize(
    "value",
    [0.5, 42, True, False, "hello", "", "名字", {"k": "v", "n": 3.25}, {"nested": {"x": [1, "y"]}}],
)
def test_round_trip(value):
    assert AMF(marshal_amfs(value)).unmarshal() == value


def test_strict_array_round_trip():
    values = [1.0, "x", True, None, {"a": 2.0}]
    assert AMF(marshal_amfs(values)).unmarshal() == values


def test_ecma_array_round_trip_keeps_type():
    arr = EcmaArray(width=640.0, height=480.0)
    amf = AMF(marshal_amfs(arr))
    result = amf.unmarshal()
    assert isinstance(result, EcmaArray)
    assert result == arr
    assert len(amf) == 0


def test_long_string_uses_long_marker():
    text = "a" * 0x10000
    encoded = marshal_amfs(text)
    assert encoded[0] == AMF0_LONG_STRING
    assert AMF(encoded).unmarshal() == text


def test_dataclass_encoded_as_object():
    @dataclass
    class Info:
        name: str
        size: int

    result = AMF(marshal_amfs(Info("clip", 7))).unmarshal()
    assert result == {"name": "clip", "size": 7.0}


def test_marshals_sequence_reads_back_in_order():
    amf = AMF(marshal_amfs("connect", 1, {"app": "live"}))
    assert amf.unmarshal() == "connect"
    assert amf.unmarshal() == 1.0
    assert amf.unmarshal() == {"app": "live"}
    assert not amf.can_read()


def test_marshal_appends_to_existing_buffer():
    amf = AMF()
    first = amf.marshal("a")
    both = amf.marshal("b")
    assert both.startswith(first)
    assert both == marshal_amfs("a", "b")


def test_date_decoding():
    raw = bytes([AMF0_DATE]) + struct.pack(">d", 5.0) + bytes(2)
    amf = AMF(raw)
    assert amf.unmarshal() == 5.0
    assert len(amf) == 0


def test_undefined_round_trip():
    assert AMF(marshal_amfs(UNDEFINED)).unmarshal() is UNDEFINED


def test_empty_buffer_raises_eof():
    with pytest.raises(EOFError):
        AMF().unmarshal()


def test_truncated_data_restores_buffer():
    data = marshal_amfs("hello")[:-2]
    amf = AMF(data)
    with pytest.raises(EOFError):
        amf.unmarshal()
    assert bytes(amf) == data


def test_unsupported_type_raises_and_restores():
    data = bytes([AMF0_UNSUPPORTED])
    amf = AMF(data)
    with pytest.raises(AMFError):
        amf.unmarshal()
    assert bytes(amf) == data


def test_read_helpers_on_matching_values():
    amf = AMF(marshal_amfs("name", 2.5, True, {"k": "v"}))
    assert amf.read_short_string() == "name"
    assert amf.read_number() == 2.5
    assert amf.read_bool() is True
    assert amf.read_object() == {"k": "v"}


def test_read_helpers_return_defaults_on_mismatch():
    amf = AMF(marshal_amfs("text"))
    assert amf.read_number() == 0.0
    empty = AMF()
    assert empty.read_short_string() == ""
    assert empty.read_bool() is False
    assert empty.read_object() == {}


def test_unsupported_python_type():
    with pytest.raises(TypeError):
        marshal_amfs(object())