"""AMF0 (Action Message Format) encoding and decoding."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from .buffer import Buffer

AMF0_NUMBER = 0x00
AMF0_BOOLEAN = 0x01
AMF0_STRING = 0x02
AMF0_OBJECT = 0x03
AMF0_MOVIECLIP = 0x04
AMF0_NULL = 0x05
AMF0_UNDEFINED = 0x06
AMF0_REFERENCE = 0x07
AMF0_ECMA_ARRAY = 0x08
AMF0_END_OBJECT = 0x09
AMF0_STRICT_ARRAY = 0x0A
AMF0_DATE = 0x0B
AMF0_LONG_STRING = 0x0C
AMF0_UNSUPPORTED = 0x0D
AMF0_RECORDSET = 0x0E
AMF0_XML_DOCUMENT = 0x0F
AMF0_TYPED_OBJECT = 0x10
AMF0_AVMPLUS_OBJECT = 0x11

END_OBJ = bytes((0, 0, AMF0_END_OBJECT))


class _Marker:
    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


OBJECT_END = _Marker("OBJECT_END")
UNDEFINED = _Marker("UNDEFINED")


class AMFError(ValueError):
    """Raised for malformed or unsupported AMF data."""


class EcmaArray(dict):
    """An associative array, encoded as an AMF0 ECMA array rather than an object."""


class AMF(Buffer):
    """A buffer that reads and writes AMF0 values."""

    # -- decoding -------------------------------------------------------

    def _read_key(self) -> str:
        length = self.read_uint16()
        return self.read_n(length).decode("utf-8", errors="replace")

    def _at_object_end(self) -> bool:
        return self.can_read_n(3) and bytes(self._data[self._pos:self._pos + 3]) == END_OBJ

    def _read_properties(self, target: dict, limit: int | None) -> dict:
        count = 0
        while limit is None or count < limit:
            key = self._read_key()
            value = self.unmarshal()
            if key == "" and value is OBJECT_END:
                return target
            target[key] = value
            count += 1
        if self._at_object_end():
            self.read_n(3)
        return target

    def _decode(self) -> Any:
        marker = self.read_byte()
        if marker == AMF0_NUMBER:
            return self.read_float64()
        if marker == AMF0_BOOLEAN:
            return self.read_byte() == 1
        if marker == AMF0_STRING:
            return self._read_key()
        if marker == AMF0_OBJECT:
            return self._read_properties({}, None)
        if marker == AMF0_NULL:
            return None
        if marker == AMF0_UNDEFINED:
            return UNDEFINED
        if marker == AMF0_ECMA_ARRAY:
            size = self.read_uint32()
            return self._read_properties(EcmaArray(), size)
        if marker == AMF0_END_OBJECT:
            return OBJECT_END
        if marker == AMF0_STRICT_ARRAY:
            size = self.read_uint32()
            return [self.unmarshal() for _ in range(size)]
        if marker == AMF0_DATE:
            if not self.can_read_n(10):
                raise EOFError("unexpected end of AMF date")
            value = self.read_float64()
            self.read_n(2)
            return value
        if marker in (AMF0_LONG_STRING, AMF0_XML_DOCUMENT):
            length = self.read_uint32()
            return self.read_n(length).decode("utf-8", errors="replace")
        raise AMFError(f"unsupported type:{marker}")

    def unmarshal(self) -> Any:
        """Decode the next value; on failure the buffer is left as it was."""
        if not self.can_read():
            raise EOFError("unexpected end of AMF data")
        state = (self._data, self._pos)
        try:
            return self._decode()
        except (EOFError, AMFError):
            self._data, self._pos = state
            raise

    def _read_as(self, kind: type, default: Any) -> Any:
        try:
            value = self.unmarshal()
        except (AMFError, EOFError):
            return default
        return value if isinstance(value, kind) else default

    def read_short_string(self) -> str:
        """Next value if it is a string, otherwise an empty string."""
        return self._read_as(str, "")

    def read_number(self) -> float:
        """Next value if it is a number, otherwise 0.0."""
        return self._read_as(float, 0.0)

    def read_object(self) -> dict:
        """Next value if it is an object, otherwise an empty dict."""
        return self._read_as(Mapping, {})

    def read_bool(self) -> bool:
        """Next value if it is a boolean, otherwise False."""
        return self._read_as(bool, False)

    # -- encoding -------------------------------------------------------

    def _write_property(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"AMF object keys must be strings, not {type(key).__name__}")
        raw = key.encode("utf-8")
        if len(raw) > 0xFFFF:
            raise AMFError(f"property name too long: {len(raw)} bytes")
        self.write_uint16(len(raw))
        self.write(raw)
        self._encode(value)

    def _encode(self, value: Any) -> None:
        if value is None:
            self.write_byte(AMF0_NULL)
        elif value is UNDEFINED:
            self.write_byte(AMF0_UNDEFINED)
        elif isinstance(value, str):
            raw = value.encode("utf-8")
            if len(raw) > 0xFFFF:
                self.write_byte(AMF0_LONG_STRING)
                self.write_uint32(len(raw))
            else:
                self.write_byte(AMF0_STRING)
                self.write_uint16(len(raw))
            self.write(raw)
        elif isinstance(value, bool):
            self.write_byte(AMF0_BOOLEAN)
            self.write_byte(1 if value else 0)
        elif isinstance(value, (int, float)):
            self.write_byte(AMF0_NUMBER)
            self.write_float64(float(value))
        elif isinstance(value, EcmaArray):
            self.write_byte(AMF0_ECMA_ARRAY)
            self.write_uint32(len(value))
            for key, item in value.items():
                self._write_property(key, item)
            self.write(END_OBJ)
        elif isinstance(value, Mapping):
            self.write_byte(AMF0_OBJECT)
            for key, item in value.items():
                self._write_property(key, item)
            self.write(END_OBJ)
        elif isinstance(value, (list, tuple)):
            self.write_byte(AMF0_STRICT_ARRAY)
            self.write_uint32(len(value))
            for item in value:
                self._encode(item)
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            self.write_byte(AMF0_OBJECT)
            for field in dataclasses.fields(value):
                self._write_property(field.name, getattr(value, field.name))
            self.write(END_OBJ)
        else:
            raise TypeError(f"cannot encode {type(value).__name__} as AMF0")

    def marshal(self, value: Any) -> bytes:
        """Append ``value`` and return the unread content of the buffer."""
        self._encode(value)
        return bytes(self)

    def marshals(self, *args: Any) -> bytes:
        """Append every value in turn and return the unread content."""
        for value in args:
            self._encode(value)
        return bytes(self)


def marshal_amfs(*args: Any) -> bytes:
    """Encode the values one after another as AMF0."""
    return AMF().marshals(*args)