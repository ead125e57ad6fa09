"""AMF3 encoding and decoding with string and object reference tables."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from .amf import AMF, AMFError

AMF3_UNDEFINED = 0x00
AMF3_NULL = 0x01
AMF3_FALSE = 0x02
AMF3_TRUE = 0x03
AMF3_INTEGER = 0x04
AMF3_DOUBLE = 0x05
AMF3_STRING = 0x06
AMF3_XML_DOC = 0x07
AMF3_DATE = 0x08
AMF3_ARRAY = 0x09
AMF3_OBJECT = 0x0A
AMF3_XML = 0x0B
AMF3_BYTE_ARRAY = 0x0C
AMF3_VECTOR_INT = 0x0D
AMF3_VECTOR_UINT = 0x0E
AMF3_VECTOR_DOUBLE = 0x0F
AMF3_VECTOR_OBJECT = 0x10
AMF3_DICTIONARY = 0x11

_U29_LIMIT = 0x20000000
_DYNAMIC_TRAITS = 0x0B


class AMF3(AMF):
    """A buffer that reads and writes AMF3 values.

    Strings and objects seen before are sent as references to earlier ones.
    """

    def __init__(self, data: bytes = b"", reserve_struct: bool = False) -> None:
        super().__init__(data)
        self.reserve_struct = reserve_struct
        self._strings_out: dict[str, int] = {}
        self._strings_in: list[str] = []
        self._objects_out: dict[int, tuple[int, Any]] = {}
        self._objects_in: list[Any] = []

    # -- variable-length integers ---------------------------------------

    def _read_u29(self) -> int:
        value = 0
        for index in range(4):
            byte = self.read_byte()
            if index < 3:
                value = (value << 7) | (byte & 0x7F)
                if not byte & 0x80:
                    break
            else:
                value = (value << 8) | byte
        return value

    def _write_u29(self, value: int) -> None:
        if value < 0 or value >= _U29_LIMIT:
            raise ValueError("u29 over flow")
        if value < 0x80:
            self.write_byte(value)
        elif value < 0x4000:
            self.write(bytes(((value >> 7) | 0x80, value & 0x7F)))
        elif value < 0x200000:
            self.write(bytes((
                ((value >> 14) & 0x7F) | 0x80,
                ((value >> 7) & 0x7F) | 0x80,
                value & 0x7F,
            )))
        else:
            self.write(bytes((
                ((value >> 22) & 0x7F) | 0x80,
                ((value >> 15) & 0x7F) | 0x80,
                ((value >> 8) & 0x7F) | 0x80,
                value & 0xFF,
            )))

    # -- strings ----------------------------------------------------------

    def _read_str(self) -> str:
        header = self._read_u29()
        if not header & 0x01:
            return self._strings_in[header >> 1]
        text = self.read_n(header >> 1).decode("utf-8", errors="replace")
        if text:
            self._strings_in.append(text)
        return text

    def _write_str(self, text: str) -> None:
        index = self._strings_out.get(text)
        if index is not None:
            self._write_u29(index << 1)
            return
        raw = text.encode("utf-8")
        self._write_u29((len(raw) << 1) | 0x01)
        if text:
            self._strings_out[text] = len(self._strings_out)
        self.write(raw)

    # -- decoding -------------------------------------------------------

    def _read_object(self) -> Any:
        header = self._read_u29()
        if not header & 0x01:
            return self._objects_in[header >> 1]
        if header != _DYNAMIC_TRAITS:
            raise AMFError("invalid object type")
        if self.read_byte() != 0x01:
            raise AMFError("type object not allowed")
        result: dict[str, Any] = {}
        self._objects_in.append(result)
        while True:
            key = self._read_str()
            if key == "":
                return result
            result[key] = self.unmarshal()

    def _decode3(self) -> Any:
        marker = self.read_byte()
        if marker == AMF3_NULL:
            return None
        if marker == AMF3_FALSE:
            return False
        if marker == AMF3_TRUE:
            return True
        if marker == AMF3_INTEGER:
            return self._read_u29()
        if marker == AMF3_DOUBLE:
            return self.read_float64()
        if marker == AMF3_STRING:
            return self._read_str()
        if marker == AMF3_OBJECT:
            return self._read_object()
        raise AMFError("amf3 unmarshal error")

    def unmarshal(self) -> Any:
        """Decode the next AMF3 value."""
        try:
            return self._decode3()
        except AMFError:
            raise
        except (EOFError, IndexError) as exc:
            raise AMFError("amf3 unmarshal error") from exc

    # -- encoding -------------------------------------------------------

    def _field_name(self, field: dataclasses.Field) -> str:
        name = field.name
        if name.startswith("_"):
            return ""
        tagged = field.metadata.get("amf.name")
        if tagged:
            return tagged
        if self.reserve_struct:
            return name
        return name[0].lower() + name[1:]

    def _begin_object(self, value: Any) -> bool:
        """Write the object header; return False if a reference was written instead."""
        self.write_byte(AMF3_OBJECT)
        known = self._objects_out.get(id(value))
        if known is not None:
            self._write_u29(known[0] << 1)
            return False
        self._objects_out[id(value)] = (len(self._objects_out), value)
        self.write_byte(_DYNAMIC_TRAITS)
        self._write_str("")
        return True

    def _encode_int(self, value: int) -> None:
        if 0 <= value < _U29_LIMIT:
            self.write_byte(AMF3_INTEGER)
            self._write_u29(value)
        elif -0x7FFFFFFF < value <= 0xFFFFFFFF:
            self._encode(float(value))
        else:
            self._encode(str(value))

    def _encode(self, value: Any) -> None:
        if value is None:
            self.write_byte(AMF3_NULL)
        elif isinstance(value, str):
            self.write_byte(AMF3_STRING)
            self._write_str(value)
        elif isinstance(value, bool):
            self.write_byte(AMF3_TRUE if value else AMF3_FALSE)
        elif isinstance(value, int):
            self._encode_int(value)
        elif isinstance(value, float):
            self.write_byte(AMF3_DOUBLE)
            self.write_float64(value)
        elif isinstance(value, Mapping):
            if self._begin_object(value):
                for key, item in value.items():
                    self._write_str(str(key))
                    self._encode(item)
                self._write_str("")
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            if self._begin_object(value):
                for field in dataclasses.fields(value):
                    key = self._field_name(field)
                    if not key:
                        continue
                    self._write_str(key)
                    self._encode(getattr(value, field.name))
                self._write_str("")
        else:
            raise TypeError(f"cannot encode {type(value).__name__} as AMF3")

    def marshal(self, value: Any) -> bytes:
        """Append ``value`` and return the unread content of the buffer."""
        self._encode(value)
        return bytes(self)

    def marshals(self, *args: Any) -> bytes:
        """Append every value in turn and return the unread content."""
        for value in args:
            self._encode(value)
        return bytes(self)


def marshal_amf3s(*args: Any) -> bytes:
    """Encode the values one after another as AMF3, sharing reference tables."""
    return AMF3().marshals(*args)