"""Record types assembled field by field at run time."""

from __future__ import annotations

import dataclasses
from typing import Any

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


class FieldNotFound(LookupError):
    """Raised when a record has no field of the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"field no exist: {name}")
        self.name = name


def _zero(typ: type) -> Any:
    try:
        return typ()
    except TypeError:
        return None


class StructBuilder:
    """Collects fields and builds a :class:`Struct` from them."""

    def __init__(self, name: str = "Struct") -> None:
        self._name = name
        self._fields: list[tuple[str, type]] = []

    def add_field(self, name: str, typ: type) -> StructBuilder:
        self._fields.append((name, typ))
        return self

    def add_string(self, name: str) -> StructBuilder:
        return self.add_field(name, str)

    def add_bool(self, name: str) -> StructBuilder:
        return self.add_field(name, bool)

    def add_int64(self, name: str) -> StructBuilder:
        return self.add_field(name, int)

    def add_float64(self, name: str) -> StructBuilder:
        return self.add_field(name, float)

    def build(self) -> Struct:
        """Create the record type; duplicate or invalid names raise TypeError."""
        spec = [
            (name, typ, dataclasses.field(default_factory=lambda t=typ: _zero(t)))
            for name, typ in self._fields
        ]
        cls = dataclasses.make_dataclass(self._name, spec)
        return Struct(cls, dict(self._fields))


class Struct:
    """A record type built by :class:`StructBuilder`."""

    def __init__(self, cls: type, types: dict[str, type]) -> None:
        self.type = cls
        self._types = dict(types)

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._types)

    def new(self) -> Instance:
        """Make a record with every field at its zero value."""
        return Instance(self.type(), self._types)


class Instance:
    """A record of a :class:`Struct` type."""

    def __init__(self, obj: Any, types: dict[str, type]) -> None:
        self._obj = obj
        self._types = types

    def field(self, name: str) -> Any:
        if name not in self._types:
            raise FieldNotFound(name)
        return getattr(self._obj, name)

    def _set(self, name: str, value: Any, kind: type) -> None:
        typ = self._types.get(name)
        if typ is None:
            return
        if typ is not kind:
            raise TypeError(f"field {name} holds {typ.__name__}, not {kind.__name__}")
        setattr(self._obj, name, value)

    def set_string(self, name: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"expected str, got {type(value).__name__}")
        self._set(name, value, str)

    def set_bool(self, name: str, value: bool) -> None:
        if not isinstance(value, bool):
            raise TypeError(f"expected bool, got {type(value).__name__}")
        self._set(name, value, bool)

    def set_int64(self, name: str, value: int) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"expected int, got {type(value).__name__}")
        if not _INT64_MIN <= value <= _INT64_MAX:
            raise OverflowError(f"{value} does not fit in 64 bits")
        self._set(name, value, int)

    def set_float64(self, name: str, value: float) -> None:
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            raise TypeError(f"expected float, got {type(value).__name__}")
        self._set(name, float(value), float)

    def value(self) -> Any:
        """The underlying record object."""
        return self._obj