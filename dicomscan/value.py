"""Typed values decoded from DICOM data elements."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import Union

ValueData = Union[None, int, float, str, bytes]


class ValueKind(enum.Enum):
    """The kinds of value a data element can decode to."""

    EMPTY = "empty"
    UINT16 = "uint16"
    INT16 = "int16"
    UINT32 = "uint32"
    INT32 = "int32"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BINARY = "binary"


_INTEGER_RANGES = {
    ValueKind.UINT16: (0, 0xFFFF),
    ValueKind.INT16: (-0x8000, 0x7FFF),
    ValueKind.UINT32: (0, 0xFFFFFFFF),
    ValueKind.INT32: (-0x80000000, 0x7FFFFFFF),
}


def _to_single_precision(number: float) -> float:
    return struct.unpack("<f", struct.pack("<f", number))[0]


@dataclass(frozen=True)
class DicomValue:
    """A decoded value together with the kind it was decoded as."""

    kind: ValueKind = ValueKind.EMPTY
    value: ValueData = None

    def __post_init__(self) -> None:
        kind = ValueKind(self.kind)
        object.__setattr__(self, "kind", kind)
        value = self.value

        if kind is ValueKind.EMPTY:
            if value is not None:
                raise ValueError("an empty value carries no data")
        elif kind in _INTEGER_RANGES:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{kind.value} value must be an int, got {type(value).__name__}")
            low, high = _INTEGER_RANGES[kind]
            if not low <= value <= high:
                raise ValueError(f"{value} is out of range for {kind.value}")
        elif kind in (ValueKind.FLOAT, ValueKind.DOUBLE):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"{kind.value} value must be a number, got {type(value).__name__}")
            number = float(value)
            if kind is ValueKind.FLOAT:
                number = _to_single_precision(number)
            object.__setattr__(self, "value", number)
        elif kind is ValueKind.STRING:
            if not isinstance(value, str):
                raise TypeError(f"string value must be a str, got {type(value).__name__}")
        elif kind is ValueKind.BINARY:
            if not isinstance(value, (bytes, bytearray, memoryview)):
                raise TypeError(f"binary value must be bytes, got {type(value).__name__}")
            object.__setattr__(self, "value", bytes(value))

    @classmethod
    def empty(cls) -> DicomValue:
        """Return the value that stands for "nothing decoded"."""
        return cls(ValueKind.EMPTY, None)

    def is_empty(self) -> bool:
        """True when no value was decoded."""
        return self.kind is ValueKind.EMPTY

    def __str__(self) -> str:
        kind = self.kind
        if kind is ValueKind.EMPTY:
            return "Empty"
        if kind in _INTEGER_RANGES:
            return str(self.value)
        if kind in (ValueKind.FLOAT, ValueKind.DOUBLE):
            return f"{self.value:f}"
        if kind is ValueKind.STRING:
            return self.value  # type: ignore[return-value]
        if kind is ValueKind.BINARY:
            return f"Binary data, length: {len(self.value)}"  # type: ignore[arg-type]
        return "Unknown type"