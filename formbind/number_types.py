from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated


@dataclass(frozen=True)
class IntWidth:
    bits: int = 64
    signed: bool = True

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


@dataclass(frozen=True)
class FloatWidth:
    bits: int = 64


INT64_WIDTH = IntWidth(64, signed=True)
UINT64_WIDTH = IntWidth(64, signed=False)

Int8 = Annotated[int, IntWidth(8)]
Int16 = Annotated[int, IntWidth(16)]
Int32 = Annotated[int, IntWidth(32)]
Int64 = Annotated[int, INT64_WIDTH]

UInt = Annotated[int, UINT64_WIDTH]
UInt8 = Annotated[int, IntWidth(8, signed=False)]
UInt16 = Annotated[int, IntWidth(16, signed=False)]
UInt32 = Annotated[int, IntWidth(32, signed=False)]
UInt64 = Annotated[int, UINT64_WIDTH]

Float32 = Annotated[float, FloatWidth(32)]
Float64 = Annotated[float, FloatWidth(64)]

Complex64 = Annotated[complex, FloatWidth(32)]
Complex128 = Annotated[complex, FloatWidth(64)]
