"""Bit flag transforms (e.g. userAccountControl)."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

from ..context import ExecutionContext
from ..exceptions import RangeError
from ..values import parse_integer, to_signed
from .base import Transform, param

# Test transforms read 64-bit values; SetBit works on 32-bit flags.
TEST_BIT_WIDTH = 64
SET_BIT_WIDTH = 32


def _check_position(variant: str, position: int, width: int) -> None:
    if position < 0 or position >= width:
        raise RangeError(f"{variant}: BitPosition {position} outside 0..{width - 1}")


@dataclass(frozen=True)
class _BitTest(Transform):
    bit_position: int = param("BitPosition", int)

    def is_set(self, value: Any) -> bool:
        _check_position(self.name, self.bit_position, TEST_BIT_WIDTH)
        number = parse_integer(value, bits=TEST_BIT_WIDTH)
        return (number >> self.bit_position) & 1 == 1


@dataclass(frozen=True)
class IsBitSet(_BitTest):
    name = "IsBitSet"

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        return str(self.is_set(value))


@dataclass(frozen=True)
class IsBitNotSet(_BitTest):
    name = "IsBitNotSet"

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        return str(not self.is_set(value))


@dataclass(frozen=True)
class SetBit(Transform):
    """Set (Value=true) or clear (Value=false) one bit of a 32-bit integer."""
    name = "SetBit"

    bit_position: int = param("BitPosition", int)
    bit_value: bool = param("Value", bool, default=True)

    def convert(self, value: Any, context: Optional[ExecutionContext] = None) -> Any:
        if value is None:
            return value
        _check_position(self.name, self.bit_position, SET_BIT_WIDTH)
        number = parse_integer(value, bits=SET_BIT_WIDTH)
        mask = 1 << self.bit_position
        number = number | mask if self.bit_value else number & ~mask
        return str(to_signed(number, SET_BIT_WIDTH))
