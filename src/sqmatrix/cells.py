"""Scalar cell values: concrete integers and single-letter symbols."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Final

from .errors import DivisionByZeroError, InvalidValuationError, UnresolvedVariableError

INT_MIN: Final[int] = -(2**31)
INT_MAX: Final[int] = 2**31 - 1

Valuation = Mapping[str, int]


def wrap_int32(value: int) -> int:
    return ((value - INT_MIN) % 2**32) + INT_MIN


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


class Cell(ABC):
    """One entry of a matrix."""

    @abstractmethod
    def resolve(self, valuation: Valuation) -> int:
        """Return the integer this cell stands for under ``valuation``."""

    @abstractmethod
    def clone(self) -> "Cell":
        """Return an equal cell that is a distinct object."""

    def to_string(self) -> str:
        return str(self)


@dataclass(frozen=True)
class ConcreteCell(Cell):
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"ConcreteCell holds an int, got {type(self.value).__name__}")
        if not INT_MIN <= self.value <= INT_MAX:
            raise OverflowError(f"{self.value} does not fit a 32-bit signed integer")

    def resolve(self, valuation: Valuation) -> int:
        return self.value

    def clone(self) -> "ConcreteCell":
        return replace(self)

    def __str__(self) -> str:
        return str(self.value)

    def __int__(self) -> int:
        return self.value

    def __add__(self, other: "ConcreteCell") -> "ConcreteCell":
        if not isinstance(other, ConcreteCell):
            return NotImplemented
        return ConcreteCell(wrap_int32(self.value + other.value))

    def __sub__(self, other: "ConcreteCell") -> "ConcreteCell":
        if not isinstance(other, ConcreteCell):
            return NotImplemented
        return ConcreteCell(wrap_int32(self.value - other.value))

    def __mul__(self, other: "ConcreteCell") -> "ConcreteCell":
        if not isinstance(other, ConcreteCell):
            return NotImplemented
        return ConcreteCell(wrap_int32(self.value * other.value))

    def __truediv__(self, other: "ConcreteCell") -> "ConcreteCell":
        if not isinstance(other, ConcreteCell):
            return NotImplemented
        if other.value == 0:
            raise DivisionByZeroError("Divisor cannot be zero")
        return ConcreteCell(wrap_int32(_truncating_div(self.value, other.value)))


@dataclass(frozen=True)
class SymbolicCell(Cell):
    name: str

    def __post_init__(self) -> None:
        if not (isinstance(self.name, str) and len(self.name) == 1 and self.name.isascii() and self.name.isalpha()):
            raise ValueError(f"SymbolicCell name must be a single ASCII letter, got {self.name!r}")

    def resolve(self, valuation: Valuation) -> int:
        try:
            value = valuation[self.name]
        except KeyError:
            raise UnresolvedVariableError(self.name) from None
        if isinstance(value, bool) or not isinstance(value, int) or not INT_MIN <= value <= INT_MAX:
            raise InvalidValuationError(self.name, value)
        return value

    def clone(self) -> "SymbolicCell":
        return replace(self)

    def __str__(self) -> str:
        return self.name
