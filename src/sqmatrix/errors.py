"""Structured error types for the matrix engine."""

from __future__ import annotations


class MatrixError(Exception):
    """Base class for structured sqmatrix errors."""


class ParseError(MatrixError, ValueError):
    """Malformed textual matrix."""

    def __init__(
        self,
        message: str,
        start: int,
        end: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        expected_text = ""
        if self.expected:
            expected_text = f"; expected {', '.join(self.expected)}"
        found_text = ""
        if self.found is not None:
            found_text = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}){expected_text}{found_text}"


class ShapeError(MatrixError, ValueError):
    """Explicit grid does not match its declared size."""


class DimensionMismatchError(MatrixError, ValueError):
    """Arithmetic between matrices of different sizes."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"Dimension mismatch: {left}x{left} and {right}x{right}")
        self.left = left
        self.right = right


class DivisionByZeroError(MatrixError, ZeroDivisionError):
    """Concrete division by a zero divisor."""


class UnresolvedVariableError(MatrixError, LookupError):
    """A symbol has no binding in the valuation."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined variable {name!r}")
        self.name = name

    def __str__(self) -> str:
        return f"Undefined variable {self.name!r}"


class InvalidValuationError(MatrixError, ValueError):
    """A symbol is bound to something other than a 32-bit signed integer."""

    def __init__(self, name: str, value: object) -> None:
        super().__init__(f"Variable {name!r} is bound to {value!r}, expected a 32-bit signed integer")
        self.name = name
        self.value = value


class OutOfRangeError(MatrixError, IndexError):
    """Block request outside the flattened cell range."""


class ConfigurationError(MatrixError, RuntimeError):
    """Settings that make the engine unusable, detected at startup."""
