"""Deferred binary expressions over matrices."""

from __future__ import annotations

from enum import Enum

from .cells import Valuation
from .matrix import ConcreteMatrix, SquareMatrix


class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Unknown matrix operator {symbol!r}") from None

    def apply(self, lhs: ConcreteMatrix, rhs: ConcreteMatrix) -> ConcreteMatrix:
        if self is Operator.ADD:
            return lhs + rhs
        if self is Operator.SUB:
            return lhs - rhs
        if self is Operator.MUL:
            return lhs * rhs
        return lhs / rhs


class ExpressionNode(SquareMatrix):
    """``left <operator> right``, evaluated only on demand.

    Both operands are cloned on construction, so later changes to the values
    the node was built from never reach the tree. Operands may themselves be
    expression nodes. Evaluation does not modify the node and caches nothing.
    """

    __slots__ = ("_left", "_right", "_operator")

    def __init__(self, left: SquareMatrix, right: SquareMatrix, operator: Operator) -> None:
        if not isinstance(operator, Operator):
            raise TypeError(f"operator must be an Operator, got {type(operator).__name__}")
        self._left = left.clone()
        self._right = right.clone()
        self._operator = operator

    @property
    def left(self) -> SquareMatrix:
        return self._left

    @property
    def right(self) -> SquareMatrix:
        return self._right

    @property
    def operator(self) -> Operator:
        return self._operator

    @property
    def symbol(self) -> str:
        return self._operator.symbol

    @property
    def size(self) -> int:
        return self._left.size

    def clone(self) -> "ExpressionNode":
        return ExpressionNode(self._left, self._right, self._operator)

    def evaluate(self, valuation: Valuation) -> ConcreteMatrix:
        return self._operator.apply(self._left.evaluate(valuation), self._right.evaluate(valuation))

    def __str__(self) -> str:
        return f"( {self._left} ) {self.symbol} ( {self._right} )"

    def __repr__(self) -> str:
        return f"ExpressionNode({str(self)!r})"


def combine(left: SquareMatrix, right: SquareMatrix, symbol: str) -> ExpressionNode:
    return ExpressionNode(left, right, Operator.from_symbol(symbol))
