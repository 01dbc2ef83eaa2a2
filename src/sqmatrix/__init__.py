"""sqmatrix public API."""

from .cells import Cell, ConcreteCell, SymbolicCell, Valuation
from .config import Settings, get_settings, load_settings, use_settings
from .errors import (
    ConfigurationError,
    DimensionMismatchError,
    DivisionByZeroError,
    InvalidValuationError,
    MatrixError,
    OutOfRangeError,
    ParseError,
    ShapeError,
    UnresolvedVariableError,
)
from .expression import ExpressionNode, Operator, combine
from .matrix import CellBlock, ConcreteMatrix, SquareMatrix, SymbolicMatrix, parse_matrix
from .parallel import ElementwiseEngine
from .parser import looks_symbolic, parse_rows

__all__ = [
    "Cell",
    "ConcreteCell",
    "SymbolicCell",
    "Valuation",
    "SquareMatrix",
    "ConcreteMatrix",
    "SymbolicMatrix",
    "CellBlock",
    "parse_matrix",
    "parse_rows",
    "looks_symbolic",
    "ExpressionNode",
    "Operator",
    "combine",
    "ElementwiseEngine",
    "Settings",
    "get_settings",
    "load_settings",
    "use_settings",
    "MatrixError",
    "ParseError",
    "ShapeError",
    "DimensionMismatchError",
    "DivisionByZeroError",
    "UnresolvedVariableError",
    "InvalidValuationError",
    "OutOfRangeError",
    "ConfigurationError",
]
