"""Square matrices of concrete or symbolic cells."""

from __future__ import annotations

import operator
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import ClassVar, Final, Generic, TypeVar, overload

import jax
import jax.numpy as jnp

from .cells import Cell, ConcreteCell, SymbolicCell, Valuation
from .errors import DimensionMismatchError, OutOfRangeError, ShapeError
from .parallel import ElementwiseEngine
from .parser import looks_symbolic, parse_rows

RANDOM_MIN: Final[int] = -99
RANDOM_MAX: Final[int] = 99

C = TypeVar("C", bound=Cell)


class SquareMatrix(ABC):
    """Anything that evaluates to an n x n concrete matrix."""

    @property
    @abstractmethod
    def size(self) -> int:
        """Row (and column) count."""

    @abstractmethod
    def clone(self) -> "SquareMatrix":
        """Deep copy, independent of the original."""

    @abstractmethod
    def __str__(self) -> str:
        ...

    @abstractmethod
    def evaluate(self, valuation: Valuation) -> "ConcreteMatrix":
        """Resolve every cell under ``valuation`` into a new concrete matrix."""

    def to_string(self) -> str:
        return str(self)


class CellBlock(Sequence[C]):
    """Live view of ``length`` cells starting at flat index ``start``.

    Indices are row-major over the owning matrix. Assigning through the view
    replaces the cell in the matrix itself.
    """

    __slots__ = ("_matrix", "_start", "_length")

    def __init__(self, matrix: "ElementaryMatrix[C]", start: int, length: int) -> None:
        self._matrix = matrix
        self._start = start
        self._length = length

    def __len__(self) -> int:
        return self._length

    def _position(self, index: int) -> tuple[int, int]:
        if index < 0:
            index += self._length
        if not 0 <= index < self._length:
            raise IndexError("block index out of range")
        return divmod(self._start + index, self._matrix.size)

    @overload
    def __getitem__(self, index: int) -> C: ...

    @overload
    def __getitem__(self, index: slice) -> list[C]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._length))]
        row, col = self._position(index)
        return self._matrix._rows[row][col]

    def __setitem__(self, index: int, cell: C) -> None:
        self._matrix._check_cell(cell)
        row, col = self._position(index)
        self._matrix._rows[row][col] = cell

    def __repr__(self) -> str:
        return f"CellBlock([{', '.join(str(cell) for cell in self)}])"


class ElementaryMatrix(SquareMatrix, Generic[C]):
    """Shared grid storage, parsing and rendering for leaf matrices."""

    _cell_type: ClassVar[type[Cell]] = Cell
    _allow_symbols: ClassVar[bool] = False

    def __init__(self, rows: Iterable[Iterable[C]] | None = None, size: int | None = None) -> None:
        grid = [] if rows is None else [list(row) for row in rows]
        n = len(grid) if size is None else size
        if n != len(grid):
            raise ShapeError(f"Not a square matrix: declared size {n}, got {len(grid)} rows")
        for row in grid:
            if len(row) != n:
                raise ShapeError(f"Not a square matrix: row of {len(row)} cells in a {n}x{n} matrix")
            for cell in row:
                self._check_cell(cell)
        self._size = n
        self._rows: list[list[C]] = grid

    @classmethod
    def from_string(cls, text: str):
        return cls(parse_rows(text, allow_symbols=cls._allow_symbols))

    @classmethod
    def _check_cell(cls, cell: object) -> None:
        if not isinstance(cell, cls._cell_type):
            raise TypeError(f"{cls.__name__} cannot hold {type(cell).__name__}")

    @property
    def size(self) -> int:
        return self._size

    @property
    def rows(self) -> tuple[tuple[C, ...], ...]:
        return tuple(tuple(row) for row in self._rows)

    def __getitem__(self, position: tuple[int, int]) -> C:
        row, col = position
        return self._rows[row][col]

    def clone(self):
        return type(self)([[cell.clone() for cell in row] for row in self._rows], size=self._size)

    def transpose(self):
        return type(self)(
            [[cell.clone() for cell in column] for column in zip(*self._rows)],
            size=self._size,
        )

    def block(self, start: int, length: int) -> CellBlock[C]:
        """Return cells ``[start, start + length)`` of the row-major flattening.

        A zero ``length`` always yields an empty block.
        """
        total = self._size * self._size
        if length == 0:
            return CellBlock(self, 0, 0)
        if start < 0 or start > total:
            raise OutOfRangeError(f"Start index {start} exceeds elements size {total}")
        if length < 0 or length > total:
            raise OutOfRangeError(f"Block length {length} exceeds elements size {total}")
        if start + length > total:
            raise OutOfRangeError(f"Block [{start}, {start + length}) runs past elements size {total}")
        return CellBlock(self, start, length)

    def _cells_equal(self, left: C, right: C) -> bool:
        return left == right

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        if other._size != self._size:
            return False
        return all(
            self._cells_equal(left, right)
            for row, other_row in zip(self._rows, other._rows)
            for left, right in zip(row, other_row)
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "[" + "".join("[" + ",".join(str(cell) for cell in row) + "]" for row in self._rows) + "]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class ConcreteMatrix(ElementaryMatrix[ConcreteCell]):
    _cell_type = ConcreteCell
    _allow_symbols = False

    @classmethod
    def from_values(cls, values: Iterable[Iterable[int]]) -> "ConcreteMatrix":
        return cls([[ConcreteCell(int(value)) for value in row] for row in values])

    @classmethod
    def random(cls, size: int, *, seed: int | None = None) -> "ConcreteMatrix":
        """Fill a ``size`` x ``size`` matrix with uniform integers in [-99, 99]."""
        if size < 0:
            raise ValueError(f"Matrix size must be non-negative, got {size}")
        key = jax.random.PRNGKey(time.time_ns() & 0xFFFFFFFF if seed is None else seed)
        values = jax.random.randint(key, (size, size), RANDOM_MIN, RANDOM_MAX + 1, dtype=jnp.int32)
        return cls.from_values(values.tolist())

    def values(self) -> list[list[int]]:
        return [[cell.value for cell in row] for row in self._rows]

    def evaluate(self, valuation: Valuation) -> "ConcreteMatrix":
        return self.clone()

    def _check_dimension(self, other: "ConcreteMatrix") -> None:
        if other._size != self._size:
            raise DimensionMismatchError(self._size, other._size)

    def __iadd__(self, other: "ConcreteMatrix") -> "ConcreteMatrix":
        if not isinstance(other, ConcreteMatrix):
            return NotImplemented
        self._check_dimension(other)
        ElementwiseEngine.from_settings().apply(self, other, operator.add)
        return self

    def __isub__(self, other: "ConcreteMatrix") -> "ConcreteMatrix":
        if not isinstance(other, ConcreteMatrix):
            return NotImplemented
        self._check_dimension(other)
        ElementwiseEngine.from_settings().apply(self, other, operator.sub)
        return self

    def __imul__(self, other: "ConcreteMatrix") -> "ConcreteMatrix":
        if not isinstance(other, ConcreteMatrix):
            return NotImplemented
        self._check_dimension(other)
        if self._size == 0:
            return self
        # Rows of self against rows of the transpose, i.e. columns of other.
        lhs = jnp.asarray(self.values(), dtype=jnp.int32)
        columns = jnp.asarray(other.transpose().values(), dtype=jnp.int32)
        product = jnp.einsum("ik,jk->ij", lhs, columns)
        self._rows = [[ConcreteCell(int(value)) for value in row] for row in product.tolist()]
        return self

    def __itruediv__(self, other: "ConcreteMatrix") -> "ConcreteMatrix":
        """Multiply by the transpose of ``other``.

        This is the calculator's own definition of matrix division, not a
        multiplication by an inverse.
        """
        if not isinstance(other, ConcreteMatrix):
            return NotImplemented
        self._check_dimension(other)
        return self.__imul__(other.transpose())

    def __add__(self, other: "ConcreteMatrix") -> "ConcreteMatrix":
        if not isinstance(other, ConcreteMatrix):
            return NotImplemented
        result = self.clone()
        result += other
        return result

    def __sub__(self, other: "ConcreteMatrix") -> "ConcreteMatrix":
        if not isinstance(other, ConcreteMatrix):
            return NotImplemented
        result = self.clone()
        result -= other
        return result

    def __mul__(self, other: "ConcreteMatrix") -> "ConcreteMatrix":
        if not isinstance(other, ConcreteMatrix):
            return NotImplemented
        result = self.clone()
        result *= other
        return result

    def __truediv__(self, other: "ConcreteMatrix") -> "ConcreteMatrix":
        if not isinstance(other, ConcreteMatrix):
            return NotImplemented
        result = self.clone()
        result /= other
        return result


class SymbolicMatrix(ElementaryMatrix[Cell]):
    _cell_type = Cell
    _allow_symbols = True

    def symbols(self) -> set[str]:
        return {cell.name for row in self._rows for cell in row if isinstance(cell, SymbolicCell)}

    def _cells_equal(self, left: Cell, right: Cell) -> bool:
        return str(left) == str(right)

    def evaluate(self, valuation: Valuation) -> ConcreteMatrix:
        return ConcreteMatrix(
            [[ConcreteCell(cell.resolve(valuation)) for cell in row] for row in self._rows],
            size=self._size,
        )


def parse_matrix(text: str) -> ConcreteMatrix | SymbolicMatrix:
    """Parse ``text`` as symbolic when it contains a letter, else as concrete."""
    if looks_symbolic(text):
        return SymbolicMatrix.from_string(text)
    return ConcreteMatrix.from_string(text)
