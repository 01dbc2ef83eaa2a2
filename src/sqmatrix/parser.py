"""Recursive-descent parser for ``[[c11,c12][c21,c22]]`` matrix text."""

from __future__ import annotations

from dataclasses import dataclass

from .cells import INT_MAX, INT_MIN, Cell, ConcreteCell, SymbolicCell
from .errors import ParseError
from .lexer import Token, is_symbol_char, tokenize


@dataclass
class _Parser:
    tokens: list[Token]
    allow_symbols: bool
    index: int = 0

    def parse_matrix(self) -> list[list[Cell]]:
        self._expect("LBRACK")
        rows: list[list[Cell]] = []
        while self._peek().kind == "LBRACK":
            row_start = self._peek()
            row = self._parse_row()
            if rows and len(row) != len(rows[0]):
                self._error(
                    row_start,
                    message=f"Row {len(rows)} has {len(row)} cells, expected {len(rows[0])}",
                )
            rows.append(row)

        closing = self._peek()
        if not rows:
            self._error(closing, message="Matrix must contain at least one row", expected=("LBRACK",))
        self._expect("RBRACK")

        if len(rows) != len(rows[0]):
            self._error(
                closing,
                message=f"Matrix is not square: {len(rows)} rows of {len(rows[0])} cells",
            )

        self._expect("EOF")
        return rows

    def _parse_row(self) -> list[Cell]:
        self._expect("LBRACK")
        cells = [self._parse_cell()]
        while self._match("COMMA"):
            cells.append(self._parse_cell())
        self._expect("RBRACK", "COMMA")
        return cells

    def _parse_cell(self) -> Cell:
        tok = self._peek()
        if tok.kind == "INT":
            self._advance()
            value = int(tok.text)
            if not INT_MIN <= value <= INT_MAX:
                self._error(tok, message="Integer literal out of range")
            return ConcreteCell(value)
        if tok.kind == "SYMBOL":
            if not self.allow_symbols:
                self._error(tok, message="Symbolic cell in a concrete matrix", expected=("INT",))
            self._advance()
            return SymbolicCell(tok.text)
        expected = ("INT", "SYMBOL") if self.allow_symbols else ("INT",)
        self._error(tok, expected=expected)
        raise AssertionError("unreachable")

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def _match(self, kind: str) -> bool:
        if self._peek().kind == kind:
            self._advance()
            return True
        return False

    def _expect(self, kind: str, *also_expected: str) -> Token:
        tok = self._peek()
        if tok.kind != kind:
            self._error(tok, expected=(kind, *also_expected))
        return self._advance()

    def _error(self, tok: Token, *, message: str | None = None, expected: tuple[str, ...] = ()) -> None:
        detail = message if message is not None else "Unexpected token"
        if tok.kind == "EOF":
            found = "EOF"
        else:
            found = f"{tok.kind}({tok.text})"
        raise ParseError(detail, tok.pos, tok.end, expected=tuple(dict.fromkeys(expected)), found=found)


def parse_rows(source: str, *, allow_symbols: bool = False) -> list[list[Cell]]:
    """Parse matrix text into a square grid of cells.

    Concrete parsing (the default) rejects letters; ``allow_symbols=True``
    accepts a single ASCII letter wherever an integer may appear.
    """
    if not isinstance(source, str):
        raise TypeError(f"Matrix source must be str, got {type(source).__name__}")
    parser = _Parser(tokens=tokenize(source), allow_symbols=allow_symbols)
    return parser.parse_matrix()


def looks_symbolic(source: str) -> bool:
    return any(is_symbol_char(ch) for ch in source)
