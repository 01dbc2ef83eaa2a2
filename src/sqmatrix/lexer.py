"""Tokenization for the bracketed matrix notation."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ParseError


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int


_SINGLE_TOKENS = {
    "[": "LBRACK",
    "]": "RBRACK",
    ",": "COMMA",
}

_MINUS = "-"


def is_symbol_char(ch: str) -> bool:
    return len(ch) == 1 and ch.isascii() and ch.isalpha()


def _is_digit(ch: str) -> bool:
    return ch.isascii() and ch.isdigit()


def _scan_while(source: str, start: int, predicate) -> tuple[str, int]:
    i = start
    while i < len(source) and predicate(source[i]):
        i += 1
    return source[start:i], i


def tokenize(source: str) -> list[Token]:
    tokens: list[Token] = []
    i = 0

    while i < len(source):
        ch = source[i]

        if ch in _SINGLE_TOKENS:
            tokens.append(Token(_SINGLE_TOKENS[ch], ch, i, i + 1))
            i += 1
            continue

        if ch == _MINUS or _is_digit(ch):
            start = i
            if ch == _MINUS:
                i += 1
            digits, end = _scan_while(source, i, _is_digit)
            if not digits:
                raise ParseError(
                    "Minus sign must be followed by digits",
                    start,
                    end,
                    expected=("INT",),
                    found="EOF" if end >= len(source) else repr(source[end]),
                )
            tokens.append(Token("INT", source[start:end], start, end))
            i = end
            continue

        if is_symbol_char(ch):
            tokens.append(Token("SYMBOL", ch, i, i + 1))
            i += 1
            continue

        raise ParseError(f"Unexpected character {ch!r} at index {i}", i, i + 1, found=repr(ch))

    tokens.append(Token("EOF", "", len(source), len(source)))
    return tokens
