"""Interactive stack calculator for square matrices."""

from __future__ import annotations

import argparse
import logging
import re
import sys
from dataclasses import dataclass, field
from typing import Final, TextIO

from .cells import INT_MAX, INT_MIN
from .config import Settings, load_settings, use_settings
from .errors import ConfigurationError, MatrixError
from .expression import ExpressionNode, Operator
from .logging_config import setup_logging
from .matrix import SquareMatrix, parse_matrix

logger = logging.getLogger(__name__)

RED: Final[str] = "\033[31m"
GREEN: Final[str] = "\033[32m"
YELLOW: Final[str] = "\033[33m"
END: Final[str] = "\033[0m"

_BINDING_RE: Final = re.compile(r"^(?P<name>[A-Za-z])=(?P<value>[+-]?[0-9]+)$")

BANNER: Final[tuple[str, ...]] = (
    "*** SQUARE MATRIX CALCULATOR ***",
    "* Make a selection:",
    '* Input operation: "+" "-" "*" "/".',
    '* Input "quit" to quit.',
    '* Input "clearval" to clear valuation map.',
    '* Input "printval" to print valuation map.',
    '* Input "stacksize" to print stack size.',
    '* Input "=" to evaluate matrix at the stack top.',
    "* Input matrix in string format to add it to stack.",
    '* \tExample: "[[1,2][a,b]]".',
    '* \tExample: "[[4,2][5,6]]".',
    '* Input valuation in format "x=2" to add it to valuation map.',
)
PROMPT: Final[str] = "Please input a selection and press ENTER."


@dataclass(frozen=True)
class Reply:
    text: str
    ok: bool = True
    stop: bool = False


@dataclass
class Calculator:
    """Operand stack plus valuation map, driven one command line at a time."""

    stack: list[SquareMatrix] = field(default_factory=list)
    valuation: dict[str, int] = field(default_factory=dict)

    def execute(self, line: str) -> Reply:
        command = line.strip()
        if command == "quit":
            return Reply("Bye.", stop=True)
        if command == "clearval":
            self.valuation.clear()
            return Reply("Valuation map cleared.")
        if command == "printval":
            return self._print_valuation()
        if command == "stacksize":
            return Reply(f"Stack size: {len(self.stack)}")
        if command in {op.symbol for op in Operator}:
            return self._combine(Operator.from_symbol(command))
        if command == "=":
            return self._evaluate_top()
        if command.startswith("["):
            return self._push_matrix(command)
        if command[:1].isalpha():
            return self._bind(command)
        return Reply("Input was not recognized.", ok=False)

    def _print_valuation(self) -> Reply:
        if not self.valuation:
            return Reply("Valuation map is empty.")
        return Reply("\n".join(f"{name} = {value}" for name, value in sorted(self.valuation.items())))

    def _combine(self, op: Operator) -> Reply:
        # The stack top becomes the left operand.
        if len(self.stack) < 2:
            return Reply("Too few matrices in stack.", ok=False)
        left = self.stack.pop()
        right = self.stack.pop()
        node = ExpressionNode(left, right, op)
        self.stack.append(node)
        return Reply(str(node))

    def _evaluate_top(self) -> Reply:
        if not self.stack:
            return Reply("Stack is empty.", ok=False)
        top = self.stack[-1]
        try:
            result = top.evaluate(self.valuation)
        except MatrixError as exc:
            logger.debug("Evaluation of %s failed", top, exc_info=True)
            return Reply(f"Error while calculating matrices: {exc}", ok=False)
        return Reply(f"Calculating : {top}\nResult : {result}")

    def _bind(self, command: str) -> Reply:
        match = _BINDING_RE.match(command)
        if match is None:
            return Reply("Invalid valuation input.", ok=False)
        value = int(match.group("value"))
        if not INT_MIN <= value <= INT_MAX:
            return Reply("Invalid valuation input.", ok=False)
        self.valuation[match.group("name")] = value
        return Reply("Added valuation.")

    def _push_matrix(self, command: str) -> Reply:
        try:
            matrix = parse_matrix(command)
        except MatrixError as exc:
            logger.debug("Rejected matrix input %r: %s", command, exc)
            return Reply("Input was not recognized.", ok=False)
        self.stack.append(matrix)
        return Reply("Added matrix to stack.")


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{END}" if enabled else text


def run(calculator: Calculator, *, stdin: TextIO, stdout: TextIO, color: bool = True) -> int:
    for line in BANNER:
        print(_paint(line, YELLOW, color) if line.startswith("***") else line, file=stdout)

    while True:
        print(_paint(PROMPT, YELLOW, color), file=stdout)
        line = stdin.readline()
        if not line:
            break
        reply = calculator.execute(line)
        print(_paint(reply.text, GREEN if reply.ok else RED, color), file=stdout)
        if reply.stop:
            break
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sqmatrix", description=__doc__)
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="threads used for elementwise + and - (default: SQMATRIX_WORKERS or CPU count)",
    )
    parser.add_argument("--no-color", action="store_true", help="disable ANSI colours")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log level for diagnostics written to stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))
    color = not args.no_color

    try:
        settings = Settings(workers=args.workers) if args.workers is not None else load_settings()
    except ConfigurationError as exc:
        print(_paint(f"{exc}.\nExiting.", RED, color), file=sys.stdout)
        return 1
    logger.info("Elementwise operations use %d worker thread(s)", settings.workers)

    with use_settings(settings):
        return run(Calculator(), stdin=sys.stdin, stdout=sys.stdout, color=color)


if __name__ == "__main__":
    raise SystemExit(main())
