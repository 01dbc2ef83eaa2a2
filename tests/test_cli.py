from __future__ import annotations

import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

from sqmatrix.cli import Calculator, main, run
from sqmatrix.expression import ExpressionNode
from sqmatrix.matrix import ConcreteMatrix, SymbolicMatrix


class CalculatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.calc = Calculator()

    def test_push_matrices_of_both_variants(self) -> None:
        self.assertEqual(self.calc.execute("[[1,2][4,5]]").text, "Added matrix to stack.")
        self.assertEqual(self.calc.execute("[[a,b][4,5]]\n").text, "Added matrix to stack.")
        self.assertIsInstance(self.calc.stack[0], ConcreteMatrix)
        self.assertIsInstance(self.calc.stack[1], SymbolicMatrix)
        self.assertEqual(self.calc.execute("stacksize").text, "Stack size: 2")

    def test_rejects_malformed_matrix(self) -> None:
        reply = self.calc.execute("[[1,2][3]]")
        self.assertFalse(reply.ok)
        self.assertEqual(reply.text, "Input was not recognized.")
        self.assertEqual(self.calc.stack, [])

    def test_combine_and_evaluate(self) -> None:
        self.calc.execute("[[1,2][4,5]]")
        self.calc.execute("[[a,b][4,5]]")
        reply = self.calc.execute("+")
        self.assertEqual(reply.text, "( [[a,b][4,5]] ) + ( [[1,2][4,5]] )")
        self.assertEqual(len(self.calc.stack), 1)
        self.assertIsInstance(self.calc.stack[0], ExpressionNode)

        self.calc.execute("a=1")
        self.calc.execute("b=4")
        reply = self.calc.execute("=")
        self.assertTrue(reply.ok)
        self.assertEqual(
            reply.text,
            "Calculating : ( [[a,b][4,5]] ) + ( [[1,2][4,5]] )\nResult : [[2,6][8,10]]",
        )
        self.assertEqual(len(self.calc.stack), 1)

    def test_stack_top_is_left_operand(self) -> None:
        self.calc.execute("[[1]]")
        self.calc.execute("[[5]]")
        self.calc.execute("-")
        self.assertEqual(self.calc.execute("=").text.splitlines()[-1], "Result : [[4]]")

    def test_evaluation_errors_are_reported(self) -> None:
        self.calc.execute("[[a]]")
        reply = self.calc.execute("=")
        self.assertFalse(reply.ok)
        self.assertTrue(reply.text.startswith("Error while calculating matrices: "))

        self.calc.execute("[[1,2][3,4]]")
        self.calc.execute("*")
        self.calc.execute("a=1")
        reply = self.calc.execute("=")
        self.assertFalse(reply.ok)
        self.assertIn("Dimension mismatch", reply.text)

    def test_too_few_operands_and_empty_stack(self) -> None:
        self.assertEqual(self.calc.execute("=").text, "Stack is empty.")
        self.calc.execute("[[1]]")
        reply = self.calc.execute("/")
        self.assertFalse(reply.ok)
        self.assertEqual(reply.text, "Too few matrices in stack.")
        self.assertEqual(len(self.calc.stack), 1)

    def test_valuation_commands(self) -> None:
        self.assertEqual(self.calc.execute("printval").text, "Valuation map is empty.")
        self.assertEqual(self.calc.execute("y=-3").text, "Added valuation.")
        self.assertEqual(self.calc.execute("x=2").text, "Added valuation.")
        self.assertEqual(self.calc.execute("x=5").text, "Added valuation.")
        self.assertEqual(self.calc.execute("printval").text, "x = 5\ny = -3")
        self.assertEqual(self.calc.execute("clearval").text, "Valuation map cleared.")
        self.assertEqual(self.calc.valuation, {})

    def test_invalid_valuation_input(self) -> None:
        for command in ("x2", "x=", "x=1a", "xy=1", "x=99999999999"):
            with self.subTest(command=command):
                reply = self.calc.execute(command)
                self.assertFalse(reply.ok)
                self.assertEqual(reply.text, "Invalid valuation input.")
        self.assertEqual(self.calc.valuation, {})

    def test_unrecognized_input(self) -> None:
        for command in ("", "?", "42"):
            with self.subTest(command=command):
                self.assertEqual(self.calc.execute(command).text, "Input was not recognized.")

    def test_quit(self) -> None:
        self.assertTrue(self.calc.execute("quit").stop)


class RunLoopTests(unittest.TestCase):
    def test_run_without_colour(self) -> None:
        stdin = io.StringIO("[[1,2][3,4]]\n[[1,1][1,1]]\n+\n=\nquit\nstacksize\n")
        stdout = io.StringIO()
        self.assertEqual(run(Calculator(), stdin=stdin, stdout=stdout, color=False), 0)
        out = stdout.getvalue()
        self.assertIn("*** SQUARE MATRIX CALCULATOR ***", out)
        self.assertIn("Result : [[2,3][4,5]]", out)
        self.assertNotIn("Stack size", out)
        self.assertNotIn("\033[", out)

    def test_run_stops_at_end_of_input(self) -> None:
        stdout = io.StringIO()
        run(Calculator(), stdin=io.StringIO("stacksize\n"), stdout=stdout, color=True)
        self.assertIn("\033[32mStack size: 0\033[0m", stdout.getvalue())

    def test_main_with_explicit_workers(self) -> None:
        stdout = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO("[[1]]\n[[2]]\n+\n=\n")), redirect_stdout(stdout):
            self.assertEqual(main(["--workers", "2", "--no-color"]), 0)
        self.assertIn("Result : [[3]]", stdout.getvalue())

    def test_main_refuses_unknown_concurrency(self) -> None:
        stdout = io.StringIO()
        with mock.patch("sqmatrix.config.os.cpu_count", return_value=None), mock.patch.dict(
            "os.environ", {}, clear=True
        ), redirect_stdout(stdout):
            self.assertEqual(main(["--no-color"]), 1)
        self.assertIn("Cannot read the amount of system threads", stdout.getvalue())


if __name__ == "__main__":
    unittest.main()
