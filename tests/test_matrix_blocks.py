from __future__ import annotations

import unittest

from sqmatrix.cells import ConcreteCell, SymbolicCell
from sqmatrix.errors import OutOfRangeError
from sqmatrix.matrix import ConcreteMatrix, SymbolicMatrix


class MatrixBlockTests(unittest.TestCase):
    def setUp(self) -> None:
        self.conc = ConcreteMatrix.from_string("[[1,2][3,4]]")
        self.symb = SymbolicMatrix.from_string("[[a,b][c,d]]")
        self.sym2 = SymbolicMatrix.from_string("[[a,1][2,d]]")

    def test_blocks_follow_row_major_order(self) -> None:
        self.assertEqual(list(self.conc.block(0, 3)), [ConcreteCell(1), ConcreteCell(2), ConcreteCell(3)])
        self.assertEqual([str(cell) for cell in self.symb.block(0, 2)], ["a", "b"])
        self.assertEqual([str(cell) for cell in self.symb.block(3, 1)], ["d"])
        self.assertEqual([str(cell) for cell in self.sym2.block(0, 4)], ["a", "1", "2", "d"])

        m = ConcreteMatrix.from_string("[[1,2,3][4,5,6][7,8,9]]")
        self.assertEqual(list(m.block(7, 2)), [ConcreteCell(8), ConcreteCell(9)])

        m2 = ConcreteMatrix.from_string("[[1,2,3,4][5,6,7,8][9,10,11,12][13,14,15,16]]")
        self.assertEqual([cell.value for cell in m2.block(0, 16)], list(range(1, 17)))

    def test_zero_length_block_is_always_empty(self) -> None:
        for start in (0, 2, 6, 1000, -1):
            with self.subTest(start=start):
                self.assertEqual(len(self.conc.block(start, 0)), 0)
                self.assertEqual(list(self.symb.block(start, 0)), [])

    def test_out_of_range_requests(self) -> None:
        for start, length in ((-1, 1), (1, 5), (6, 1), (0, 8), (-1, -1), (3, 2)):
            for matrix in (self.conc, self.symb):
                with self.subTest(start=start, length=length, matrix=str(matrix)):
                    with self.assertRaises(OutOfRangeError):
                        matrix.block(start, length)

    def test_out_of_range_is_an_index_error(self) -> None:
        with self.assertRaises(IndexError):
            self.conc.block(0, 9)

    def test_block_writes_through_to_matrix(self) -> None:
        block = self.conc.block(1, 2)
        block[0] = ConcreteCell(20)
        block[-1] = ConcreteCell(30)
        self.assertEqual(str(self.conc), "[[1,20][30,4]]")
        with self.assertRaises(TypeError):
            block[0] = SymbolicCell("z")
        with self.assertRaises(IndexError):
            block[2] = ConcreteCell(0)

    def test_block_reads_are_live(self) -> None:
        block = self.conc.block(0, 4)
        self.conc += ConcreteMatrix.from_string("[[1,1][1,1]]")
        self.assertEqual([cell.value for cell in block], [2, 3, 4, 5])
        self.assertEqual(block[1:3], [ConcreteCell(3), ConcreteCell(4)])


if __name__ == "__main__":
    unittest.main()
