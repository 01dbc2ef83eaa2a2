"""Thread-parallel elementwise operations between equal-sized matrices.

Each call partitions the row-major flattened cells into contiguous blocks and
runs one thread per block. A worker computes its results from the current
cells, waits on a barrier until every worker has finished computing, and only
then writes its block back into the left operand under a shared lock. The
left operand may be the right operand as well (``m += m``).
"""

from __future__ import annotations

import math
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .cells import ConcreteCell
from .config import Settings, get_settings

if TYPE_CHECKING:
    from .matrix import ConcreteMatrix

CellOp = Callable[[ConcreteCell, ConcreteCell], ConcreteCell]


@dataclass(frozen=True)
class ElementwiseEngine:
    workers: int

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError(f"ElementwiseEngine needs at least one worker, got {self.workers}")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ElementwiseEngine":
        active = get_settings() if settings is None else settings
        return cls(workers=active.workers)

    def partition(self, total: int) -> list[tuple[int, int]]:
        """Return ``(start, length)`` spans covering ``range(total)`` once each."""
        if total <= 0:
            return []
        block_size = math.ceil(total / self.workers)
        return [(start, min(block_size, total - start)) for start in range(0, total, block_size)]

    def apply(self, lhs: "ConcreteMatrix", rhs: "ConcreteMatrix", op: CellOp) -> None:
        spans = self.partition(lhs.size * lhs.size)
        if not spans:
            return

        barrier = threading.Barrier(len(spans))
        commit_lock = threading.Lock()
        failures: list[BaseException] = []

        def run(start: int, length: int) -> None:
            try:
                lhs_block = lhs.block(start, length)
                rhs_block = rhs.block(start, length)
                results = [op(left, right) for left, right in zip(lhs_block, rhs_block)]
            except BaseException as exc:
                failures.append(exc)
                barrier.abort()
                return

            try:
                barrier.wait()
            except threading.BrokenBarrierError:
                return

            with commit_lock:
                for index, result in enumerate(results):
                    lhs_block[index] = result

        threads = [
            threading.Thread(target=run, args=span, name=f"sqmatrix-elementwise-{i}")
            for i, span in enumerate(spans)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        if failures:
            raise failures[0]
