"""Row decomposition of the plate across ranks."""

from __future__ import annotations

from .datastructures import LocalParams


def row_range(rows: int, size: int, rank: int) -> tuple[int, int]:
    """Interior rows ``[start, stop)`` owned by ``rank``.

    Rows are dealt out in blocks of ``ceil(rows / size)``. Rank 0 starts at
    row 1 and the last rank stops at ``rows - 1`` so the fixed top and bottom
    rows are never owned. Bounds past the last interior row collapse to the
    empty range ``[rows - 1, rows - 1)``.

    Assumes ``rows >= size + 1``; smaller plates are not checked.
    """
    rows_per_pe = (rows + size - 1) // size
    start = rank * rows_per_pe
    stop = (rank + 1) * rows_per_pe

    if rank == 0:
        start = 1
    if rank == size - 1:
        stop = rows - 1

    last = rows - 1
    return min(start, last), min(stop, last)


class RowPartitioner:
    """Assigns each rank a contiguous block of interior rows.

    Parameters
    ----------
    rows : int
        Total number of grid rows (including the fixed top and bottom rows).
    size : int
        Number of ranks.

    Example
    -------
    >>> part = RowPartitioner(rows=10, size=4)
    >>> part.get_range(0), part.get_range(3)
    ((1, 3), (9, 9))
    """

    def __init__(self, rows: int, size: int):
        self.rows = rows
        self.size = size
        self.rows_per_pe = (rows + size - 1) // size

    def get_range(self, rank: int) -> tuple[int, int]:
        return row_range(self.rows, self.size, rank)

    def ranges(self) -> list[tuple[int, int]]:
        """Ranges for every rank, ordered by rank."""
        return [self.get_range(r) for r in range(self.size)]

    def get_rank_info(self, rank: int, hostname: str = "") -> LocalParams:
        start, stop = self.get_range(rank)
        return LocalParams(rank=rank, start_row=start, stop_row=stop, hostname=hostname)
