"""Grid synchronisation strategies between relaxation passes."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from mpi4py import MPI

from ..partition import RowPartitioner
from .symmetric import SymmetricGrid


class GridSynchronizer(ABC):
    """Abstract base for making freshly relaxed rows visible to other ranks."""

    name = "base"

    @abstractmethod
    def publish(self, grid: SymmetricGrid, start: int, stop: int):
        """Make this rank's rows available; returns after all ranks wrote."""
        pass

    @abstractmethod
    def exchange(self, grid: SymmetricGrid, start: int, stop: int):
        """Bring every rank's working buffer up to date for the next pass."""
        pass

    def gather(self, grid: SymmetricGrid, partitioner: RowPartitioner, u: np.ndarray):
        """Assemble the full field ``u`` on every rank. No-op by default."""
        pass


class BroadcastSynchronizer(GridSynchronizer):
    """Puts owned rows into rank 0's copy, then broadcasts the whole grid.

    Every rank holds an identical full grid after each pass, at the cost of
    ``rows * cols`` values moved per rank per iteration.
    """

    name = "broadcast"

    def __init__(self, root: int = 0):
        self.root = root

    def publish(self, grid: SymmetricGrid, start: int, stop: int):
        grid.publish_rows(start, stop, target=self.root)

    def exchange(self, grid: SymmetricGrid, start: int, stop: int):
        if grid.size > 1:
            grid.comm.Bcast(grid.working, root=self.root)


class HaloSynchronizer(GridSynchronizer):
    """Exchanges only the rows adjacent to partition boundaries.

    Moves ``2 * cols`` values per rank per iteration. Rows owned by
    non-adjacent ranks are stale until :meth:`gather`.
    """

    name = "halo"

    def publish(self, grid: SymmetricGrid, start: int, stop: int):
        grid.comm.Barrier()

    def exchange(self, grid: SymmetricGrid, start: int, stop: int):
        if grid.size == 1:
            return

        rank, size = grid.rank, grid.size
        lo = rank - 1 if rank > 0 else MPI.PROC_NULL
        hi = rank + 1 if rank < size - 1 else MPI.PROC_NULL
        u = grid.working
        cols = grid.cols

        # Send last owned row up, receive the row below our first from below
        send = np.ascontiguousarray(u[max(stop - 1, 0)])
        recv = np.empty(cols, dtype=u.dtype)
        grid.comm.Sendrecv(send, hi, 0, recv, lo, 0)
        if lo != MPI.PROC_NULL:
            u[start - 1] = recv

        # Send first owned row down, receive the row after our last from above
        send = np.ascontiguousarray(u[min(start, grid.rows - 1)])
        recv = np.empty(cols, dtype=u.dtype)
        grid.comm.Sendrecv(send, lo, 1, recv, hi, 1)
        if hi != MPI.PROC_NULL:
            u[stop] = recv

    def gather(self, grid: SymmetricGrid, partitioner: RowPartitioner, u: np.ndarray):
        if grid.size == 1:
            return
        start, stop = partitioner.get_range(grid.rank)
        blocks = grid.comm.allgather(u[start:stop].copy())
        for (s, e), block in zip(partitioner.ranges(), blocks):
            u[s:e] = block


def create_synchronizer(sync_type: str) -> GridSynchronizer:
    """Factory: 'broadcast' for full-grid broadcast, 'halo' for halo rows."""
    if sync_type == "broadcast":
        return BroadcastSynchronizer()
    elif sync_type == "halo":
        return HaloSynchronizer()
    else:
        raise ValueError(f"Unknown sync type: {sync_type}. Use 'broadcast' or 'halo'.")
