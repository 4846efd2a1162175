"""Symmetric (remotely addressable) grid buffers backed by MPI windows.

Every rank collectively allocates the same two ``rows x cols`` buffers with
``MPI.Win.Allocate``. Any rank may ``Put`` into another rank's copy; writes
become visible to the target only after the closing ``Fence`` of the epoch,
which doubles as the barrier between ranks.
"""

from __future__ import annotations

import numpy as np
from mpi4py import MPI


def _allocate(shape: tuple, comm: MPI.Comm, dtype=np.float64):
    """Collectively allocate a window and view its memory as an array."""
    itemsize = np.dtype(dtype).itemsize
    nbytes = int(np.prod(shape)) * itemsize
    win = MPI.Win.Allocate(nbytes, disp_unit=itemsize, comm=comm)
    arr = np.frombuffer(win.tomemory(), dtype=dtype, count=int(np.prod(shape)))
    return win, arr.reshape(shape)


class SymmetricGrid:
    """Current/working grid pair allocated symmetrically on all ranks.

    The two buffers trade roles on :meth:`swap`; no data is copied.

    Parameters
    ----------
    rows, cols : int
        Global grid shape (boundaries included). Every rank holds the full grid.
    comm : MPI.Comm
        Communicator spanning all PEs.

    Example
    -------
    >>> grid = SymmetricGrid(rows=64, cols=64, comm=MPI.COMM_WORLD)
    >>> initialize_hotplate(grid.current, grid.working, temps)
    >>> local_max = kernel.step(grid.current, grid.working, start, stop)
    >>> grid.publish_rows(start, stop)   # collective
    >>> grid.swap()
    """

    def __init__(self, rows: int, cols: int, comm: MPI.Comm = MPI.COMM_WORLD):
        self.rows = rows
        self.cols = cols
        self.comm = comm
        self.rank = comm.Get_rank()
        self.size = comm.Get_size()

        self._windows = []
        self._buffers = []
        for _ in range(2):
            win, arr = _allocate((rows, cols), comm)
            arr.fill(0.0)
            self._windows.append(win)
            self._buffers.append(arr)

        self._current = 0

    @property
    def current(self) -> np.ndarray:
        return self._buffers[self._current]

    @property
    def working(self) -> np.ndarray:
        return self._buffers[1 - self._current]

    @property
    def working_window(self) -> MPI.Win:
        return self._windows[1 - self._current]

    def swap(self):
        """Exchange the current and working roles."""
        self._current = 1 - self._current

    def publish_rows(self, start: int, stop: int, target: int = 0):
        """Put working rows ``[start, stop)`` into ``target``'s working buffer.

        Collective: every rank must call it once per pass, even with an empty
        range. On return the rows are visible on ``target``.
        """
        win = self.working_window
        win.Fence()
        n_rows = stop - start
        if n_rows > 0 and self.rank != target:
            origin = np.ascontiguousarray(self.working[start:stop])
            win.Put(origin, target, target=(start * self.cols, n_rows * self.cols, MPI.DOUBLE))
        win.Fence()

    def free(self):
        """Release the windows. Buffer views must not be used afterwards."""
        for win in self._windows:
            if win != MPI.WIN_NULL:
                win.Free()
        self._windows = []
        self._buffers = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.free()
