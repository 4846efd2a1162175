"""Process-local grid store for the sequential solver."""

import numpy as np


class LocalGrid:
    """Current/working buffer pair held in ordinary process memory.

    Mirrors the role-swapping interface of :class:`Hotplate.mpi.SymmetricGrid`
    so the iteration loop is shared between the sequential and MPI solvers.
    """

    def __init__(self, rows: int, cols: int, dtype=np.float64):
        self.rows = rows
        self.cols = cols
        self._buffers = [
            np.zeros((rows, cols), dtype=dtype),
            np.zeros((rows, cols), dtype=dtype),
        ]
        self._current = 0

    @property
    def current(self) -> np.ndarray:
        return self._buffers[self._current]

    @property
    def working(self) -> np.ndarray:
        return self._buffers[1 - self._current]

    def swap(self):
        """Exchange the current and working roles."""
        self._current = 1 - self._current

    def free(self):
        pass
