"""Relaxation kernels.

Each kernel updates the interior columns of rows ``[start, stop)``:
``working = (up + left + down + right) / 4`` read from ``current``, and
returns the largest absolute change it made. Boundary cells are never
written. Publishing the rows to other ranks is handled by the solver.
"""

import numpy as np
import numba
from numba import njit, prange


@njit(parallel=True)
def _relax_rows_numba(
    current: np.ndarray, working: np.ndarray, start: int, stop: int
) -> float:
    """Numba JIT implementation of one relaxation pass over owned rows."""
    n_rows = stop - start
    if n_rows <= 0:
        return 0.0

    cols = current.shape[1]
    row_max = np.zeros(n_rows)

    for k in prange(n_rows):
        r = start + k
        local_max = 0.0
        for c in range(1, cols - 1):
            new = (
                current[r - 1, c]
                + current[r, c - 1]
                + current[r + 1, c]
                + current[r, c + 1]
            ) / 4.0
            diff = abs(current[r, c] - new)
            if diff > local_max:
                local_max = diff
            working[r, c] = new
        row_max[k] = local_max

    return row_max.max()


class NumPyKernel:
    """NumPy-based relaxation kernel."""

    def __init__(self, specified_numba_threads: int = 1):
        self.observed_numba_threads = None  # Not applicable for NumPy

    def step(
        self, current: np.ndarray, working: np.ndarray, start: int, stop: int
    ) -> float:
        """Relax rows ``[start, stop)``; return the local max change."""
        if stop <= start:
            return 0.0

        new = (
            current[start - 1 : stop - 1, 1:-1]
            + current[start:stop, 0:-2]
            + current[start + 1 : stop + 1, 1:-1]
            + current[start:stop, 2:]
        ) / 4.0

        local_max = float(np.max(np.abs(current[start:stop, 1:-1] - new)))
        working[start:stop, 1:-1] = new
        return local_max

    def warmup(self, warmup_size: int = 10):
        """No-op for NumPy kernel."""
        pass


class NumbaKernel:
    """Numba JIT-compiled relaxation kernel."""

    def __init__(self, specified_numba_threads: int = 1):
        # Set requested threads (may be clamped by NUMBA_NUM_THREADS env var)
        if specified_numba_threads is not None:
            numba.set_num_threads(
                min(specified_numba_threads, numba.config.NUMBA_NUM_THREADS)
            )

        # Record what Numba actually reports
        self.observed_numba_threads = numba.get_num_threads()

    def step(
        self, current: np.ndarray, working: np.ndarray, start: int, stop: int
    ) -> float:
        """Relax rows ``[start, stop)``; return the local max change."""
        return float(_relax_rows_numba(current, working, start, stop))

    def warmup(self, warmup_size: int = 10):
        """Trigger JIT compilation with a small problem."""
        u1 = np.random.rand(warmup_size, warmup_size)
        u2 = u1.copy()
        for _ in range(3):
            _relax_rows_numba(u1, u2, 1, warmup_size - 1)
            u1, u2 = u2, u1


def create_kernel(use_numba: bool = False, specified_numba_threads: int = 1):
    """Factory: NumbaKernel when ``use_numba`` else NumPyKernel."""
    cls = NumbaKernel if use_numba else NumPyKernel
    return cls(specified_numba_threads=specified_numba_threads)
