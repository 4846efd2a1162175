"""Sequential hotplate solver."""

import logging

import numpy as np

from .base import BaseSolver
from ..boundary import initialize_hotplate
from ..datastructures import SolverState
from ..grid import LocalGrid
from ..kernels import create_kernel
from ..partition import RowPartitioner
from ..reporting import ConvergenceReporter

log = logging.getLogger(__name__)


class HotplateSolver(BaseSolver):
    """Sequential Jacobi relaxation of the hotplate.

    No MPI overhead - runs entirely on a single process. Subclasses swap in a
    distributed grid and override the synchronisation hooks.

    Parameters
    ----------
    rows, cols : int
        Grid shape including the boundary ring (both >= 3).
    top, left, right, bottom : float
        Fixed edge temperatures.
    epsilon : float
        Stop once the max change of a pass is <= epsilon.
    max_iter : int, optional
        Stop after this many passes even if not converged. None (default)
        iterates until convergence, however long that takes.
    use_numba : bool
        Use Numba JIT kernel (default: False).
    numba_threads : int
        Number of Numba threads (default: 1).
    reporter : ConvergenceReporter, optional
        Receives progress lines on the root rank. Silent if not given.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        top: float,
        left: float,
        right: float,
        bottom: float,
        epsilon: float,
        use_numba: bool = False,
        numba_threads: int = 1,
        reporter: ConvergenceReporter = None,
        **kwargs,
    ):
        super().__init__(
            rows, cols, top, left, right, bottom, epsilon,
            use_numba=use_numba, specified_numba_threads=numba_threads, **kwargs,
        )
        self.reporter = reporter or ConvergenceReporter(enabled=False)

        self._init_kernel()
        self._init_partition()
        self._init_arrays()

    def _init_kernel(self):
        """Initialize the relaxation kernel."""
        self.kernel = create_kernel(
            self.config.use_numba, self.config.specified_numba_threads
        )

    def _init_partition(self):
        """Single process owns every interior row."""
        self.partitioner = RowPartitioner(self.config.rows, 1)
        self.start_row, self.stop_row = self.partitioner.get_range(0)

    def _init_arrays(self):
        """Allocate and initialise the current/working pair."""
        self.grid = LocalGrid(self.config.rows, self.config.cols)
        self.seed = initialize_hotplate(
            self.grid.current, self.grid.working, self.config.temperatures
        )

    def solve(self):
        """Relax until the global max change drops to epsilon or below."""
        self._reset()
        epsilon = self.config.epsilon
        max_iter = self.config.max_iter

        self.state = SolverState.INIT
        global_max_diff = epsilon + 1.0
        if self._is_root():
            self.reporter.header()

        self._barrier()
        t_start = self._get_time()

        iteration = 0
        while global_max_diff > epsilon:
            if max_iter is not None and iteration >= max_iter:
                self.state = SolverState.EXHAUSTED
                break
            self.state = SolverState.ITERATING

            t0 = self._get_time()
            local_max_diff = self.kernel.step(
                self.grid.current, self.grid.working, self.start_row, self.stop_row
            )
            t1 = self._get_time()
            global_max_diff = self._synchronize(local_max_diff)
            t2 = self._get_time()

            self.grid.swap()

            self._time_compute += t1 - t0
            self._time_sync += t2 - t1
            self.timeseries.compute_times.append(t1 - t0)
            self.timeseries.sync_times.append(t2 - t1)
            self.timeseries.max_diff_history.append(global_max_diff)

            if self._is_root():
                self.reporter.iteration(
                    iteration, global_max_diff, converged=global_max_diff <= epsilon
                )
            iteration += 1
        else:
            self.state = SolverState.CONVERGED

        wall_time = self._get_time() - t_start
        self._finalize(wall_time, iteration, global_max_diff)
        return self.metrics

    def _synchronize(self, local_max_diff: float) -> float:
        """Share rows and reduce the max change. Sequential: nothing to share."""
        return local_max_diff

    def _gather_solution(self) -> np.ndarray:
        """Return a private copy of the final field."""
        return self.grid.current.copy()

    def _finalize(self, wall_time: float, iterations: int, final_max_diff: float):
        """Finalize metrics after solve."""
        self.u = self._gather_solution()
        self.metrics.converged = self.state is SolverState.CONVERGED
        self.metrics.final_max_diff = float(final_max_diff)
        self.metrics.observed_numba_threads = self.kernel.observed_numba_threads
        self._compute_metrics(wall_time, iterations)

        if self._is_root():
            self.reporter.total_time(wall_time)
            log.info(
                f"{self.state.value}: {iterations} iter, max diff={final_max_diff:.3e}, "
                f"time={wall_time:.3f}s"
            )
