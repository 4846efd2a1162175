"""Base class for solvers."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import asdict

import numpy as np

from ..datastructures import GlobalMetrics, GlobalParams, LocalMetrics, SolverState

log = logging.getLogger(__name__)


class BaseSolver(ABC):
    """Abstract base for hotplate solvers."""

    def __init__(
        self,
        rows: int,
        cols: int,
        top: float,
        left: float,
        right: float,
        bottom: float,
        epsilon: float,
        max_iter: int = None,
        **kwargs,
    ):
        self.config = GlobalParams(
            rows=rows,
            cols=cols,
            top=top,
            left=left,
            right=right,
            bottom=bottom,
            epsilon=epsilon,
            max_iter=max_iter,
            **kwargs,
        )

        # Metrics containers (match datastructures.py naming)
        self.metrics = GlobalMetrics()
        self.timeseries = LocalMetrics()
        self.state = SolverState.INIT

        # Final field, set by solve()
        self.u = None

        # Timing accumulators
        self._time_compute = 0.0
        self._time_sync = 0.0

    @abstractmethod
    def solve(self) -> GlobalMetrics:
        """Execute the solver. Returns metrics."""
        pass

    def warmup(self, warmup_size: int = 10):
        """Warmup kernel (trigger Numba JIT if used)."""
        self.kernel.warmup(warmup_size=warmup_size)

    def _get_time(self) -> float:
        """Get current time. Override for MPI timing."""
        return time.perf_counter()

    def _is_root(self) -> bool:
        """True if this rank should report and log. Override for MPI."""
        return True

    def _barrier(self):
        """Synchronize all ranks before timing. No-op for sequential."""
        pass

    def _reset(self):
        """Reset timers and timeseries."""
        self._time_compute = 0.0
        self._time_sync = 0.0
        self.timeseries.clear()
        self.metrics = GlobalMetrics()

    def _compute_metrics(self, wall_time: float, iterations: int):
        """Compute performance metrics."""
        self.metrics.wall_time = wall_time
        self.metrics.iterations = iterations
        self.metrics.total_compute_time = self._time_compute
        self.metrics.total_sync_time = self._time_sync

        n_interior = (self.config.rows - 2) * (self.config.cols - 2)
        if iterations > 0 and wall_time > 0:
            self.metrics.mlups = n_interior * iterations / (wall_time * 1e6)

    def save_hdf5(self, path):
        """Save config, metrics, timeseries and final grid to HDF5 (root only)."""
        if not self._is_root():
            return

        import pandas as pd
        import warnings

        row = {**asdict(self.config), **asdict(self.metrics)}
        df_results = pd.DataFrame([row])

        # Convert object columns (None, strings) to avoid PyTables pickle warning
        for col in df_results.select_dtypes(include=["object", "string"]).columns:
            df_results[col] = df_results[col].astype(str)

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", pd.errors.PerformanceWarning)
            df_results.to_hdf(path, key="results", mode="w", format="table")

            ts_data = {k: v for k, v in asdict(self.timeseries).items() if v}
            if ts_data:
                max_len = max(len(v) for v in ts_data.values())
                for k, v in ts_data.items():
                    if len(v) < max_len:
                        ts_data[k] = v + [float("nan")] * (max_len - len(v))
                pd.DataFrame(ts_data).to_hdf(path, key="timeseries", mode="a", format="table")

            if self.u is not None:
                pd.DataFrame(np.asarray(self.u)).to_hdf(path, key="grid", mode="a")

        log.info(f"Saved results to {path}")
