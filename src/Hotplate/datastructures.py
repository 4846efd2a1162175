"""Data structures for solver configuration and results.

Architecture: 2x2 matrix of Params vs Metrics × Global vs Local

                 Params (input/config)         Metrics (output/results)
                 ─────────────────────         ────────────────────────
Global           GlobalParams                  GlobalMetrics
(same across     rows, cols, temperatures,     wall_time, mlups,
ranks / agg)     epsilon, n_ranks, sync...     converged, iterations...

Local            LocalParams                   LocalMetrics
(per-rank)       rank, hostname,               compute_times[],
                 start_row, stop_row...        sync_times[]...
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# ============================================================================
# Problem definition
# ============================================================================


@dataclass(frozen=True)
class BoundaryTemperatures:
    """Fixed temperatures of the four plate edges."""

    top: float
    left: float
    right: float
    bottom: float


class SolverState(Enum):
    """Iteration controller states."""

    INIT = "init"
    ITERATING = "iterating"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"  # only reachable with an explicit max_iter


# ============================================================================
# Global (identical across ranks, or aggregated on rank 0)
# ============================================================================


@dataclass
class GlobalParams:
    """Run configuration - validated by Hydra, logged to MLflow as params.

    Immutable configuration set before the run. Identical across all MPI ranks.
    """

    # Required
    rows: int
    cols: int
    top: float
    left: float
    right: float
    bottom: float
    epsilon: float

    # None keeps the loop unbounded
    max_iter: Optional[int] = None

    # Parallelization
    n_ranks: int = 1
    sync: Optional[str] = None  # "broadcast" | "halo"

    # Numba
    use_numba: bool = False
    specified_numba_threads: int = 1

    # Experiment tracking
    experiment_name: str = "default"

    # Auto-detected at runtime (not from config)
    environment: str = field(init=False)

    def __post_init__(self):
        self.environment = (
            "hpc"
            if os.environ.get("LSB_JOBID") or os.environ.get("SLURM_JOB_ID")
            else "local"
        )

    @property
    def temperatures(self) -> BoundaryTemperatures:
        return BoundaryTemperatures(self.top, self.left, self.right, self.bottom)

    def to_mlflow(self) -> dict:
        """Convert to MLflow-compatible params dict (bools as int, no None)."""
        return {
            k: (int(v) if isinstance(v, bool) else v)
            for k, v in self.__dict__.items()
            if v is not None
        }


@dataclass
class GlobalMetrics:
    """Aggregated results - logged to MLflow as metrics.

    Final results computed/aggregated on rank 0.
    """

    converged: bool = False
    iterations: int = 0
    final_max_diff: Optional[float] = None
    wall_time: Optional[float] = None

    # Timing breakdown (sum across all iterations)
    total_compute_time: Optional[float] = None
    total_sync_time: Optional[float] = None

    # Million Lattice Updates per Second
    mlups: Optional[float] = None

    # Numba runtime info (what was actually available)
    observed_numba_threads: Optional[int] = None

    def to_mlflow(self) -> dict:
        """Convert to MLflow-compatible dict (no None, bools as int)."""
        return {
            k: (int(v) if isinstance(v, bool) else v)
            for k, v in self.__dict__.items()
            if v is not None
        }


# ============================================================================
# Local (per-rank)
# ============================================================================


@dataclass
class LocalParams:
    """Per-rank row ownership - gathered to rank 0, logged as artifact."""

    rank: int
    start_row: int
    stop_row: int
    hostname: str = ""

    @property
    def n_rows(self) -> int:
        return self.stop_row - self.start_row


@dataclass
class LocalMetrics:
    """Per-rank timeseries. Accumulated during solve, logged post-solve."""

    compute_times: List[float] = field(default_factory=list)
    sync_times: List[float] = field(default_factory=list)

    # Global convergence value per iteration (identical on every rank)
    max_diff_history: List[float] = field(default_factory=list)

    def clear(self):
        """Clear all timeseries data."""
        self.compute_times.clear()
        self.sync_times.clear()
        self.max_diff_history.clear()
