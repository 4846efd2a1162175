"""MPI one-sided communication for the hotplate solver.

This package provides:
- SymmetricGrid: current/working buffers allocated in MPI windows on all ranks
- ConvergenceReducer: per-rank max-change slots reduced on a coordinator
- GridSynchronizer: strategies for sharing relaxed rows (broadcast/halo)
"""

from .symmetric import SymmetricGrid
from .reduction import ConvergenceReducer
from .sync import (
    GridSynchronizer,
    BroadcastSynchronizer,
    HaloSynchronizer,
    create_synchronizer,
)

__all__ = [
    "SymmetricGrid",
    "ConvergenceReducer",
    "GridSynchronizer",
    "BroadcastSynchronizer",
    "HaloSynchronizer",
    "create_synchronizer",
]
