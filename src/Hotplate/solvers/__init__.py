"""Hotplate Solvers.

Consistent naming: {Method}Solver for sequential, {Method}MPISolver for parallel.

Sequential (no MPI):
- HotplateSolver: single-process relaxation, reference results

Parallel (MPI):
- HotplateMPISolver: row-partitioned relaxation over one-sided communication
"""

from .hotplate import HotplateSolver
from .hotplate_mpi import HotplateMPISolver

__all__ = [
    "HotplateSolver",
    "HotplateMPISolver",
]
