"""MPI Hotplate Solver package.

Steady-state heat distribution on a rectangular plate with four fixed edge
temperatures, solved by Jacobi relaxation. Rows are partitioned across MPI
ranks that share results through one-sided (put/get) communication on
symmetrically allocated buffers.

Solvers
-------
Sequential (no MPI):
- HotplateSolver

Parallel (MPI):
- HotplateMPISolver
"""

from .datastructures import (
    BoundaryTemperatures,
    GlobalParams,
    GlobalMetrics,
    LocalParams,
    LocalMetrics,
    SolverState,
)
from .boundary import interior_seed, initialize_hotplate, fill_boundary
from .partition import RowPartitioner, row_range
from .kernels import NumPyKernel, NumbaKernel, create_kernel
from .grid import LocalGrid
from .reporting import ConvergenceReporter
from .solvers import HotplateSolver, HotplateMPISolver
from .runner import run_solver

__all__ = [
    # Data structures
    "BoundaryTemperatures",
    "GlobalParams",
    "GlobalMetrics",
    "LocalParams",
    "LocalMetrics",
    "SolverState",
    # Problem setup
    "interior_seed",
    "initialize_hotplate",
    "fill_boundary",
    # Decomposition
    "RowPartitioner",
    "row_range",
    # Kernels
    "NumPyKernel",
    "NumbaKernel",
    "create_kernel",
    # Grid
    "LocalGrid",
    # Reporting
    "ConvergenceReporter",
    # Solvers
    "HotplateSolver",
    "HotplateMPISolver",
    # Runner
    "run_solver",
]
