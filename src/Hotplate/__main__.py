"""Command-line entry point.

Usage:
    mpiexec -n 4 python -m Hotplate ROWS COLS TOP LEFT RIGHT BOTTOM EPSILON
    mpiexec -n 4 python -m Hotplate 1000 1000 100 0 0 0 0.01 --sync halo --numba
"""

import argparse
import logging

from mpi4py import MPI

from .reporting import ConvergenceReporter
from .solvers import HotplateMPISolver

log = logging.getLogger("Hotplate.cli")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="python -m Hotplate",
        description="Steady-state hotplate temperatures by parallel Jacobi relaxation",
    )
    parser.add_argument("rows", type=int, help="Grid rows, boundaries included")
    parser.add_argument("cols", type=int, help="Grid columns, boundaries included")
    parser.add_argument("top", type=float, help="Top edge temperature")
    parser.add_argument("left", type=float, help="Left edge temperature")
    parser.add_argument("right", type=float, help="Right edge temperature")
    parser.add_argument("bottom", type=float, help="Bottom edge temperature")
    parser.add_argument("epsilon", type=float, help="Convergence tolerance")

    parser.add_argument("--max-iter", type=int, default=None, help="Iteration cap (default: none)")
    parser.add_argument("--sync", choices=["broadcast", "halo"], default="broadcast", help="Row synchronisation strategy")
    parser.add_argument("--numba", action="store_true", help="Use Numba kernel")
    parser.add_argument("--numba-threads", type=int, default=1, help="Numba threads per rank")
    parser.add_argument("--output", type=str, default=None, help="Save results to this HDF5 file")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    solver = HotplateMPISolver(
        args.rows, args.cols, args.top, args.left, args.right, args.bottom, args.epsilon,
        sync=args.sync,
        max_iter=args.max_iter,
        use_numba=args.numba,
        numba_threads=args.numba_threads,
        reporter=ConvergenceReporter(),
        comm=MPI.COMM_WORLD,
    )
    if args.numba:
        solver.warmup()

    solver.solve()
    solver.free()

    if args.output:
        solver.save_hdf5(args.output)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    try:
        main()
    except Exception:
        # A failure on any rank ends the whole job
        log.exception(f"Rank {MPI.COMM_WORLD.Get_rank()} failed")
        MPI.COMM_WORLD.Abort(1)
