"""MPI worker - invoked via: mpiexec -n X python -m Hotplate.helpers.runner_helper '{config}'"""

import json
import logging
import sys

from mpi4py import MPI

from Hotplate import ConvergenceReporter, HotplateMPISolver

log = logging.getLogger("Hotplate.runner_helper")


def main(config: dict, comm: MPI.Comm = MPI.COMM_WORLD):
    rank = comm.Get_rank()

    solver = HotplateMPISolver(
        config["rows"],
        config["cols"],
        config["top"],
        config["left"],
        config["right"],
        config["bottom"],
        config["epsilon"],
        sync=config.get("sync", "broadcast"),
        max_iter=config.get("max_iter"),
        use_numba=config.get("use_numba", False),
        numba_threads=config.get("numba_threads", 1),
        reporter=ConvergenceReporter(enabled=config.get("report", True)),
        comm=comm,
    )
    if config.get("use_numba"):
        solver.warmup()

    solver.solve()
    solver.free()

    output_path = config.get("output")
    if output_path:
        solver.save_hdf5(output_path)

    if rank == 0:
        # runner.py loads the HDF5, the path is informational
        print(f"RESULT:{output_path}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    try:
        main(json.loads(sys.argv[1]))
    except Exception:
        # A rank that cannot continue takes the whole job down
        log.exception(f"Rank {MPI.COMM_WORLD.Get_rank()} failed")
        MPI.COMM_WORLD.Abort(1)
