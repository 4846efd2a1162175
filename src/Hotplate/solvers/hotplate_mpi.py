"""MPI-parallel hotplate solver (extends HotplateSolver)."""

import numpy as np
from mpi4py import MPI

from .hotplate import HotplateSolver
from .mpi_mixin import MPISolverMixin
from ..boundary import initialize_hotplate
from ..mpi import ConvergenceReducer, SymmetricGrid, create_synchronizer
from ..partition import RowPartitioner


class HotplateMPISolver(MPISolverMixin, HotplateSolver):
    """Parallel hotplate solver over one-sided MPI communication.

    Every rank holds the full grid in symmetric memory and relaxes only its
    own block of rows. Per pass: owned rows are published, each rank's max
    change is deposited on rank 0, the grid is synchronised, rank 0 reduces
    the max and every rank reads it back before testing convergence.

    Parameters
    ----------
    sync : str
        'broadcast' (default) puts rows into rank 0 and broadcasts the grid;
        'halo' exchanges only partition-boundary rows.
    comm : MPI.Comm, optional
        Communicator (default: MPI.COMM_WORLD).
    **kwargs
        Forwarded to :class:`HotplateSolver`.
    """

    def __init__(self, *args, sync: str = "broadcast", comm: MPI.Comm = None, **kwargs):
        # MPI setup before parent init
        self._init_mpi(comm)
        self.synchronizer = create_synchronizer(sync)

        super().__init__(*args, n_ranks=self.size, sync=sync, **kwargs)

    def _init_partition(self):
        """Rank-local row block."""
        self.partitioner = RowPartitioner(self.config.rows, self.size)
        self.start_row, self.stop_row = self.partitioner.get_range(self.rank)

    def _init_arrays(self):
        """Allocate symmetric buffers and the reduction slots on all ranks."""
        self.grid = SymmetricGrid(self.config.rows, self.config.cols, self.comm)
        self.seed = initialize_hotplate(
            self.grid.current, self.grid.working, self.config.temperatures
        )
        self.reducer = ConvergenceReducer(
            self.comm, root=0, initial=self.config.epsilon + 1.0
        )

    def _synchronize(self, local_max_diff: float) -> float:
        """Publish rows, reduce the max change on rank 0, read it back."""
        start, stop = self.start_row, self.stop_row

        self.synchronizer.publish(self.grid, start, stop)
        self.reducer.deposit(local_max_diff)
        self.synchronizer.exchange(self.grid, start, stop)
        self.reducer.reduce()
        return self.reducer.publish()

    def _gather_solution(self) -> np.ndarray:
        """Assemble the full field on every rank and copy it out of the window."""
        self.synchronizer.gather(self.grid, self.partitioner, self.grid.current)
        return self.grid.current.copy()

    def gather_topology(self):
        """Gather per-rank row ownership to rank 0 (None elsewhere)."""
        info = self.partitioner.get_rank_info(self.rank, MPI.Get_processor_name())
        return self.comm.gather(info, root=0)

    def free(self):
        """Release MPI windows (collective)."""
        self.grid.free()
        self.reducer.free()
