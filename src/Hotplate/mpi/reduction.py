"""Global max-change reduction over one-sided slots."""

from __future__ import annotations

import numpy as np
from mpi4py import MPI

from .symmetric import _allocate


class ConvergenceReducer:
    """Collects per-rank max changes on a coordinator and publishes the max.

    Each rank owns a slot in the coordinator's ``slots`` array and deposits its
    local value there with ``Put``. The coordinator reduces the slots into
    ``global_max``, which every rank then reads back with ``Get``.

    Parameters
    ----------
    comm : MPI.Comm
        Communicator spanning all PEs.
    root : int
        Coordinating rank (default 0).
    initial : float
        Sentinel the global value starts at; must exceed the tolerance.
    """

    def __init__(self, comm: MPI.Comm = MPI.COMM_WORLD, root: int = 0, initial: float = np.inf):
        self.comm = comm
        self.rank = comm.Get_rank()
        self.size = comm.Get_size()
        self.root = root

        self._slots_win, self.slots = _allocate((self.size,), comm)
        self._global_win, self._global = _allocate((1,), comm)
        self.slots.fill(0.0)
        self._global[0] = initial

    @property
    def global_max(self) -> float:
        return float(self._global[0])

    def deposit(self, local_max: float):
        """Put this rank's value into its slot on the coordinator (collective)."""
        value = np.array([local_max], dtype=np.float64)
        self._slots_win.Fence()
        self._slots_win.Put(value, self.root, target=(self.rank, 1, MPI.DOUBLE))
        self._slots_win.Fence()

    def reduce(self):
        """Coordinator only: global value = max over all slots."""
        if self.rank == self.root:
            self._global[0] = self.slots.max()

    def publish(self) -> float:
        """Every rank reads the coordinator's global value (collective)."""
        fetched = np.empty(1, dtype=np.float64)
        self._global_win.Fence()
        if self.rank != self.root:
            self._global_win.Get(fetched, self.root, target=(0, 1, MPI.DOUBLE))
        self._global_win.Fence()
        if self.rank != self.root:
            self._global[0] = fetched[0]
        return self.global_max

    def free(self):
        for win in (self._slots_win, self._global_win):
            if win != MPI.WIN_NULL:
                win.Free()
