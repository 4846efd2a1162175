"""Tests for relaxation kernels."""

import numpy as np
import pytest
from Hotplate import BoundaryTemperatures, NumPyKernel, NumbaKernel, initialize_hotplate


def setup_plate(rows=12, cols=9):
    temps = BoundaryTemperatures(top=100.0, left=25.0, right=50.0, bottom=0.0)
    u1, u2 = np.zeros((rows, cols)), np.zeros((rows, cols))
    initialize_hotplate(u1, u2, temps)
    return u1, u2


def run_iterations(kernel, u1, u2, n_iter):
    """Run n_iter full passes, return final field and max-change history."""
    history = []
    for i in range(n_iter):
        if i % 2 == 0:
            history.append(kernel.step(u1, u2, 1, u1.shape[0] - 1))
        else:
            history.append(kernel.step(u2, u1, 1, u1.shape[0] - 1))
    return (u1 if n_iter % 2 == 0 else u2), history


@pytest.fixture(scope="module")
def numba_kernel():
    kernel = NumbaKernel(specified_numba_threads=1)
    kernel.warmup()
    return kernel


def test_kernels_produce_identical_results(numba_kernel):
    """NumPy and Numba kernels should produce identical results."""
    u1, u2 = setup_plate()
    u_numpy, h_numpy = run_iterations(NumPyKernel(), u1.copy(), u2.copy(), 25)
    u_numba, h_numba = run_iterations(numba_kernel, u1.copy(), u2.copy(), 25)

    assert np.array_equal(u_numpy, u_numba)
    assert h_numpy == h_numba


def test_single_cell_update():
    """One interior cell: average of four neighbours, change from old value."""
    current = np.zeros((3, 3))
    current[0, 1] = 4.0
    current[1, 1] = 3.0
    working = current.copy()

    diff = NumPyKernel().step(current, working, 1, 2)

    assert working[1, 1] == 1.0
    assert diff == 2.0


@pytest.mark.parametrize("kernel_cls", [NumPyKernel, NumbaKernel])
def test_only_owned_rows_written(kernel_cls):
    """Rows outside [start, stop) and boundary columns stay untouched."""
    current, _ = setup_plate()
    working = np.full_like(current, -1.0)

    kernel_cls().step(current, working, 4, 7)

    assert np.all(working[:4] == -1.0)
    assert np.all(working[7:] == -1.0)
    assert np.all(working[4:7, 0] == -1.0)
    assert np.all(working[4:7, -1] == -1.0)
    assert np.all(working[4:7, 1:-1] != -1.0)


@pytest.mark.parametrize("kernel_cls", [NumPyKernel, NumbaKernel])
def test_empty_range(kernel_cls):
    current, working = setup_plate()
    before = working.copy()

    assert kernel_cls().step(current, working, 5, 5) == 0.0
    assert np.array_equal(working, before)


def test_max_diff_matches_manual():
    current, working = setup_plate(6, 6)
    current[1:-1, 1:-1] = np.random.default_rng(0).random((4, 4))

    diff = NumPyKernel().step(current, working, 1, 5)

    expected = 0.0
    for r in range(1, 5):
        for c in range(1, 5):
            new = (current[r - 1, c] + current[r, c - 1] + current[r + 1, c] + current[r, c + 1]) / 4
            expected = max(expected, abs(current[r, c] - new))
    assert diff == pytest.approx(expected)


def test_boundary_preservation():
    """Kernels should not modify boundary conditions."""
    u1, u2 = setup_plate()
    boundaries = [u1[0].copy(), u1[-1].copy(), u1[:, 0].copy(), u1[:, -1].copy()]

    u, _ = run_iterations(NumPyKernel(), u1, u2, 10)

    assert np.array_equal(u[0], boundaries[0])
    assert np.array_equal(u[-1], boundaries[1])
    assert np.array_equal(u[:, 0], boundaries[2])
    assert np.array_equal(u[:, -1], boundaries[3])


def test_max_change_non_increasing():
    """Jacobi on fixed boundaries never increases the max change."""
    u1, u2 = setup_plate(20, 20)
    _, history = run_iterations(NumPyKernel(), u1, u2, 200)

    assert all(b <= a + 1e-12 for a, b in zip(history, history[1:]))
    assert history[-1] < history[0]
