"""Tests for boundary and interior initialisation."""

import numpy as np
import pytest
from Hotplate import BoundaryTemperatures, initialize_hotplate, interior_seed


def expected_edge(row, col, rows, cols, t):
    """Edge value by precedence: top, left, right, bottom."""
    if row == 0 and col not in (0, cols - 1):
        return t.top
    elif col == 0 and row != rows - 1:
        return t.left
    elif col == cols - 1 and row != rows - 1:
        return t.right
    elif row == rows - 1:
        return t.bottom
    return None


TEMPS = BoundaryTemperatures(top=10.0, left=20.0, right=30.0, bottom=40.0)


class TestInteriorSeed:
    def test_weighted_average(self):
        # (10*3 + 20*3 + 40*5 + 30*3) / (2*4 + 2*3)
        assert interior_seed(4, 5, TEMPS) == pytest.approx(380.0 / 14.0)

    def test_hot_top_5x5(self):
        temps = BoundaryTemperatures(top=100, left=0, right=0, bottom=0)
        assert interior_seed(5, 5, temps) == pytest.approx(18.75)

    def test_uniform_edges(self):
        """Equal edge temperatures seed the interior with that temperature."""
        temps = BoundaryTemperatures(top=7.0, left=7.0, right=7.0, bottom=7.0)
        assert interior_seed(9, 13, temps) == pytest.approx(7.0)


class TestInitializeHotplate:
    @pytest.mark.parametrize("rows,cols", [(3, 3), (4, 5), (10, 7), (6, 20)])
    def test_every_cell(self, rows, cols):
        """Boundary cells carry their edge value and interior cells the seed."""
        u = np.full((rows, cols), np.nan)
        clone = np.full((rows, cols), np.nan)
        seed = initialize_hotplate(u, clone, TEMPS)

        assert seed == pytest.approx(interior_seed(rows, cols, TEMPS))
        for grid in (u, clone):
            for r in range(rows):
                for c in range(cols):
                    edge = expected_edge(r, c, rows, cols, TEMPS)
                    assert grid[r, c] == (seed if edge is None else edge)

    def test_corner_precedence(self):
        """Top corners take left/right, bottom corners take bottom."""
        u, clone = np.zeros((6, 6)), np.zeros((6, 6))
        initialize_hotplate(u, clone, TEMPS)

        assert u[0, 0] == TEMPS.left
        assert u[0, -1] == TEMPS.right
        assert u[-1, 0] == TEMPS.bottom
        assert u[-1, -1] == TEMPS.bottom

    def test_hot_top_corners_stay_cold(self):
        temps = BoundaryTemperatures(top=100, left=0, right=0, bottom=0)
        u, clone = np.zeros((5, 5)), np.zeros((5, 5))
        initialize_hotplate(u, clone, temps)

        assert u[0, 0] == 0.0
        assert u[0, 4] == 0.0
        assert np.all(u[0, 1:-1] == 100.0)

    def test_buffers_identical(self):
        u, clone = np.zeros((8, 9)), np.ones((8, 9))
        initialize_hotplate(u, clone, TEMPS)
        assert np.array_equal(u, clone)
