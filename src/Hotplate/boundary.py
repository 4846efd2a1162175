"""Fixed edge temperatures and interior seed for the hotplate."""

import numpy as np

from .datastructures import BoundaryTemperatures


def interior_seed(rows: int, cols: int, temps: BoundaryTemperatures) -> float:
    """Average edge temperature, weighted by how many cells each edge holds.

    The top edge excludes both corners, the left/right edges exclude the
    bottom row, and the bottom edge spans every column.
    """
    n_outer = 2 * rows + 2 * (cols - 2)
    outer_sum = (
        temps.top * (cols - 2)
        + temps.left * (rows - 1)
        + temps.bottom * cols
        + temps.right * (rows - 1)
    )
    return outer_sum / n_outer


def fill_boundary(u: np.ndarray, temps: BoundaryTemperatures):
    """Write the edge temperatures into ``u``.

    Precedence per cell: top (corners excluded), then left, then right
    (both excluding the bottom row), then bottom. The top corners therefore
    take the left/right values and both bottom corners take ``bottom``.
    """
    u[-1, :] = temps.bottom
    u[:-1, 0] = temps.left
    u[:-1, -1] = temps.right
    u[0, 1:-1] = temps.top


def initialize_hotplate(
    hotplate: np.ndarray, clone: np.ndarray, temps: BoundaryTemperatures
) -> float:
    """Initialise both buffers: edges from ``temps``, interior with the seed.

    Returns
    -------
    float
        The interior seed value.
    """
    rows, cols = hotplate.shape
    seed = interior_seed(rows, cols, temps)

    for u in (hotplate, clone):
        fill_boundary(u, temps)
        u[1:-1, 1:-1] = seed

    return seed
