import math

from rrtstar_planner.world.cost_grid import CostGrid


def unit_ball_volume(dimensions: int) -> float:
    return math.pi ** (dimensions / 2.0) / math.gamma(dimensions / 2.0 + 1.0)


def calculate_ball_radius_constant(
    grid: CostGrid, dimensions: int = 2, max_constant: float = 10.0
) -> float:
    """
    Computes the RRT* connection constant gamma = 2 * (1 + 1/d) * (A / V_d) ** (1/d), where
    A is the free area of the grid and V_d the volume of the d-dimensional unit ball.

    The result is capped at `max_constant`, which bounds the neighborhood (and so the
    rewiring work) on large open maps.
    """
    cell_area = grid.resolution * grid.resolution
    free_volume = cell_area * grid.count_free_cells()
    gamma = (
        2.0
        * (1.0 + 1.0 / dimensions)
        * (free_volume / unit_ball_volume(dimensions)) ** (1.0 / dimensions)
    )
    return min(gamma, max_constant)


def calculate_ball_radius(
    gamma: float,
    tree_size: int,
    dimensions: int = 2,
    max_connection_distance: float = 2.0,
) -> float:
    """Shrinking RRT* connection radius, min((gamma * ln(n) / n) ** (1/d), max distance)."""
    if tree_size <= 1 or gamma <= 0:
        return 0.0
    term = (gamma * math.log(tree_size)) / tree_size
    return min(term ** (1.0 / dimensions), max_connection_distance)
