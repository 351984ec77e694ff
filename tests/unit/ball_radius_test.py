import math

from rrtstar_planner.algorithms.ball_radius import (
    calculate_ball_radius,
    calculate_ball_radius_constant,
    unit_ball_volume,
)
from rrtstar_planner.world.cost_grid import LETHAL_OBSTACLE, CostGrid


def test_unit_ball_volume():
    assert math.isclose(unit_ball_volume(2), math.pi)
    assert math.isclose(unit_ball_volume(3), 4.0 / 3.0 * math.pi)


def test_radius_constant_small_map():
    # 1x1 free area: 3 * sqrt(1 / pi)
    grid = CostGrid(resolution=0.1, size_x=10, size_y=10)
    gamma = calculate_ball_radius_constant(grid)
    assert math.isclose(gamma, 3.0 * math.sqrt(1.0 / math.pi))


def test_radius_constant_counts_free_cells_only():
    grid = CostGrid(resolution=0.1, size_x=10, size_y=10)
    for x in range(10):
        for y in range(5):
            grid.set_cost(x, y, LETHAL_OBSTACLE)
    gamma = calculate_ball_radius_constant(grid)
    assert math.isclose(gamma, 3.0 * math.sqrt(0.5 / math.pi))


def test_radius_constant_is_capped():
    grid = CostGrid(resolution=0.1, size_x=100, size_y=100)
    # Uncapped value would be 3 * sqrt(100 / pi) ~ 16.9
    assert calculate_ball_radius_constant(grid) == 10.0
    assert calculate_ball_radius_constant(grid, max_constant=20.0) > 16.0


def test_radius_constant_without_free_space():
    grid = CostGrid(resolution=0.1, size_x=10, size_y=10)
    grid.costs[:, :] = LETHAL_OBSTACLE
    assert calculate_ball_radius_constant(grid) == 0.0


def test_radius_degenerate_tree_sizes():
    assert calculate_ball_radius(10.0, 0) == 0.0
    assert calculate_ball_radius(10.0, 1) == 0.0
    assert calculate_ball_radius(0.0, 50) == 0.0


def test_radius_value_and_cap():
    expected = math.sqrt(10.0 * math.log(100) / 100)
    assert math.isclose(calculate_ball_radius(10.0, 100, 2, 2.0), expected)
    assert calculate_ball_radius(10.0, 2, 2, 0.5) == 0.5


def test_radius_is_non_increasing():
    previous = calculate_ball_radius(10.0, 3, 2, math.inf)
    for n in range(4, 3000):
        radius = calculate_ball_radius(10.0, n, 2, math.inf)
        assert radius <= previous
        previous = radius
