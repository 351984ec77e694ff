import math

import numpy as np

from rrtstar_planner.data_models import Position2D
from rrtstar_planner.world.cost_grid import FREE_SPACE, CostGrid


class ConnectivityChecker:
    """
    Discretized straight-line collision test on a `CostGrid`.

    The segment is walked in `ceil(length / interpolation_resolution)` equal steps, checking
    the cell under each step's start point. Endpoints are ordered lexicographically before
    walking so that the result does not depend on the argument order.
    """

    def __init__(self, grid: CostGrid, interpolation_resolution: float):
        if interpolation_resolution <= 0:
            raise ValueError(
                "interpolation_resolution must be positive, got {}".format(
                    interpolation_resolution
                )
            )
        self.grid = grid
        self.interpolation_resolution = interpolation_resolution

    def nb_steps(self, a: Position2D, b: Position2D) -> int:
        return math.ceil(math.hypot(b[0] - a[0], b[1] - a[1]) / self.interpolation_resolution)

    def connectible(self, a: Position2D, b: Position2D) -> bool:
        start, end = (a, b) if (a[0], a[1]) <= (b[0], b[1]) else (b, a)
        steps = self.nb_steps(start, end)
        if steps == 0:
            return True

        fractions = np.arange(steps, dtype=np.float64) / steps
        xs = start[0] + fractions * (end[0] - start[0])
        ys = start[1] + fractions * (end[1] - start[1])
        mxs, mys, in_bounds = self.grid.world_to_map_array(xs, ys)
        if not np.all(in_bounds):
            return False
        return bool(np.all(self.grid.costs[mxs, mys] == FREE_SPACE))
