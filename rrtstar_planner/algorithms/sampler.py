import random

from rrtstar_planner.data_models import Position2D
from rrtstar_planner.world.cost_grid import CostGrid


class GoalBiasedSampler:
    """Uniform sampler over the grid bounds that samples around the goal every
    `goal_bias_interval` iterations instead."""

    def __init__(
        self,
        grid: CostGrid,
        goal: Position2D,
        rng: random.Random,
        goal_bias_interval: int = 5,
        goal_window: float = 5.0,
    ):
        self.rng = rng
        self.goal = goal
        self.goal_bias_interval = goal_bias_interval
        self.goal_window = goal_window
        self.min_x, self.min_y, self.max_x, self.max_y = grid.get_bounds()

    def is_goal_biased(self, iteration: int) -> bool:
        return iteration % self.goal_bias_interval == 0

    def sample(self, iteration: int) -> Position2D:
        if self.is_goal_biased(iteration):
            return (
                self.rng.uniform(
                    self.goal[0] - self.goal_window, self.goal[0] + self.goal_window
                ),
                self.rng.uniform(
                    self.goal[1] - self.goal_window, self.goal[1] + self.goal_window
                ),
            )
        return (
            self.rng.uniform(self.min_x, self.max_x),
            self.rng.uniform(self.min_y, self.max_y),
        )
