import random

from rrtstar_planner.algorithms.sampler import GoalBiasedSampler
from rrtstar_planner.world.cost_grid import CostGrid


class TestGoalBiasedSampler:
    def setup_method(self):
        self.grid = CostGrid(resolution=0.5, size_x=100, size_y=40, origin_x=-10.0)
        self.goal = (30.0, 15.0)

    def make_sampler(self, seed: int) -> GoalBiasedSampler:
        return GoalBiasedSampler(
            self.grid, self.goal, random.Random(seed), goal_bias_interval=5, goal_window=2.0
        )

    def test_uniform_samples_stay_in_bounds(self):
        sampler = self.make_sampler(0)
        for i in range(1, 500):
            if sampler.is_goal_biased(i):
                continue
            x, y = sampler.sample(i)
            assert -10.0 <= x <= 40.0
            assert 0.0 <= y <= 20.0

    def test_goal_biased_cadence(self):
        sampler = self.make_sampler(0)
        biased = [i for i in range(1, 21) if sampler.is_goal_biased(i)]
        assert biased == [5, 10, 15, 20]
        for i in biased:
            x, y = sampler.sample(i)
            assert abs(x - self.goal[0]) <= 2.0
            assert abs(y - self.goal[1]) <= 2.0

    def test_seeded_samples_are_reproducible(self):
        a = self.make_sampler(42)
        b = self.make_sampler(42)
        assert [a.sample(i) for i in range(1, 50)] == [b.sample(i) for i in range(1, 50)]
