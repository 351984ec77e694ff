import math
import random
import time
import typing as t

from rrtstar_planner.algorithms.ball_radius import (
    calculate_ball_radius,
    calculate_ball_radius_constant,
)
from rrtstar_planner.algorithms.connectivity import ConnectivityChecker
from rrtstar_planner.algorithms.rrt_tree import ROOT_PARENT, RRTTree
from rrtstar_planner.algorithms.sampler import GoalBiasedSampler
from rrtstar_planner.data_models import Position2D, RRTStarConfigModel
from rrtstar_planner.exceptions import NoPathFoundError, PlanningTimeoutError
from rrtstar_planner.utils import utils
from rrtstar_planner.world.cost_grid import CostGrid

DIMENSIONS = 2


class RRTStar:
    """
    RRT* planner on a `CostGrid`.

    Each call to `plan` builds a fresh tree rooted at the start, grows it for
    `config.max_iterations` vertices (root included), connects the goal to the cheapest
    reachable vertex and returns the dense list of waypoints from start to goal.

    With `rewire_mode="new_vertex"` only the newly inserted vertex is ever re-parented;
    existing vertices keep their parent even when the new vertex would offer them a
    cheaper route. `rewire_mode="full"` adds that second rewiring pass.
    """

    def __init__(
        self,
        grid: CostGrid,
        config: RRTStarConfigModel | None = None,
        rng: random.Random | None = None,
        logger: utils.PlannerLogger | None = None,
        plan_id: int = 0,
    ):
        self.grid = grid
        self.config = config if config is not None else RRTStarConfigModel()
        self.rng = rng if rng is not None else random.Random(self.config.random_seed)
        self.logger = logger if logger is not None else utils.PlannerLogger(printout=False)
        self.plan_id = plan_id
        self.checker = ConnectivityChecker(grid, self.config.interpolation_resolution)
        self.tree = RRTTree(capacity=self.config.max_iterations + 1)
        self.gamma = 0.0
        self.elapsed_time: t.Optional[float] = None
        self._t0 = 0.0
        self._deadline_t0 = 0.0

    def ball_radius(self) -> float:
        return calculate_ball_radius(
            self.gamma,
            len(self.tree),
            DIMENSIONS,
            self.config.max_connection_distance,
        )

    def plan(self, start: Position2D, goal: Position2D) -> t.List[Position2D]:
        self._t0 = time.time()
        self._deadline_t0 = time.monotonic()
        self.gamma = calculate_ball_radius_constant(
            self.grid, DIMENSIONS, self.config.ball_radius_constant_cap
        )
        self.tree.clear(capacity=self.config.max_iterations + 1)
        self.tree.add(start[0], start[1])

        sampler = GoalBiasedSampler(
            self.grid,
            goal,
            self.rng,
            goal_bias_interval=self.config.goal_bias_interval,
            goal_window=self.config.goal_bias_window,
        )
        for i in range(1, self.config.max_iterations):
            self._check_deadline()
            self.extend(sampler, i)

        goal_index = self.connect_goal(goal)
        path = self.extract_path(goal_index)
        self.elapsed_time = time.time() - self._t0
        return path

    def _check_deadline(self):
        if self.config.max_planning_time is None:
            return
        elapsed = time.monotonic() - self._deadline_t0
        if elapsed > self.config.max_planning_time:
            raise PlanningTimeoutError(elapsed, self.config.max_planning_time)

    def extend(self, sampler: GoalBiasedSampler, iteration: int) -> int | None:
        """Samples until a point connectible to its nearest vertex is found, inserts it and
        rewires it. Returns the new vertex index, or `None` once the retry budget is spent."""
        for _ in range(self.config.max_sample_retries):
            x, y = sampler.sample(iteration)
            nearest = self.tree.nearest(x, y)
            nearest_vertex = self.tree[nearest]
            if not self.checker.connectible(nearest_vertex.position, (x, y)):
                continue

            radius = self.ball_radius()
            neighbors = self.tree.within_radius(x, y, radius)
            new_index = self.tree.add(
                x, y, parent=nearest, cost=nearest_vertex.distance_to(x, y)
            )
            self.choose_parent(new_index, neighbors)
            if self.config.rewire_mode == "full":
                self.rewire_neighbors(new_index, neighbors)
            return new_index

        self.logger.info(
            "No connectible sample found for iteration {} after {} retries".format(
                iteration, self.config.max_sample_retries
            ),
            self.plan_id,
        )
        return None

    def choose_parent(self, index: int, neighbors: t.Iterable[int]) -> float:
        """Greedily re-parents vertex `index` to cheaper neighbors. Each improvement lowers
        the bound the following neighbors are compared against. Returns the final
        cost from the root."""
        vertex = self.tree[index]
        best_cost = self.tree.cost_from_root(index)
        for j in neighbors:
            neighbor = self.tree[j]
            distance = neighbor.distance_to(vertex.x, vertex.y)
            potential_cost = self.tree.cost_from_root(j) + distance
            if potential_cost < best_cost and self.checker.connectible(
                vertex.position, neighbor.position
            ):
                self.tree.set_parent(index, j, distance)
                best_cost = potential_cost
        return best_cost

    def rewire_neighbors(self, index: int, neighbors: t.Iterable[int]) -> t.List[int]:
        """Re-parents existing neighbors to vertex `index` when it offers them a strictly
        cheaper route. Returns the re-parented indices."""
        vertex = self.tree[index]
        new_cost = self.tree.cost_from_root(index)
        ancestors = set(self.tree.ancestry(index))
        rewired = []
        for j in neighbors:
            if j in ancestors:
                continue
            neighbor = self.tree[j]
            distance = vertex.distance_to(neighbor.x, neighbor.y)
            if new_cost + distance < self.tree.cost_from_root(
                j
            ) and self.checker.connectible(vertex.position, neighbor.position):
                self.tree.set_parent(j, index, distance)
                rewired.append(j)
        return rewired

    def connect_goal(self, goal: Position2D) -> int:
        """
        Attaches the goal to the vertex minimizing cost-from-root plus distance to the goal
        among the connectible vertices near it. The search radius starts at twice the
        current connection radius and grows after each failed attempt; the last attempt
        considers the whole tree.

        :raises NoPathFoundError: if no attempt finds a connectible vertex below the cost threshold
        """
        radius = 2 * self.ball_radius()
        attempts = self.config.goal_connection_attempts
        for attempt in range(1, attempts + 1):
            self._check_deadline()
            if attempt == attempts:
                candidates = list(range(len(self.tree)))
            else:
                candidates = self.tree.within_radius(goal[0], goal[1], radius)

            ranked = sorted(
                (
                    (
                        self.tree.cost_from_root(j) + self.tree[j].distance_to(*goal),
                        j,
                    )
                    for j in candidates
                ),
            )
            for potential_cost, j in ranked:
                if potential_cost >= self.config.goal_cost_threshold:
                    break
                if self.checker.connectible(goal, self.tree[j].position):
                    self.logger.info(
                        "Goal connected to vertex {} with cost {:.3f} (attempt {})".format(
                            j, potential_cost, attempt
                        ),
                        self.plan_id,
                    )
                    return self.tree.add(
                        goal[0],
                        goal[1],
                        parent=j,
                        cost=self.tree[j].distance_to(*goal),
                    )

            self.logger.info(
                "Goal connection attempt {} failed with {} candidates in radius {:.3f}".format(
                    attempt, len(candidates), radius
                ),
                self.plan_id,
            )
            radius = max(
                radius * self.config.goal_radius_growth,
                self.config.max_connection_distance,
            )

        raise NoPathFoundError(attempts)

    def extract_path(self, goal_index: int) -> t.List[Position2D]:
        """Walks the parent links from the goal to the root, inserting evenly spaced points
        along every edge (`config.path_density` points per unit). Ordered start to goal."""
        points: t.List[Position2D] = []
        for index in self.tree.ancestry(goal_index):
            vertex = self.tree[index]
            points.append(vertex.position)
            if vertex.parent == ROOT_PARENT:
                continue
            parent = self.tree[vertex.parent]
            steps = math.ceil(
                math.hypot(parent.x - vertex.x, parent.y - vertex.y)
                * self.config.path_density
            )
            for k in range(1, steps):
                points.append(
                    utils.interpolate(vertex.position, parent.position, k / steps)
                )
        points.reverse()
        return points
