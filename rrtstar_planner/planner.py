import random
import typing as t
import weakref

from rrtstar_planner.algorithms.rrt_star import RRTStar
from rrtstar_planner.algorithms.smoothing import smooth_path
from rrtstar_planner.data_models import (
    Header,
    Path,
    Point,
    Pose,
    PoseStamped,
    RRTStarConfigModel,
)
from rrtstar_planner.exceptions import PlannerNotConfiguredError
from rrtstar_planner.utils import utils
from rrtstar_planner.world.cost_grid import CostGrid


class PlannerNode(t.Protocol):
    """What the planner needs from its host node"""

    def declare_parameter(self, name: str, default: t.Any) -> t.Any: ...

    def get_parameter(self, name: str) -> t.Any: ...

    def now(self) -> float: ...


class RRTStarPlanner:
    """
    Global planner plugin wrapping `RRTStar`: validates frames, runs the planner, densifies
    and smooths the result and stamps it with the global frame.
    """

    def __init__(
        self,
        config: RRTStarConfigModel | None = None,
        logger: utils.PlannerLogger | None = None,
    ):
        self.config = config if config is not None else RRTStarConfigModel()
        self.logger = logger if logger is not None else utils.PlannerLogger()
        self.name = "RRTStar"
        self.node: PlannerNode | None = None
        self.grid: CostGrid | None = None
        self.global_frame = ""
        self.plan_count = 0
        self.last_rrt: RRTStar | None = None

    def configure(
        self,
        parent: "weakref.ReferenceType[PlannerNode]",
        name: str,
        grid: CostGrid,
        global_frame: str,
    ):
        node = parent()
        if node is None:
            self.logger.error(
                "Failed to lock parent node in configure; parent is expired."
            )
            return

        parameter = f"{name}.interpolation_resolution"
        node.declare_parameter(parameter, self.config.interpolation_resolution)
        self.config = RRTStarConfigModel(
            **{
                **self.config.model_dump(),
                "interpolation_resolution": node.get_parameter(parameter),
            }
        )

        self.node = node
        self.name = name
        self.grid = grid
        self.global_frame = global_frame
        if self.logger.ros2_logger is None and hasattr(node, "get_logger"):
            self.logger.ros2_logger = node.get_logger()  # type: ignore

    def cleanup(self):
        self.logger.info(f"CleaningUp plugin {self.name} of type RRTStarPlanner")

    def activate(self):
        self.logger.info(f"Activating plugin {self.name} of type RRTStarPlanner")

    def deactivate(self):
        self.logger.info(f"Deactivating plugin {self.name} of type RRTStarPlanner")

    @property
    def is_configured(self) -> bool:
        return self.node is not None and self.grid is not None

    def create_plan(
        self,
        start: PoseStamped,
        goal: PoseStamped,
        rng: random.Random | None = None,
    ) -> Path:
        """
        Plans from `start` to `goal`. Both must be expressed in the global frame, otherwise
        an empty path is returned.

        :raises PlannerNotConfiguredError: if `configure` did not complete
        :raises NoPathFoundError: if the goal cannot be connected to the tree
        :raises PlanningTimeoutError: if `max_planning_time` is exceeded
        """
        if self.node is None or self.grid is None:
            raise PlannerNotConfiguredError(
                "Planner {} must be configured before planning".format(self.name)
            )

        self.plan_count += 1
        global_path = Path()

        if start.header.frame_id != self.global_frame:
            self.logger.error(
                f"Planner will only accept start position from {self.global_frame} frame",
                self.plan_count,
            )
            return global_path

        if goal.header.frame_id != self.global_frame:
            self.logger.error(
                f"Planner will only accept goal position from {self.global_frame} frame",
                self.plan_count,
            )
            return global_path

        global_path.header = Header(stamp=self.node.now(), frame_id=self.global_frame)

        rrt = RRTStar(
            grid=self.grid,
            config=self.config,
            rng=rng if rng is not None else random.Random(self.config.random_seed),
            logger=self.logger,
            plan_id=self.plan_count,
        )
        self.last_rrt = rrt
        try:
            points = rrt.plan(
                (start.pose.position.x, start.pose.position.y),
                (goal.pose.position.x, goal.pose.position.y),
            )
        except Exception as e:
            self.logger.error(f"Planning failed: {e}", self.plan_count)
            raise

        poses = [Pose(position=Point(x, y, 0.0)) for x, y in points]
        poses.append(
            Pose(
                position=Point(goal.pose.position.x, goal.pose.position.y, 0.0),
                orientation=goal.pose.orientation,
            )
        )
        global_path.poses = smooth_path(poses, self.config.smoothing_step)

        self.logger.info(
            "Plan found with {} vertices and {} poses in {:.3f}s".format(
                len(rrt.tree), len(global_path.poses), rrt.elapsed_time or 0.0
            ),
            self.plan_count,
        )
        return global_path
