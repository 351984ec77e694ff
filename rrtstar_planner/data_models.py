import math
import typing as t

import yaml
from pydantic import BaseModel, Field, field_validator


class Point(t.NamedTuple):
    x: float
    y: float
    z: float = 0.0


class Quaternion(t.NamedTuple):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


class Pose(t.NamedTuple):
    position: Point
    orientation: Quaternion = Quaternion()


Position2D = t.Tuple[float, float]
GridCellModel = t.Tuple[int, int]


class Header(BaseModel):
    stamp: float = 0.0
    frame_id: str = ""


class PoseStamped(BaseModel):
    header: Header = Field(default_factory=Header)
    pose: Pose


class Path(BaseModel):
    header: Header = Field(default_factory=Header)
    poses: t.List[Pose] = Field(default_factory=list)

    def __len__(self):
        return len(self.poses)


def make_pose_stamped(
    x: float, y: float, frame_id: str, orientation: Quaternion = Quaternion()
) -> PoseStamped:
    return PoseStamped(
        header=Header(frame_id=frame_id),
        pose=Pose(position=Point(x, y, 0.0), orientation=orientation),
    )


# YAML MODELS


class RRTStarConfigModel(BaseModel):
    interpolation_resolution: float = Field(default=0.01, gt=0)
    max_iterations: int = Field(default=1000, ge=1)
    max_connection_distance: float = Field(default=2.0, gt=0)
    goal_bias_interval: int = Field(default=5, ge=1)
    goal_bias_window: float = Field(default=5.0, ge=0)
    ball_radius_constant_cap: float = Field(default=10.0, gt=0)
    goal_cost_threshold: float = Field(default=10000.0, gt=0)
    path_density: float = Field(default=10.0, gt=0)
    smoothing_step: float = Field(default=0.05, gt=0, le=1)
    max_sample_retries: int = Field(default=100, ge=1)
    goal_connection_attempts: int = Field(default=5, ge=1)
    goal_radius_growth: float = Field(default=2.0, ge=1)
    rewire_mode: t.Literal["new_vertex", "full"] = "new_vertex"
    random_seed: t.Optional[int] = None
    max_planning_time: t.Optional[float] = Field(default=None, ge=0)

    @field_validator("smoothing_step")
    @classmethod
    def smoothing_step_divides_one(cls, step: float) -> float:
        # The smoother samples t = 0, step, ..., 1 on a uniform grid
        if not math.isclose(round(1.0 / step) * step, 1.0, abs_tol=1e-6):
            raise ValueError("smoothing_step must divide 1, got {}".format(step))
        return step


class MapYamlConfigModel(BaseModel):
    image: str
    mode: str = "trinary"
    resolution: float
    origin: t.List[float]
    negate: int | bool
    occupied_thresh: float
    free_thresh: float


def planner_config_from_yaml(file_path: str) -> RRTStarConfigModel:
    with open(file_path, "r") as stream:
        config = yaml.safe_load(stream)
    return RRTStarConfigModel(**(config or {}))
