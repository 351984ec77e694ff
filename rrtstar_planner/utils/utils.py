import json
import math
import typing as t
from collections import deque
from datetime import datetime

from rrtstar_planner.data_models import Position2D


class RosStyleLogger(t.Protocol):
    def info(self, message: str) -> t.Any: ...

    def error(self, message: str) -> t.Any: ...


def timestamp_string():
    return datetime.now().strftime("%Y-%m-%d-%Hh%Mm%Ss_%f")


class PlannerLog:
    def __init__(self, message: str, plan_id: int, level: str = "info", timestamp=None):
        self.message = message
        self.plan_id = plan_id
        self.level = level
        self.timestamp = timestamp if timestamp is not None else timestamp_string()

    def __str__(self):
        return "At plan {}: '{}'".format(self.plan_id, self.message)

    def toJSON(self):
        return json.dumps(self, default=lambda o: o.__dict__, sort_keys=True, indent=4)


class PlannerLogger(deque[PlannerLog]):
    """Keeps the most recent `max_records` logs; older ones are dropped as new ones arrive"""

    def __init__(
        self,
        printout: bool = True,
        ros2_logger: RosStyleLogger | None = None,
        max_records: int = 1000,
    ):
        if max_records < 1:
            raise ValueError("max_records must be at least 1, got {}".format(max_records))
        super(PlannerLogger, self).__init__(maxlen=max_records)
        self.printout = printout
        self.ros2_logger = ros2_logger

    def append(self, log: PlannerLog):
        super(PlannerLogger, self).append(log)
        if self.printout:
            print(log)
        if self.ros2_logger:
            text = f"[rrtstar]:[plan={log.plan_id}]: {log.message}"
            if log.level == "error":
                self.ros2_logger.error(text)
            else:
                self.ros2_logger.info(text)

    def info(self, message: str, plan_id: int = 0):
        self.append(PlannerLog(message, plan_id))

    def error(self, message: str, plan_id: int = 0):
        self.append(PlannerLog(message, plan_id, level="error"))

    def messages(self, level: str | None = None) -> t.List[str]:
        return [x.message for x in self if level is None or x.level == level]


def euclidean_distance(a: t.Sequence[float], b: t.Sequence[float]):
    return math.sqrt((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2)


def interpolate(a: Position2D, b: Position2D, fraction: float) -> Position2D:
    return (a[0] + fraction * (b[0] - a[0]), a[1] + fraction * (b[1] - a[1]))
