import math
import typing as t

import numpy as np

from rrtstar_planner.data_models import Point, Pose

STEP_TOLERANCE = 1e-6


def compute_bezier_point(p0: Pose, p1: Pose, p2: Pose, p3: Pose, t: float) -> Pose:
    """Point of the cubic Bezier curve with control points p0..p3 at parameter t, in the
    z = 0 plane. Returns exactly p0's position at t = 0 and p3's at t = 1."""
    u = 1.0 - t
    a = u**3
    b = 3.0 * u**2 * t
    c = 3.0 * u * t**2
    d = t**3
    x = a * p0.position.x + b * p1.position.x + c * p2.position.x + d * p3.position.x
    y = a * p0.position.y + b * p1.position.y + c * p2.position.y + d * p3.position.y
    return Pose(position=Point(x, y, 0.0))


def bezier_parameters(step: float = 0.05) -> t.List[float]:
    """0, step, 2 * step, ... up to and including 1.0. `step` must divide 1."""
    if step <= 0 or step > 1:
        raise ValueError("Bezier step must be in (0, 1], got {}".format(step))
    nb_segments = int(round(1.0 / step))
    if not math.isclose(nb_segments * step, 1.0, abs_tol=STEP_TOLERANCE):
        raise ValueError("Bezier step {} does not divide 1".format(step))
    return np.linspace(0.0, 1.0, nb_segments + 1).tolist()


def smooth_path(poses: t.Sequence[Pose], step: float = 0.05) -> t.List[Pose]:
    """
    Sliding-window cubic Bezier smoothing.

    Every window of four consecutive poses (offsets -1, 0, +1, +2 around index i) is used as
    the control polygon of a cubic Bezier curve sampled at `bezier_parameters(step)`. The
    first and last poses are kept verbatim. Paths shorter than four poses are returned
    unchanged. Consecutive windows overlap, so points near window boundaries repeat.
    """
    if len(poses) < 4:
        return list(poses)

    parameters = bezier_parameters(step)
    smoothed = [poses[0]]
    for i in range(1, len(poses) - 2):
        p0, p1, p2, p3 = poses[i - 1], poses[i], poses[i + 1], poses[i + 2]
        for t_ in parameters:
            smoothed.append(compute_bezier_point(p0, p1, p2, p3, t_))
    smoothed.append(poses[-1])
    return smoothed
