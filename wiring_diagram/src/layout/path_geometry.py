"""Corner rounding shared by both routers."""

import math
from typing import List, Sequence

from .route_plan import PathCommand, Point


def build_rounded_path(
    points: Sequence[Point], radius: float, min_radius: float = 0.0
) -> List[PathCommand]:
    """Convert a waypoint polyline into line/quadratic-curve commands.

    At each interior waypoint the corner radius is capped at half the shorter
    adjacent segment so neighbouring corners never overlap. Corners with a
    zero-length neighbour, or whose radius falls below ``min_radius``, are
    drawn as a plain line to the waypoint.
    """
    if len(points) < 2:
        return []

    commands: List[PathCommand] = [PathCommand("M", (tuple(points[0]),))]

    for i in range(1, len(points) - 1):
        prev, curr, nxt = points[i - 1], points[i], points[i + 1]

        dx1 = curr[0] - prev[0]
        dy1 = curr[1] - prev[1]
        dx2 = nxt[0] - curr[0]
        dy2 = nxt[1] - curr[1]
        len1 = math.hypot(dx1, dy1)
        len2 = math.hypot(dx2, dy2)

        if len1 == 0 or len2 == 0:
            commands.append(PathCommand("L", (tuple(curr),)))
            continue

        r = min(radius, min(len1, len2) / 2)
        if r <= 0 or r < min_radius:
            commands.append(PathCommand("L", (tuple(curr),)))
            continue

        corner_start = (curr[0] - dx1 / len1 * r, curr[1] - dy1 / len1 * r)
        corner_end = (curr[0] + dx2 / len2 * r, curr[1] + dy2 / len2 * r)
        commands.append(PathCommand("L", (corner_start,)))
        commands.append(PathCommand("Q", (tuple(curr), corner_end)))

    commands.append(PathCommand("L", (tuple(points[-1]),)))
    return commands


def straight_path(source: Point, target: Point) -> List[PathCommand]:
    """Two-point path with no corners."""
    return [PathCommand("M", (tuple(source),)), PathCommand("L", (tuple(target),))]


def midpoint(source: Point, target: Point) -> Point:
    return ((source[0] + target[0]) / 2, (source[1] + target[1]) / 2)
