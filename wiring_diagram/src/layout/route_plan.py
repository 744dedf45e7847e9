from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

"""Data structures for wire route planning."""


Point = Tuple[float, float]


@dataclass(frozen=True)
class NodeBounds:
    """Axis-aligned canvas rectangle of a placed component or junction."""

    id: str
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeBounds":
        return cls(
            id=str(data["id"]),
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass(frozen=True)
class BoundingBox:
    """Padded obstacle box. Edges are inclusive for intersection tests."""

    left: float
    right: float
    top: float
    bottom: float

    def intersects_vertical(self, x: float, y_start: float, y_end: float) -> bool:
        """Check if the vertical segment at ``x`` touches this box."""
        if x < self.left or x > self.right:
            return False
        if max(y_start, y_end) < self.top or min(y_start, y_end) > self.bottom:
            return False
        return True

    def intersects_horizontal(self, y: float, x_start: float, x_end: float) -> bool:
        """Check if the horizontal segment at ``y`` touches this box."""
        if y < self.top or y > self.bottom:
            return False
        if max(x_start, x_end) < self.left or min(x_start, x_end) > self.right:
            return False
        return True


@dataclass(frozen=True)
class EdgeRequest:
    """Routing request for a single wire.

    The index/total pairs only offset the routing corridor so that parallel
    wires do not overlap.
    """

    wire_id: str
    source_point: Point
    target_point: Point
    source_node_id: str
    target_node_id: str
    splice_index: int = 0
    splice_total: int = 1
    source_component_index: int = 0
    source_component_total: int = 1
    target_pin_index: int = 0
    target_pin_total: int = 1

    @property
    def is_splice(self) -> bool:
        return self.splice_total > 1


@dataclass(frozen=True)
class PathCommand:
    """One drawing command of a path description.

    ``op`` is ``"M"`` (move), ``"L"`` (line) or ``"Q"`` (quadratic curve,
    control point followed by end point).
    """

    op: str
    points: Tuple[Point, ...]


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def commands_to_svg(commands: List[PathCommand]) -> str:
    """Render path commands as an SVG ``d`` attribute, e.g. ``M 0 0 L 10 0``."""
    parts: List[str] = []
    for command in commands:
        coords = " ".join(
            f"{_format_number(x)} {_format_number(y)}" for x, y in command.points
        )
        parts.append(f"{command.op} {coords}")
    return " ".join(parts)


@dataclass
class RoutedPath:
    """Computed geometry for one wire, consumed by a renderer."""

    waypoints: List[Point]
    commands: List[PathCommand] = field(default_factory=list)
    label_anchor: Point = (0.0, 0.0)
    splice_dot: Optional[Point] = None
    collision_accepted: bool = False

    @property
    def start(self) -> Point:
        return self.waypoints[0]

    @property
    def end(self) -> Point:
        return self.waypoints[-1]

    def to_svg(self) -> str:
        """Serialize the path description as an SVG path string."""
        return commands_to_svg(self.commands)

    def to_dict(self, include_svg: bool = False) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "points": [list(point) for point in self.waypoints],
            "labelAnchor": list(self.label_anchor),
            "spliceDot": list(self.splice_dot) if self.splice_dot else None,
            "collisionAccepted": self.collision_accepted,
        }
        if include_svg:
            result["path"] = self.to_svg()
        return result
