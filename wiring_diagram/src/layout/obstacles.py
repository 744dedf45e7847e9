"""Padded obstacle boxes for wire routing."""

from typing import Iterable, List, Optional, Sequence

from .route_plan import BoundingBox, NodeBounds


def build_bounding_boxes(
    nodes: Iterable[NodeBounds],
    exclude_ids: Iterable[str],
    padding: float,
) -> List[BoundingBox]:
    """Build padded bounding boxes for every node not in ``exclude_ids``.

    Callers exclude the edge's own source and target nodes so a wire is never
    blocked by the components it connects.
    """
    excluded = set(exclude_ids)
    return [
        BoundingBox(
            left=node.x - padding,
            right=node.x + node.width + padding,
            top=node.y - padding,
            bottom=node.y + node.height + padding,
        )
        for node in nodes
        if node.id not in excluded
    ]


def find_vertical_collision(
    x: float, y_start: float, y_end: float, boxes: Sequence[BoundingBox]
) -> Optional[BoundingBox]:
    """Return the first box a vertical segment intersects, if any."""
    for box in boxes:
        if box.intersects_vertical(x, y_start, y_end):
            return box
    return None


def find_horizontal_collision(
    y: float, x_start: float, x_end: float, boxes: Sequence[BoundingBox]
) -> Optional[BoundingBox]:
    """Return the first box a horizontal segment intersects, if any."""
    for box in boxes:
        if box.intersects_horizontal(y, x_start, x_end):
            return box
    return None
