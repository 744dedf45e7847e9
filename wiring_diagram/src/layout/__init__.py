"""Wire Routing Module
=====================

This package computes wire geometry for a placed wiring diagram. It is
responsible for:

1. Obstacle indexing – padded boxes around every component a wire must avoid.
2. Interactive routing – the cheap orthogonal router run on every redraw.
3. Precise routing – the grid A* pathfinder run on demand.
4. Edge requests – per-wire spread metadata so parallel wires get own lanes.

Results are :class:`RoutedPath` values consumed by a renderer.
"""

from .route_plan import (
    BoundingBox,
    EdgeRequest,
    NodeBounds,
    PathCommand,
    RoutedPath,
    commands_to_svg,
)
from .obstacles import (
    build_bounding_boxes,
    find_horizontal_collision,
    find_vertical_collision,
)
from .path_geometry import build_rounded_path
from .orthogonal_router import OrthogonalRouter
from .grid_pathfinder import GridPathfinder, OccupancyGrid, astar_search, simplify_path
from .edge_requests import build_edge_requests
from .planner import RoutePlanner, route_diagram

__all__ = [
    # Orchestration
    "RoutePlanner",
    "route_diagram",
    "build_edge_requests",

    # Data structures
    "NodeBounds",
    "BoundingBox",
    "EdgeRequest",
    "PathCommand",
    "RoutedPath",
    "commands_to_svg",

    # Routers
    "OrthogonalRouter",
    "GridPathfinder",
    "OccupancyGrid",
    "astar_search",
    "simplify_path",

    # Geometry helpers
    "build_bounding_boxes",
    "find_horizontal_collision",
    "find_vertical_collision",
    "build_rounded_path",
]
