import heapq
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from wiring_diagram.src.common.constants import (
    DEFAULT_CONFIG,
    EMPTY_CANVAS_BOUNDS,
    RoutingConfig,
)
from wiring_diagram.src.common.diagnostics import DiagramDiagnostics

from .path_geometry import build_rounded_path, midpoint, straight_path
from .route_plan import NodeBounds, Point, RoutedPath

"""Grid-based A* router for on-demand precise routing."""


Cell = Tuple[int, int]  # (col, row)

_NEIGHBOR_STEPS: Tuple[Cell, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


def calculate_canvas_bounds(
    nodes: Sequence[NodeBounds],
) -> Tuple[float, float, float, float]:
    """Bounding box ``(min_x, min_y, max_x, max_y)`` of all nodes."""
    if not nodes:
        return EMPTY_CANVAS_BOUNDS

    min_x = min(node.x for node in nodes)
    min_y = min(node.y for node in nodes)
    max_x = max(node.right for node in nodes)
    max_y = max(node.bottom for node in nodes)
    return (min_x, min_y, max_x, max_y)


def simplify_path(path: Sequence[Cell]) -> List[Cell]:
    """Keep the endpoints and every cell where the direction changes."""
    if len(path) <= 2:
        return list(path)

    simplified = [path[0]]
    for i in range(1, len(path) - 1):
        prev, curr, nxt = path[i - 1], path[i], path[i + 1]
        incoming = (curr[0] - prev[0], curr[1] - prev[1])
        outgoing = (nxt[0] - curr[0], nxt[1] - curr[1])
        if incoming != outgoing:
            simplified.append(curr)
    simplified.append(path[-1])
    return simplified


def astar_search(walkable: np.ndarray, start: Cell, goal: Cell) -> List[Cell]:
    """4-directional A* over a ``(rows, cols)`` walkability mask.

    Returns the cell path from ``start`` to ``goal`` inclusive, or an empty
    list when the goal is unreachable. Ties are broken by insertion order so
    results are deterministic.
    """
    rows, cols = walkable.shape

    def heuristic(cell: Cell) -> int:
        return abs(cell[0] - goal[0]) + abs(cell[1] - goal[1])

    counter = 0
    open_heap: List[Tuple[int, int, Cell]] = [(heuristic(start), counter, start)]
    came_from: Dict[Cell, Cell] = {}
    g_score: Dict[Cell, int] = {start: 0}
    closed = set()

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current == goal:
            return _reconstruct(came_from, current)
        if current in closed:
            continue
        closed.add(current)

        for dx, dy in _NEIGHBOR_STEPS:
            col, row = current[0] + dx, current[1] + dy
            if not (0 <= col < cols and 0 <= row < rows):
                continue
            if not walkable[row, col]:
                continue
            neighbor = (col, row)
            if neighbor in closed:
                continue
            tentative = g_score[current] + 1
            if tentative < g_score.get(neighbor, math.inf):
                g_score[neighbor] = tentative
                came_from[neighbor] = current
                counter += 1
                heapq.heappush(
                    open_heap, (tentative + heuristic(neighbor), counter, neighbor)
                )

    return []


def _reconstruct(came_from: Dict[Cell, Cell], current: Cell) -> List[Cell]:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


class OccupancyGrid:
    """Coarse walkable/blocked grid laid over the padded canvas."""

    def __init__(
        self,
        bounds: Tuple[float, float, float, float],
        config: RoutingConfig = DEFAULT_CONFIG,
    ):
        self.config = config
        min_x, min_y, max_x, max_y = bounds
        self.origin_x = min_x - config.canvas_padding
        self.origin_y = min_y - config.canvas_padding
        cell = config.grid_cell_size

        width = math.ceil((max_x - min_x + config.canvas_padding * 2) / cell)
        height = math.ceil((max_y - min_y + config.canvas_padding * 2) / cell)
        # Cap the grid so search cost is bounded regardless of canvas size
        self.width = max(1, min(width, config.max_grid_cells))
        self.height = max(1, min(height, config.max_grid_cells))

        self.walkable = np.ones((self.height, self.width), dtype=bool)

    def block_node(self, node: NodeBounds, padding: float) -> None:
        """Mark every cell under the padded node box as blocked."""
        cell = self.config.grid_cell_size
        start_col = max(0, math.floor((node.x - padding - self.origin_x) / cell))
        end_col = min(
            self.width - 1, math.ceil((node.right + padding - self.origin_x) / cell)
        )
        start_row = max(0, math.floor((node.y - padding - self.origin_y) / cell))
        end_row = min(
            self.height - 1,
            math.ceil((node.bottom + padding - self.origin_y) / cell),
        )
        if start_col > end_col or start_row > end_row:
            return
        self.walkable[start_row : end_row + 1, start_col : end_col + 1] = False

    def to_cell(self, point: Point) -> Cell:
        """Snap a canvas point to its cell, clamped into the grid."""
        cell = self.config.grid_cell_size
        col = math.floor((point[0] - self.origin_x) / cell)
        row = math.floor((point[1] - self.origin_y) / cell)
        return (
            max(0, min(self.width - 1, col)),
            max(0, min(self.height - 1, row)),
        )

    def to_canvas(self, cell: Cell) -> Point:
        """Canvas coordinates of a cell centre."""
        size = self.config.grid_cell_size
        return (
            cell[0] * size + self.origin_x + size / 2,
            cell[1] * size + self.origin_y + size / 2,
        )

    def set_walkable(self, cell: Cell, walkable: bool = True) -> None:
        self.walkable[cell[1], cell[0]] = walkable


class GridPathfinder:
    """Obstacle-avoiding shortest-path router over an occupancy grid.

    Substantially more expensive than :class:`OrthogonalRouter`; intended for
    on-demand "precise routing" requests rather than every frame.
    """

    def __init__(
        self,
        config: RoutingConfig = DEFAULT_CONFIG,
        diagnostics: Optional[DiagramDiagnostics] = None,
    ):
        self.config = config
        self.diagnostics = diagnostics

    def build_grid(
        self,
        nodes: Sequence[NodeBounds],
        source_node_id: Optional[str],
        target_node_id: Optional[str],
    ) -> OccupancyGrid:
        grid = OccupancyGrid(calculate_canvas_bounds(nodes), self.config)
        for node in nodes:
            # The wire's own endpoints stay walkable
            if node.id in (source_node_id, target_node_id):
                continue
            grid.block_node(node, self.config.grid_node_padding)
        return grid

    def find_route(
        self,
        source: Point,
        target: Point,
        nodes: Sequence[NodeBounds],
        source_node_id: Optional[str] = None,
        target_node_id: Optional[str] = None,
        wire_id: Optional[str] = None,
    ) -> RoutedPath:
        """Find an obstacle-avoiding route; never returns an empty path."""
        source = (float(source[0]), float(source[1]))
        target = (float(target[0]), float(target[1]))

        grid = self.build_grid(nodes, source_node_id, target_node_id)
        start_cell = grid.to_cell(source)
        goal_cell = grid.to_cell(target)
        grid.set_walkable(start_cell)
        grid.set_walkable(goal_cell)

        cell_path = astar_search(grid.walkable, start_cell, goal_cell)
        if not cell_path:
            if self.diagnostics is not None:
                self.diagnostics.debug(
                    "No grid path found; using straight-line fallback",
                    stage="routing",
                    entity_id=wire_id,
                )
            return self._fallback(source, target)

        canvas_path = [grid.to_canvas(cell) for cell in simplify_path(cell_path)]
        if len(canvas_path) < 2:
            canvas_path = [source, target]
        else:
            canvas_path[0] = source
            canvas_path[-1] = target

        return RoutedPath(
            waypoints=canvas_path,
            commands=build_rounded_path(
                canvas_path,
                self.config.grid_corner_radius,
                min_radius=self.config.min_rounded_radius,
            ),
            label_anchor=canvas_path[len(canvas_path) // 2],
        )

    def route_request(self, request, nodes: Sequence[NodeBounds]) -> RoutedPath:
        return self.find_route(
            request.source_point,
            request.target_point,
            nodes,
            request.source_node_id,
            request.target_node_id,
            wire_id=request.wire_id,
        )

    @staticmethod
    def _fallback(source: Point, target: Point) -> RoutedPath:
        return RoutedPath(
            waypoints=[source, target],
            commands=straight_path(source, target),
            label_anchor=midpoint(source, target),
        )
