"""Debug visualization for computed wire routes.

Renders component boxes, their padded obstacle boxes and every routed wire
into a PNG so router behaviour can be inspected without the diagram UI.

Usage:
    routes = route_diagram(diagram, nodes, anchors)
    RouteVisualizer(nodes).render(routes, "output/routes.png")
"""

from pathlib import Path
from typing import Dict, Optional, Sequence, Union

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle, Rectangle

from wiring_diagram.src.common.constants import DEFAULT_CONFIG, RoutingConfig

from .grid_pathfinder import calculate_canvas_bounds
from .obstacles import build_bounding_boxes
from .route_plan import NodeBounds, RoutedPath

# Points sampled along each quadratic corner
_CURVE_SAMPLES = 8


def flatten_path(path: RoutedPath) -> np.ndarray:
    """Sample a routed path's commands into an ``(n, 2)`` polyline."""
    points = []
    current = None
    for command in path.commands:
        if command.op in ("M", "L"):
            current = np.asarray(command.points[0], dtype=float)
            points.append(current)
        elif command.op == "Q" and current is not None:
            control = np.asarray(command.points[0], dtype=float)
            end = np.asarray(command.points[1], dtype=float)
            t = np.linspace(0.0, 1.0, _CURVE_SAMPLES)[1:, None]
            curve = (1 - t) ** 2 * current + 2 * (1 - t) * t * control + t**2 * end
            points.extend(curve)
            current = end
    if not points:
        return np.asarray(path.waypoints, dtype=float).reshape(-1, 2)
    return np.vstack(points)


class RouteVisualizer:
    """Draws nodes, obstacles and routes for one routing session."""

    def __init__(
        self,
        nodes: Sequence[NodeBounds],
        config: RoutingConfig = DEFAULT_CONFIG,
        figsize: tuple = (12, 12),
        dpi: int = 100,
    ):
        self.nodes = list(nodes)
        self.config = config
        self.figsize = figsize
        self.dpi = dpi

    def render(
        self,
        routes: Dict[str, RoutedPath],
        output_path: Union[str, Path],
        title: Optional[str] = None,
    ) -> Path:
        """Render ``routes`` to ``output_path`` and return the written path."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)

        self._draw_obstacles(ax)
        self._draw_nodes(ax)
        self._draw_routes(ax, routes)
        self._setup_axes(ax, title or f"{len(routes)} routed wire(s)")

        plt.savefig(output_path, bbox_inches="tight", dpi=self.dpi)
        plt.close(fig)
        return output_path

    def _draw_obstacles(self, ax):
        for box in build_bounding_boxes(self.nodes, (), self.config.component_padding):
            ax.add_patch(
                Rectangle(
                    (box.left, box.top),
                    box.right - box.left,
                    box.bottom - box.top,
                    facecolor="none",
                    edgecolor="gray",
                    linestyle="--",
                    linewidth=0.8,
                    zorder=1,
                )
            )

    def _draw_nodes(self, ax):
        for node in self.nodes:
            ax.add_patch(
                Rectangle(
                    (node.x, node.y),
                    node.width,
                    node.height,
                    facecolor="lightblue",
                    edgecolor="darkblue",
                    linewidth=1.5,
                    alpha=0.7,
                    zorder=2,
                )
            )
            ax.text(
                node.x + node.width / 2,
                node.y + node.height / 2,
                node.id[:16],
                ha="center",
                va="center",
                fontsize=6,
                zorder=3,
            )

    def _draw_routes(self, ax, routes: Dict[str, RoutedPath]):
        if not routes:
            return

        segments = [flatten_path(path) for path in routes.values()]
        colors = [
            "red" if path.collision_accepted else "black" for path in routes.values()
        ]
        ax.add_collection(
            LineCollection(segments, colors=colors, linewidths=1.2, zorder=4)
        )

        for path in routes.values():
            if path.splice_dot is not None:
                ax.add_patch(Circle(path.splice_dot, 5, color="black", zorder=5))

    def _setup_axes(self, ax, title: str):
        min_x, min_y, max_x, max_y = calculate_canvas_bounds(self.nodes)
        pad = self.config.canvas_padding
        ax.set_xlim(min_x - pad, max_x + pad)
        # Canvas Y grows downward
        ax.set_ylim(max_y + pad, min_y - pad)
        ax.set_aspect("equal")
        ax.set_title(title)
