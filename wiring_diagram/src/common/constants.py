"""Shared constants across the routing core."""

from dataclasses import dataclass

# Orthogonal router geometry (canvas pixels)
CORNER_RADIUS = 8
SPLICE_OFFSET = 50
COMPONENT_PADDING = 20  # Padding around components for interactive routing
WIRE_SPREAD = 10  # Spacing between parallel wires from the same component
JOG_OFFSET = 25  # Vertical jog distance around horizontal collisions
STRAIGHT_EPSILON = 1.0
MAX_CORRIDOR_ATTEMPTS = 20

# Grid pathfinder geometry
GRID_CELL_SIZE = 20
GRID_NODE_PADDING = 30
CANVAS_PADDING = 100
MAX_GRID_CELLS = 200  # Per axis
GRID_CORNER_RADIUS = 16
MIN_ROUNDED_RADIUS = 2.0
EMPTY_CANVAS_BOUNDS = (0.0, 0.0, 1000.0, 1000.0)

# Topology
GROUND_CIRCUIT_ID = "circuit-ground"
JUNCTION_TYPES = ("splice", "distribution", "tap", "ground-bus")

# Router names accepted by the routing session and CLI
ROUTER_TYPES = ("orthogonal", "grid")


@dataclass(frozen=True)
class RoutingConfig:
    """Tunable routing parameters.

    Routers receive a config value explicitly; there is no shared engine.
    """

    corner_radius: float = CORNER_RADIUS
    splice_offset: float = SPLICE_OFFSET
    component_padding: float = COMPONENT_PADDING
    wire_spread: float = WIRE_SPREAD
    jog_offset: float = JOG_OFFSET
    straight_epsilon: float = STRAIGHT_EPSILON
    max_corridor_attempts: int = MAX_CORRIDOR_ATTEMPTS

    grid_cell_size: float = GRID_CELL_SIZE
    grid_node_padding: float = GRID_NODE_PADDING
    canvas_padding: float = CANVAS_PADDING
    max_grid_cells: int = MAX_GRID_CELLS
    grid_corner_radius: float = GRID_CORNER_RADIUS
    min_rounded_radius: float = MIN_ROUNDED_RADIUS

    ground_circuit_id: str = GROUND_CIRCUIT_ID


DEFAULT_CONFIG = RoutingConfig()
