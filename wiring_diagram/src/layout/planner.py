"""Routing orchestrator: edge requests -> obstacles -> router -> paths."""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence

from wiring_diagram.src.common.constants import DEFAULT_CONFIG, ROUTER_TYPES, RoutingConfig
from wiring_diagram.src.common.diagnostics import DiagramDiagnostics
from wiring_diagram.src.topology.diagram import DiagramData

from .edge_requests import build_edge_requests
from .grid_pathfinder import GridPathfinder
from .obstacles import build_bounding_boxes
from .orthogonal_router import OrthogonalRouter
from .route_plan import NodeBounds, Point, RoutedPath


class RoutePlanner:
    """Route every wire of a diagram with a caller-owned router.

    A planner holds no state between calls beyond its configuration, so one
    instance may be reused or a fresh one built per request.
    """

    def __init__(
        self,
        diagnostics: Optional[DiagramDiagnostics] = None,
        *,
        router: str = "orthogonal",
        config: RoutingConfig = DEFAULT_CONFIG,
    ) -> None:
        if router not in ROUTER_TYPES:
            raise ValueError(
                f"Unknown router '{router}'; expected one of: {', '.join(ROUTER_TYPES)}"
            )
        self.diagnostics = diagnostics or DiagramDiagnostics()
        self.diagnostics.default_stage = "routing"
        self.router_type = router
        self.config = config

        if router == "grid":
            self.router = GridPathfinder(config, self.diagnostics)
        else:
            self.router = OrthogonalRouter(config, self.diagnostics)

    def plan_routes(
        self,
        diagram: DiagramData,
        nodes: Sequence[NodeBounds],
        anchors: Optional[Mapping[str, Point]] = None,
    ) -> Dict[str, RoutedPath]:
        """Compute a path for every wire whose endpoints can be located."""
        requests = build_edge_requests(diagram, nodes, anchors, self.diagnostics)
        routes: Dict[str, RoutedPath] = {}

        for request in requests:
            if isinstance(self.router, GridPathfinder):
                routes[request.wire_id] = self.router.route_request(request, nodes)
                continue

            # Obstacles are rebuilt per edge so a wire never avoids its own ends
            obstacles = build_bounding_boxes(
                nodes,
                (request.source_node_id, request.target_node_id),
                self.config.component_padding,
            )
            routes[request.wire_id] = self.router.route_request(request, obstacles)

        accepted = sum(1 for path in routes.values() if path.collision_accepted)
        self.diagnostics.info(
            f"Routed {len(routes)} wire(s) with the {self.router_type} router"
            + (f"; {accepted} crossing an obstacle" if accepted else "")
        )
        return routes


def route_diagram(
    diagram: DiagramData,
    nodes: Sequence[NodeBounds],
    anchors: Optional[Mapping[str, Point]] = None,
    router: str = "orthogonal",
    config: RoutingConfig = DEFAULT_CONFIG,
    diagnostics: Optional[DiagramDiagnostics] = None,
) -> Dict[str, RoutedPath]:
    """Convenience wrapper building a fresh :class:`RoutePlanner` per call."""
    planner = RoutePlanner(diagnostics, router=router, config=config)
    return planner.plan_routes(diagram, nodes, anchors)
