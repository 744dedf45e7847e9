from typing import List, Optional, Sequence, Tuple

from wiring_diagram.src.common.constants import DEFAULT_CONFIG, RoutingConfig
from wiring_diagram.src.common.diagnostics import DiagramDiagnostics

from .obstacles import find_horizontal_collision, find_vertical_collision
from .path_geometry import build_rounded_path, straight_path
from .route_plan import BoundingBox, EdgeRequest, Point, RoutedPath

"""Incremental orthogonal router used on every interactive redraw."""


class OrthogonalRouter:
    """Cheap per-edge router producing a rounded, multi-segment path.

    Each wire leaves its source horizontally, travels along a vertical
    corridor to the target's Y level and enters the target horizontally.
    Corridors are offset per sibling wire so parallel wires get distinct
    lanes, and pushed left past any obstacle they cross.

    Obstacle avoidance is best-effort: the corridor search stops after
    ``config.max_corridor_attempts`` moves and accepts whatever corridor it
    holds, flagging the result with ``collision_accepted``.
    """

    def __init__(
        self,
        config: RoutingConfig = DEFAULT_CONFIG,
        diagnostics: Optional[DiagramDiagnostics] = None,
    ):
        self.config = config
        self.diagnostics = diagnostics

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def route(
        self,
        source: Point,
        target: Point,
        spread: Optional[EdgeRequest] = None,
        obstacles: Sequence[BoundingBox] = (),
    ) -> RoutedPath:
        """Route one wire from ``source`` to ``target``.

        ``spread`` supplies the sibling indices used to offset the corridor;
        without it the wire is routed as a lone edge.
        """
        cfg = self.config
        source_x, source_y = source
        target_x, target_y = target

        label_anchor = (
            (source_x + target_x) / 2 - cfg.splice_offset,
            (source_y + target_y) / 2,
        )
        splice_dot = self._splice_dot(source, spread)

        if abs(target_y - source_y) < cfg.straight_epsilon:
            return RoutedPath(
                waypoints=[tuple(source), tuple(target)],
                commands=straight_path(source, target),
                label_anchor=label_anchor,
                splice_dot=splice_dot,
            )

        corridor_x = self.initial_corridor_x(source_x, spread)
        corridor_x, collided = self.find_clear_vertical_x(
            corridor_x, source_y, target_y, obstacles
        )
        if collided and self.diagnostics is not None:
            self.diagnostics.debug(
                f"Corridor search gave up after {cfg.max_corridor_attempts} "
                f"attempts; keeping corridor at x={corridor_x}",
                stage="routing",
                entity_id=spread.wire_id if spread else None,
            )

        waypoints: List[Point] = [
            (source_x, source_y),
            (corridor_x, source_y),
        ]
        waypoints.extend(
            self._approach_points(corridor_x, source_y, target_x, target_y, obstacles)
        )
        waypoints.append((target_x, target_y))

        return RoutedPath(
            waypoints=waypoints,
            commands=build_rounded_path(waypoints, cfg.corner_radius),
            label_anchor=label_anchor,
            splice_dot=splice_dot,
            collision_accepted=collided,
        )

    def route_request(
        self, request: EdgeRequest, obstacles: Sequence[BoundingBox] = ()
    ) -> RoutedPath:
        return self.route(
            request.source_point, request.target_point, request, obstacles
        )

    # ------------------------------------------------------------------
    # Corridor selection
    # ------------------------------------------------------------------

    def initial_corridor_x(
        self, source_x: float, spread: Optional[EdgeRequest] = None
    ) -> float:
        """Corridor X before obstacle avoidance.

        Wires of a splice group share the splice corridor; other wires from
        the same component fan out by their index. Every wire is then shifted
        by its target pin index so wires landing on different pins of the same
        component don't share a vertical lane.
        """
        cfg = self.config
        corridor_x = source_x - cfg.splice_offset
        if spread is None:
            return corridor_x

        if not spread.is_splice:
            corridor_x -= spread.source_component_index * cfg.wire_spread
        corridor_x -= spread.target_pin_index * cfg.wire_spread
        return corridor_x

    def find_clear_vertical_x(
        self,
        start_x: float,
        source_y: float,
        target_y: float,
        obstacles: Sequence[BoundingBox],
    ) -> Tuple[float, bool]:
        """Push the corridor left until it clears every obstacle.

        Returns ``(corridor_x, collided)``; ``collided`` is True when the
        attempt cap was reached and the corridor still crosses a box.
        """
        vertical_x = start_x
        for _ in range(self.config.max_corridor_attempts):
            box = find_vertical_collision(vertical_x, source_y, target_y, obstacles)
            if box is None:
                return vertical_x, False
            vertical_x = box.left - self.config.wire_spread

        collided = (
            find_vertical_collision(vertical_x, source_y, target_y, obstacles)
            is not None
        )
        return vertical_x, collided

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _approach_points(
        self,
        corridor_x: float,
        source_y: float,
        target_x: float,
        target_y: float,
        obstacles: Sequence[BoundingBox],
    ) -> List[Point]:
        """Points between the corridor and the final horizontal approach."""
        cfg = self.config
        box = find_horizontal_collision(target_y, corridor_x, target_x, obstacles)
        if box is None:
            return [(corridor_x, target_y)]

        going_down = target_y > source_y
        jog_y = box.bottom + cfg.jog_offset if going_down else box.top - cfg.jog_offset
        approach_x = target_x - cfg.splice_offset
        return [
            (corridor_x, jog_y),
            (approach_x, jog_y),
            (approach_x, target_y),
        ]

    def _splice_dot(
        self, source: Point, spread: Optional[EdgeRequest]
    ) -> Optional[Point]:
        # Only the first wire of a splice group marks the physical splice
        if spread is None or not spread.is_splice or spread.splice_index != 0:
            return None
        return (source[0] - self.config.splice_offset, source[1])
