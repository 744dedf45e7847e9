from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Mapping, Optional, Sequence

from wiring_diagram.src.common.diagnostics import DiagramDiagnostics
from wiring_diagram.src.topology.diagram import DiagramData, DiagramWire

from .route_plan import EdgeRequest, NodeBounds, Point

"""Derive per-wire routing requests and spread metadata from a diagram."""


def resolve_endpoint_node(
    endpoint_id: str, is_junction: bool, pin_owners: Mapping[str, str]
) -> Optional[str]:
    """Node id owning an endpoint; junctions are their own nodes."""
    if is_junction:
        return endpoint_id
    return pin_owners.get(endpoint_id)


def _default_anchor(node: NodeBounds) -> Point:
    # Pins sit on the left edge of a component
    return (node.x, node.y + node.height / 2)


def build_edge_requests(
    diagram: DiagramData,
    nodes: Sequence[NodeBounds],
    anchors: Optional[Mapping[str, Point]] = None,
    diagnostics: Optional[DiagramDiagnostics] = None,
) -> List[EdgeRequest]:
    """Build one :class:`EdgeRequest` per routable wire, in wire order.

    Index/total pairs:
    - splice: position among wires sharing the same source pin
    - source component: position among wires leaving the same source node
    - target pin: index of the wire's target endpoint among the distinct
      endpoints wired on the same target node
    """
    anchors = anchors or {}
    nodes_by_id: Dict[str, NodeBounds] = {node.id: node for node in nodes}
    pin_owners = diagram.pin_owner_map()

    resolved: List[tuple] = []
    for wire in diagram.wires:
        source_node = resolve_endpoint_node(
            wire.source_id, wire.source_junction_id is not None, pin_owners
        )
        target_node = resolve_endpoint_node(
            wire.target_id, wire.target_junction_id is not None, pin_owners
        )
        source_point = _anchor_for(wire.source_id, source_node, anchors, nodes_by_id)
        target_point = _anchor_for(wire.target_id, target_node, anchors, nodes_by_id)
        if source_point is None or target_point is None:
            if diagnostics is not None:
                diagnostics.warning(
                    "Wire endpoints could not be located; skipping route",
                    stage="routing",
                    entity_id=wire.id,
                )
            continue
        resolved.append(
            (wire, source_node or wire.source_id, target_node or wire.target_id,
             source_point, target_point)
        )

    splice_totals: Dict[str, int] = defaultdict(int)
    component_totals: Dict[str, int] = defaultdict(int)
    target_pins: Dict[str, List[str]] = defaultdict(list)
    for wire, source_node, target_node, _, _ in resolved:
        if wire.source_pin_id:
            splice_totals[wire.source_pin_id] += 1
        component_totals[source_node] += 1
        if wire.target_id not in target_pins[target_node]:
            target_pins[target_node].append(wire.target_id)

    splice_seen: Dict[str, int] = defaultdict(int)
    component_seen: Dict[str, int] = defaultdict(int)
    requests: List[EdgeRequest] = []
    for wire, source_node, target_node, source_point, target_point in resolved:
        splice_total, splice_index = _splice_position(wire, splice_totals, splice_seen)

        component_index = component_seen[source_node]
        component_seen[source_node] += 1

        pins_on_target = target_pins[target_node]
        requests.append(
            EdgeRequest(
                wire_id=wire.id,
                source_point=source_point,
                target_point=target_point,
                source_node_id=source_node,
                target_node_id=target_node,
                splice_index=splice_index,
                splice_total=splice_total,
                source_component_index=component_index,
                source_component_total=component_totals[source_node],
                target_pin_index=pins_on_target.index(wire.target_id),
                target_pin_total=len(pins_on_target),
            )
        )

    return requests


def _splice_position(
    wire: DiagramWire,
    totals: Mapping[str, int],
    seen: Dict[str, int],
) -> tuple:
    if not wire.source_pin_id:
        return 1, 0
    total = totals.get(wire.source_pin_id, 1)
    if total <= 1:
        return 1, 0
    index = seen[wire.source_pin_id]
    seen[wire.source_pin_id] += 1
    return total, index


def _anchor_for(
    endpoint_id: str,
    node_id: Optional[str],
    anchors: Mapping[str, Point],
    nodes_by_id: Mapping[str, NodeBounds],
) -> Optional[Point]:
    anchor = anchors.get(endpoint_id)
    if anchor is not None:
        return (float(anchor[0]), float(anchor[1]))
    if node_id is not None and node_id in nodes_by_id:
        return _default_anchor(nodes_by_id[node_id])
    return None
