from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Set

from wiring_diagram.src.common.constants import GROUND_CIRCUIT_ID
from wiring_diagram.src.common.diagnostics import DiagramDiagnostics

from .diagram import DiagramData, DiagramJunction, DiagramWire

"""Conversion of implicit multi-wire splices into explicit junctions.

An implicit splice exists when several wires share one source pin. Migration
gives each such pin a junction, one trunk wire from the pin to the junction,
and rewrites the original wires into branches leaving the junction.
"""


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class SpliceGroup:
    """Wires sharing one source pin."""

    source_pin_id: str
    wires: tuple


def junction_id_for_pin(pin_id: str) -> str:
    """Deterministic junction id for a splice at ``pin_id``."""
    return f"junction-{pin_id}"


def trunk_wire_id(junction_id: str) -> str:
    """Deterministic id of the wire feeding ``junction_id``."""
    return f"trunk-{junction_id}"


def parse_awg(gauge: Optional[str]) -> Optional[int]:
    """Leading integer of a gauge string (``"18 AWG"`` -> 18), else None."""
    if not isinstance(gauge, str) or not gauge:
        return None
    match = _LEADING_INT.match(gauge)
    if match is None:
        return None
    return int(match.group(1))


def thickest_gauge(wires: Sequence[DiagramWire]) -> Optional[str]:
    """Gauge string with the lowest AWG number; unparseable gauges are ignored."""
    thickest: Optional[str] = None
    thickest_awg: Optional[int] = None
    for wire in wires:
        awg = parse_awg(wire.gauge)
        if awg is None:
            continue
        if thickest_awg is None or awg < thickest_awg:
            thickest_awg = awg
            thickest = wire.gauge
    return thickest


def detect_implicit_splices(diagram: DiagramData) -> List[SpliceGroup]:
    """Find source pins feeding more than one wire, in first-seen order."""
    wires_by_pin: Dict[str, List[DiagramWire]] = {}
    for wire in diagram.wires:
        # Junction-sourced wires are already explicit
        if not wire.source_pin_id:
            continue
        wires_by_pin.setdefault(wire.source_pin_id, []).append(wire)

    return [
        SpliceGroup(source_pin_id=pin_id, wires=tuple(wires))
        for pin_id, wires in wires_by_pin.items()
        if len(wires) > 1
    ]


def needs_migration(diagram: DiagramData) -> bool:
    """True when the diagram still has implicit splices."""
    return len(detect_implicit_splices(diagram)) > 0


def _unused_wire_id(base: str, taken: Set[str]) -> str:
    suffix = 2
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


def _junction_type(
    wires: Sequence[DiagramWire], ground_circuit_id: str
) -> str:
    if any(wire.circuit_id == ground_circuit_id for wire in wires):
        return "ground-bus"
    return "splice"


def migrate_implicit_splices(
    diagram: DiagramData,
    ground_circuit_id: str = GROUND_CIRCUIT_ID,
    diagnostics: Optional[DiagramDiagnostics] = None,
) -> DiagramData:
    """Rewrite every implicit splice into junction + trunk + branch wires.

    Pure: returns a new diagram and leaves ``diagram`` untouched. Branch wires
    keep their ids so attachments that reference them stay valid. A group
    whose junction already exists is treated as migrated and its wires are
    passed through unchanged, which makes the pass idempotent. A wire that
    already carries the trunk id is reused as the trunk rather than emitted
    twice.
    """
    splices = detect_implicit_splices(diagram)
    if not splices:
        return diagram

    junctions: List[DiagramJunction] = list(diagram.junctions)
    existing_junction_ids: Set[str] = set(diagram.junction_ids())
    existing_wire_ids: Set[str] = {wire.id for wire in diagram.wires}
    rewritten: Dict[str, DiagramWire] = {}
    trunks: List[DiagramWire] = []

    for splice in splices:
        junction_id = junction_id_for_pin(splice.source_pin_id)

        if junction_id in existing_junction_ids:
            if diagnostics is not None:
                diagnostics.debug(
                    f"Junction '{junction_id}' already exists; leaving "
                    f"{len(splice.wires)} wire(s) as they are",
                    stage="migration",
                    entity_id=junction_id,
                )
            continue

        junction = DiagramJunction(
            id=junction_id,
            type=_junction_type(splice.wires, ground_circuit_id),
            label=f"Splice from {splice.source_pin_id}",
            is_installed=False,
        )
        junctions.append(junction)
        existing_junction_ids.add(junction_id)

        trunk_id = trunk_wire_id(junction_id)
        feed = next((wire for wire in splice.wires if wire.id == trunk_id), None)
        branches = [wire for wire in splice.wires if wire is not feed]

        if feed is not None:
            # A leftover trunk wire at the pin stays the junction feed
            if diagnostics is not None:
                diagnostics.debug(
                    f"Reusing existing wire '{trunk_id}' as the trunk",
                    stage="migration",
                    entity_id=junction_id,
                )
        else:
            if trunk_id in existing_wire_ids:
                trunk_id = _unused_wire_id(trunk_id, existing_wire_ids)
            existing_wire_ids.add(trunk_id)
            first_wire = splice.wires[0]
            trunks.append(
                DiagramWire(
                    id=trunk_id,
                    source_pin_id=splice.source_pin_id,
                    target_junction_id=junction_id,
                    color=first_wire.color,
                    gauge=thickest_gauge(splice.wires),
                    circuit_id=first_wire.circuit_id,
                    is_installed=False,
                )
            )

        for wire in branches:
            rewritten[wire.id] = wire.with_junction_source(junction_id)

        if diagnostics is not None:
            diagnostics.info(
                f"Created {junction.type} '{junction_id}' with "
                f"{len(branches)} branch wire(s)",
                stage="migration",
                entity_id=junction_id,
            )

    wires: List[DiagramWire] = list(trunks)
    wires.extend(rewritten.get(wire.id, wire) for wire in diagram.wires)

    return replace(diagram, wires=tuple(wires), junctions=tuple(junctions))
