from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Tuple

from wiring_diagram.src.common.constants import JUNCTION_TYPES

"""Diagram aggregate: wires, junctions and the pass-through remainder."""


class DiagramFormatError(ValueError):
    """Raised when a diagram document is structurally invalid."""


@dataclass(frozen=True)
class DiagramWire:
    """A wire between two endpoints.

    Exactly one of ``source_pin_id``/``source_junction_id`` and exactly one
    of ``target_pin_id``/``target_junction_id`` is set.
    """

    id: str
    source_pin_id: Optional[str] = None
    source_junction_id: Optional[str] = None
    target_pin_id: Optional[str] = None
    target_junction_id: Optional[str] = None
    color: Optional[str] = None
    gauge: Optional[str] = None
    circuit_id: Optional[str] = None
    is_installed: bool = False

    @property
    def source_id(self) -> str:
        return self.source_pin_id or self.source_junction_id or ""

    @property
    def target_id(self) -> str:
        return self.target_pin_id or self.target_junction_id or ""

    def with_junction_source(self, junction_id: str) -> "DiagramWire":
        """Copy of this wire fed from ``junction_id`` instead of its pin."""
        return replace(self, source_pin_id=None, source_junction_id=junction_id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiagramWire":
        wire = cls(
            id=str(data["id"]),
            source_pin_id=data.get("sourcePinId"),
            source_junction_id=data.get("sourceJunctionId"),
            target_pin_id=data.get("targetPinId"),
            target_junction_id=data.get("targetJunctionId"),
            color=data.get("color"),
            gauge=data.get("gauge"),
            circuit_id=data.get("circuitId"),
            is_installed=bool(data.get("isInstalled", False)),
        )
        if (wire.source_pin_id is None) == (wire.source_junction_id is None):
            raise DiagramFormatError(
                f"Wire '{wire.id}' must have exactly one of sourcePinId/sourceJunctionId"
            )
        if (wire.target_pin_id is None) == (wire.target_junction_id is None):
            raise DiagramFormatError(
                f"Wire '{wire.id}' must have exactly one of targetPinId/targetJunctionId"
            )
        return wire

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id}
        if self.source_pin_id is not None:
            result["sourcePinId"] = self.source_pin_id
        if self.source_junction_id is not None:
            result["sourceJunctionId"] = self.source_junction_id
        if self.target_pin_id is not None:
            result["targetPinId"] = self.target_pin_id
        if self.target_junction_id is not None:
            result["targetJunctionId"] = self.target_junction_id
        result["color"] = self.color
        result["gauge"] = self.gauge
        result["circuitId"] = self.circuit_id
        result["isInstalled"] = self.is_installed
        return result


@dataclass(frozen=True)
class DiagramJunction:
    """A physical splice or distribution point."""

    id: str
    type: str = "splice"  # One of JUNCTION_TYPES
    label: Optional[str] = None
    position: Optional[Tuple[float, float]] = None
    is_installed: bool = False
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiagramJunction":
        junction_type = data.get("type", "splice")
        if junction_type not in JUNCTION_TYPES:
            raise DiagramFormatError(
                f"Junction '{data.get('id')}' has unknown type '{junction_type}'; "
                f"expected one of: {', '.join(JUNCTION_TYPES)}"
            )
        position = data.get("position")
        return cls(
            id=str(data["id"]),
            type=junction_type,
            label=data.get("label"),
            position=(float(position["x"]), float(position["y"]))
            if position
            else None,
            is_installed=bool(data.get("isInstalled", False)),
            notes=data.get("notes"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id, "type": self.type}
        if self.label is not None:
            result["label"] = self.label
        if self.position is not None:
            result["position"] = {"x": self.position[0], "y": self.position[1]}
        result["isInstalled"] = self.is_installed
        if self.notes is not None:
            result["notes"] = self.notes
        return result


@dataclass(frozen=True)
class DiagramData:
    """The diagram aggregate.

    Components, circuits, positions, attachments and any unrecognised keys are
    opaque to the core and are carried through every transformation as-is.
    """

    components: Tuple[Any, ...] = ()
    wires: Tuple[DiagramWire, ...] = ()
    junctions: Tuple[DiagramJunction, ...] = ()
    circuits: Tuple[Any, ...] = ()
    positions: Dict[str, Any] = field(default_factory=dict)
    attachments: Tuple[Any, ...] = ()
    extra: Dict[str, Any] = field(default_factory=dict)

    def junction_ids(self) -> List[str]:
        return [junction.id for junction in self.junctions]

    def iter_component_pins(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(component_id, pin_id)`` for every pin of every component."""
        for component in self.components:
            component_id = component.get("id")
            for connector in component.get("connectors") or []:
                for pin in connector.get("pins") or []:
                    yield component_id, pin.get("id")

    def pin_owner_map(self) -> Dict[str, str]:
        """Map pin id to the id of the component that owns it."""
        owners: Dict[str, str] = {}
        for component_id, pin_id in self.iter_component_pins():
            owners.setdefault(pin_id, component_id)
        return owners

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiagramData":
        known = {"components", "wires", "junctions", "circuits", "positions", "attachments"}
        components = tuple(data.get("components") or ())
        _check_components(components)
        return cls(
            components=components,
            wires=tuple(DiagramWire.from_dict(w) for w in data.get("wires") or ()),
            junctions=tuple(
                DiagramJunction.from_dict(j) for j in data.get("junctions") or ()
            ),
            circuits=tuple(data.get("circuits") or ()),
            positions=dict(data.get("positions") or {}),
            attachments=tuple(data.get("attachments") or ()),
            extra={key: value for key, value in data.items() if key not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "components": list(self.components),
            "circuits": list(self.circuits),
            "wires": [wire.to_dict() for wire in self.wires],
            "junctions": [junction.to_dict() for junction in self.junctions],
        }
        if self.positions:
            result["positions"] = dict(self.positions)
        if self.attachments:
            result["attachments"] = list(self.attachments)
        result.update(self.extra)
        return result


def _check_components(components: Tuple[Any, ...]) -> None:
    """Components are opaque, but pin lookup needs their connector/pin shape."""
    for index, component in enumerate(components):
        if not isinstance(component, dict):
            raise DiagramFormatError(f"Component #{index} must be an object")
        name = component.get("id", f"#{index}")
        connectors = component.get("connectors") or []
        if not isinstance(connectors, list):
            raise DiagramFormatError(f"Component '{name}' connectors must be a list")
        for connector in connectors:
            if not isinstance(connector, dict):
                raise DiagramFormatError(
                    f"Component '{name}' has a connector that is not an object"
                )
            pins = connector.get("pins") or []
            if not isinstance(pins, list) or not all(
                isinstance(pin, dict) for pin in pins
            ):
                raise DiagramFormatError(
                    f"Connector '{connector.get('id')}' of component '{name}' "
                    "must list its pins as objects"
                )
