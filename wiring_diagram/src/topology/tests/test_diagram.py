"""Tests for topology/diagram.py - diagram model and document mapping."""

import pytest

from wiring_diagram.src.topology.diagram import (
    DiagramData,
    DiagramFormatError,
    DiagramJunction,
    DiagramWire,
)


@pytest.fixture
def document():
    return {
        "components": [
            {
                "id": "ecu",
                "name": "ECU",
                "connectors": [
                    {"id": "ecu-a", "pins": [{"id": "e1"}, {"id": "e2"}]},
                    {"id": "ecu-b", "pins": [{"id": "e3"}]},
                ],
            },
            {"id": "lamp", "connectors": [{"id": "lamp-a", "pins": [{"id": "l1"}]}]},
        ],
        "wires": [
            {
                "id": "w1",
                "sourcePinId": "e1",
                "targetPinId": "l1",
                "color": "red",
                "gauge": "18 AWG",
                "circuitId": "circuit-lights",
                "isInstalled": True,
            },
            {"id": "w2", "sourceJunctionId": "junction-e2", "targetPinId": "l1"},
        ],
        "junctions": [
            {"id": "junction-e2", "type": "tap", "position": {"x": 10, "y": 20}},
        ],
        "circuits": [{"id": "circuit-lights", "name": "Lights"}],
        "positions": {"ecu": {"x": 0, "y": 0}},
        "attachments": [{"wireId": "w1", "kind": "label"}],
        "vehicle": "Land Cruiser",
    }


class TestDiagramWire:
    def test_from_dict_reads_all_fields(self, document):
        wire = DiagramWire.from_dict(document["wires"][0])
        assert wire == DiagramWire(
            id="w1",
            source_pin_id="e1",
            target_pin_id="l1",
            color="red",
            gauge="18 AWG",
            circuit_id="circuit-lights",
            is_installed=True,
        )

    def test_source_and_target_ids(self, document):
        wire = DiagramWire.from_dict(document["wires"][1])
        assert wire.source_id == "junction-e2"
        assert wire.target_id == "l1"

    def test_both_sources_rejected(self):
        with pytest.raises(DiagramFormatError, match="w9"):
            DiagramWire.from_dict(
                {"id": "w9", "sourcePinId": "a", "sourceJunctionId": "j", "targetPinId": "b"}
            )

    def test_missing_target_rejected(self):
        with pytest.raises(DiagramFormatError, match="targetPinId"):
            DiagramWire.from_dict({"id": "w9", "sourcePinId": "a"})

    def test_with_junction_source_keeps_everything_else(self):
        wire = DiagramWire(id="w1", source_pin_id="p1", target_pin_id="t1", color="blue")
        branch = wire.with_junction_source("junction-p1")
        assert branch.source_pin_id is None
        assert branch.source_junction_id == "junction-p1"
        assert (branch.id, branch.target_pin_id, branch.color) == ("w1", "t1", "blue")
        assert wire.source_pin_id == "p1"

    def test_to_dict_omits_unset_endpoints(self):
        data = DiagramWire(id="w1", source_junction_id="j1", target_pin_id="t1").to_dict()
        assert "sourcePinId" not in data
        assert data["sourceJunctionId"] == "j1"
        assert data["isInstalled"] is False


class TestDiagramJunction:
    def test_position_parsed_as_tuple(self, document):
        junction = DiagramJunction.from_dict(document["junctions"][0])
        assert junction.type == "tap"
        assert junction.position == (10.0, 20.0)

    def test_defaults(self):
        junction = DiagramJunction.from_dict({"id": "j1"})
        assert junction.type == "splice"
        assert junction.position is None
        assert junction.to_dict() == {"id": "j1", "type": "splice", "isInstalled": False}


class TestDiagramData:
    def test_pin_owner_map(self, document):
        diagram = DiagramData.from_dict(document)
        assert diagram.pin_owner_map() == {"e1": "ecu", "e2": "ecu", "e3": "ecu", "l1": "lamp"}

    def test_junction_ids(self, document):
        assert DiagramData.from_dict(document).junction_ids() == ["junction-e2"]

    def test_unknown_keys_carried_through(self, document):
        diagram = DiagramData.from_dict(document)
        assert diagram.extra == {"vehicle": "Land Cruiser"}
        assert diagram.to_dict()["vehicle"] == "Land Cruiser"

    def test_opaque_sections_preserved(self, document):
        result = DiagramData.from_dict(document).to_dict()
        assert result["components"] == document["components"]
        assert result["circuits"] == document["circuits"]
        assert result["positions"] == document["positions"]
        assert result["attachments"] == document["attachments"]

    def test_empty_document(self):
        diagram = DiagramData.from_dict({})
        assert diagram.wires == ()
        assert diagram.pin_owner_map() == {}
        assert diagram.to_dict() == {
            "components": [],
            "circuits": [],
            "wires": [],
            "junctions": [],
        }

    def test_invalid_wire_propagates(self, document):
        document["wires"].append({"id": "bad", "targetPinId": "l1"})
        with pytest.raises(DiagramFormatError):
            DiagramData.from_dict(document)

    def test_unknown_junction_type_rejected(self, document):
        document["junctions"][0]["type"] = "solder-blob"
        with pytest.raises(DiagramFormatError, match="unknown type"):
            DiagramData.from_dict(document)

    @pytest.mark.parametrize(
        "components",
        [
            ["pdm"],
            [{"id": "pdm", "connectors": "c1"}],
            [{"id": "pdm", "connectors": ["c1"]}],
            [{"id": "pdm", "connectors": [{"id": "c1", "pins": ["p1", "p2"]}]}],
            [{"id": "pdm", "connectors": [{"id": "c1", "pins": {"id": "p1"}}]}],
        ],
    )
    def test_malformed_components_rejected(self, document, components):
        document["components"] = components
        with pytest.raises(DiagramFormatError):
            DiagramData.from_dict(document)

    def test_component_without_connectors_accepted(self, document):
        document["components"].append({"id": "fuse-box"})
        diagram = DiagramData.from_dict(document)
        assert "fuse-box" not in diagram.pin_owner_map().values()
