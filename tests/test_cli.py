"""
Tests for the CLI module (wiring_diagram/cli.py).

These tests cover the command-line interface and the route_document function.
"""

import json

import pytest
from click.testing import CliRunner

from wiring_diagram.cli import main, route_document, setup_logging
from wiring_diagram.src.topology.diagram import DiagramFormatError


@pytest.fixture
def document():
    """A power distribution module feeding two lamps from one pin."""
    return {
        "diagram": {
            "components": [
                {"id": "pdm", "connectors": [{"id": "pdm-a", "pins": [{"id": "p1"}]}]},
                {"id": "lamp-l", "connectors": [{"id": "ll-a", "pins": [{"id": "l1"}]}]},
                {"id": "lamp-r", "connectors": [{"id": "lr-a", "pins": [{"id": "r1"}]}]},
            ],
            "wires": [
                {"id": "w1", "sourcePinId": "p1", "targetPinId": "l1", "gauge": "20 AWG"},
                {"id": "w2", "sourcePinId": "p1", "targetPinId": "r1", "gauge": "16 AWG"},
            ],
            "circuits": [{"id": "circuit-lights"}],
            "layoutVersion": 3,
        },
        "nodes": [
            {"id": "pdm", "x": 600, "y": 0, "width": 200, "height": 100},
            {"id": "lamp-l", "x": 0, "y": 0, "width": 150, "height": 80},
            {"id": "lamp-r", "x": 0, "y": 300, "width": 150, "height": 80},
        ],
        "anchors": {
            "p1": [600, 50],
            "l1": [0, 40],
            "r1": [0, 340],
            "junction-p1": [550, 50],
        },
    }


class TestRouteDocument:
    """Tests for the route_document function."""

    def test_migrates_and_routes(self, document):
        result, messages = route_document(document)
        assert set(result["routes"]) == {"trunk-junction-p1", "w1", "w2"}
        assert [j["id"] for j in result["diagram"]["junctions"]] == ["junction-p1"]
        assert messages == []

    def test_trunk_uses_thickest_gauge(self, document):
        result, _ = route_document(document)
        trunk = result["diagram"]["wires"][0]
        assert trunk["id"] == "trunk-junction-p1"
        assert trunk["gauge"] == "16 AWG"

    def test_no_migrate_keeps_implicit_splice(self, document):
        result, _ = route_document(document, migrate=False)
        assert set(result["routes"]) == {"w1", "w2"}
        assert result["diagram"]["junctions"] == []
        assert result["routes"]["w1"]["spliceDot"] == [550, 50]

    def test_route_endpoints_match_anchors(self, document):
        result, _ = route_document(document)
        route = result["routes"]["w2"]
        assert route["points"][0] == [550, 50]
        assert route["points"][-1] == [0, 340]

    @pytest.mark.parametrize("router", ["orthogonal", "grid"])
    def test_routers(self, document, router):
        result, _ = route_document(document, router=router)
        assert len(result["routes"]) == 3

    def test_svg_included_on_request(self, document):
        result, _ = route_document(document, include_svg=True)
        assert result["routes"]["w1"]["path"].startswith("M 550 50")
        assert "path" not in route_document(document)[0]["routes"]["w1"]

    def test_unknown_keys_preserved(self, document):
        result, _ = route_document(document)
        assert result["diagram"]["layoutVersion"] == 3

    def test_missing_anchor_reported(self, document):
        del document["anchors"]["junction-p1"]
        result, messages = route_document(document)
        assert "trunk-junction-p1" not in result["routes"]
        assert any("trunk-junction-p1" in message for message in messages)

    def test_missing_diagram_fails(self):
        with pytest.raises(DiagramFormatError):
            route_document({"nodes": []})

    def test_malformed_node_fails(self, document):
        document["nodes"][0] = {"id": "pdm", "x": 1}
        with pytest.raises(DiagramFormatError, match="Malformed"):
            route_document(document)

    def test_invalid_wire_fails(self, document):
        document["diagram"]["wires"].append({"id": "bad", "sourcePinId": "p1"})
        with pytest.raises(DiagramFormatError, match="bad"):
            route_document(document)

    def test_pin_list_of_strings_fails(self, document):
        document["diagram"]["components"][0]["connectors"][0]["pins"] = ["p1"]
        with pytest.raises(DiagramFormatError, match="pins"):
            route_document(document)

    def test_unknown_junction_type_fails(self, document):
        document["diagram"]["junctions"] = [{"id": "junction-p1", "type": "blob"}]
        with pytest.raises(DiagramFormatError, match="unknown type"):
            route_document(document)

    def test_plot_written(self, document, tmp_path):
        plot = tmp_path / "routes.png"
        route_document(document, plot_path=plot)
        assert plot.exists()


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def test_valid_log_level(self):
        setup_logging("info")

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging("chatty")


class TestMainCommand:
    """Tests for the main CLI command."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def input_file(self, tmp_path, document):
        file = tmp_path / "layout.json"
        file.write_text(json.dumps(document))
        return file

    def test_route_file(self, runner, input_file):
        result = runner.invoke(main, [str(input_file)])
        assert result.exit_code == 0
        assert '"routes"' in result.output

    def test_output_to_file(self, runner, input_file, tmp_path):
        output_file = tmp_path / "out" / "routes.json"
        result = runner.invoke(main, [str(input_file), "-o", str(output_file)])
        assert result.exit_code == 0
        data = json.loads(output_file.read_text())
        assert "trunk-junction-p1" in data["routes"]

    def test_grid_router(self, runner, input_file, tmp_path):
        output_file = tmp_path / "routes.json"
        result = runner.invoke(
            main, [str(input_file), "--router", "grid", "-o", str(output_file)]
        )
        assert result.exit_code == 0
        assert len(json.loads(output_file.read_text())["routes"]) == 3

    def test_no_migrate_flag(self, runner, input_file, tmp_path):
        output_file = tmp_path / "routes.json"
        result = runner.invoke(main, [str(input_file), "--no-migrate", "-o", str(output_file)])
        assert result.exit_code == 0
        assert set(json.loads(output_file.read_text())["routes"]) == {"w1", "w2"}

    def test_svg_flag(self, runner, input_file, tmp_path):
        output_file = tmp_path / "routes.json"
        result = runner.invoke(main, [str(input_file), "--svg", "-o", str(output_file)])
        assert result.exit_code == 0
        routes = json.loads(output_file.read_text())["routes"]
        assert all("path" in route for route in routes.values())

    def test_plot_flag(self, runner, input_file, tmp_path):
        plot = tmp_path / "routes.png"
        result = runner.invoke(main, [str(input_file), "--plot", str(plot)])
        assert result.exit_code == 0
        assert plot.exists()

    def test_invalid_json_fails(self, runner, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        result = runner.invoke(main, [str(bad)])
        assert result.exit_code == 1

    def test_malformed_document_fails(self, runner, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"diagram": {"wires": [{"id": "x"}]}}))
        result = runner.invoke(main, [str(bad)])
        assert result.exit_code == 1

    def test_malformed_component_fails(self, runner, tmp_path, document):
        document["diagram"]["components"] = ["pdm"]
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps(document))
        result = runner.invoke(main, [str(bad)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, AttributeError)
        assert "Routing failed" in result.output

    def test_numeric_gauge_routes(self, runner, tmp_path, document):
        document["diagram"]["wires"][0]["gauge"] = 18
        document["diagram"]["wires"][1]["gauge"] = None
        source = tmp_path / "layout.json"
        source.write_text(json.dumps(document))
        output_file = tmp_path / "routes.json"
        result = runner.invoke(main, [str(source), "-o", str(output_file)])
        assert result.exit_code == 0
        data = json.loads(output_file.read_text())
        assert data["diagram"]["wires"][0]["gauge"] is None
        assert data["diagram"]["wires"][1]["gauge"] == 18

    def test_missing_file_fails(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "nope.json")])
        assert result.exit_code != 0

    def test_unknown_router_rejected(self, runner, input_file):
        result = runner.invoke(main, [str(input_file), "--router", "bezier"])
        assert result.exit_code != 0

    def test_verbose_log_level(self, runner, input_file, tmp_path):
        output_file = tmp_path / "routes.json"
        result = runner.invoke(
            main, [str(input_file), "--log-level", "info", "-o", str(output_file)]
        )
        assert result.exit_code == 0
        assert output_file.exists()
