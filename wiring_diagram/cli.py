#!/usr/bin/env python3
"""
Wiring-route CLI - Command-line interface for the wiring diagram router.

This module provides the entry point for the 'wiring-route' command installed via pip.

Usage:
    wiring-route layout.json                    # Route with the orthogonal router
    wiring-route layout.json --router grid      # Precise A* routing
    wiring-route layout.json -o routes.json     # Save result to file
    wiring-route layout.json --no-migrate       # Keep implicit splices
    wiring-route layout.json --plot routes.png  # Render a debug image
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from wiring_diagram.src.common.constants import DEFAULT_CONFIG, ROUTER_TYPES, RoutingConfig
from wiring_diagram.src.common.diagnostics import DiagramDiagnostics
from wiring_diagram.src.layout.planner import RoutePlanner
from wiring_diagram.src.layout.route_plan import NodeBounds
from wiring_diagram.src.topology.diagram import DiagramData, DiagramFormatError
from wiring_diagram.src.topology.junction_migrator import (
    migrate_implicit_splices,
    needs_migration,
)


def route_document(
    document: Dict[str, Any],
    router: str = "orthogonal",
    migrate: bool = True,
    include_svg: bool = False,
    log_level: str = "error",
    config: RoutingConfig = DEFAULT_CONFIG,
    plot_path: Optional[Path] = None,
    diagnostics: Optional[DiagramDiagnostics] = None,
) -> tuple[Dict[str, Any], list]:
    """
    Migrate and route a diagram document.

    Args:
        document: Parsed input with "diagram", "nodes" and optional "anchors"
        router: "orthogonal" or "grid"
        migrate: Convert implicit splices to explicit junctions first
        include_svg: Add an SVG path string to every route
        log_level: Logging verbosity level
        config: Routing configuration settings
        plot_path: Optional PNG path for a debug rendering
        diagnostics: Collector to record into (a fresh one when omitted)

    Returns:
        (result document, diagnostic messages)

    Raises:
        DiagramFormatError: If the document is malformed
    """
    if diagnostics is None:
        diagnostics = DiagramDiagnostics(
            verbose=log_level in ("debug", "info"), debug=log_level == "debug"
        )

    if not isinstance(document, dict) or "diagram" not in document:
        raise DiagramFormatError("Input document must contain a 'diagram' object")

    try:
        diagram = DiagramData.from_dict(document["diagram"])
        nodes = [NodeBounds.from_dict(node) for node in document.get("nodes") or []]
        anchors = {
            endpoint_id: (float(point[0]), float(point[1]))
            for endpoint_id, point in (document.get("anchors") or {}).items()
        }
    except DiagramFormatError:
        raise
    except (KeyError, TypeError, ValueError, IndexError, AttributeError) as e:
        raise DiagramFormatError(f"Malformed diagram document: {e}") from e

    if migrate and needs_migration(diagram):
        diagram = migrate_implicit_splices(
            diagram, config.ground_circuit_id, diagnostics=diagnostics
        )

    planner = RoutePlanner(diagnostics, router=router, config=config)
    routes = planner.plan_routes(diagram, nodes, anchors)

    if plot_path is not None:
        from wiring_diagram.src.layout.route_debug_viz import RouteVisualizer

        RouteVisualizer(nodes, config).render(routes, plot_path)

    result = {
        "diagram": diagram.to_dict(),
        "routes": {
            wire_id: path.to_dict(include_svg=include_svg)
            for wire_id, path in routes.items()
        },
    }
    return result, diagnostics.get_messages()


def setup_logging(level: str) -> None:
    """Setup logging configuration."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format="%(levelname)s: %(message)s")


@click.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output file for the routed diagram (default: stdout)",
)
@click.option(
    "--router",
    type=click.Choice(list(ROUTER_TYPES), case_sensitive=False),
    default="orthogonal",
    help="Routing algorithm: cheap orthogonal routing or precise grid A*",
)
@click.option(
    "--migrate/--no-migrate",
    default=True,
    help="Convert implicit splices into explicit junctions before routing",
)
@click.option("--svg", is_flag=True, help="Include SVG path strings in the output")
@click.option(
    "--plot",
    type=click.Path(path_type=Path),
    help="Write a debug PNG of nodes and routes",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Set the logging level",
)
def main(input_file, output, router, migrate, svg, plot, log_level):
    """Route the wires of a placed wiring diagram and print JSON."""
    setup_logging(log_level)
    verbose = log_level in ["debug", "info"]

    try:
        document = json.loads(input_file.read_text(encoding="utf-8"))
        if verbose:
            click.echo(f"Routing {input_file}...", err=True)
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"Failed to read input file: {e}", err=True)
        sys.exit(1)

    diagnostics = DiagramDiagnostics(verbose=verbose, debug=log_level == "debug")
    try:
        result, _ = route_document(
            document,
            router=router.lower(),
            migrate=migrate,
            include_svg=svg,
            log_level=log_level,
            plot_path=plot,
            diagnostics=diagnostics,
        )
    except DiagramFormatError as e:
        click.echo(f"Routing failed: {e}", err=True)
        sys.exit(1)

    text = json.dumps(result, indent=2)
    if output:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(text, encoding="utf-8")
            if verbose:
                click.echo(f"Routes saved to {output}", err=True)
        except OSError as e:
            click.echo(f"Failed to write output file: {e}", err=True)
            sys.exit(1)
    else:
        click.echo(text)

    if verbose:
        click.echo(diagnostics.format_for_user(), err=True)
    elif diagnostics.warning_count():
        click.echo(
            f"Routing completed with {diagnostics.warning_count()} warning(s).",
            err=True,
        )


if __name__ == "__main__":
    main()
