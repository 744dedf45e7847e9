"""Common utilities shared across routing and topology stages."""

from .diagnostics import (
    DiagramDiagnostics,
    Diagnostic,
    DiagnosticSeverity,
)
from .constants import *

__all__ = [
    "DiagramDiagnostics",
    "Diagnostic",
    "DiagnosticSeverity",
    # Configuration
    "RoutingConfig",
    "DEFAULT_CONFIG",
    "GROUND_CIRCUIT_ID",
    "JUNCTION_TYPES",
    "ROUTER_TYPES",
]
