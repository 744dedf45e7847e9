"""Connection topology: the diagram model and splice normalization."""

from .diagram import DiagramData, DiagramFormatError, DiagramJunction, DiagramWire
from .junction_migrator import (
    SpliceGroup,
    detect_implicit_splices,
    junction_id_for_pin,
    migrate_implicit_splices,
    needs_migration,
    parse_awg,
    thickest_gauge,
    trunk_wire_id,
)

__all__ = [
    "DiagramData",
    "DiagramFormatError",
    "DiagramJunction",
    "DiagramWire",
    "SpliceGroup",
    "detect_implicit_splices",
    "junction_id_for_pin",
    "migrate_implicit_splices",
    "needs_migration",
    "parse_awg",
    "thickest_gauge",
    "trunk_wire_id",
]
