"""Exporters that write parachute pattern pieces to drawing files."""

from .patterns import FlatPiece, PatternExporter, write_dxf, write_svg

__all__ = [
    "FlatPiece",
    "PatternExporter",
    "write_dxf",
    "write_svg",
]
