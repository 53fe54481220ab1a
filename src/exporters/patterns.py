"""Utilities for exporting parachute pattern pieces as 2D drawing files."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from parachute.collection import PatternPieceCollection
from parachute.errors import ExportError
from parachute.pattern import PatternPiece

__all__ = ["FlatPiece", "PatternExporter", "write_dxf", "write_svg"]

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("dxf", "svg")


@dataclass(slots=True)
class FlatPiece:
    """Drawing-ready outlines of one pattern piece, in drawing units (y up)."""

    name: str
    cut_outline: list[tuple[float, float]]
    seam_outline: list[tuple[float, float]] = field(default_factory=list)
    count: int = 1
    seam_allowances: tuple[float, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_piece(cls, piece: PatternPiece, *, count: int = 1, scale: float = 1000.0) -> "FlatPiece":
        scaled = piece.scaled(scale)
        metadata: dict[str, Any] = {
            "chute_area": scaled.chute_area,
            "fabric_area": scaled.fabric_area,
        }
        if scaled.warnings:
            metadata["warnings"] = list(scaled.warnings)
        return cls(
            name=piece.name,
            cut_outline=list(scaled.computed_points),
            seam_outline=list(scaled.points),
            count=count,
            seam_allowances=tuple(segment.seam_allowance for segment in scaled.segments),
            metadata=metadata,
        )

    def translated(self, dx: float) -> "FlatPiece":
        return FlatPiece(
            name=self.name,
            cut_outline=[(x + dx, y) for x, y in self.cut_outline],
            seam_outline=[(x + dx, y) for x, y in self.seam_outline],
            count=self.count,
            seam_allowances=self.seam_allowances,
            metadata=dict(self.metadata),
        )


class PatternExporter:
    """Export the pieces of a parachute to pattern files in several formats.

    ``scale`` converts engine units (metres) to drawing units; the default
    produces millimetres. ``spacing`` is the gap between neighbouring pieces,
    in metres.
    """

    def __init__(self, *, scale: float = 1000.0, spacing: float = 0.05) -> None:
        self.scale = float(scale)
        self.spacing = float(spacing)

    def flatten(self, collection: PatternPieceCollection) -> list[FlatPiece]:
        """Drawing pieces laid out left to right; the first keeps its position."""

        pieces: list[FlatPiece] = []
        right_edge: float | None = None
        for piece, count in collection:
            flat = FlatPiece.from_piece(piece, count=count, scale=self.scale)
            if not flat.cut_outline and not flat.seam_outline:
                pieces.append(flat)
                continue
            min_x, _, max_x, _ = _piece_bounds([flat])
            if right_edge is not None:
                shift = right_edge + self.spacing * self.scale - min_x
                flat = flat.translated(shift)
                min_x, max_x = min_x + shift, max_x + shift
            right_edge = max_x
            pieces.append(flat)
        return pieces

    def export(
        self,
        collection: PatternPieceCollection,
        *,
        output_dir: Path | str,
        formats: Iterable[str] = SUPPORTED_FORMATS,
        metadata: Mapping[str, Any] | None = None,
        basename: str = "parachute_pattern",
    ) -> dict[str, Path]:
        normalized_formats = [fmt.lower() for fmt in formats]
        for fmt in normalized_formats:
            if fmt not in SUPPORTED_FORMATS:
                raise ValueError(f"Unsupported pattern export format: {fmt}")

        output_path = Path(output_dir)
        try:
            output_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ExportError(f"Cannot create output directory {output_path}: {exc}") from exc

        pieces = self.flatten(collection)
        combined_metadata: dict[str, Any] = {
            "scale": self.scale,
            "piece_count": collection.piece_count(),
        }
        piece_warnings = {
            piece.name: piece.metadata["warnings"]
            for piece in pieces
            if piece.metadata.get("warnings")
        }
        if piece_warnings:
            combined_metadata["piece_warnings"] = piece_warnings
        if metadata:
            combined_metadata.update(metadata)

        created: dict[str, Path] = {}
        for fmt in normalized_formats:
            path = output_path / f"{basename}.{fmt}"
            if fmt == "svg":
                write_svg(path, pieces, combined_metadata)
            else:
                write_dxf(path, pieces, combined_metadata)
            logger.info("Wrote %s pattern to %s", fmt.upper(), path)
            created[fmt] = path
        return created


def _polygon_centroid(points: Sequence[tuple[float, float]]) -> tuple[float, float]:
    """Area centroid of a closed outline, or the vertex mean when it has no area."""

    if not points:
        return 0.0, 0.0
    coords = np.asarray(points, dtype=float)
    following = np.roll(coords, -1, axis=0)
    cross = coords[:, 0] * following[:, 1] - following[:, 0] * coords[:, 1]
    area = 0.5 * float(cross.sum())
    if math.isclose(area, 0.0):
        mean_x, mean_y = coords.mean(axis=0)
        return float(mean_x), float(mean_y)
    centroid = ((coords + following) * cross[:, None]).sum(axis=0) / (6.0 * area)
    return float(centroid[0]), float(centroid[1])


def _piece_bounds(pieces: Sequence[FlatPiece]) -> tuple[float, float, float, float]:
    outlines = [
        np.asarray(outline, dtype=float)
        for piece in pieces
        for outline in (piece.cut_outline, piece.seam_outline)
        if outline
    ]
    if not outlines:
        return 0.0, 0.0, 1.0, 1.0
    coords = np.vstack(outlines)
    min_x, min_y = (float(value) for value in coords.min(axis=0))
    max_x, max_y = (float(value) for value in coords.max(axis=0))
    # Keep the view box non-degenerate for flat or single-point drawings
    if math.isclose(min_x, max_x):
        max_x = min_x + 1.0
    if math.isclose(min_y, max_y):
        max_y = min_y + 1.0
    return min_x, min_y, max_x, max_y


def _escape_svg_text(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _write_text(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ExportError(f"Cannot write pattern file {path}: {exc}") from exc


def write_svg(path: Path, pieces: Sequence[FlatPiece], metadata: Mapping[str, Any]) -> None:
    """Write *pieces* at their drawing positions into an SVG file; y is flipped for display."""

    min_x, min_y, max_x, max_y = _piece_bounds(pieces)
    width = max_x - min_x
    height = max_y - min_y
    lines = [
        "<?xml version=\"1.0\" encoding=\"UTF-8\"?>",
        f"<!-- Scale: {metadata['scale']} -->",
        f"<!-- Pieces to cut: {metadata['piece_count']} -->",
        f"<svg xmlns=\"http://www.w3.org/2000/svg\" width=\"{width:.2f}mm\" height=\"{height:.2f}mm\" viewBox=\"{min_x:.2f} {-max_y:.2f} {width:.2f} {height:.2f}\">",
        "  <style>",
        "    .cut-outline { fill: none; stroke: #d94f4f; stroke-width: 0.5; stroke-linejoin: miter; }",
        "    .seam-outline { fill: none; stroke: #1a1a1a; stroke-width: 0.3; stroke-dasharray: 4 2; }",
        "    .piece-label { font: 12px sans-serif; fill: #000; text-anchor: middle; }",
        "  </style>",
    ]
    if metadata.get("piece_warnings"):
        warnings_json = json.dumps(metadata["piece_warnings"], sort_keys=True)
        lines.insert(3, f"<!-- piece_warnings: {warnings_json} -->")
    for piece in pieces:
        if not piece.cut_outline and not piece.seam_outline:
            continue
        allowances = ",".join(f"{value:g}" for value in piece.seam_allowances)
        lines.append(
            f"  <g id=\"{_escape_svg_text(piece.name)}\" data-count=\"{piece.count}\" data-seam-allowance=\"{allowances}\" transform=\"scale(1,-1)\">"
        )
        if piece.cut_outline:
            cut_points = " ".join(f"{x:.2f},{y:.2f}" for x, y in piece.cut_outline)
            lines.append(f"    <polygon class=\"cut-outline\" points=\"{cut_points}\" />")
        if piece.seam_outline:
            seam_points = " ".join(f"{x:.2f},{y:.2f}" for x, y in piece.seam_outline)
            lines.append(f"    <polygon class=\"seam-outline\" points=\"{seam_points}\" />")
        lines.append("  </g>")
        cx, cy = _polygon_centroid(piece.seam_outline or piece.cut_outline)
        label = _escape_svg_text(f"{piece.name} x{piece.count}")
        lines.append(f"  <text class=\"piece-label\" x=\"{cx:.2f}\" y=\"{-cy:.2f}\">{label}</text>")
    lines.append("</svg>")
    _write_text(path, "\n".join(lines))


def _dxf_polyline(layer: str, points: Sequence[tuple[float, float]]) -> list[str]:
    lines = [
        "0",
        "LWPOLYLINE",
        "8",
        layer,
        "90",
        str(len(points)),
        "70",
        "1",
    ]
    for x, y in points:
        lines.extend(["10", f"{x:.4f}", "20", f"{y:.4f}"])
    return lines


def write_dxf(path: Path, pieces: Sequence[FlatPiece], metadata: Mapping[str, Any]) -> None:
    """Write every piece as a closed polyline on a layer named after it."""

    lines = [
        "0",
        "SECTION",
        "2",
        "HEADER",
        "9",
        "$INSUNITS",
        "70",
        "4",
        "9",
        "$CHUTE_SCALE",
        "1",
        str(metadata["scale"]),
        "9",
        "$CHUTE_PIECE_COUNT",
        "1",
        str(metadata["piece_count"]),
        "0",
        "ENDSEC",
        "0",
        "SECTION",
        "2",
        "ENTITIES",
    ]
    for piece in pieces:
        if not piece.cut_outline:
            continue
        lines.extend(_dxf_polyline(piece.name, piece.cut_outline))
        if piece.seam_outline:
            lines.extend(_dxf_polyline(f"{piece.name}_SEAM", piece.seam_outline))
        cx, cy = _polygon_centroid(piece.seam_outline or piece.cut_outline)
        lines.extend([
            "0",
            "TEXT",
            "8",
            f"{piece.name}_LABEL",
            "10",
            f"{cx:.4f}",
            "20",
            f"{cy:.4f}",
            "40",
            "10.0",
            "1",
            f"{piece.name} x{piece.count}",
        ])
    lines.extend(["0", "ENDSEC", "0", "EOF"])
    _write_text(path, "\n".join(lines) + "\n")
