"""Tests for the parachute pattern exporter."""

from __future__ import annotations

from pathlib import Path

import pytest

from exporters.patterns import FlatPiece, PatternExporter
from parachute.collection import PatternPieceCollection
from parachute.design import ChuteDesign
from parachute.errors import ExportError
from parachute.pattern import PatternPiece
from parachute.segment import Segment


@pytest.fixture()
def collection() -> PatternPieceCollection:
    piece = PatternPiece(
        "panel",
        [Segment([(0.0, 0.0), (0.5, 0.0), (0.5, 1.0), (0.0, 1.0)], 0.01)],
    )
    piece.compute()
    return PatternPieceCollection([(piece, 3)])


def _dxf_pairs(path: Path) -> list[tuple[str, str]]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return list(zip(lines[0::2], lines[1::2]))


def test_export_creates_requested_formats(tmp_path: Path, collection: PatternPieceCollection) -> None:
    created = PatternExporter().export(collection, output_dir=tmp_path / "out", formats=["SVG", "dxf"])

    assert set(created) == {"svg", "dxf"}
    for fmt, path in created.items():
        assert path.exists(), f"Expected {fmt} output to exist"
        assert path.suffix == f".{fmt}"


def test_unsupported_format_is_rejected(tmp_path: Path, collection: PatternPieceCollection) -> None:
    with pytest.raises(ValueError):
        PatternExporter().export(collection, output_dir=tmp_path, formats=["pdf"])


def test_flat_piece_is_in_millimetres(collection: PatternPieceCollection) -> None:
    (flat,) = PatternExporter().flatten(collection)

    assert isinstance(flat, FlatPiece)
    assert flat.count == 3
    assert flat.seam_outline[2] == pytest.approx((500.0, 1000.0))
    assert flat.cut_outline[0] == pytest.approx((-10.0, -10.0))
    assert flat.seam_allowances == pytest.approx((10.0,))
    assert flat.metadata["chute_area"] == pytest.approx(500_000.0)


def test_pieces_are_laid_out_without_overlap() -> None:
    entries = []
    for name in ("crown", "skirt", "vent"):
        piece = PatternPiece(name, [Segment([(0.0, 0.0), (0.5, 0.0), (0.5, 1.0), (0.0, 1.0)], 0.01)])
        piece.compute()
        entries.append((piece, 2))
    pieces = PatternExporter().flatten(PatternPieceCollection(entries))

    assert pieces[0].cut_outline[0] == pytest.approx((-10.0, -10.0))
    previous_right = None
    for flat in pieces:
        xs = [x for x, _ in flat.cut_outline + flat.seam_outline]
        ys = [y for _, y in flat.cut_outline]
        assert min(ys) == pytest.approx(-10.0)
        if previous_right is not None:
            assert min(xs) == pytest.approx(previous_right + 50.0)
        previous_right = max(xs)


def test_dxf_contains_closed_polylines_per_layer(tmp_path: Path, collection: PatternPieceCollection) -> None:
    created = PatternExporter().export(collection, output_dir=tmp_path, formats=["dxf"])
    pairs = _dxf_pairs(created["dxf"])

    assert ("9", "$CHUTE_PIECE_COUNT") in pairs
    assert ("1", "3") in pairs
    polylines = [index for index, pair in enumerate(pairs) if pair == ("0", "LWPOLYLINE")]
    assert len(polylines) == 2
    layers = [pairs[index + 1] for index in polylines]
    assert layers == [("8", "panel"), ("8", "panel_SEAM")]
    for index in polylines:
        assert pairs[index + 2] == ("90", "4")
        assert pairs[index + 3] == ("70", "1")
    assert pairs[-1] == ("0", "EOF")


def test_svg_flips_y_and_records_allowance(tmp_path: Path, collection: PatternPieceCollection) -> None:
    created = PatternExporter().export(
        collection, output_dir=tmp_path, formats=["svg"], metadata={"design": "Test <chute>"}
    )
    svg = created["svg"].read_text(encoding="utf-8")

    assert "transform=\"scale(1,-1)\"" in svg
    assert "data-seam-allowance=\"10\"" in svg
    assert "class=\"cut-outline\"" in svg
    assert "class=\"seam-outline\"" in svg
    assert "panel x3" in svg


def test_export_of_default_design(tmp_path: Path) -> None:
    collection = ChuteDesign.default().pattern_pieces(resolution=20)
    created = PatternExporter(scale=1.0).export(collection, output_dir=tmp_path)
    pairs = _dxf_pairs(created["dxf"])

    assert ("8", "section1_gore") in pairs
    assert ("8", "section1_gore_SEAM") in pairs


def test_write_failure_raises_export_error(tmp_path: Path, collection: PatternPieceCollection) -> None:
    blocker = tmp_path / "not_a_directory"
    blocker.write_text("occupied", encoding="utf-8")

    with pytest.raises(ExportError):
        PatternExporter().export(collection, output_dir=blocker)
