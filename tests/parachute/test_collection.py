"""Tests for pattern piece collections."""

from __future__ import annotations

import pytest

from parachute.collection import PatternPieceCollection
from parachute.pattern import PatternPiece
from parachute.segment import Segment


def _rectangle(width: float, height: float, allowance: float = 0.0) -> PatternPiece:
    piece = PatternPiece(
        f"rect_{width}x{height}",
        [Segment([(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)], allowance)],
    )
    piece.compute()
    return piece


def test_empty_collection_has_no_area() -> None:
    collection = PatternPieceCollection()
    assert collection.total_area() == 0.0
    assert collection.piece_count() == 0
    assert len(collection) == 0


def test_single_piece() -> None:
    collection = PatternPieceCollection([(_rectangle(2.0, 3.0), 1)])
    assert collection.total_area() == pytest.approx(6.0)


def test_repeated_pieces_multiply_area() -> None:
    collection = PatternPieceCollection()
    collection.add(_rectangle(1.0, 1.0), 8)
    collection.add(_rectangle(0.5, 2.0, allowance=0.1), 4)
    collection.add(_rectangle(3.0, 3.0), 0)

    assert collection.total_area() == pytest.approx(8 * 1.0 + 4 * 1.0)
    assert collection.total_area(including_seams=True) == pytest.approx(8 * 1.0 + 4 * 0.7 * 2.2)
    assert collection.piece_count() == 12
    assert [count for _, count in collection] == [8, 4, 0]


def test_negative_count_is_rejected() -> None:
    collection = PatternPieceCollection()
    with pytest.raises(ValueError):
        collection.add(_rectangle(1.0, 1.0), -1)
