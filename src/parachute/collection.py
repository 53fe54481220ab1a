"""Pattern pieces of a whole parachute with their repeat counts."""

from __future__ import annotations

from typing import Iterable, Iterator

from .pattern import PatternPiece

__all__ = ["PatternPieceCollection"]


class PatternPieceCollection:
    """Pairs of pattern piece and number of times it is cut."""

    def __init__(self, pieces: Iterable[tuple[PatternPiece, int]] | None = None) -> None:
        self.pieces: list[tuple[PatternPiece, int]] = []
        for piece, count in pieces or ():
            self.add(piece, count)

    def add(self, piece: PatternPiece, count: int = 1) -> None:
        if count < 0:
            raise ValueError(f"Repeat count must not be negative, got {count}.")
        self.pieces.append((piece, int(count)))

    def __iter__(self) -> Iterator[tuple[PatternPiece, int]]:
        return iter(self.pieces)

    def __len__(self) -> int:
        return len(self.pieces)

    def total_area(self, including_seams: bool = False) -> float:
        return sum(
            (piece.get_area(including_seams) * count for piece, count in self.pieces),
            0.0,
        )

    def piece_count(self) -> int:
        """Number of pieces to cut, repeats included."""

        return sum(count for _, count in self.pieces)
