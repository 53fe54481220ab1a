"""Boundary segments of flat pattern pieces."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator

import numpy as np

from .errors import EmptySegment

__all__ = ["Point", "Segment"]

Point = tuple[float, float]


@dataclass(slots=True)
class Segment:
    """Ordered run of 2D points sharing one seam allowance.

    ``mirror_x``, ``reverse`` and ``with_seam_allowance`` return new
    segments and leave the original untouched. ``scale`` and ``add_point``
    change the segment in place.
    """

    points: list[Point] = field(default_factory=list)
    seam_allowance: float = 0.0

    def __post_init__(self) -> None:
        self.points = [(float(x), float(y)) for x, y in self.points]
        self.seam_allowance = float(self.seam_allowance)

    @classmethod
    def from_points(cls, points: Iterable[Iterable[float]], seam_allowance: float = 0.0) -> "Segment":
        return cls(points=[tuple(point) for point in points], seam_allowance=seam_allowance)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def add_point(self, point: Iterable[float]) -> None:
        x, y = point
        self.points.append((float(x), float(y)))

    def add_point_xy(self, x: float, y: float) -> None:
        self.points.append((float(x), float(y)))

    def mirror_x(self) -> "Segment":
        """Copy with every x negated (mirror across the vertical axis)."""

        return replace(self, points=[(-x, y) for x, y in self.points])

    def reverse(self) -> "Segment":
        """Copy with the point order reversed."""

        return replace(self, points=self.points[::-1])

    def with_seam_allowance(self, seam_allowance: float) -> "Segment":
        return replace(self, points=list(self.points), seam_allowance=seam_allowance)

    def scale(self, scale_x: float, scale_y: float) -> None:
        """Scale every point about the origin, in place."""

        self.points = [(x * scale_x, y * scale_y) for x, y in self.points]

    def get_point(self, index: int) -> Point:
        return self.points[index]

    def first(self) -> Point:
        if not self.points:
            raise EmptySegment("Segment has no points")
        return self.points[0]

    def last(self) -> Point:
        if not self.points:
            raise EmptySegment("Segment has no points")
        return self.points[-1]

    def length(self) -> float:
        """Polyline length of the segment."""

        if len(self.points) < 2:
            return 0.0
        coords = self.to_array()
        return float(np.linalg.norm(np.diff(coords, axis=0), axis=1).sum())

    def to_array(self) -> np.ndarray:
        return np.asarray(self.points, dtype=float).reshape(-1, 2)
