"""Closed pattern pieces assembled from boundary segments."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from .errors import EmptyPiece
from .segment import Point, Segment

__all__ = [
    "MITER_LIMIT",
    "PatternPiece",
    "offset_boundary",
    "polygon_area",
]

logger = logging.getLogger(__name__)

# Longest allowed miter, as a multiple of the larger adjacent seam allowance.
MITER_LIMIT = 4.0

_SAME_POINT_TOLERANCE = 1e-12


def polygon_area(points: Sequence[Point]) -> float:
    """Signed shoelace area; counterclockwise boundaries are positive."""

    if not points:
        raise EmptyPiece("Cannot compute the area of an empty boundary")
    closed = list(points)
    closed.append(closed[0])
    total = 0.0
    for (x0, y0), (x1, y1) in zip(closed, closed[1:]):
        total += x0 * y1 - y0 * x1
    return total / 2.0


@dataclass(frozen=True, slots=True)
class _BoundaryVertex:
    point: Point
    allowance: float
    owner: int


def _same_point(a: Point, b: Point) -> bool:
    return math.dist(a, b) <= _SAME_POINT_TOLERANCE


def _merge_vertices(segments: Sequence[Segment]) -> list[_BoundaryVertex]:
    # The edge leaving a vertex carries the allowance of the vertex's segment.
    # Repeated junction points are merged and the later segment owns them.
    merged: list[_BoundaryVertex] = []
    for owner, segment in enumerate(segments):
        for point in segment.points:
            vertex = _BoundaryVertex(point, segment.seam_allowance, owner)
            if merged and _same_point(merged[-1].point, point):
                merged[-1] = vertex
            else:
                merged.append(vertex)
    if len(merged) > 1 and _same_point(merged[-1].point, merged[0].point):
        merged.pop()
    return merged


def _line_intersection(
    point_a: Point,
    direction_a: Point,
    point_b: Point,
    direction_b: Point,
) -> Point | None:
    det = direction_a[0] * direction_b[1] - direction_a[1] * direction_b[0]
    if math.isclose(det, 0.0, abs_tol=1e-12):
        return None
    diff_x = point_b[0] - point_a[0]
    diff_y = point_b[1] - point_a[1]
    t = (diff_x * direction_b[1] - diff_y * direction_b[0]) / det
    return (point_a[0] + direction_a[0] * t, point_a[1] + direction_a[1] * t)


def offset_boundary(
    segments: Sequence[Segment],
    *,
    corner_cutout: bool = False,
) -> list[Point] | None:
    """Offset a closed segment boundary outward by each segment's allowance.

    Corners are mitered. Overlong miters, reversals and steps between
    parallel edges are beveled, and ``corner_cutout`` bevels every corner
    where two segments meet. Returns ``None`` when the boundary has fewer
    than three distinct points or no area.
    """

    vertices = _merge_vertices(segments)
    count = len(vertices)
    if count < 3:
        return None
    area = polygon_area([vertex.point for vertex in vertices])
    if math.isclose(area, 0.0, abs_tol=1e-12):
        return None
    orientation = 1.0 if area > 0.0 else -1.0

    offset_points: list[Point] = []
    for idx, current in enumerate(vertices):
        previous = vertices[idx - 1]
        following = vertices[(idx + 1) % count]
        distance_prev = previous.allowance
        distance_next = current.allowance

        edge_prev = (
            current.point[0] - previous.point[0],
            current.point[1] - previous.point[1],
        )
        edge_next = (
            following.point[0] - current.point[0],
            following.point[1] - current.point[1],
        )
        length_prev = math.hypot(*edge_prev)
        length_next = math.hypot(*edge_next)
        if length_prev <= 1e-12 or length_next <= 1e-12:
            return None

        normal_prev = (
            orientation * edge_prev[1] / length_prev,
            -orientation * edge_prev[0] / length_prev,
        )
        normal_next = (
            orientation * edge_next[1] / length_next,
            -orientation * edge_next[0] / length_next,
        )
        point_prev = (
            current.point[0] + normal_prev[0] * distance_prev,
            current.point[1] + normal_prev[1] * distance_prev,
        )
        point_next = (
            current.point[0] + normal_next[0] * distance_next,
            current.point[1] + normal_next[1] * distance_next,
        )

        intersection = _line_intersection(point_prev, edge_prev, point_next, edge_next)
        if intersection is None:
            if _same_point(point_prev, point_next):
                offset_points.append(point_next)
            else:
                offset_points.extend((point_prev, point_next))
            continue

        junction = previous.owner != current.owner
        miter = math.dist(intersection, current.point)
        limit = MITER_LIMIT * max(distance_prev, distance_next)
        if (corner_cutout and junction) or miter > limit + 1e-12:
            offset_points.extend((point_prev, point_next))
        else:
            offset_points.append(intersection)

    return offset_points


class PatternPiece:
    """Closed flat piece whose boundary is a list of segments.

    Segments must be supplied in counterclockwise order and are joined end to
    start; the last point wraps around to the first. ``compute`` has to be
    called after the segments change; adding a segment discards the computed
    points so stale geometry is never served.
    """

    def __init__(
        self,
        name: str = "pattern",
        segments: Iterable[Segment] | None = None,
        *,
        corner_cutout: bool = False,
    ) -> None:
        self.name = name
        self.corner_cutout = corner_cutout
        self.segments: list[Segment] = []
        self.points: list[Point] = []
        self.computed_points: list[Point] = []
        self.warnings: list[str] = []
        for segment in segments or ():
            self.add_segment(segment)

    def __repr__(self) -> str:
        return f"PatternPiece(name={self.name!r}, segments={len(self.segments)})"

    def add_segment(self, segment: Segment) -> None:
        self.segments.append(segment)
        self.points = []
        self.computed_points = []

    def compute(self) -> None:
        """Rebuild the design boundary and the seam allowance boundary."""

        self.warnings = []
        self.points = [point for segment in self.segments for point in segment.points]
        if all(segment.seam_allowance == 0.0 for segment in self.segments):
            self.computed_points = list(self.points)
            return

        offset = offset_boundary(self.segments, corner_cutout=self.corner_cutout)
        if offset is None:
            message = "Pattern piece lacks sufficient geometry for seam allowance offset."
            logger.warning("%s: %s", self.name, message)
            self.warnings.append(message)
            self.computed_points = list(self.points)
        else:
            self.computed_points = offset
        logger.debug(
            "Computed %s: %d boundary points, %d cut points",
            self.name,
            len(self.points),
            len(self.computed_points),
        )

    def get_area(self, including_seams: bool = False) -> float:
        """Signed area of the design boundary, or of the cut boundary."""

        points = self.computed_points if including_seams else self.points
        if not points:
            raise EmptyPiece(f"Pattern piece {self.name!r} has no computed points")
        return polygon_area(points)

    @property
    def chute_area(self) -> float:
        return self.get_area(including_seams=False)

    @property
    def fabric_area(self) -> float:
        return self.get_area(including_seams=True)

    def first_point(self) -> Point:
        if not self.points:
            raise EmptyPiece(f"Pattern piece {self.name!r} has no computed points")
        return self.points[0]

    def last_point(self) -> Point:
        if not self.points:
            raise EmptyPiece(f"Pattern piece {self.name!r} has no computed points")
        return self.points[-1]

    def scaled(self, factor: float) -> "PatternPiece":
        """Computed copy with coordinates and seam allowances multiplied by *factor*."""

        copies = []
        for segment in self.segments:
            copy = segment.with_seam_allowance(segment.seam_allowance * factor)
            copy.scale(factor, factor)
            copies.append(copy)
        piece = PatternPiece(self.name, copies, corner_cutout=self.corner_cutout)
        piece.compute()
        return piece

    def to_millimeters(self) -> "PatternPiece":
        """Computed copy in millimetres, the unit drawing files use."""

        return self.scaled(1000.0)
