"""Four-sided gore panels built from edge curves."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Sequence

from .curves import cumulative_length
from .pattern import PatternPiece
from .segment import Point, Segment

__all__ = [
    "Gore",
    "SeamAllowances",
    "build_gore",
    "gore_edge_from_profile",
]


class SeamAllowances(NamedTuple):
    """Seam allowance per gore edge, in metres."""

    right: float = 0.01
    top: float = 0.01
    left: float = 0.01
    bottom: float = 0.01

    @classmethod
    def uniform(cls, value: float) -> "SeamAllowances":
        return cls(value, value, value, value)


@dataclass(slots=True)
class Gore:
    """Gore with a straight top and bottom edge.

    Both edge curves run from bottom to top. A symmetric gore uses the right
    edge mirrored across the vertical axis as its left edge.
    """

    coords_right: Segment
    coords_left: Segment
    seam_allowances: SeamAllowances = SeamAllowances()

    @classmethod
    def symmetric(
        cls,
        coords_right: Segment,
        seam_allowances: SeamAllowances = SeamAllowances(),
    ) -> "Gore":
        return cls(coords_right, coords_right.mirror_x(), SeamAllowances(*seam_allowances))

    def pattern_piece(self, *, name: str = "gore", corner_cutout: bool = False) -> PatternPiece:
        """Counterclockwise piece: right edge, top, reversed left edge, bottom."""

        right, top, left, bottom = self.seam_allowances
        segment_right = self.coords_right.with_seam_allowance(right)
        segment_left = self.coords_left.reverse().with_seam_allowance(left)

        segment_top = Segment(seam_allowance=top)
        segment_top.add_point(segment_right.last())
        segment_top.add_point(segment_left.first())

        segment_bottom = Segment(seam_allowance=bottom)
        segment_bottom.add_point(segment_left.last())
        segment_bottom.add_point(segment_right.first())

        piece = PatternPiece(
            name,
            (segment_right, segment_top, segment_left, segment_bottom),
            corner_cutout=corner_cutout,
        )
        piece.compute()
        return piece


def build_gore(
    right_curve: Segment,
    left_curve: Segment | None = None,
    seams: Sequence[float] = SeamAllowances(),
    *,
    name: str = "gore",
    corner_cutout: bool = False,
) -> PatternPiece:
    """Build and compute the pattern piece of a gore.

    Without *left_curve* the gore is symmetric about the vertical axis.
    """

    allowances = SeamAllowances(*seams)
    if left_curve is None:
        gore = Gore.symmetric(right_curve, allowances)
    else:
        gore = Gore(right_curve, left_curve, allowances)
    return gore.pattern_piece(name=name, corner_cutout=corner_cutout)


def gore_edge_from_profile(profile: Sequence[Point], gores: int) -> Segment:
    """Right gore edge for a band of revolution with *gores* panels.

    The profile holds (radius, height) points. It is walked from bottom to
    top (lower end first, ties broken by the larger radius); the flat edge
    places each point at half of its circumference share across and at its
    arc length along the profile up.
    """

    if gores <= 0:
        raise ValueError("Gore count must be positive.")
    points = list(profile)
    if len(points) >= 2:
        first, last = points[0], points[-1]
        if first[1] > last[1] or (first[1] == last[1] and abs(first[0]) < abs(last[0])):
            points.reverse()
    heights = cumulative_length(points)
    return Segment(
        points=[(math.pi * abs(radius) / gores, height) for (radius, _), height in zip(points, heights)]
    )
