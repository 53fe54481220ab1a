"""Discretisation of cross-section curves into point sequences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .segment import Point

__all__ = ["Line", "Polyline", "check_resolution", "cumulative_length"]


def check_resolution(resolution: int) -> int:
    resolution = int(resolution)
    if resolution < 2:
        raise ValueError("Resolution must be at least 2 to include both endpoints.")
    return resolution


@dataclass(frozen=True, slots=True)
class Line:
    """Straight line between two points."""

    begin: Point
    end: Point

    def to_points(self, resolution: int) -> list[Point]:
        """``resolution`` evenly spaced points, both endpoints included."""

        resolution = check_resolution(resolution)
        coords = np.linspace(self.begin, self.end, resolution)
        return [(float(x), float(y)) for x, y in coords]

    @property
    def length(self) -> float:
        return float(np.hypot(self.end[0] - self.begin[0], self.end[1] - self.begin[1]))


@dataclass(frozen=True, slots=True)
class Polyline:
    """Open polyline through two or more vertices."""

    vertices: tuple[Point, ...]

    def __post_init__(self) -> None:
        if len(self.vertices) < 2:
            raise ValueError("A polyline needs at least two vertices.")

    def to_points(self, resolution: int) -> list[Point]:
        """Points evenly spaced by arc length, plus every vertex of the polyline.

        ``resolution`` samples are taken along the whole length; interior
        vertices that fall between samples are added, so corners survive.
        """

        resolution = check_resolution(resolution)
        coords = np.asarray(self.vertices, dtype=float)
        distances = _cumulative_length(coords)
        total = distances[-1]
        if total <= 1e-12:
            return [(float(coords[0, 0]), float(coords[0, 1]))] * resolution
        samples = np.linspace(0.0, total, resolution)
        # Samples that land on a vertex are replaced by the vertex itself
        gaps = np.abs(samples[:, None] - distances[None, :]).min(axis=1)
        targets = np.union1d(samples[gaps > 1e-9 * total], distances)
        xs = np.interp(targets, distances, coords[:, 0])
        ys = np.interp(targets, distances, coords[:, 1])
        return [(float(x), float(y)) for x, y in zip(xs, ys)]

    @property
    def length(self) -> float:
        return float(_cumulative_length(np.asarray(self.vertices, dtype=float))[-1])


def _cumulative_length(coords: np.ndarray) -> np.ndarray:
    steps = np.linalg.norm(np.diff(coords, axis=0), axis=1)
    return np.concatenate(([0.0], np.cumsum(steps)))


def cumulative_length(points: Sequence[Point]) -> list[float]:
    """Arc length from the first point to each point."""

    if not points:
        return []
    return [float(value) for value in _cumulative_length(np.asarray(points, dtype=float))]
