"""Parametric cross-section bands of a canopy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .curves import Line, Polyline
from .errors import EvalError, SectionError
from .expressions import ExpressionContext
from .gore import SeamAllowances, build_gore, gore_edge_from_profile
from .materials import DEFAULT_FABRIC, Fabric
from .pattern import PatternPiece
from .segment import Point

__all__ = [
    "ChuteSection",
    "CircularSection",
    "ExpressionIssue",
    "PolygonalSection",
    "SectionEvaluation",
    "SectionGeometry",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExpressionIssue:
    """An expression of a section that failed and was replaced by ``0.0``."""

    expression: str
    error: EvalError


@dataclass(frozen=True, slots=True)
class SectionEvaluation:
    """Curve of a section for one evaluation pass, with failed expressions."""

    curve: Line | Polyline
    issues: tuple[ExpressionIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues


@dataclass(slots=True)
class CircularSection:
    """Band that bends into a disk, cone or cylinder: one straight line.

    ``expressions`` holds begin x, begin y, end x and end y.
    """

    expressions: tuple[str, str, str, str] = ("0", "0", "1.0", "0.0")

    def __post_init__(self) -> None:
        if len(self.expressions) != 4:
            raise SectionError("A circular section needs exactly four expressions.")
        self.expressions = tuple(str(expression) for expression in self.expressions)


@dataclass(slots=True)
class PolygonalSection:
    """Band whose profile is a polyline through expression-defined vertices."""

    vertices: tuple[tuple[str, str], ...] = (("0", "0"), ("1.0", "0.0"))

    def __post_init__(self) -> None:
        if len(self.vertices) < 2:
            raise SectionError("A polygonal section needs at least two vertices.")
        self.vertices = tuple((str(x), str(y)) for x, y in self.vertices)


SectionGeometry = Union[CircularSection, PolygonalSection]


def _evaluate_all(
    context: ExpressionContext,
    expressions: tuple[str, ...],
) -> tuple[list[float], list[ExpressionIssue]]:
    values: list[float] = []
    issues: list[ExpressionIssue] = []
    for expression in expressions:
        result = context.try_evaluate(expression)
        values.append(result.value)
        if not result.ok:
            issues.append(ExpressionIssue(expression, result.error))
    return values, issues


def evaluate_geometry(geometry: SectionGeometry, context: ExpressionContext) -> SectionEvaluation:
    """Evaluate the expressions of *geometry* into a curve."""

    match geometry:
        case CircularSection(expressions=expressions):
            (bx, by, ex, ey), issues = _evaluate_all(context, expressions)
            curve: Line | Polyline = Line(begin=(bx, by), end=(ex, ey))
        case PolygonalSection(vertices=vertices):
            flat = tuple(expression for vertex in vertices for expression in vertex)
            values, issues = _evaluate_all(context, flat)
            curve = Polyline(tuple(zip(values[0::2], values[1::2])))
        case _:
            raise SectionError(f"Unsupported section geometry {type(geometry).__name__}")
    return SectionEvaluation(curve=curve, issues=tuple(issues))


@dataclass(slots=True)
class ChuteSection:
    """One band of the canopy with its gore count, fabric and seam allowances."""

    geometry: SectionGeometry = field(default_factory=CircularSection)
    gores: int = 8
    fabric: Fabric = DEFAULT_FABRIC
    seam_allowance: SeamAllowances = SeamAllowances()

    def __post_init__(self) -> None:
        if int(self.gores) != self.gores or self.gores <= 0:
            raise SectionError(f"Number of gores must be a positive integer, got {self.gores!r}.")
        self.gores = int(self.gores)
        self.seam_allowance = SeamAllowances(*(float(value) for value in self.seam_allowance))

    @classmethod
    def circular(cls, *expressions: str, **kwargs: Any) -> "ChuteSection":
        geometry = CircularSection(expressions) if expressions else CircularSection()
        return cls(geometry=geometry, **kwargs)

    def evaluate(self, context: ExpressionContext) -> SectionEvaluation:
        evaluation = evaluate_geometry(self.geometry, context)
        for issue in evaluation.issues:
            logger.warning("Section expression failed, using 0.0: %s", issue.error)
        return evaluation

    def cross_section(self, context: ExpressionContext, resolution: int) -> list[Point]:
        """Profile of the band as (radius, height) points."""

        return self.evaluate(context).curve.to_points(resolution)

    def gore(
        self,
        context: ExpressionContext,
        resolution: int,
        *,
        name: str = "gore",
        corner_cutout: bool = False,
        seam_allowance: SeamAllowances | None = None,
    ) -> PatternPiece:
        """Flat, computed pattern piece of one gore of this band."""

        edge = gore_edge_from_profile(self.cross_section(context, resolution), self.gores)
        return build_gore(
            edge,
            None,
            seam_allowance or self.seam_allowance,
            name=name,
            corner_cutout=corner_cutout,
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ChuteSection":
        kind = payload.get("type", "circular")
        if kind == "circular":
            geometry: SectionGeometry = CircularSection(tuple(payload["expressions"]))
        elif kind == "polygonal":
            geometry = PolygonalSection(tuple(tuple(vertex) for vertex in payload["vertices"]))
        else:
            raise SectionError(f"Unknown section type {kind!r}")
        fabric_payload = payload.get("fabric")
        seams = payload.get("seam_allowance")
        return cls(
            geometry=geometry,
            gores=payload.get("gores", 8),
            fabric=Fabric.from_mapping(fabric_payload) if fabric_payload else DEFAULT_FABRIC,
            seam_allowance=SeamAllowances(*seams) if seams is not None else SeamAllowances(),
        )

    def to_mapping(self) -> dict[str, Any]:
        mapping: dict[str, Any]
        match self.geometry:
            case CircularSection(expressions=expressions):
                mapping = {"type": "circular", "expressions": list(expressions)}
            case PolygonalSection(vertices=vertices):
                mapping = {"type": "polygonal", "vertices": [list(vertex) for vertex in vertices]}
            case _:
                raise SectionError(f"Unsupported section geometry {type(self.geometry).__name__}")
        mapping.update(
            {
                "gores": self.gores,
                "fabric": self.fabric.to_mapping(),
                "seam_allowance": list(self.seam_allowance),
            }
        )
        return mapping
