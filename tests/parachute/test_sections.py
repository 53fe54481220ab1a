"""Tests for parametric chute sections."""

from __future__ import annotations

import math

import pytest

from parachute.curves import Line, Polyline
from parachute.errors import SectionError
from parachute.expressions import ExpressionContext
from parachute.gore import SeamAllowances
from parachute.materials import Fabric
from parachute.sections import ChuteSection, CircularSection, PolygonalSection


@pytest.fixture()
def context() -> ExpressionContext:
    ctx = ExpressionContext()
    ctx.set_value("diameter", 1.0)
    ctx.set_value("height_ratio", 0.7)
    ctx.set_value("vent_ratio", 0.2)
    return ctx


def test_circular_section_endpoints(context: ExpressionContext) -> None:
    section = ChuteSection.circular("vent_ratio*diameter", "height_ratio*diameter", "diameter", "0")
    evaluation = section.evaluate(context)

    assert evaluation.ok
    assert isinstance(evaluation.curve, Line)
    points = section.cross_section(context, 30)
    assert len(points) == 30
    assert points[0] == pytest.approx((0.2, 0.7))
    assert points[-1] == pytest.approx((1.0, 0.0))


def test_failed_expression_falls_back_to_zero(context: ExpressionContext) -> None:
    section = ChuteSection.circular("missing*2", "height_ratio", "diameter", "0")
    evaluation = section.evaluate(context)

    assert not evaluation.ok
    assert evaluation.issues[0].expression == "missing*2"
    assert evaluation.curve.begin == (0.0, 0.7)


def test_polygonal_section(context: ExpressionContext) -> None:
    section = ChuteSection(
        PolygonalSection((("diameter", "0"), ("diameter", "height_ratio"), ("vent_ratio", "height_ratio"))),
        gores=6,
    )
    evaluation = section.evaluate(context)

    assert isinstance(evaluation.curve, Polyline)
    assert evaluation.curve.length == pytest.approx(0.7 + 0.8)
    points = section.cross_section(context, 4)
    assert points[-1] == pytest.approx((0.2, 0.7))


def test_gore_piece_from_section(context: ExpressionContext) -> None:
    section = ChuteSection.circular(
        "vent_ratio*diameter", "height_ratio*diameter", "diameter", "0",
        gores=8,
        seam_allowance=SeamAllowances.uniform(0.0),
    )
    piece = section.gore(context, 50, name="band")

    assert piece.name == "band"
    assert piece.chute_area * 8 == pytest.approx(math.pi * 1.2 * math.hypot(0.8, 0.7))
    assert piece.computed_points == piece.points


def test_polygonal_cross_section_keeps_corner(context: ExpressionContext) -> None:
    section = ChuteSection(
        PolygonalSection((("diameter", "0"), ("diameter", "height_ratio"), ("vent_ratio", "height_ratio"))),
    )
    points = section.cross_section(context, 30)
    assert any(point == pytest.approx((1.0, 0.7)) for point in points)


def test_cylinder_with_annulus_gore_area(context: ExpressionContext) -> None:
    section = ChuteSection(
        PolygonalSection((("diameter", "0"), ("diameter", "height_ratio"), ("vent_ratio", "height_ratio"))),
        gores=8,
        seam_allowance=SeamAllowances.uniform(0.0),
    )
    piece = section.gore(context, 30)

    cylinder = 2.0 * math.pi * 1.0 * 0.7
    annulus = math.pi * (1.0**2 - 0.2**2)
    assert piece.chute_area * 8 == pytest.approx(cylinder + annulus)


def test_to_mapping_rejects_unknown_geometry() -> None:
    section = ChuteSection()
    section.geometry = object()
    with pytest.raises(SectionError):
        section.to_mapping()


def test_gore_seam_override(context: ExpressionContext) -> None:
    section = ChuteSection.circular("0.2", "0.7", "1", "0", seam_allowance=SeamAllowances.uniform(0.0))
    piece = section.gore(context, 10, seam_allowance=SeamAllowances.uniform(0.02))
    assert piece.fabric_area > piece.chute_area


@pytest.mark.parametrize("gores", [0, -3, 2.5])
def test_gore_count_must_be_positive_integer(gores) -> None:
    with pytest.raises(SectionError):
        ChuteSection(gores=gores)


def test_geometry_validation() -> None:
    with pytest.raises(SectionError):
        CircularSection(("0", "0", "1"))
    with pytest.raises(SectionError):
        PolygonalSection((("0", "0"),))


def test_mapping_round_trip() -> None:
    section = ChuteSection(
        PolygonalSection((("0", "0"), ("1", "1"))),
        gores=12,
        fabric=Fabric("Ripstop nylon", 67.0),
        seam_allowance=SeamAllowances(0.01, 0.02, 0.01, 0.03),
    )
    payload = section.to_mapping()

    assert payload["type"] == "polygonal"
    assert payload["vertices"] == [["0", "0"], ["1", "1"]]
    assert ChuteSection.from_mapping(payload) == section


def test_unknown_section_type() -> None:
    with pytest.raises(SectionError):
        ChuteSection.from_mapping({"type": "elliptic", "expressions": ["0", "0", "1", "0"]})
