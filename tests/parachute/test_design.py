"""End-to-end tests for parachute designs."""

from __future__ import annotations

import math

import pytest

from parachute.design import ChuteDesign
from parachute.gore import SeamAllowances
from parachute.sections import ChuteSection
from parachute.variables import InputValue, ParameterValue

SLANT = math.hypot(0.8, 0.7)


@pytest.fixture()
def design() -> ChuteDesign:
    return ChuteDesign.default()


def test_default_design_evaluates(design: ChuteDesign) -> None:
    evaluation = design.evaluate()

    assert evaluation.ok
    assert evaluation.context.variables == {
        "input1": 0.0,
        "input2": 0.0,
        "diameter": 1.0,
        "height_ratio": 0.7,
        "vent_ratio": 0.2,
        "param1": 0.0,
        "param2": 0.0,
        "param3": 0.0,
    }
    assert design.instructions == ["Cut out fabric"]


def test_cross_section_endpoints(design: ChuteDesign) -> None:
    (profile,) = design.cross_sections()
    assert len(profile) == 30
    assert profile[0] == pytest.approx((0.2, 0.7))
    assert profile[-1] == pytest.approx((1.0, 0.0))


def test_pattern_pieces(design: ChuteDesign) -> None:
    collection = design.pattern_pieces(resolution=40)
    ((piece, count),) = list(collection)

    assert piece.name == "section1_gore"
    assert count == 8
    assert collection.total_area() == pytest.approx(math.pi * 1.2 * SLANT)
    assert collection.total_area(including_seams=True) > collection.total_area()


def test_fabric_mass_uses_section_fabric(design: ChuteDesign) -> None:
    area = design.fabric_area(resolution=40)
    assert design.fabric_mass(resolution=40) == pytest.approx(area * 38.0 / 1000.0)


def test_section_allowances_apply_without_global_override(design: ChuteDesign) -> None:
    design.use_global_seam_allowance = False
    design.sections[0].seam_allowance = SeamAllowances.uniform(0.0)
    collection = design.pattern_pieces(resolution=20)
    assert collection.total_area(including_seams=True) == pytest.approx(collection.total_area())

    design.use_global_seam_allowance = True
    assert design.seam_allowances_for(design.sections[0]) == SeamAllowances.uniform(0.01)


def test_one_bad_parameter_does_not_stop_the_sections() -> None:
    design = ChuteDesign(
        inputs=[InputValue("radius", 2.0)],
        parameters=[ParameterValue("broken", "radius/0"), ParameterValue("height", "radius/2")],
        sections=[ChuteSection.circular("0", "height", "radius", "0")],
    )
    evaluation = design.evaluate()

    assert not evaluation.ok
    assert [status.ok for status in evaluation.variables] == [True, False, True]
    assert evaluation.sections[0].ok
    assert design.cross_sections(2)[0] == [(0.0, 1.0), (2.0, 0.0)]


def test_mapping_round_trip(design: ChuteDesign) -> None:
    assert ChuteDesign.from_mapping(design.to_mapping()) == design
