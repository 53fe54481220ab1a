"""Complete parametric parachute design."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .collection import PatternPieceCollection
from .expressions import ExpressionContext
from .gore import SeamAllowances
from .sections import ChuteSection, SectionEvaluation
from .segment import Point
from .variables import EntryStatus, InputValue, ParameterValue, StandardUnit, evaluate_variables

__all__ = [
    "EXPORT_RESOLUTION",
    "PREVIEW_RESOLUTION",
    "ChuteDesign",
    "DesignEvaluation",
]

logger = logging.getLogger(__name__)

PREVIEW_RESOLUTION = 30
EXPORT_RESOLUTION = 200


@dataclass(slots=True)
class DesignEvaluation:
    """Result of one full evaluation pass over a design."""

    context: ExpressionContext
    variables: list[EntryStatus]
    sections: list[SectionEvaluation]

    @property
    def ok(self) -> bool:
        return all(status.ok for status in self.variables) and all(
            section.ok for section in self.sections
        )


@dataclass(slots=True)
class ChuteDesign:
    """Inputs, derived parameters and cross-section bands of a parachute."""

    name: str = "Untitled Parachute"
    inputs: list[InputValue] = field(default_factory=list)
    parameters: list[ParameterValue] = field(default_factory=list)
    sections: list[ChuteSection] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    use_global_seam_allowance: bool = True
    global_seam_allowance: float = 0.01
    corner_cutout: bool = False

    @classmethod
    def default(cls) -> "ChuteDesign":
        return cls(
            inputs=[
                InputValue("input1", 0.0),
                InputValue("input2", 0.0),
                InputValue("diameter", 1.0, description="Parachute Diameter"),
                InputValue(
                    "height_ratio",
                    0.7,
                    StandardUnit.UNITLESS,
                    "height / diameter of parachute",
                    (0.0, 1.0),
                ),
                InputValue(
                    "vent_ratio",
                    0.2,
                    StandardUnit.UNITLESS,
                    "vent_diameter / diameter of parachute",
                    (0.0, 1.0),
                ),
            ],
            parameters=[
                ParameterValue("param1", "input1*2"),
                ParameterValue("param2", "input2*2"),
                ParameterValue("param3", "param1+param2"),
            ],
            sections=[
                ChuteSection.circular(
                    "vent_ratio*diameter", "height_ratio*diameter", "diameter", "0"
                )
            ],
            instructions=["Cut out fabric"],
        )

    def evaluate(self) -> DesignEvaluation:
        """Rebuild the context from scratch and evaluate every section."""

        context, statuses = evaluate_variables(self.inputs, self.parameters)
        sections = [section.evaluate(context) for section in self.sections]
        return DesignEvaluation(context=context, variables=statuses, sections=sections)

    def cross_sections(self, resolution: int = PREVIEW_RESOLUTION) -> list[list[Point]]:
        evaluation = self.evaluate()
        return [section.curve.to_points(resolution) for section in evaluation.sections]

    def seam_allowances_for(self, section: ChuteSection) -> SeamAllowances:
        if self.use_global_seam_allowance:
            return SeamAllowances.uniform(self.global_seam_allowance)
        return section.seam_allowance

    def pattern_pieces(self, resolution: int = EXPORT_RESOLUTION) -> PatternPieceCollection:
        """One gore piece per section, repeated by the section's gore count."""

        evaluation = self.evaluate()
        collection = PatternPieceCollection()
        for index, section in enumerate(self.sections):
            piece = section.gore(
                evaluation.context,
                resolution,
                name=f"section{index + 1}_gore",
                corner_cutout=self.corner_cutout,
                seam_allowance=self.seam_allowances_for(section),
            )
            collection.add(piece, section.gores)
        logger.debug("Built %d pattern pieces for %s", len(collection), self.name)
        return collection

    def fabric_area(self, resolution: int = EXPORT_RESOLUTION) -> float:
        return self.pattern_pieces(resolution).total_area(including_seams=True)

    def fabric_mass(self, resolution: int = EXPORT_RESOLUTION) -> float:
        """Canopy fabric mass in kilograms, seam allowances included."""

        collection = self.pattern_pieces(resolution)
        return sum(
            section.fabric.mass_kg(piece.fabric_area * count)
            for section, (piece, count) in zip(self.sections, collection)
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ChuteDesign":
        return cls(
            name=str(payload.get("name", "Untitled Parachute")),
            inputs=[InputValue.from_mapping(item) for item in payload.get("inputs", [])],
            parameters=[ParameterValue.from_mapping(item) for item in payload.get("parameters", [])],
            sections=[ChuteSection.from_mapping(item) for item in payload.get("sections", [])],
            instructions=[str(step) for step in payload.get("instructions", [])],
            use_global_seam_allowance=bool(payload.get("use_global_seam_allowance", True)),
            global_seam_allowance=float(payload.get("global_seam_allowance", 0.01)),
            corner_cutout=bool(payload.get("corner_cutout", False)),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "use_global_seam_allowance": self.use_global_seam_allowance,
            "global_seam_allowance": self.global_seam_allowance,
            "corner_cutout": self.corner_cutout,
            "instructions": list(self.instructions),
            "inputs": [item.to_mapping() for item in self.inputs],
            "parameters": [item.to_mapping() for item in self.parameters],
            "sections": [section.to_mapping() for section in self.sections],
        }
