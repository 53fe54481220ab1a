"""User-editable design inputs and derived parameters."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from .errors import ChuteError
from .expressions import ExpressionContext

__all__ = [
    "EntryStatus",
    "InputValue",
    "ParameterValue",
    "StandardUnit",
    "evaluate_variables",
]

logger = logging.getLogger(__name__)


class StandardUnit(str, Enum):
    """Unit family used to display and edit a value.

    Stored values are always SI; the unit family only picks the display scale.
    """

    UNITLESS = "unitless"
    METER_FOOT = "m | ft"
    MILLIMETER_INCH = "mm | in"
    RADIAN = "rad"
    DEGREE = "deg"

    def display_scale(self, imperial: bool = False) -> float:
        """SI value of one display unit."""

        return _DISPLAY_UNITS[self][1 if imperial else 0][1]

    def display_label(self, imperial: bool = False) -> str:
        return _DISPLAY_UNITS[self][1 if imperial else 0][0]

    def to_display(self, value: float, imperial: bool = False) -> float:
        return value / self.display_scale(imperial)

    def from_display(self, value: float, imperial: bool = False) -> float:
        return value * self.display_scale(imperial)


# (metric label, scale), (imperial label, scale)
_DISPLAY_UNITS: dict[StandardUnit, tuple[tuple[str, float], tuple[str, float]]] = {
    StandardUnit.UNITLESS: (("-", 1.0), ("-", 1.0)),
    StandardUnit.METER_FOOT: (("m", 1.0), ("ft", 0.3048)),
    StandardUnit.MILLIMETER_INCH: (("mm", 0.001), ("in", 0.0254)),
    StandardUnit.RADIAN: (("rad", 1.0), ("rad", 1.0)),
    StandardUnit.DEGREE: (("deg", math.pi / 180.0), ("deg", math.pi / 180.0)),
}


@dataclass(slots=True)
class InputValue:
    """A value the user sets directly, usually through a slider."""

    id: str
    value: float = 0.0
    unit: StandardUnit = StandardUnit.METER_FOOT
    description: str = ""
    range: tuple[float, float] = (0.0, 10.0)

    def __post_init__(self) -> None:
        self.value = float(self.value)
        self.unit = StandardUnit(self.unit)
        low, high = (float(bound) for bound in self.range)
        self.range = (low, high)

    def set_display_value(self, value: float, imperial: bool = False) -> None:
        """Set the value from display units, clamped to ``range``."""

        low, high = self.range
        si_value = self.unit.from_display(value, imperial)
        self.value = min(max(si_value, low), high)

    def display_value(self, imperial: bool = False) -> float:
        return self.unit.to_display(self.value, imperial)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "InputValue":
        raw_range = payload.get("range", (0.0, 10.0))
        return cls(
            id=str(payload["id"]),
            value=float(payload.get("value", 0.0)),
            unit=StandardUnit(payload.get("unit", StandardUnit.METER_FOOT.value)),
            description=str(payload.get("description", "")),
            range=(float(raw_range[0]), float(raw_range[1])),
        )

    def to_mapping(self) -> dict[str, Any]:
        mapping: dict[str, Any] = {
            "id": self.id,
            "value": self.value,
            "unit": self.unit.value,
            "range": list(self.range),
        }
        if self.description:
            mapping["description"] = self.description
        return mapping


@dataclass(slots=True)
class ParameterValue:
    """A value derived from an expression over earlier inputs and parameters."""

    id: str
    expression: str
    display_unit: StandardUnit = StandardUnit.METER_FOOT

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ParameterValue":
        return cls(
            id=str(payload["id"]),
            expression=str(payload["expression"]),
            display_unit=StandardUnit(
                payload.get("display_unit", StandardUnit.METER_FOOT.value)
            ),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "expression": self.expression,
            "display_unit": self.display_unit.value,
        }


@dataclass(frozen=True, slots=True)
class EntryStatus:
    """Evaluation outcome of one input or parameter."""

    id: str
    ok: bool
    value: float = 0.0
    error: ChuteError | None = None

    @property
    def message(self) -> str | None:
        return None if self.error is None else f"Error: {self.error}"


def evaluate_variables(
    inputs: Iterable[InputValue],
    parameters: Iterable[ParameterValue],
) -> tuple[ExpressionContext, list[EntryStatus]]:
    """Build a fresh context from the inputs and parameters, in order.

    Each entry is reported separately; a failing entry is left out of the
    context and evaluation carries on with the next one.
    """

    context = ExpressionContext()
    statuses: list[EntryStatus] = []
    for entry in inputs:
        try:
            context.set_value(entry.id, entry.value)
        except ChuteError as exc:
            logger.warning("Input %r rejected: %s", entry.id, exc)
            statuses.append(EntryStatus(id=entry.id, ok=False, error=exc))
        else:
            statuses.append(EntryStatus(id=entry.id, ok=True, value=entry.value))

    for parameter in parameters:
        try:
            context.check_identifier(parameter.id)
            value = context.evaluate(parameter.expression)
            context.set_value(parameter.id, value)
        except ChuteError as exc:
            logger.warning("Parameter %r failed: %s", parameter.id, exc)
            statuses.append(EntryStatus(id=parameter.id, ok=False, error=exc))
        else:
            statuses.append(EntryStatus(id=parameter.id, ok=True, value=value))

    logger.debug(
        "Evaluated %d design variables (%d failed)",
        len(statuses),
        sum(1 for status in statuses if not status.ok),
    )
    return context, statuses
