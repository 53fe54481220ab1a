"""Fabric and suspension line lookup tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

__all__ = [
    "DEFAULT_FABRIC",
    "DEFAULT_FABRICS",
    "Fabric",
    "SuspensionLine",
    "fabric_by_name",
]

# Grams per square metre in one ounce per square yard.
GSM_PER_OZ_YD2 = 33.906


@dataclass(frozen=True, slots=True)
class Fabric:
    """Canopy fabric identified by name and area density."""

    name: str
    area_density_gsm: float

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Fabric":
        return cls(name=str(payload["name"]), area_density_gsm=float(payload["area_density_gsm"]))

    def to_mapping(self) -> dict[str, Any]:
        return {"name": self.name, "area_density_gsm": self.area_density_gsm}

    def name_weight(self, imperial: bool = False) -> str:
        if imperial:
            return f"{self.name} ({self.area_density_gsm / GSM_PER_OZ_YD2:.1f} oz)"
        return f"{self.name} ({self.area_density_gsm:.0f} gsm)"

    def mass_kg(self, area_m2: float) -> float:
        return area_m2 * self.area_density_gsm / 1000.0


@dataclass(frozen=True, slots=True)
class SuspensionLine:
    """Suspension line identified by name, breaking strength and weight."""

    name: str
    rating_newtons: float
    linear_density_g_m: float

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "SuspensionLine":
        return cls(
            name=str(payload["name"]),
            rating_newtons=float(payload["rating_newtons"]),
            linear_density_g_m=float(payload["linear_density_g_m"]),
        )


DEFAULT_FABRICS: tuple[Fabric, ...] = (
    Fabric("Ripstop nylon", 38.0),
    Fabric("Ripstop nylon", 48.0),
    Fabric("Ripstop nylon", 67.0),
)

DEFAULT_FABRIC = DEFAULT_FABRICS[0]


def fabric_by_name(
    name: str,
    area_density_gsm: float | None = None,
    catalog: Sequence[Fabric] = DEFAULT_FABRICS,
) -> Fabric:
    """Return the first catalog fabric matching *name* (and density, if given)."""

    for fabric in catalog:
        if fabric.name != name:
            continue
        if area_density_gsm is None or abs(fabric.area_density_gsm - area_density_gsm) < 1e-9:
            return fabric
    raise KeyError(f"Unknown fabric {name!r}")
