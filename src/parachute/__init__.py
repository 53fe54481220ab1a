"""Parametric parachute geometry and pattern piece engine."""

from __future__ import annotations

from importlib import import_module

__all__ = [
    "ChuteDesign",
    "ChuteError",
    "ChuteSection",
    "CircularSection",
    "DuplicateIdentifier",
    "EmptyPiece",
    "EmptySegment",
    "EvalError",
    "ExpressionContext",
    "Fabric",
    "Gore",
    "InputValue",
    "InvalidIdentifier",
    "ParameterValue",
    "PatternPiece",
    "PatternPieceCollection",
    "PolygonalSection",
    "SeamAllowances",
    "Segment",
    "StandardUnit",
    "build_gore",
]

_ATTRIBUTE_MODULES: dict[str, str] = {
    "ChuteDesign": ".design",
    "ChuteError": ".errors",
    "ChuteSection": ".sections",
    "CircularSection": ".sections",
    "DuplicateIdentifier": ".errors",
    "EmptyPiece": ".errors",
    "EmptySegment": ".errors",
    "EvalError": ".errors",
    "ExpressionContext": ".expressions",
    "Fabric": ".materials",
    "Gore": ".gore",
    "InputValue": ".variables",
    "InvalidIdentifier": ".errors",
    "ParameterValue": ".variables",
    "PatternPiece": ".pattern",
    "PatternPieceCollection": ".collection",
    "PolygonalSection": ".sections",
    "SeamAllowances": ".gore",
    "Segment": ".segment",
    "StandardUnit": ".variables",
    "build_gore": ".gore",
}


def __getattr__(name: str):
    try:
        module_name = _ATTRIBUTE_MODULES[name]
    except KeyError as exc:
        raise AttributeError(f"module 'parachute' has no attribute {name!r}") from exc

    module = import_module(module_name, __name__)
    value = getattr(module, name)
    globals()[name] = value
    return value
