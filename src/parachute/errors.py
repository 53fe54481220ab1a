"""Exception types raised by the parachute pattern engine."""

from __future__ import annotations

__all__ = [
    "ChuteError",
    "DuplicateIdentifier",
    "EmptyPiece",
    "EmptySegment",
    "EvalError",
    "ExportError",
    "InvalidIdentifier",
    "SectionError",
]


class ChuteError(Exception):
    """Base class for every error raised by the engine."""


class InvalidIdentifier(ChuteError, ValueError):
    """Raised when a variable identifier breaks the naming rules.

    ``code`` is stable and identifies the violated rule: ``whitespace``,
    ``empty``, ``not_alphanumeric`` or ``not_alphabetic_start``.
    """

    def __init__(self, identifier: str, code: str, message: str) -> None:
        self.identifier = identifier
        self.code = code
        super().__init__(message)


class DuplicateIdentifier(ChuteError, ValueError):
    """Raised when an identifier already resolves to a value in the context."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Identifier {identifier!r} is already used")


class EvalError(ChuteError, ValueError):
    """Raised when an expression cannot be parsed or evaluated."""

    def __init__(self, expression: str, reason: str) -> None:
        self.expression = expression
        self.reason = reason
        super().__init__(f"Cannot evaluate {expression!r}: {reason}")


class SectionError(ChuteError, ValueError):
    """Raised for invalid chute section definitions."""


class EmptySegment(ChuteError, IndexError):
    """Raised when an endpoint of a segment without points is requested."""


class EmptyPiece(ChuteError, IndexError):
    """Raised when geometry of a pattern piece without points is requested."""


class ExportError(ChuteError, OSError):
    """Raised when a drawing file cannot be written."""
