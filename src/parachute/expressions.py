"""Arithmetic expression evaluation over named design values.

Every value is stored in SI base units. The context always starts from the
immutable built-in tables below; user values are layered on top and never
overwrite an existing name.
"""

from __future__ import annotations

import ast
import io
import keyword
import logging
import math
import tokenize
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterator, Mapping

from .errors import DuplicateIdentifier, EvalError, InvalidIdentifier

__all__ = [
    "BUILTIN_CONSTANTS",
    "BUILTIN_FUNCTIONS",
    "Evaluation",
    "ExpressionContext",
    "format_result",
    "validate_identifier",
]

logger = logging.getLogger(__name__)

BUILTIN_CONSTANTS: Mapping[str, float] = MappingProxyType(
    {
        "m": 1.0,
        "mm": 0.001,
        "yd": 0.9144,
        "ft": 0.3048,
        "in": 0.0254,
        "rad": 1.0,
        "deg": math.pi / 180.0,
        "pi": math.pi,
        "e": math.e,
    }
)

BUILTIN_FUNCTIONS: Mapping[str, Callable[..., float]] = MappingProxyType(
    {
        "ln": math.log,
        "log10": math.log10,
        "exp": math.exp,
        "sqrt": math.sqrt,
        "sin": math.sin,
        "cos": math.cos,
        "tan": math.tan,
        "asin": math.asin,
        "acos": math.acos,
        "atan": math.atan,
        "abs": abs,
        "min": min,
        "max": max,
    }
)

# Python keywords (``in`` above all) are valid identifiers here; they are
# renamed before parsing. Identifiers never start with an underscore.
_KEYWORD_PREFIX = "_kw_"

_BINARY_OPERATORS: Mapping[type, Callable[[float, float], float]] = {
    ast.Add: lambda a, b: a + b,
    ast.Sub: lambda a, b: a - b,
    ast.Mult: lambda a, b: a * b,
    ast.Div: lambda a, b: a / b,
    ast.Pow: lambda a, b: a**b,
    ast.Mod: math.fmod,
}


def validate_identifier(identifier: str) -> None:
    """Raise :class:`InvalidIdentifier` when *identifier* breaks a naming rule."""

    if any(char.isspace() for char in identifier):
        raise InvalidIdentifier(
            identifier, "whitespace", "ID cannot contain whitespace characters"
        )
    if not identifier:
        raise InvalidIdentifier(identifier, "empty", "ID cannot be empty")
    if not all(char.isalnum() or char == "_" for char in identifier):
        raise InvalidIdentifier(identifier, "not_alphanumeric", "ID must be alphanumeric")
    if not identifier[0].isalpha():
        raise InvalidIdentifier(
            identifier, "not_alphabetic_start", "First letter must be alphabetic"
        )


def format_result(value: float) -> str:
    """Format an evaluated value for display, rounded to 8 decimals."""

    return str(round(value, 8))


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Outcome of a display evaluation; ``value`` is ``0.0`` when ``ok`` is false."""

    value: float
    ok: bool
    error: EvalError | None = None


class ExpressionContext:
    """Mapping from identifier to value used to evaluate design expressions."""

    def __init__(self) -> None:
        self._values: dict[str, float] = dict(BUILTIN_CONSTANTS)
        self._user_names: list[str] = []

    def __contains__(self, name: object) -> bool:
        return name in self._values or name in BUILTIN_FUNCTIONS

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get(self, name: str, default: float | None = None) -> float | None:
        return self._values.get(name, default)

    @property
    def variables(self) -> dict[str, float]:
        """User values in the order they were set."""

        return {name: self._values[name] for name in self._user_names}

    def check_identifier(self, name: str) -> None:
        """Raise when *name* could not be bound in this context.

        :class:`DuplicateIdentifier` when the name already resolves (built-in
        constant, built-in function or earlier entry), otherwise
        :class:`InvalidIdentifier` when it breaks the naming rules.
        """

        if name in self:
            raise DuplicateIdentifier(name)
        validate_identifier(name)

    def set_value(self, name: str, value: float) -> None:
        """Bind *name* to *value*; see :meth:`check_identifier` for failures."""

        self.check_identifier(name)
        self._values[name] = float(value)
        self._user_names.append(name)

    def evaluate(self, expression: str) -> float:
        """Evaluate *expression* against the bound values.

        Raises :class:`EvalError` on syntax errors, unknown identifiers,
        division by zero, math domain errors and non-finite results.
        """

        tree = _parse(expression)
        try:
            result = self._eval_node(tree.body, expression)
        except EvalError:
            raise
        except (ArithmeticError, ValueError, TypeError) as exc:
            raise EvalError(expression, str(exc) or type(exc).__name__) from exc
        except RecursionError as exc:
            raise EvalError(expression, "expression is nested too deeply") from exc
        if isinstance(result, complex):
            raise EvalError(expression, "result is not a real number")
        if not math.isfinite(result):
            raise EvalError(expression, "result is not finite")
        return float(result)

    def try_evaluate(self, expression: str) -> Evaluation:
        """Evaluate for live display, falling back to ``0.0`` on failure."""

        try:
            return Evaluation(value=self.evaluate(expression), ok=True)
        except EvalError as exc:
            logger.debug("Display evaluation failed: %s", exc)
            return Evaluation(value=0.0, ok=False, error=exc)

    def _lookup(self, name: str, expression: str) -> float:
        if name.startswith(_KEYWORD_PREFIX):
            name = name[len(_KEYWORD_PREFIX):]
        if name in BUILTIN_FUNCTIONS:
            raise EvalError(expression, f"{name!r} is a function and must be called")
        try:
            return self._values[name]
        except KeyError:
            raise EvalError(expression, f"unknown identifier {name!r}") from None

    def _eval_node(self, node: ast.AST, expression: str) -> float:
        if isinstance(node, ast.BinOp):
            operator = _BINARY_OPERATORS.get(type(node.op))
            if operator is None:
                raise EvalError(expression, f"unsupported operator {type(node.op).__name__}")
            left = self._eval_node(node.left, expression)
            right = self._eval_node(node.right, expression)
            if isinstance(node.op, (ast.Div, ast.Mod)) and right == 0.0:
                raise EvalError(expression, "division by zero")
            return operator(left, right)
        if isinstance(node, ast.UnaryOp):
            operand = self._eval_node(node.operand, expression)
            if isinstance(node.op, ast.USub):
                return -operand
            if isinstance(node.op, ast.UAdd):
                return +operand
            raise EvalError(expression, f"unsupported operator {type(node.op).__name__}")
        if isinstance(node, ast.Name):
            return self._lookup(node.id, expression)
        if isinstance(node, ast.Constant):
            if isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
                return float(node.value)
            raise EvalError(expression, f"unsupported literal {node.value!r}")
        if isinstance(node, ast.Call):
            return self._eval_call(node, expression)
        raise EvalError(expression, f"unsupported syntax {type(node).__name__}")

    def _eval_call(self, node: ast.Call, expression: str) -> float:
        if not isinstance(node.func, ast.Name) or node.keywords:
            raise EvalError(expression, "only plain built-in function calls are supported")
        name = node.func.id
        function = BUILTIN_FUNCTIONS.get(name)
        if function is None:
            raise EvalError(expression, f"unknown function {name!r}")
        args = [self._eval_node(arg, expression) for arg in node.args]
        return float(function(*args))


def _parse(expression: str) -> ast.Expression:
    source = _rewrite_tokens(expression)
    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as exc:
        raise EvalError(expression, f"syntax error: {exc.msg}") from exc
    except (MemoryError, RecursionError) as exc:
        raise EvalError(expression, "expression is nested too deeply") from exc
    return tree


def _rewrite_tokens(expression: str) -> str:
    """Map ``^`` to exponentiation and rename keyword identifiers."""

    source = expression.strip()
    if not source:
        raise EvalError(expression, "empty expression")
    rewritten: list[tuple[int, str]] = []
    try:
        for token in tokenize.generate_tokens(io.StringIO(source).readline):
            if token.type == tokenize.OP and token.string == "^":
                rewritten.append((tokenize.OP, "**"))
            elif token.type == tokenize.NAME and keyword.iskeyword(token.string):
                rewritten.append((tokenize.NAME, _KEYWORD_PREFIX + token.string))
            elif token.type in (tokenize.NEWLINE, tokenize.NL, tokenize.ENDMARKER):
                continue
            else:
                rewritten.append((token.type, token.string))
    except (tokenize.TokenError, SyntaxError) as exc:
        raise EvalError(expression, f"syntax error: {exc}") from exc
    return tokenize.untokenize(rewritten)
