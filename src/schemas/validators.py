"""Utilities for validating parachute design documents."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import json
import logging

import yaml
from jsonschema import Draft202012Validator, ValidationError

from parachute.design import ChuteDesign

DEFAULT_SCHEMA_NAME = "parachute_design.yaml"

__all__ = [
    "DEFAULT_SCHEMA_NAME",
    "SchemaValidationError",
    "dump_design",
    "load_design",
    "load_payload",
    "load_schema",
    "validate_design",
    "validate_file",
]

logger = logging.getLogger(__name__)


class SchemaValidationError(RuntimeError):
    """Raised when an instance fails schema validation."""

    def __init__(self, errors: Iterable[ValidationError]):
        self.errors = tuple(errors)
        message = "Schema validation failed:\n" + "\n".join(_format_error(e) for e in self.errors)
        super().__init__(message)


def _schema_dir() -> Path:
    return Path(__file__).resolve().parent


@lru_cache(maxsize=4)
def load_schema(name: str = DEFAULT_SCHEMA_NAME) -> Mapping[str, Any]:
    """Load and cache a schema definition by name."""

    schema_path = _schema_dir() / name
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema '{name}' not found at {schema_path}")

    with schema_path.open("r", encoding="utf-8") as handle:
        schema = yaml.safe_load(handle)

    if not isinstance(schema, Mapping):
        raise TypeError(f"Schema '{name}' must decode to a mapping, received {type(schema)!r}")

    return schema


def load_payload(path: Path) -> Any:
    """Load a JSON or YAML payload from disk."""

    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as handle:
        if suffix in {".yaml", ".yml"}:
            try:
                return yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
        if suffix == ".json":
            return json.load(handle)
    raise ValueError(f"Unsupported payload extension '{suffix}' for {path}")


def validate_design(instance: Any, *, schema_name: str = DEFAULT_SCHEMA_NAME) -> None:
    """Validate *instance* against the parachute design schema."""

    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda exc: [str(part) for part in exc.absolute_path])
    if errors:
        raise SchemaValidationError(errors)


def validate_file(path: Path, *, schema_name: str = DEFAULT_SCHEMA_NAME) -> Any:
    """Load a payload from *path*, validate it, and return the parsed instance."""

    instance = load_payload(path)
    validate_design(instance, schema_name=schema_name)
    return instance


def load_design(path: Path) -> ChuteDesign:
    """Load, validate and build the design stored at *path*."""

    instance = validate_file(Path(path))
    design = ChuteDesign.from_mapping(instance)
    logger.debug(
        "Loaded design %r with %d inputs, %d parameters and %d sections",
        design.name,
        len(design.inputs),
        len(design.parameters),
        len(design.sections),
    )
    return design


def dump_design(design: ChuteDesign, path: Path) -> Path:
    """Write *design* to *path* as JSON or YAML, chosen by the suffix."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported payload extension '{suffix}' for {path}")

    payload = design.to_mapping()
    with path.open("w", encoding="utf-8") as handle:
        if suffix == ".json":
            json.dump(payload, handle, indent=2)
            handle.write("\n")
        else:
            yaml.safe_dump(payload, handle, sort_keys=False)
    return path


def _format_error(error: ValidationError) -> str:
    location = " / ".join(str(component) for component in error.absolute_path)
    prefix = f"[{location}] " if location else ""
    return f"{prefix}{error.message}"
