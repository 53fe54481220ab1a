"""Schema helpers for parachute design documents."""

from .validators import (
    DEFAULT_SCHEMA_NAME,
    SchemaValidationError,
    dump_design,
    load_design,
    load_payload,
    load_schema,
    validate_design,
    validate_file,
)

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
