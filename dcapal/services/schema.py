"""JSON Schema validation for imported portfolio documents.

The portfolio v1 schema ships with the package and is parsed and compiled once,
at import time. The resulting validator is never mutated, so every request
shares the module-level instance.
"""

from __future__ import annotations

import json
from importlib import resources
from typing import Any, Iterator

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError, best_match

from dcapal.core.errors import SchemaViolation

PORTFOLIO_SCHEMA_VERSION = "v1"


def _json_pointer(error: ValidationError) -> str:
    return "".join(f"/{part}" for part in error.absolute_path)


def _to_violation(error: ValidationError) -> SchemaViolation:
    return SchemaViolation(path=_json_pointer(error), rule=str(error.validator), message=error.message)


def load_schema(version: str = PORTFOLIO_SCHEMA_VERSION) -> dict[str, Any]:
    source = resources.files("dcapal.resources").joinpath("portfolio").joinpath(version).joinpath("schema.json")
    return json.loads(source.read_text(encoding="utf-8"))


class SchemaValidator:
    """Validate documents against a fixed JSON Schema."""

    def __init__(self, schema: dict[str, Any]) -> None:
        Draft7Validator.check_schema(schema)
        self._validator = Draft7Validator(schema)

    def iter_violations(self, document: Any) -> Iterator[SchemaViolation]:
        for error in sorted(self._validator.iter_errors(document), key=_json_pointer):
            yield _to_violation(error)

    def validate(self, document: Any) -> None:
        """Raise ``SchemaViolation`` for the most relevant error, if any."""

        error = best_match(self._validator.iter_errors(document))
        if error is not None:
            raise _to_violation(error)


PORTFOLIO_JSON_SCHEMA: dict[str, Any] = load_schema()
PORTFOLIO_SCHEMA_VALIDATOR = SchemaValidator(PORTFOLIO_JSON_SCHEMA)


__all__ = [
    "PORTFOLIO_JSON_SCHEMA",
    "PORTFOLIO_SCHEMA_VALIDATOR",
    "PORTFOLIO_SCHEMA_VERSION",
    "SchemaValidator",
    "load_schema",
]
