"""Block validator: checks a block's data against its component's inputs.

Checks, in order:
1. The uid names a known component (otherwise that is the only error)
2. Every required input is present
3. Enum-constrained values are allowed members
4. Values match the declared primitive type (None is exempt)

Fields the component does not declare are ignored, so newer producers can
send extra data to older consumers.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field

from uicp.blocks.schemas import Block
from uicp.definitions.schemas import Definitions

logger = logging.getLogger(__name__)

# Declared types that are checked; anything else (e.g. "any") is accepted
PRIMITIVE_TYPES = {"string", "number", "integer", "boolean", "array", "object"}


class ValidationResult(BaseModel):
    """Outcome of validating one block."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


def value_category(value: Any) -> str:
    """Runtime type category of a JSON-like value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _matches_type(expected: str, value: Any) -> bool:
    if expected == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    return value_category(value) == expected


def validate_block(block: Block, definitions: Definitions) -> ValidationResult:
    """Validate a block against the definitions document."""
    component = definitions.get_component(block.uid)
    if component is None:
        return ValidationResult(
            valid=False,
            errors=[f"Unknown component UID: {block.uid}"],
        )

    errors: list[str] = []

    for name, schema in component.inputs.items():
        if schema.required and name not in block.data:
            errors.append(f"Missing required field: {name}")

    for name, value in block.data.items():
        schema = component.inputs.get(name)
        if schema is None:
            continue

        if schema.enum is not None and value not in schema.enum:
            errors.append(
                f"Invalid value for {name}: must be one of {', '.join(schema.enum)}"
            )

        if (
            value is not None
            and schema.type in PRIMITIVE_TYPES
            and not _matches_type(schema.type, value)
        ):
            errors.append(
                f"Invalid type for {name}: expected {schema.type}, got {value_category(value)}"
            )

    if errors:
        logger.debug(f"Block '{block.uid}' failed validation: {errors}")
    return ValidationResult(valid=not errors, errors=errors)
