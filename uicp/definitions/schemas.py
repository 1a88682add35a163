"""Definitions schemas — data models for the component definitions document.

A Definitions document declares which component uids exist, what kind of
component each one is, where its renderer lives (componentPath) and the
input contract for the data carried by a block.
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class InputSchema(BaseModel):
    """Schema for a single field of a component's data."""

    type: str = Field(
        ...,
        description="Expected value type: 'string', 'number', 'integer', "
        "'boolean', 'array', 'object' (other types are not checked)",
    )
    description: str = ""
    required: bool = False
    default: Optional[Any] = None
    enum: Optional[list[str]] = Field(
        default=None,
        description="Allowed values, in declaration order",
    )


class ComponentDefinition(BaseModel):
    """A component that blocks may reference by uid."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str = Field(..., description="Unique identifier (e.g. 'SimpleCard')")
    type: str = Field(
        default="",
        description="Component category (e.g. 'card', 'table', 'chart')",
    )
    description: str = ""
    component_path: str = Field(
        default="",
        alias="componentPath",
        description="Renderer location, relative to the components base path",
    )
    inputs: dict[str, InputSchema] = Field(default_factory=dict)
    example: Optional[Any] = None

    def required_inputs(self) -> list[str]:
        """Names of required inputs, in declaration order."""
        return [name for name, schema in self.inputs.items() if schema.required]


class ComponentSummary(BaseModel):
    """Component view handed to LLMs and API consumers (no renderer path)."""

    uid: str
    type: str = ""
    description: str = ""
    inputs: dict[str, InputSchema] = Field(default_factory=dict)
    example: Optional[Any] = None


class Definitions(BaseModel):
    """A versioned definitions document.

    Component uids are unique: when a document repeats a uid, the first
    occurrence is kept and later ones are dropped.
    """

    version: str = ""
    components: list[ComponentDefinition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _drop_duplicate_uids(self) -> "Definitions":
        seen: set[str] = set()
        unique: list[ComponentDefinition] = []
        for component in self.components:
            if component.uid in seen:
                logger.warning(
                    f"Duplicate component uid '{component.uid}' in definitions "
                    f"version '{self.version}', keeping first occurrence"
                )
                continue
            seen.add(component.uid)
            unique.append(component)
        self.components = unique
        return self

    def get_component(self, uid: str) -> Optional[ComponentDefinition]:
        """Get a component definition by uid."""
        for component in self.components:
            if component.uid == uid:
                return component
        return None

    def list_uids(self) -> list[str]:
        """List component uids in document order."""
        return [c.uid for c in self.components]

    def list_types(self) -> list[str]:
        """List distinct component types in first-seen order."""
        types: list[str] = []
        for component in self.components:
            if component.type not in types:
                types.append(component.type)
        return types

    def summaries(self) -> list[ComponentSummary]:
        """Summaries for every component, in document order."""
        return [
            ComponentSummary(
                uid=c.uid,
                type=c.type,
                description=c.description,
                inputs=c.inputs,
                example=c.example,
            )
            for c in self.components
        ]
