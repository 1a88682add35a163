"""Tool parameter and result schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from uicp.definitions.schemas import ComponentSummary, InputSchema


class GetUIComponentsParams(BaseModel):
    """Parameters for get_ui_components."""

    component_type: Optional[str] = Field(
        default=None,
        description='Filter by component type (e.g., "card", "table")',
    )
    uid: Optional[str] = Field(
        default=None,
        description="Get a specific component by its unique identifier",
    )


class CreateUIComponentParams(BaseModel):
    """Parameters for create_ui_component."""

    uid: str = Field(
        ...,
        description='The unique identifier of the component (e.g., "SimpleCard")',
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="The data object containing all required and optional "
        "fields for the component",
    )


class UsageHints(BaseModel):
    instructions: str
    format: str


class GetUIComponentsResult(BaseModel):
    success: bool
    version: Optional[str] = None
    components: Optional[list[ComponentSummary]] = None
    usage: Optional[UsageHints] = None
    message: Optional[str] = None
    available_types: Optional[list[str]] = None


class CreateInstructions(BaseModel):
    usage: str
    note: str


class CreateUIComponentResult(BaseModel):
    success: bool
    message: Optional[str] = None
    uicp_block: Optional[str] = None
    error: Optional[str] = None
    missing_fields: Optional[list[str]] = None
    component_schema: Optional[dict[str, InputSchema]] = None
    available_components: Optional[list[str]] = None
    instructions: Optional[CreateInstructions] = None
