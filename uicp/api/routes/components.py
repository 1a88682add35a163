"""API routes for component discovery and block creation.

These mirror the LLM tools so an agent runtime outside this process can
offer them over HTTP.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from uicp.definitions.schemas import ComponentSummary
from uicp.tools.schemas import (
    CreateUIComponentParams,
    CreateUIComponentResult,
    GetUIComponentsParams,
    GetUIComponentsResult,
)
from uicp.tools.tools import create_ui_component, get_ui_components, tool_definitions

from .meta import get_definitions_source, load_service_definitions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/components", tags=["components"])


@router.get("", response_model=GetUIComponentsResult, response_model_exclude_none=True)
async def list_components(
    component_type: Optional[str] = None,
    uid: Optional[str] = None,
):
    """List components, optionally filtered by type or uid."""
    return await get_ui_components(
        get_definitions_source(),
        GetUIComponentsParams(component_type=component_type, uid=uid),
    )


@router.get("/tools")
async def list_tools() -> list[dict]:
    """Tool declarations for LLM tool use."""
    return tool_definitions()


@router.get("/{uid}", response_model=ComponentSummary)
async def get_component(uid: str):
    """Get a single component by uid."""
    definitions = await load_service_definitions()
    component = definitions.get_component(uid)
    if component is None:
        raise HTTPException(
            status_code=404,
            detail=f"Component '{uid}' not found. Available: {definitions.list_uids()}",
        )
    return ComponentSummary(
        uid=component.uid,
        type=component.type,
        description=component.description,
        inputs=component.inputs,
        example=component.example,
    )


@router.post(
    "/create", response_model=CreateUIComponentResult, response_model_exclude_none=True
)
async def create_component(params: CreateUIComponentParams):
    """Create a wire-format block for a component."""
    result = await create_ui_component(get_definitions_source(), params)
    if result.success:
        logger.info(f"Created block for component: {params.uid}")
    return result
