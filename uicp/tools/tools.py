"""Tool functions for component discovery and block creation.

Both tools load definitions through the shared TTL cache and never raise:
failures come back as results with success=False, so the LLM sees the
reason and can correct its call.
"""

import logging
from typing import Optional

from uicp.blocks.extractor import format_block
from uicp.definitions.cache import DEFAULT_CACHE_TTL, DefinitionsCache, get_definitions_cache
from uicp.definitions.sources import DefinitionsLoadError, DefinitionsSource

from .schemas import (
    CreateInstructions,
    CreateUIComponentParams,
    CreateUIComponentResult,
    GetUIComponentsParams,
    GetUIComponentsResult,
    UsageHints,
)

logger = logging.getLogger(__name__)

GET_UI_COMPONENTS_DESCRIPTION = (
    "Discover available UI components. Use this to find out what components "
    "you can use and their schemas."
)
CREATE_UI_COMPONENT_DESCRIPTION = (
    "Create a UICP block for rendering a UI component. First use "
    "get_ui_components to discover available components and their schemas."
)


async def get_ui_components(
    definitions: DefinitionsSource,
    params: Optional[GetUIComponentsParams] = None,
    cache_ttl: float = DEFAULT_CACHE_TTL,
    cache: Optional[DefinitionsCache] = None,
) -> GetUIComponentsResult:
    """Discover available components, optionally filtered by uid or type.

    A uid filter takes precedence over a type filter.
    """
    params = params or GetUIComponentsParams()
    cache = cache or get_definitions_cache()

    try:
        defs = await cache.load_cached(definitions, ttl=cache_ttl)
    except DefinitionsLoadError as e:
        logger.error(f"get_ui_components failed: {e}")
        return GetUIComponentsResult(
            success=False,
            message=f"Failed to load component definitions: {e}",
        )

    components = defs.components
    if params.uid:
        components = [c for c in components if c.uid == params.uid]
    elif params.component_type:
        components = [c for c in components if c.type == params.component_type]

    if not components:
        if params.uid:
            message = f"No component found with UID: {params.uid}"
        elif params.component_type:
            message = f"No components found with type: {params.component_type}"
        else:
            message = "No components available"
        return GetUIComponentsResult(
            success=False,
            message=message,
            available_types=defs.list_types(),
        )

    uids = {c.uid for c in components}
    return GetUIComponentsResult(
        success=True,
        version=defs.version,
        components=[s for s in defs.summaries() if s.uid in uids],
        usage=UsageHints(
            instructions="Use create_ui_component to generate a UICP block "
            "with the component data",
            format="UICP blocks are code blocks with ```uicp prefix containing "
            "JSON with uid and data",
        ),
    )


async def create_ui_component(
    definitions: DefinitionsSource,
    params: CreateUIComponentParams,
    cache_ttl: float = DEFAULT_CACHE_TTL,
    cache: Optional[DefinitionsCache] = None,
) -> CreateUIComponentResult:
    """Produce a wire-format block after checking the uid and required fields."""
    cache = cache or get_definitions_cache()

    try:
        defs = await cache.load_cached(definitions, ttl=cache_ttl)
    except DefinitionsLoadError as e:
        logger.error(f"create_ui_component failed: {e}")
        return CreateUIComponentResult(
            success=False,
            error=f"Failed to create component: {e}",
        )

    component = defs.get_component(params.uid)
    if component is None:
        return CreateUIComponentResult(
            success=False,
            error=f"Unknown component UID: {params.uid}",
            available_components=defs.list_uids(),
        )

    missing = [name for name in component.required_inputs() if name not in params.data]
    if missing:
        return CreateUIComponentResult(
            success=False,
            error="Missing required fields",
            missing_fields=missing,
            component_schema=component.inputs,
        )

    return CreateUIComponentResult(
        success=True,
        message=f"Successfully created {component.type} component: {params.uid}",
        uicp_block=format_block(params.uid, params.data),
        instructions=CreateInstructions(
            usage="Include the uicp_block string directly in your response text",
            note="The UICP block will be automatically parsed and rendered as "
            "a visual component",
        ),
    )


def tool_definitions() -> list[dict]:
    """Tool declarations (name, description, JSON input schema) for LLM tool use."""
    return [
        {
            "name": "get_ui_components",
            "description": GET_UI_COMPONENTS_DESCRIPTION,
            "input_schema": GetUIComponentsParams.model_json_schema(),
        },
        {
            "name": "create_ui_component",
            "description": CREATE_UI_COMPONENT_DESCRIPTION,
            "input_schema": CreateUIComponentParams.model_json_schema(),
        },
    ]
