"""Meta/system API routes.

Exposes the configured definitions source, cache stats and cache
invalidation so consumers can force a reload after editing definitions.
"""

import logging
import os
from typing import Optional

from fastapi import APIRouter, HTTPException

from uicp.components.builtin import DEFINITIONS_PATH
from uicp.components.registry import get_component_registry
from uicp.definitions.cache import get_definitions_cache
from uicp.definitions.schemas import Definitions
from uicp.definitions.sources import DefinitionsLoadError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meta", tags=["meta"])

# Definitions served by this process: a URL or a local path
DEFINITIONS_SOURCE = os.environ.get("UICP_DEFINITIONS", str(DEFINITIONS_PATH))


def get_definitions_source() -> str:
    return DEFINITIONS_SOURCE


async def load_service_definitions() -> Definitions:
    """Load the service's definitions through the shared cache, or raise 502."""
    source = get_definitions_source()
    try:
        return await get_definitions_cache().load_cached(source)
    except DefinitionsLoadError as e:
        logger.error(f"Definitions unavailable: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.get("/health")
async def health() -> dict:
    """Health check: definitions load and component counts."""
    definitions = await load_service_definitions()
    return {
        "status": "healthy",
        "definitions_source": get_definitions_source(),
        "definitions_version": definitions.version,
        "components": len(definitions.components),
        "registered_renderers": get_component_registry().count(),
    }


@router.get("/cache")
async def cache_stats() -> dict:
    """Get definitions cache statistics."""
    return get_definitions_cache().stats()


@router.delete("/cache")
async def clear_cache(source: Optional[str] = None) -> dict:
    """Clear one cached definitions source, or the whole cache."""
    get_definitions_cache().clear(source)
    logger.info(f"Cleared definitions cache ({source or 'all entries'})")
    return {"cleared": source or "all"}
