"""UICP API - component definitions service.

Serves the component definitions document to agent runtimes and UIs:
- Component discovery and block creation (the LLM tools over HTTP)
- Block extraction and validation
- Definitions cache management
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from uicp import __version__
from uicp.api.routes import blocks, components, meta
from uicp.definitions.cache import get_definitions_cache
from uicp.definitions.sources import DefinitionsLoadError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    source = meta.get_definitions_source()
    logger.info(f"Loading component definitions from {source}...")
    try:
        definitions = await get_definitions_cache().load_cached(source)
        logger.info(
            f"Loaded {len(definitions.components)} components "
            f"(definitions version '{definitions.version}')"
        )
    except DefinitionsLoadError as e:
        # Requests retry the load; the service still starts
        logger.error(f"Initial definitions load failed: {e}")

    logger.info("UICP API ready")
    yield
    logger.info("Shutting down UICP API")


app = FastAPI(
    title="UICP API",
    description="""
## Component Definitions Service

- `GET /v1/components` - List components (filter by `component_type` or `uid`)
- `GET /v1/components/{uid}` - Get one component's input schema
- `POST /v1/components/create` - Build a ```uicp block for a component
- `POST /v1/blocks/extract` - Extract blocks from text
- `POST /v1/blocks/validate` - Validate a block
""",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(components.router, prefix="/v1")
app.include_router(blocks.router, prefix="/v1")
app.include_router(meta.router, prefix="/v1")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "UICP API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "components": "/v1/components",
            "blocks": "/v1/blocks",
            "meta": "/v1/meta",
        },
    }
