"""API routes for block extraction and validation."""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from uicp.blocks.extractor import extract_blocks, has_blocks
from uicp.blocks.schemas import Block, ExtractionResult
from uicp.validation.validator import ValidationResult, validate_block

from .meta import load_service_definitions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blocks", tags=["blocks"])


class ExtractRequest(BaseModel):
    content: str


class ExtractResponse(ExtractionResult):
    has_blocks: bool


@router.post("/extract", response_model=ExtractResponse)
async def extract(request: ExtractRequest):
    """Extract blocks from text; incomplete trailing blocks are cut off."""
    result = extract_blocks(request.content)
    return ExtractResponse(
        blocks=result.blocks,
        text=result.text,
        has_blocks=has_blocks(request.content),
    )


@router.post("/validate", response_model=ValidationResult)
async def validate(block: Block):
    """Validate one block against the service's definitions."""
    definitions = await load_service_definitions()
    return validate_block(block, definitions)
