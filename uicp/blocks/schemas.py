"""Block schemas."""

from typing import Any

from pydantic import BaseModel, Field


class Block(BaseModel):
    """One component block found in text."""

    uid: str
    data: dict[str, Any] = Field(default_factory=dict)


class ExtractionResult(BaseModel):
    """Blocks found in a text, and the text with placeholders substituted."""

    blocks: list[Block] = Field(default_factory=list)
    text: str = ""
