"""Segment and fallback artifact schemas for parsed content."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from uicp.blocks.schemas import Block


class SegmentKind(str, Enum):
    TEXT = "text"
    COMPONENT = "component"


class ComponentErrorKind(str, Enum):
    """Why a block was rendered as a fallback instead of its component."""

    INVALID = "invalid"
    MISSING_RENDERER = "missing_renderer"
    RENDER_FAILED = "render_failed"


class ComponentError(BaseModel):
    """Visible in-place fallback for a block that could not be rendered."""

    kind: ComponentErrorKind
    uid: str
    title: str
    messages: list[str] = Field(default_factory=list)


class ParsedSegment(BaseModel):
    """One piece of parsed content, in document order.

    Text segments carry a string. Component segments carry the renderer's
    artifact (or a ComponentError) plus the block it was rendered from.
    """

    kind: SegmentKind
    content: Any
    key: str
    block: Optional[Block] = None

    @property
    def is_error(self) -> bool:
        return isinstance(self.content, ComponentError)
