"""Block extractor — finds component blocks in (possibly partial) text.

Wire format:

    ```uicp
    {"uid": "SimpleCard", "data": {"title": "Hello"}}
    ```

Each accepted block is replaced by a positional placeholder
(__UICP_BLOCK_<index>__). Regions whose payload is not valid JSON, or lacks
a uid or data member, are left in the text untouched.

While a response is still streaming, the text may end inside a block. An
opening marker with no closing fence truncates the text at the marker, so
half-written JSON is never shown to the user.
"""

import json
import logging
import re
from typing import Any, Iterable, Optional

from .schemas import Block, ExtractionResult

logger = logging.getLogger(__name__)

# "block" is accepted as a generic alias of the uicp fence tag
DEFAULT_TAGS = ("uicp", "block")

PLACEHOLDER_TEMPLATE = "__UICP_BLOCK_{index}__"
PLACEHOLDER_PATTERN = re.compile(r"__UICP_BLOCK_(\d+)__")
PLACEHOLDER_SPLIT = re.compile(r"(__UICP_BLOCK_\d+__)")


def placeholder(index: int) -> str:
    """Placeholder token for the block at index."""
    return PLACEHOLDER_TEMPLATE.format(index=index)


class BlockExtractor:
    """Extracts fenced component blocks for a set of fence tags."""

    def __init__(self, tags: Iterable[str] = DEFAULT_TAGS):
        self.tags = tuple(tags)
        if not self.tags:
            raise ValueError("At least one fence tag is required")
        alternatives = "|".join(re.escape(tag) for tag in self.tags)
        # Same opening as _opening_re; an info string may follow the tag
        self._block_re = re.compile(
            rf"```(?:{alternatives})(?![\w-])[^`\n]*\n(.*?)```", re.DOTALL
        )
        self._opening_re = re.compile(rf"```(?:{alternatives})(?![\w-])")

    def has_blocks(self, text: str) -> bool:
        """Whether text contains an opening marker, complete or not."""
        return self._opening_re.search(text) is not None

    def extract(self, text: str) -> ExtractionResult:
        """Extract blocks and substitute placeholders for them."""
        blocks: list[Block] = []
        parts: list[str] = []
        copied_to = 0
        scanned_to = 0

        for match in self._block_re.finditer(text):
            scanned_to = match.end()
            block = self._parse_payload(match.group(1))
            if block is None:
                continue
            parts.append(text[copied_to:match.start()])
            parts.append(placeholder(len(blocks)))
            blocks.append(block)
            copied_to = match.end()

        incomplete = self._opening_re.search(text, scanned_to)
        if incomplete is not None:
            logger.debug(f"Truncating at incomplete block (offset {incomplete.start()})")
            parts.append(text[copied_to:incomplete.start()])
            output = "".join(parts).rstrip()
        else:
            parts.append(text[copied_to:])
            output = "".join(parts)

        return ExtractionResult(blocks=blocks, text=output)

    def _parse_payload(self, payload: str) -> Optional[Block]:
        try:
            parsed = json.loads(payload.strip())
        except json.JSONDecodeError as e:
            logger.debug(f"Failed to parse block payload: {e}")
            return None

        if not isinstance(parsed, dict):
            return None
        uid = parsed.get("uid")
        data = parsed.get("data")
        if not uid or not isinstance(uid, str) or not isinstance(data, dict):
            logger.debug(f"Ignoring block without uid/data members: {payload[:80]!r}")
            return None
        return Block(uid=uid, data=data)


_default_extractor = BlockExtractor()


def extract_blocks(text: str) -> ExtractionResult:
    """Extract blocks using the default fence tags."""
    return _default_extractor.extract(text)


def has_blocks(text: str) -> bool:
    """Whether text contains any block marker (default fence tags)."""
    return _default_extractor.has_blocks(text)


def format_block(uid: str, data: dict[str, Any], tag: str = "uicp") -> str:
    """Serialize a block in wire format."""
    payload = json.dumps({"uid": uid, "data": data}, indent=2)
    return f"```{tag}\n{payload}\n```"
