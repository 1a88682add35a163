"""Parsing pipeline: turns text with component blocks into ordered segments.

Async flow (UICPParser.parse / parse_content):
1. Load definitions through the TTL cache
2. Extract blocks, substituting placeholders
3. Load renderers for known components that are not registered yet,
   concurrently; a failed load only affects blocks with that uid
4. Validate and render each block, then reassemble in document order

The sync flow (parse_sync / parse_content_sync) takes definitions directly
and only uses renderers that are already registered.

Nothing here aborts the document: invalid blocks, missing renderers and
renderer exceptions all become ComponentError artifacts in place.
"""

import asyncio
import logging
from typing import Any, Optional

from uicp.blocks.extractor import (
    PLACEHOLDER_PATTERN,
    PLACEHOLDER_SPLIT,
    BlockExtractor,
)
from uicp.blocks.schemas import Block, ExtractionResult
from uicp.components.registry import ComponentRegistry, get_component_registry
from uicp.definitions.cache import DEFAULT_CACHE_TTL, DefinitionsCache, get_definitions_cache
from uicp.definitions.schemas import Definitions
from uicp.definitions.sources import (
    DefinitionsLoader,
    DefinitionsSource,
    get_definitions_loader,
)
from uicp.validation.validator import validate_block

from .schemas import ComponentError, ComponentErrorKind, ParsedSegment, SegmentKind

logger = logging.getLogger(__name__)


def render_block(
    block: Block,
    definitions: Definitions,
    registry: Optional[ComponentRegistry] = None,
    load_error: Optional[str] = None,
) -> Any:
    """Render one block, or a ComponentError describing why it cannot be."""
    registry = registry or get_component_registry()

    result = validate_block(block, definitions)
    if not result.valid:
        return ComponentError(
            kind=ComponentErrorKind.INVALID,
            uid=block.uid,
            title="Invalid UICP Component",
            messages=result.errors,
        )

    renderer = registry.get(block.uid)
    if renderer is None:
        messages = ["This component needs to be loaded or registered"]
        if load_error:
            messages.append(load_error)
        return ComponentError(
            kind=ComponentErrorKind.MISSING_RENDERER,
            uid=block.uid,
            title=f"Component Not Available: {block.uid}",
            messages=messages,
        )

    try:
        return renderer(block.data)
    except Exception as e:
        logger.warning(f"Renderer for '{block.uid}' raised: {e}")
        return ComponentError(
            kind=ComponentErrorKind.RENDER_FAILED,
            uid=block.uid,
            title=f"Component Failed to Render: {block.uid}",
            messages=[str(e) or type(e).__name__],
        )


def assemble_segments(
    original: str,
    extraction: ExtractionResult,
    definitions: Definitions,
    registry: ComponentRegistry,
    load_errors: Optional[dict[str, str]] = None,
    had_marker: bool = True,
) -> list[ParsedSegment]:
    """Reassemble text spans and rendered blocks in document order."""
    load_errors = load_errors or {}

    if not extraction.blocks:
        text = extraction.text if had_marker else original
        if had_marker and not text.strip():
            return []
        return [ParsedSegment(kind=SegmentKind.TEXT, content=text, key="text-0")]

    segments: list[ParsedSegment] = []
    for index, part in enumerate(PLACEHOLDER_SPLIT.split(extraction.text)):
        match = PLACEHOLDER_PATTERN.fullmatch(part)
        block_index = int(match.group(1)) if match else None

        if block_index is not None and block_index < len(extraction.blocks):
            block = extraction.blocks[block_index]
            segments.append(
                ParsedSegment(
                    kind=SegmentKind.COMPONENT,
                    content=render_block(
                        block, definitions, registry, load_errors.get(block.uid)
                    ),
                    key=f"component-{block_index}",
                    block=block,
                )
            )
        elif part.strip():
            segments.append(
                ParsedSegment(kind=SegmentKind.TEXT, content=part, key=f"text-{index}")
            )

    return segments


class UICPParser:
    """Configured parsing pipeline.

    Holds the definitions source plus the registry, loader and cache to use,
    so hosts configure it once and call parse() per message.
    """

    def __init__(
        self,
        definitions: DefinitionsSource,
        registry: Optional[ComponentRegistry] = None,
        loader: Optional[DefinitionsLoader] = None,
        cache: Optional[DefinitionsCache] = None,
        components_base_path: Optional[str] = None,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        extractor: Optional[BlockExtractor] = None,
    ):
        self.definitions_source = definitions
        self.registry = registry or get_component_registry()
        self.loader = loader or get_definitions_loader()
        self.cache = cache or get_definitions_cache()
        self.components_base_path = components_base_path or self.registry.base_path
        self.cache_ttl = cache_ttl
        self.extractor = extractor or BlockExtractor()

    def has_blocks(self, content: str) -> bool:
        return self.extractor.has_blocks(content)

    async def load_definitions(self) -> Definitions:
        return await self.cache.load_cached(
            self.definitions_source, loader=self.loader, ttl=self.cache_ttl
        )

    async def preload_components(
        self, blocks: list[Block], definitions: Definitions
    ) -> dict[str, str]:
        """Load missing renderers for known components.

        Returns:
            uid -> error message for each component whose load failed
        """
        pending: dict[str, str] = {}
        for block in blocks:
            if block.uid in pending or self.registry.get(block.uid) is not None:
                continue
            component = definitions.get_component(block.uid)
            if component is not None:
                pending[block.uid] = component.component_path

        if not pending:
            return {}

        results = await asyncio.gather(
            *(
                self.registry.load_component(uid, path, self.components_base_path)
                for uid, path in pending.items()
            ),
            return_exceptions=True,
        )

        load_errors: dict[str, str] = {}
        for uid, result in zip(pending, results):
            if isinstance(result, Exception):
                logger.warning(f"Could not load renderer for '{uid}': {result}")
                load_errors[uid] = str(result)
            elif isinstance(result, BaseException):
                raise result
        return load_errors

    async def parse(self, content: str) -> list[ParsedSegment]:
        """Parse content, loading definitions and renderers as needed.

        Raises:
            DefinitionsLoadError: If the definitions cannot be loaded
        """
        definitions = await self.load_definitions()
        extraction = self.extractor.extract(content)
        load_errors = await self.preload_components(extraction.blocks, definitions)
        return assemble_segments(
            content,
            extraction,
            definitions,
            self.registry,
            load_errors,
            had_marker=self.extractor.has_blocks(content),
        )

    def parse_sync(
        self, content: str, definitions: Optional[Definitions] = None
    ) -> list[ParsedSegment]:
        """Parse content using pre-registered renderers only.

        Uses the given definitions, or the parser's source when it is
        already a Definitions object.
        """
        if definitions is None:
            if not isinstance(self.definitions_source, Definitions):
                raise ValueError("parse_sync needs a Definitions object")
            definitions = self.definitions_source

        extraction = self.extractor.extract(content)
        return assemble_segments(
            content,
            extraction,
            definitions,
            self.registry,
            had_marker=self.extractor.has_blocks(content),
        )


async def parse_content(
    content: str,
    definitions: DefinitionsSource,
    components_base_path: Optional[str] = None,
    registry: Optional[ComponentRegistry] = None,
    cache_ttl: float = DEFAULT_CACHE_TTL,
) -> list[ParsedSegment]:
    """Parse content with the global cache and loader."""
    parser = UICPParser(
        definitions,
        registry=registry,
        components_base_path=components_base_path,
        cache_ttl=cache_ttl,
    )
    return await parser.parse(content)


def parse_content_sync(
    content: str,
    definitions: Definitions,
    registry: Optional[ComponentRegistry] = None,
) -> list[ParsedSegment]:
    """Parse content with pre-registered renderers and given definitions."""
    return UICPParser(definitions, registry=registry).parse_sync(content, definitions)
