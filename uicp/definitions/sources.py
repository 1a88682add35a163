"""Definition sources — turn a source locator into a Definitions document.

A source is one of:
- a Definitions object (or plain mapping): returned as-is, never cached
- an http(s) URL: fetched over the network
- anything else: a local locator read through the injected local source

Which local source to use depends on the host. A service or CLI reads from
disk (FileContentSource); a sandboxed host without storage access fetches
relative locators from its origin (HttpContentSource with a base_url).
The host picks one at construction time.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Protocol, Union, runtime_checkable

import httpx
import yaml
from pydantic import ValidationError

from .schemas import Definitions

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http://", "https://")
YAML_SUFFIXES = (".yaml", ".yml")

# Seconds before a remote definitions fetch is abandoned
HTTP_TIMEOUT = float(os.environ.get("UICP_HTTP_TIMEOUT", "30"))

DefinitionsSource = Union[str, Definitions, dict[str, Any]]


class DefinitionsLoadError(Exception):
    """Raised when a definitions document cannot be read or parsed."""

    def __init__(self, source: str, message: str, status_code: Optional[int] = None):
        self.source = source
        self.status_code = status_code
        super().__init__(f"Failed to load definitions from {source}: {message}")


@runtime_checkable
class ContentSource(Protocol):
    """Reads the raw text of a definitions document."""

    async def read(self, locator: str) -> str: ...


class HttpContentSource:
    """Fetches documents over HTTP.

    Used for remote URLs, and for relative locators when the host has no
    storage access (pass base_url so relative paths resolve against it).
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = "",
        timeout: float = HTTP_TIMEOUT,
    ):
        self._client = client
        self.base_url = base_url
        self.timeout = timeout

    async def read(self, locator: str) -> str:
        if self._client is not None:
            return await self._fetch(self._client, locator)
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
        ) as client:
            return await self._fetch(client, locator)

    async def _fetch(self, client: httpx.AsyncClient, locator: str) -> str:
        try:
            response = await client.get(locator)
        except httpx.HTTPError as e:
            raise DefinitionsLoadError(locator, str(e)) from e

        if not response.is_success:
            raise DefinitionsLoadError(
                locator,
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )
        return response.text


class FileContentSource:
    """Reads documents from the local filesystem."""

    def __init__(self, root: Optional[Path] = None):
        self.root = root

    def resolve(self, locator: str) -> Path:
        path = Path(locator).expanduser()
        if self.root is not None and not path.is_absolute():
            path = self.root / path
        return path.resolve()

    async def read(self, locator: str) -> str:
        path = self.resolve(locator)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DefinitionsLoadError(locator, str(e)) from e


def is_remote(locator: str) -> bool:
    """Whether a locator names a network resource."""
    return locator.startswith(REMOTE_SCHEMES)


def parse_definitions(raw: str, locator: str) -> Definitions:
    """Parse raw document text (JSON, or YAML for .yaml/.yml locators)."""
    try:
        if locator.lower().endswith(YAML_SUFFIXES):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DefinitionsLoadError(locator, f"invalid document: {e}") from e

    if not isinstance(data, dict):
        raise DefinitionsLoadError(
            locator, f"expected an object, got {type(data).__name__}"
        )

    try:
        return Definitions.model_validate(data)
    except ValidationError as e:
        raise DefinitionsLoadError(locator, f"invalid definitions: {e}") from e


class DefinitionsLoader:
    """Resolves definitions sources using injected content sources."""

    def __init__(
        self,
        remote: Optional[ContentSource] = None,
        local: Optional[ContentSource] = None,
    ):
        self.remote = remote or HttpContentSource()
        self.local = local or FileContentSource()

    async def load(self, source: DefinitionsSource) -> Definitions:
        """Load a definitions document.

        Raises:
            DefinitionsLoadError: If the document cannot be read or parsed
        """
        if isinstance(source, Definitions):
            return source
        if isinstance(source, dict):
            try:
                return Definitions.model_validate(source)
            except ValidationError as e:
                raise DefinitionsLoadError("<inline>", f"invalid definitions: {e}") from e

        content_source = self.remote if is_remote(source) else self.local
        raw = await content_source.read(source)
        definitions = parse_definitions(raw, source)
        logger.info(
            f"Loaded {len(definitions.components)} component definitions "
            f"(version '{definitions.version}') from {source}"
        )
        return definitions


# Global loader instance
_loader: Optional[DefinitionsLoader] = None


def get_definitions_loader() -> DefinitionsLoader:
    """Get the global definitions loader instance."""
    global _loader
    if _loader is None:
        _loader = DefinitionsLoader()
    return _loader


async def load_definitions(source: DefinitionsSource) -> Definitions:
    """Load definitions with the global loader (no caching)."""
    return await get_definitions_loader().load(source)
