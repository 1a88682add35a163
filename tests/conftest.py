"""
Shared pytest fixtures.

Provides a small definitions document, fresh registries and caches, a
controllable clock and a fake component resolver.
"""

import pytest

from uicp.components.registry import ComponentLoadError, ComponentRegistry, get_component_registry
from uicp.definitions.cache import DefinitionsCache, get_definitions_cache
from uicp.definitions.schemas import Definitions


DEFINITIONS_DOC = {
    "version": "2.1.0",
    "components": [
        {
            "uid": "Card",
            "type": "card",
            "description": "A titled card",
            "componentPath": "cards/card",
            "inputs": {
                "title": {"type": "string", "description": "Heading", "required": True},
                "body": {"type": "string", "description": "Body text", "required": False},
                "tone": {
                    "type": "string",
                    "description": "Color scheme",
                    "required": False,
                    "enum": ["neutral", "alert"],
                },
            },
            "example": {"title": "Hi", "tone": "neutral"},
        },
        {
            "uid": "Table",
            "type": "table",
            "description": "Rows and columns",
            "componentPath": "tables/table",
            "inputs": {
                "headers": {"type": "array", "description": "Columns", "required": True},
                "rows": {"type": "array", "description": "Cells", "required": True},
                "striped": {"type": "boolean", "description": "Shading", "required": False},
                "max_rows": {"type": "integer", "description": "Row limit", "required": False},
            },
        },
    ],
}


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class FakeResolver:
    """Component resolver returning canned renderers and recording calls."""

    def __init__(self, renderers=None, failing=(), gate=None):
        self.renderers = renderers or {}
        self.failing = set(failing)
        self.gate = gate
        self.calls = []

    async def resolve(self, uid, component_path, base_path):
        self.calls.append((uid, component_path, base_path))
        if self.gate is not None:
            await self.gate.wait()
        if uid in self.failing or uid not in self.renderers:
            raise ComponentLoadError(uid, "no such module")
        return self.renderers[uid]


def card_renderer(data):
    return f"<card>{data['title']}</card>"


def table_renderer(data):
    return f"<table cols={len(data['headers'])}>"


@pytest.fixture(autouse=True)
def reset_globals():
    """Keep the process-wide cache and registry empty between tests."""
    get_definitions_cache().clear()
    get_component_registry().clear()
    yield
    get_definitions_cache().clear()
    get_component_registry().clear()


@pytest.fixture
def definitions_doc() -> dict:
    return DEFINITIONS_DOC


@pytest.fixture
def definitions() -> Definitions:
    return Definitions.model_validate(DEFINITIONS_DOC)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> DefinitionsCache:
    return DefinitionsCache(clock=clock)


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver({"Card": card_renderer, "Table": table_renderer})


@pytest.fixture
def registry(resolver) -> ComponentRegistry:
    return ComponentRegistry(resolver=resolver, base_path="app/components")
