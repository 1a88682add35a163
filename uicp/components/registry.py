"""Component registry — uid -> renderer mapping with on-demand loading.

A renderer is any callable taking the block's data mapping and returning an
artifact the host knows how to display (an HTML string, a widget, ...).

- register()/get()/clear() for hosts that pre-register renderers
- load_component() resolves a renderer from its component path through a
  pluggable ComponentResolver, registers it and memoizes it
- Global default instance via get_component_registry(); pipelines accept
  an explicit instance so tests and hosts can keep registries separate

Not thread-safe: mutate only from the event loop thread.
"""

import asyncio
import importlib
import importlib.util
import logging
import os
import re
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Mapping, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

Renderer = Callable[[Mapping[str, Any]], Any]

# Where component paths resolve when no base path is given
DEFAULT_COMPONENTS_BASE_PATH = os.environ.get(
    "UICP_COMPONENTS_BASE_PATH", "uicp.components.builtin"
)


class ComponentLoadError(Exception):
    """Raised when a renderer cannot be resolved for a component."""

    def __init__(self, uid: str, message: str):
        self.uid = uid
        super().__init__(f"Failed to load component '{uid}': {message}")


@runtime_checkable
class ComponentResolver(Protocol):
    """Resolves (uid, component path, base path) to a renderer."""

    async def resolve(self, uid: str, component_path: str, base_path: str) -> Renderer: ...


class ImportComponentResolver:
    """Default resolver: imports the renderer's Python module.

    The base path and component path are joined with '/'. If the result (with
    '.py' appended when missing) is an existing file, it is loaded from disk.
    Otherwise it is imported as a dotted module name ('/' -> '.', '-' -> '_').
    The renderer is the module attribute named after the uid, else `render`.
    """

    async def resolve(self, uid: str, component_path: str, base_path: str) -> Renderer:
        module = await asyncio.to_thread(self._import, uid, component_path, base_path)
        renderer = getattr(module, uid, None) or getattr(module, "render", None)
        if renderer is None or not callable(renderer):
            raise ComponentLoadError(
                uid, f"module '{module.__name__}' has no callable '{uid}' or 'render'"
            )
        return renderer

    def _import(self, uid: str, component_path: str, base_path: str) -> ModuleType:
        joined = "/".join(
            part.strip("/") for part in (base_path, component_path) if part.strip("/")
        )
        if not joined:
            raise ComponentLoadError(uid, "empty component path")

        file_path = Path(joined if joined.endswith(".py") else f"{joined}.py")
        if base_path.startswith("/"):
            file_path = Path("/") / file_path
        if file_path.is_file():
            return self._import_file(uid, file_path)

        module_name = re.sub(r"\.py$", "", joined).replace("/", ".").replace("-", "_")
        try:
            return importlib.import_module(module_name)
        except ImportError as e:
            raise ComponentLoadError(uid, f"cannot import '{module_name}': {e}") from e

    def _import_file(self, uid: str, file_path: Path) -> ModuleType:
        spec = importlib.util.spec_from_file_location(f"uicp_component_{uid}", file_path)
        if spec is None or spec.loader is None:
            raise ComponentLoadError(uid, f"cannot load module from {file_path}")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise ComponentLoadError(uid, f"error executing {file_path}: {e}") from e
        return module


class ComponentRegistry:
    """Registry of renderers keyed by component uid."""

    def __init__(
        self,
        resolver: Optional[ComponentResolver] = None,
        base_path: str = DEFAULT_COMPONENTS_BASE_PATH,
    ):
        self.resolver = resolver or ImportComponentResolver()
        self.base_path = base_path
        self._renderers: dict[str, Renderer] = {}
        self._pending: dict[str, asyncio.Task] = {}

    def register(self, uid: str, renderer: Renderer) -> None:
        """Register (or replace) the renderer for a uid."""
        if not callable(renderer):
            raise TypeError(f"Renderer for '{uid}' must be callable")
        self._renderers[uid] = renderer
        logger.debug(f"Registered component: {uid}")

    def get(self, uid: str) -> Optional[Renderer]:
        """Get the renderer for a uid."""
        return self._renderers.get(uid)

    def list_keys(self) -> list[str]:
        """List registered uids."""
        return sorted(self._renderers.keys())

    def count(self) -> int:
        return len(self._renderers)

    def clear(self, uid: Optional[str] = None) -> None:
        """Unregister one uid, or everything when uid is omitted."""
        if uid is not None:
            self._renderers.pop(uid, None)
        else:
            self._renderers.clear()

    async def load_component(
        self,
        uid: str,
        component_path: str,
        base_path: Optional[str] = None,
    ) -> Renderer:
        """Resolve, register and return the renderer for a uid.

        Returns the registered renderer without reloading when there is one.
        Concurrent callers share one load, and a cancelled caller does not
        cancel it: the renderer is still registered when it finishes.

        Raises:
            ComponentLoadError: If the resolver cannot produce a renderer
        """
        existing = self._renderers.get(uid)
        if existing is not None:
            return existing

        task = self._pending.get(uid)
        if task is None:
            task = asyncio.ensure_future(
                self._resolve_and_register(uid, component_path, base_path or self.base_path)
            )
            self._pending[uid] = task
            task.add_done_callback(lambda _: self._pending.pop(uid, None))
        return await asyncio.shield(task)

    async def _resolve_and_register(
        self, uid: str, component_path: str, base_path: str
    ) -> Renderer:
        renderer = await self.resolver.resolve(uid, component_path, base_path)
        if not callable(renderer):
            raise ComponentLoadError(uid, "resolver returned a non-callable renderer")
        self._renderers.setdefault(uid, renderer)
        logger.info(f"Loaded component: {uid} ({base_path}/{component_path})")
        return self._renderers[uid]


# Global registry instance
_registry: Optional[ComponentRegistry] = None


def get_component_registry() -> ComponentRegistry:
    """Get the global component registry instance."""
    global _registry
    if _registry is None:
        _registry = ComponentRegistry()
    return _registry


def register_component(uid: str, renderer: Renderer) -> None:
    """Register a renderer in the global registry."""
    get_component_registry().register(uid, renderer)
