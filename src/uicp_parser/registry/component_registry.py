"""Two-tier registry mapping component ids to renderable handles.

Handles registered up front by the host are returned directly. Anything else
is resolved on demand through a ComponentResolver and stored in the same
table, so each component is resolved at most once until it is cleared.
"""

import threading
from typing import Any, Optional

from uicp_parser.models.catalog import ComponentDescriptor
from uicp_parser.observability.logging import get_logger
from uicp_parser.registry.abstract import ComponentResolver


logger = get_logger(__name__)


class ComponentRegistry:
    """Injectable handle table with on-demand resolution.

    Resolution failures never raise: the rendering layer receives None and
    substitutes a fallback.
    """

    def __init__(self, resolver: Optional[ComponentResolver] = None):
        """Initializes an empty registry.

        Args:
            resolver: Optional resolver for components that were not
                registered explicitly.
        """
        self.resolver = resolver
        self._handles: dict[str, Any] = {}
        self._lock = threading.Lock()

    def register(self, component_id: str, handle: Any):
        """Stores a handle, replacing any existing one for the id."""
        with self._lock:
            self._handles[component_id] = handle

    def get(self, component_id: str) -> Optional[Any]:
        with self._lock:
            return self._handles.get(component_id)

    def list_registered(self) -> list[str]:
        with self._lock:
            return list(self._handles)

    def clear(self, component_id: Optional[str] = None):
        """Removes one handle, or every handle when no id is given."""
        with self._lock:
            if component_id is None:
                self._handles.clear()
            else:
                self._handles.pop(component_id, None)

    async def resolve(
        self, component_id: str, render_path: Optional[str] = None
    ) -> Optional[Any]:
        """Returns the handle for a component, resolving it if needed.

        Args:
            component_id: The catalog identifier of the component.
            render_path: Locator handed to the resolver; defaults to the id.

        Returns:
            The handle, or None if the component could not be resolved.
        """
        handle = self.get(component_id)
        if handle is not None:
            return handle

        if self.resolver is None:
            logger.error(
                f"No handle registered for component {component_id} and no resolver configured",
                extra={
                    "extra_fields": {
                        "event": "uicp.component.unresolved",
                        "component_id": component_id,
                    }
                },
            )
            return None

        locator = render_path or component_id
        try:
            handle = await self.resolver.resolve(component_id, locator)
        except Exception as e:
            logger.error(
                f"Failed to resolve component {component_id} from {locator}: {e}",
                extra={
                    "extra_fields": {
                        "event": "uicp.component.resolution_failed",
                        "component_id": component_id,
                    }
                },
            )
            return None

        if handle is None:
            logger.error(
                f"No valid component found for {component_id} in {locator}",
                extra={
                    "extra_fields": {
                        "event": "uicp.component.unresolved",
                        "component_id": component_id,
                    }
                },
            )
            return None

        self.register(component_id, handle)
        return handle

    async def resolve_descriptor(
        self, descriptor: ComponentDescriptor
    ) -> Optional[Any]:
        return await self.resolve(descriptor.id, descriptor.render_path)
