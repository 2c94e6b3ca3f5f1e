"""Abstract base class for dynamic component resolution.

Hosts implement this interface to turn a component id and a logical locator
into a renderable handle; the registry never assumes a particular lookup
mechanism.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class ComponentResolver(ABC):
    """Capability interface for on-demand component resolution."""

    @abstractmethod
    async def resolve(self, component_id: str, locator: str) -> Optional[Any]:
        """Resolves a component to a renderable handle.

        Args:
            component_id: The catalog identifier of the component.
            locator: The descriptor's render path (or the id when the
                descriptor has none).

        Returns:
            The handle, or None if nothing could be resolved. Implementations
            may also raise; the registry treats both as a failure.
        """
        pass  # pragma: no cover
