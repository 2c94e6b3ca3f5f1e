"""Component resolver backed by Python imports.

Locators are module paths, either dotted (``pkg.cards``) or slash separated
(``pkg/cards.py``), optionally followed by ``:attribute``. Relative locators
are resolved against a base package.
"""

import asyncio
import importlib
from typing import Any, Optional

from uicp_parser.registry.abstract import ComponentResolver


class ImportlibResolver(ComponentResolver):
    """Imports the module named by a locator and picks the component from it.

    Attribute lookup order: the explicit ``:attribute``, an attribute named
    after the component id, an attribute named after the last locator
    segment, then a module-level ``component``.
    """

    def __init__(self, base_package: Optional[str] = None):
        self.base_package = base_package

    def module_name(self, locator: str) -> str:
        path = locator.split(":", 1)[0].strip()
        if path.endswith(".py"):
            path = path[: -len(".py")]
        absolute = path.startswith("/")
        name = path.strip("/").replace("/", ".")
        if self.base_package and not absolute:
            return f"{self.base_package}.{name}"
        return name

    async def resolve(self, component_id: str, locator: str) -> Optional[Any]:
        module = await asyncio.to_thread(
            importlib.import_module, self.module_name(locator)
        )

        candidates = []
        if ":" in locator:
            candidates.append(locator.split(":", 1)[1].strip())
        candidates.append(component_id)
        candidates.append(self.module_name(locator).rsplit(".", 1)[-1])
        candidates.append("component")

        for name in candidates:
            handle = getattr(module, name, None)
            if handle is not None:
                return handle
        return None
