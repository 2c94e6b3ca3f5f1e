"""Loading of component catalogs from their source.

How a catalog source is turned into a document is delegated to a
``CatalogFetcher``. The default fetcher understands in-memory mappings,
http(s) URLs and local JSON or YAML files.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

import requests
import yaml
from pydantic import ValidationError

from uicp_parser.config import DEFAULT_FETCH_TIMEOUT_SECONDS
from uicp_parser.errors import CatalogLoadError
from uicp_parser.models.catalog import Catalog
from uicp_parser.observability.logging import get_logger


logger = get_logger(__name__)

CatalogSource = Union[str, Mapping[str, Any], Catalog]

YAML_SUFFIXES = (".yaml", ".yml")


class CatalogFetcher(ABC):
    """Turns a catalog source identifier into a raw catalog document."""

    @abstractmethod
    async def fetch(self, source: Union[str, Mapping[str, Any]]) -> Any:
        """Fetches the raw document for a source.

        Args:
            source: Source identifier or an in-memory document.

        Returns:
            The decoded document (normally a dict).
        """
        pass  # pragma: no cover


class DefaultCatalogFetcher(CatalogFetcher):
    """Fetches catalogs from mappings, http(s) URLs and local files."""

    def __init__(self, timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS):
        self.timeout = timeout

    async def fetch(self, source: Union[str, Mapping[str, Any]]) -> Any:
        if isinstance(source, Mapping):
            return source
        if source.startswith(("http://", "https://")):
            return await asyncio.to_thread(self._fetch_url, source)
        return await asyncio.to_thread(self._read_file, source)

    def _fetch_url(self, url: str) -> Any:
        response = requests.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _read_file(self, path: str) -> Any:
        file_path = Path(path)
        with open(file_path, "r", encoding="utf-8") as f:
            if file_path.suffix.lower() in YAML_SUFFIXES:
                return yaml.safe_load(f)
            return json.load(f)


class CatalogLoader:
    """Produces Catalog instances from catalog sources."""

    def __init__(self, fetcher: Optional[CatalogFetcher] = None):
        self.fetcher = fetcher or DefaultCatalogFetcher()

    async def load(self, source: CatalogSource) -> Catalog:
        """Fetches and parses a catalog.

        Args:
            source: A source identifier, a raw catalog mapping, or a
                Catalog (returned unchanged).

        Returns:
            A freshly parsed Catalog.

        Raises:
            CatalogLoadError: If fetching or parsing fails.
        """
        if isinstance(source, Catalog):
            return source

        label = source if isinstance(source, str) else "<in-memory>"
        try:
            document = await self.fetcher.fetch(source)
        except CatalogLoadError:
            raise
        except (OSError, requests.RequestException, ValueError, yaml.YAMLError) as e:
            logger.error(
                f"Failed to fetch catalog from {label}: {e}",
                extra={"extra_fields": {"event": "uicp.catalog.fetch_failed"}},
            )
            raise CatalogLoadError(
                f"Failed to fetch catalog from {label}: {e}", source=label
            ) from e

        if not isinstance(document, Mapping):
            raise CatalogLoadError(
                f"Catalog from {label} is not an object", source=label
            )

        try:
            catalog = Catalog.model_validate(document)
        except ValidationError as e:
            logger.error(
                f"Invalid catalog from {label}: {e.error_count()} error(s)",
                extra={"extra_fields": {"event": "uicp.catalog.invalid"}},
            )
            raise CatalogLoadError(
                f"Invalid catalog from {label}: {e}", source=label
            ) from e

        logger.info(
            f"Loaded catalog {catalog.version} from {label}",
            extra={
                "extra_fields": {
                    "event": "uicp.catalog.loaded",
                    "components": len(catalog.components),
                }
            },
        )
        return catalog
