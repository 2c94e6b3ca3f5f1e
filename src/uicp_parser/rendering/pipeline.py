"""Content pipeline between the extractor and a rendering adapter.

``ContentProcessor`` runs text through the extractor, validates each block
against the (cached) catalog and resolves a handle for every valid block.
The result is an ordered list of segments that a rendering adapter can map
one to one onto visual output.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from uicp_parser.catalog.cache import CatalogCache
from uicp_parser.catalog.loader import (
    CatalogLoader,
    CatalogSource,
    DefaultCatalogFetcher,
)
from uicp_parser.config import ParserSettings
from uicp_parser.models.blocks import ValidatedBlock, ValidationResult
from uicp_parser.parsing.extractor import StreamingExtractor
from uicp_parser.registry.component_registry import ComponentRegistry
from uicp_parser.registry.importlib_resolver import ImportlibResolver
from uicp_parser.validation.validator import validate_block


@dataclass(frozen=True)
class TextSegment:
    text: str


@dataclass(frozen=True)
class ComponentSegment:
    """A valid block and its handle (None when resolution failed)."""

    block: ValidatedBlock
    handle: Optional[Any]

    @property
    def key(self) -> str:
        return f"component-{self.block.source_span}"


@dataclass(frozen=True)
class RejectedSegment:
    """A block that failed validation."""

    result: ValidationResult


Segment = Union[TextSegment, ComponentSegment, RejectedSegment]


@dataclass
class ProcessedContent:
    """Render-ready view of the text seen so far.

    Attributes:
        segments: Text and component segments in source order.
        is_pending: Whether a block may still be arriving; adapters show a
            working indicator instead of the held-back text.
        in_block: Whether a confirmed block body is still open.
    """

    segments: list[Segment] = field(default_factory=list)
    is_pending: bool = False
    in_block: bool = False

    def components(self) -> list[ComponentSegment]:
        return [s for s in self.segments if isinstance(s, ComponentSegment)]

    def rejected(self) -> list[RejectedSegment]:
        return [s for s in self.segments if isinstance(s, RejectedSegment)]


class ContentProcessor:
    """Turns streamed model output into render-ready segments."""

    def __init__(
        self,
        catalog_source: CatalogSource,
        cache: Optional[CatalogCache] = None,
        registry: Optional[ComponentRegistry] = None,
        extractor: Optional[StreamingExtractor] = None,
        catalog_ttl: Optional[float] = None,
    ):
        self.catalog_source = catalog_source
        self.cache = cache or CatalogCache()
        self.registry = registry or ComponentRegistry()
        self.extractor = extractor or StreamingExtractor()
        self.catalog_ttl = catalog_ttl

    @classmethod
    def from_settings(
        cls,
        settings: ParserSettings,
        registry: Optional[ComponentRegistry] = None,
    ) -> "ContentProcessor":
        """Builds a processor wired from settings.

        Args:
            settings: Parser settings; ``catalog_source`` must be set.
            registry: Registry to use instead of one backed by an
                ImportlibResolver rooted at ``components_package``.

        Raises:
            ValueError: If no catalog source is configured.
        """
        if not settings.catalog_source:
            raise ValueError("UICP_CATALOG_SOURCE is not configured")
        loader = CatalogLoader(
            DefaultCatalogFetcher(timeout=settings.fetch_timeout_seconds)
        )
        return cls(
            settings.catalog_source,
            cache=CatalogCache(loader, default_ttl=settings.catalog_ttl_seconds),
            registry=registry
            or ComponentRegistry(ImportlibResolver(settings.components_package)),
        )

    async def process(self, text: str, final: bool = False) -> ProcessedContent:
        """Processes the full text seen so far.

        Args:
            text: Everything the model has produced so far.
            final: Whether the model has finished; held-back fence text is
                then shown and nothing is pending.

        Returns:
            Ordered segments plus the pending flags.

        Raises:
            CatalogLoadError: If the text contains blocks and the catalog
                cannot be loaded.
        """
        extraction = self.extractor.extract(text, final=final)
        content = ProcessedContent(
            is_pending=extraction.is_pending, in_block=extraction.in_block
        )

        catalog = None
        if extraction.completed_blocks:
            catalog = await self.cache.load_cached(
                self.catalog_source, self.catalog_ttl
            )

        for part in extraction.parts:
            if isinstance(part, str):
                if part.strip():
                    content.segments.append(TextSegment(part))
                continue

            result = validate_block(extraction.completed_blocks[part], catalog)
            if not result.valid:
                content.segments.append(RejectedSegment(result))
                continue

            handle = await self.registry.resolve_descriptor(result.block.descriptor)
            content.segments.append(ComponentSegment(result.block, handle))

        return content
