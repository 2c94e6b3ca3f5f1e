"""Exceptions raised by uicp-parser.

Parsing and validation problems are reported as data; only infrastructure
failures such as catalog loading are raised.
"""

from typing import Optional


class UICPError(Exception):
    def __init__(self, code: str, detail: str):
        self.code = code
        self.detail = detail
        super().__init__(detail)


class CatalogLoadError(UICPError):
    """The catalog could not be fetched or parsed."""

    def __init__(self, detail: str, source: Optional[str] = None):
        self.source = source
        super().__init__("catalog.load_failed", detail)
