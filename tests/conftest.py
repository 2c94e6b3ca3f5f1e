import copy

import pytest

from uicp_parser.models.catalog import Catalog


CATALOG_DOCUMENT = {
    "version": "1.0",
    "components": [
        {
            "id": "X",
            "category": "demo",
            "description": "Minimal demo component.",
            "renderPath": "demo/x",
            "inputSchema": {"a": {"type": "number", "required": True}},
            "example": {"a": 1},
        },
        {
            "id": "SimpleCard",
            "category": "card",
            "description": "A card with a title and optional details.",
            "renderPath": "cards:SimpleCard",
            "inputSchema": {
                "title": {"type": "string", "required": True},
                "subtitle": {"type": "string"},
                "variant": {
                    "type": "string",
                    "enumValues": ["default", "outlined"],
                    "default": "default",
                },
                "elevated": {"type": "boolean", "default": False},
                "author": {
                    "type": "object",
                    "properties": {
                        "name": {"type": "string", "required": True},
                        "age": {"type": "number"},
                    },
                },
                "tags": {"type": "array"},
            },
            "example": {
                "title": "Hello",
                "variant": "outlined",
                "author": {"name": "Ada"},
                "tags": ["intro"],
            },
        },
        {
            "id": "DataTable",
            "category": "table",
            "description": "Tabular data.",
            "renderPath": "tables/data_table",
            "inputSchema": {
                "columns": {"type": "array", "required": True},
                "rows": {"type": "array", "required": True},
            },
            "example": {"columns": ["name"], "rows": [["Ada"]]},
        },
        {
            "id": "Badge",
            "category": "display",
            "description": "A small label.",
            "inputSchema": {
                "label": {"type": "string", "required": True, "default": "New"},
                "size": {"type": "number", "enumValues": [1, 2, 3]},
            },
        },
    ],
}


@pytest.fixture
def catalog_document():
    return copy.deepcopy(CATALOG_DOCUMENT)


@pytest.fixture
def catalog(catalog_document):
    return Catalog.model_validate(catalog_document)
