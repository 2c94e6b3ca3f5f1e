"""Tools a language model calls to discover components and build blocks.

The argument models are exposed to the model as tool schemas; the functions
run against an already loaded catalog.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.blocks import RawBlock
from ..models.catalog import Catalog
from ..parsing.extractor import format_block
from ..validation.validator import validate_block


class GetUIComponents(BaseModel):
    """
    Discover available UI components and their input schemas.

    Call this before writing a UICP block to learn which components exist.
    """

    model_config = ConfigDict(extra="forbid")

    component_type: Optional[str] = Field(
        None,
        description='Filter by category (e.g., "card", "table").',
    )

    component_id: Optional[str] = Field(
        None,
        description="Return only the component with this exact id.",
    )


class CreateUIComponent(BaseModel):
    """
    Build a UICP block for one component.

    The returned block text must be pasted verbatim into the reply.
    """

    model_config = ConfigDict(extra="forbid")

    component_id: str = Field(
        ...,
        description='Component id from get_ui_components (e.g., "SimpleCard").',
    )

    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Component data with all required fields from the schema.",
    )


def get_ui_components(
    catalog: Catalog,
    component_type: Optional[str] = None,
    component_id: Optional[str] = None,
) -> dict[str, Any]:
    components = catalog.filter(category=component_type, component_id=component_id)
    return {
        "version": catalog.version,
        "components": [
            {
                "id": c.id,
                "category": c.category,
                "description": c.description,
                "inputSchema": {
                    name: spec.model_dump(by_alias=True, exclude_none=True, mode="json")
                    for name, spec in c.input_schema.items()
                },
                "example": c.example,
            }
            for c in components
        ],
    }


def create_ui_component(
    catalog: Catalog, component_id: str, payload: dict[str, Any]
) -> dict[str, Any]:
    """Validates a payload and returns the block text for it.

    Returns:
        ``{"success": True, "uicp_block": ...}`` when valid, otherwise
        ``{"success": False, "errors": [...], "known_component_ids": [...]}``
        so the model can correct itself.
    """
    if not component_id:
        return {
            "success": False,
            "errors": ["component_id must not be empty"],
            "known_component_ids": catalog.component_ids(),
        }
    result = validate_block(
        RawBlock(component_id=component_id, payload=payload, source_span=0),
        catalog,
    )
    if not result.valid:
        return {
            "success": False,
            "errors": [issue.detail for issue in result.issues],
            "known_component_ids": result.known_component_ids,
        }
    return {
        "success": True,
        "uicp_block": format_block(component_id, payload),
    }
