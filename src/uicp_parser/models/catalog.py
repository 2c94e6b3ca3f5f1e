"""Data models for the component catalog.

This module defines the schema of the catalog document the language model is
prompted with and that extracted blocks are validated against. Catalogs are
immutable; refreshing a catalog always produces a new instance.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator

from uicp_parser.models.base import DocumentModel
from uicp_parser.models.enums import FieldType


def value_matches_type(value: Any, field_type: FieldType) -> bool:
    """Checks the runtime kind of a JSON value against a schema field type.

    Booleans are never accepted as numbers even though ``bool`` subclasses
    ``int`` in Python.

    Args:
        value: The decoded JSON value.
        field_type: The declared field type.

    Returns:
        True if the value has the declared kind.
    """
    if field_type == FieldType.STRING:
        return isinstance(value, str)
    if field_type == FieldType.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if field_type == FieldType.BOOLEAN:
        return isinstance(value, bool)
    if field_type == FieldType.ARRAY:
        return isinstance(value, (list, tuple))
    if field_type == FieldType.OBJECT:
        return isinstance(value, Mapping)
    return False


class InputFieldSpec(DocumentModel):
    """Declaration of a single payload field.

    Attributes:
        type: The value kind (string, number, boolean, array, object).
        required: Whether the field must be present in the payload.
        default: Value used when the field is absent.
        enum_values: Allowed literal values (string and number fields only).
        properties: Nested field declarations (object fields only).
        description: Free-form explanation shown to the model.
    """

    type: FieldType = Field(..., description="The value kind.")
    required: bool = Field(
        default=False,
        description="Whether the field must be present in the payload.",
    )
    default: Optional[Any] = Field(
        default=None, description="Value used when the field is absent."
    )
    enum_values: Optional[list[Any]] = Field(
        default=None,
        validation_alias=AliasChoices("enumValues", "enum_values", "enum"),
        serialization_alias="enumValues",
        description="Allowed literal values (string and number fields only).",
    )
    properties: Optional[dict[str, "InputFieldSpec"]] = Field(
        default=None, description="Nested field declarations (object fields only)."
    )
    description: Optional[str] = Field(
        default=None, description="Free-form explanation shown to the model."
    )

    @model_validator(mode="after")
    def _check_consistency(self) -> "InputFieldSpec":
        if self.enum_values is not None and self.type not in (
            FieldType.STRING,
            FieldType.NUMBER,
        ):
            raise ValueError(
                f"enum values are only allowed on string or number fields, not {self.type.value}"
            )
        if self.properties is not None and self.type != FieldType.OBJECT:
            raise ValueError(
                f"nested properties are only allowed on object fields, not {self.type.value}"
            )
        if self.default is not None:
            if not value_matches_type(self.default, self.type):
                raise ValueError(
                    f"default {self.default!r} does not match field type {self.type.value}"
                )
            if self.enum_values is not None and self.default not in self.enum_values:
                raise ValueError(
                    f"default {self.default!r} is not one of {self.enum_values!r}"
                )
        return self

    @property
    def has_default(self) -> bool:
        return self.default is not None


class ComponentDescriptor(DocumentModel):
    """Catalog entry describing one renderable component.

    Attributes:
        id: Unique component identifier used in blocks (e.g., 'SimpleCard').
        category: Free-form grouping such as 'card' or 'table'.
        description: Explanation used when prompting the model.
        render_path: Logical locator handed to the component resolver.
        input_schema: Field name to field declaration mapping.
        example: Optional sample payload.
    """

    id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("id", "uid"),
        description="Unique component identifier used in blocks.",
    )
    category: str = Field(
        default="",
        validation_alias=AliasChoices("category", "type"),
        description="Free-form grouping such as 'card' or 'table'.",
    )
    description: str = Field(
        default="", description="Explanation used when prompting the model."
    )
    render_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("renderPath", "render_path", "path"),
        serialization_alias="renderPath",
        description="Logical locator handed to the component resolver.",
    )
    input_schema: dict[str, InputFieldSpec] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("inputSchema", "input_schema"),
        serialization_alias="inputSchema",
        description="Field name to field declaration mapping.",
    )
    example: Optional[dict[str, Any]] = Field(
        default=None, description="Optional sample payload."
    )

    @model_validator(mode="after")
    def _check_example(self) -> "ComponentDescriptor":
        if self.example is None:
            return self
        # Imported here, the validator module depends on this one
        from uicp_parser.validation.validator import check_fields

        issues = check_fields(self.input_schema, self.example)
        if issues:
            details = "; ".join(issue.detail for issue in issues)
            raise ValueError(
                f"example for component '{self.id}' does not match its input schema: {details}"
            )
        return self

    def required_fields(self) -> list[str]:
        return [
            name for name, spec in self.input_schema.items() if spec.required
        ]


class Catalog(DocumentModel):
    """A versioned, ordered collection of component descriptors.

    Attributes:
        version: Catalog document version.
        components: Component descriptors in document order; ids are unique.
    """

    version: str = Field(..., description="Catalog document version.")
    components: tuple[ComponentDescriptor, ...] = Field(
        default_factory=tuple,
        description="Component descriptors in document order.",
    )

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "Catalog":
        seen: set[str] = set()
        duplicates: list[str] = []
        for component in self.components:
            if component.id in seen and component.id not in duplicates:
                duplicates.append(component.id)
            seen.add(component.id)
        if duplicates:
            raise ValueError(f"Duplicate component ids: {', '.join(duplicates)}")
        return self

    def get(self, component_id: str) -> Optional[ComponentDescriptor]:
        """Retrieves a component descriptor by its ID.

        Args:
            component_id: The component identifier.

        Returns:
            The descriptor if found, otherwise None.
        """
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def component_ids(self) -> list[str]:
        return [component.id for component in self.components]

    def filter(
        self,
        category: Optional[str] = None,
        component_id: Optional[str] = None,
    ) -> list[ComponentDescriptor]:
        """Lists components matching an optional category and/or id.

        Category matching is case-insensitive.
        """
        matches = []
        for component in self.components:
            if component_id is not None and component.id != component_id:
                continue
            if (
                category is not None
                and component.category.lower() != category.lower()
            ):
                continue
            matches.append(component)
        return matches
