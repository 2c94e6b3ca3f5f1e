import pytest
from pydantic import ValidationError

from uicp_parser.models.catalog import (
    Catalog,
    ComponentDescriptor,
    InputFieldSpec,
    value_matches_type,
)
from uicp_parser.models.enums import FieldType


class TestInputFieldSpec:
    def test_defaults(self):
        spec = InputFieldSpec(type="string")
        assert spec.type == FieldType.STRING
        assert spec.required is False
        assert spec.has_default is False
        assert spec.enum_values is None

    def test_enum_aliases(self):
        for key in ("enumValues", "enum_values", "enum"):
            spec = InputFieldSpec.model_validate({"type": "string", key: ["a", "b"]})
            assert spec.enum_values == ["a", "b"]

    def test_default_must_be_enum_member(self):
        with pytest.raises(ValidationError):
            InputFieldSpec.model_validate(
                {"type": "string", "enumValues": ["a"], "default": "b"}
            )

    def test_default_must_match_type(self):
        with pytest.raises(ValidationError):
            InputFieldSpec(type="number", default="1")

    def test_false_default_counts(self):
        spec = InputFieldSpec(type="boolean", default=False)
        assert spec.has_default is True

    def test_enum_only_on_scalar_fields(self):
        with pytest.raises(ValidationError):
            InputFieldSpec.model_validate({"type": "boolean", "enum": [True]})

    def test_properties_only_on_objects(self):
        with pytest.raises(ValidationError):
            InputFieldSpec.model_validate(
                {"type": "string", "properties": {"a": {"type": "string"}}}
            )

    def test_nested_properties(self):
        spec = InputFieldSpec.model_validate(
            {
                "type": "object",
                "properties": {
                    "inner": {
                        "type": "object",
                        "properties": {"x": {"type": "number", "required": True}},
                    }
                },
            }
        )
        assert spec.properties["inner"].properties["x"].required is True

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            InputFieldSpec(type="date")

    def test_serializes_with_camel_case(self):
        spec = InputFieldSpec.model_validate({"type": "string", "enum": ["a"]})
        dumped = spec.model_dump(by_alias=True, exclude_none=True, mode="json")
        assert dumped == {"type": "string", "required": False, "enumValues": ["a"]}


class TestComponentDescriptor:
    def test_alternate_field_names(self):
        descriptor = ComponentDescriptor.model_validate(
            {
                "uid": "SimpleCard",
                "type": "card",
                "path": "cards/simple",
                "input_schema": {"title": {"type": "string", "required": True}},
            }
        )
        assert descriptor.id == "SimpleCard"
        assert descriptor.category == "card"
        assert descriptor.render_path == "cards/simple"
        assert descriptor.required_fields() == ["title"]

    def test_example_must_match_schema(self):
        with pytest.raises(ValidationError, match="does not match its input schema"):
            Catalog.model_validate(
                {
                    "version": "1",
                    "components": [
                        {
                            "id": "X",
                            "inputSchema": {"a": {"type": "number", "required": True}},
                            "example": {"a": "not a number"},
                        }
                    ],
                }
            )

    def test_example_missing_required_field(self):
        with pytest.raises(ValidationError, match="Missing required field 'title'"):
            ComponentDescriptor.model_validate(
                {
                    "id": "Card",
                    "inputSchema": {"title": {"type": "string", "required": True}},
                    "example": {"subtitle": "x"},
                }
            )

    def test_example_optional(self):
        descriptor = ComponentDescriptor.model_validate(
            {"id": "Card", "inputSchema": {"title": {"type": "string"}}}
        )
        assert descriptor.example is None

    def test_id_required(self):
        with pytest.raises(ValidationError):
            ComponentDescriptor.model_validate({"id": ""})

    def test_immutable(self, catalog):
        with pytest.raises(ValidationError):
            catalog.components[0].id = "Other"


class TestCatalog:
    def test_loads_document(self, catalog):
        assert catalog.version == "1.0"
        assert catalog.component_ids() == ["X", "SimpleCard", "DataTable", "Badge"]
        assert catalog.get("SimpleCard").render_path == "cards:SimpleCard"
        assert catalog.get("Missing") is None

    def test_duplicate_ids_rejected(self, catalog_document):
        catalog_document["components"].append({"id": "X"})
        with pytest.raises(ValidationError, match="Duplicate component ids: X"):
            Catalog.model_validate(catalog_document)

    def test_numeric_version_coerced(self):
        assert Catalog.model_validate({"version": 2, "components": []}).version == "2"

    def test_unknown_keys_ignored(self, catalog_document):
        catalog_document["generator"] = "tool"
        catalog_document["components"][0]["owner"] = "team"
        catalog = Catalog.model_validate(catalog_document)
        assert catalog.get("X") is not None

    def test_filter(self, catalog):
        assert [c.id for c in catalog.filter(category="CARD")] == ["SimpleCard"]
        assert [c.id for c in catalog.filter(component_id="Badge")] == ["Badge"]
        assert catalog.filter(category="card", component_id="Badge") == []
        assert len(catalog.filter()) == 4

    def test_refresh_builds_new_instance(self, catalog_document):
        first = Catalog.model_validate(catalog_document)
        second = Catalog.model_validate(catalog_document)
        assert first == second
        assert first is not second


class TestValueMatchesType:
    @pytest.mark.parametrize(
        "value,field_type,expected",
        [
            ("a", FieldType.STRING, True),
            (1, FieldType.NUMBER, True),
            (1.5, FieldType.NUMBER, True),
            (True, FieldType.NUMBER, False),
            (True, FieldType.BOOLEAN, True),
            (0, FieldType.BOOLEAN, False),
            ([], FieldType.ARRAY, True),
            ({}, FieldType.ARRAY, False),
            ({}, FieldType.OBJECT, True),
            ("{}", FieldType.OBJECT, False),
        ],
    )
    def test_kinds(self, value, field_type, expected):
        assert value_matches_type(value, field_type) is expected
