"""Validation of extracted blocks against the component catalog.

Every violated constraint is collected, so a single result describes all
problems with a block rather than just the first one found.
"""

from collections.abc import Mapping
from typing import Any, Iterable

from uicp_parser.models.blocks import (
    RawBlock,
    ValidatedBlock,
    ValidationIssue,
    ValidationResult,
)
from uicp_parser.models.catalog import (
    Catalog,
    InputFieldSpec,
    value_matches_type,
)
from uicp_parser.models.enums import FieldType, ValidationCode
from uicp_parser.observability.logging import get_logger


logger = get_logger(__name__)


def check_fields(
    schema: Mapping[str, InputFieldSpec],
    values: Mapping[str, Any],
    path_prefix: str = "",
) -> list[ValidationIssue]:
    """Checks a mapping of values against a flat or nested field schema.

    A ``None`` value counts as absent. Keys not declared in the schema are
    ignored.

    Args:
        schema: Field name to declaration mapping.
        values: The payload (or nested object) being checked.
        path_prefix: Internal recursion helper to build dotted paths.

    Returns:
        One issue per violated constraint, in schema order.
    """
    issues: list[ValidationIssue] = []

    for name, spec in schema.items():
        path = f"{path_prefix}.{name}" if path_prefix else name
        value = values.get(name)

        if value is None:
            if spec.required and not spec.has_default:
                issues.append(
                    ValidationIssue(
                        code=ValidationCode.MISSING_FIELD,
                        field=path,
                        detail=f"Missing required field '{path}'",
                        expected=spec.type.value,
                    )
                )
            continue

        if not value_matches_type(value, spec.type):
            issues.append(
                ValidationIssue(
                    code=ValidationCode.TYPE_MISMATCH,
                    field=path,
                    detail=(
                        f"Field '{path}' must be of type {spec.type.value}, "
                        f"got {_json_kind(value)}"
                    ),
                    expected=spec.type.value,
                    actual=value,
                )
            )
            continue

        if spec.enum_values is not None and value not in spec.enum_values:
            issues.append(
                ValidationIssue(
                    code=ValidationCode.INVALID_ENUM_VALUE,
                    field=path,
                    detail=(
                        f"Field '{path}' must be one of {spec.enum_values!r}, "
                        f"got {value!r}"
                    ),
                    expected=list(spec.enum_values),
                    actual=value,
                )
            )

        if spec.type == FieldType.OBJECT and spec.properties:
            issues.extend(check_fields(spec.properties, value, path))

    return issues


def _json_kind(value: Any) -> str:
    if isinstance(value, bool):
        return FieldType.BOOLEAN.value
    if isinstance(value, (int, float)):
        return FieldType.NUMBER.value
    if isinstance(value, str):
        return FieldType.STRING.value
    if isinstance(value, (list, tuple)):
        return FieldType.ARRAY.value
    if isinstance(value, Mapping):
        return FieldType.OBJECT.value
    return type(value).__name__


def validate_block(block: RawBlock, catalog: Catalog) -> ValidationResult:
    """Validates a raw block against the catalog.

    Args:
        block: The block emitted by the extractor.
        catalog: The catalog to look the component up in.

    Returns:
        A valid result carrying a ValidatedBlock, or an invalid result
        listing every violated constraint.
    """
    descriptor = catalog.get(block.component_id)
    if descriptor is None:
        known_ids = catalog.component_ids()
        logger.info(
            f"Unknown UICP component: {block.component_id}",
            extra={
                "extra_fields": {
                    "event": "uicp.block.unknown_component",
                    "component_id": block.component_id,
                }
            },
        )
        return ValidationResult(
            valid=False,
            raw=block,
            issues=[
                ValidationIssue(
                    code=ValidationCode.UNKNOWN_COMPONENT,
                    detail=f"Unknown component '{block.component_id}'",
                    actual=block.component_id,
                )
            ],
            known_component_ids=known_ids,
        )

    issues = check_fields(descriptor.input_schema, block.payload)
    if issues:
        logger.info(
            f"UICP block {block.component_id} failed validation with {len(issues)} issue(s)",
            extra={
                "extra_fields": {
                    "event": "uicp.block.invalid",
                    "component_id": block.component_id,
                    "codes": [issue.code.value for issue in issues],
                }
            },
        )
        return ValidationResult(valid=False, raw=block, issues=issues)

    validated = ValidatedBlock(
        component_id=block.component_id,
        payload=block.payload,
        source_span=block.source_span,
        descriptor=descriptor,
    )
    return ValidationResult(valid=True, raw=block, block=validated)


class BlockValidator:
    """Validates blocks against a fixed catalog instance."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def validate(self, block: RawBlock) -> ValidationResult:
        return validate_block(block, self.catalog)

    def validate_all(self, blocks: Iterable[RawBlock]) -> list[ValidationResult]:
        return [self.validate(block) for block in blocks]
