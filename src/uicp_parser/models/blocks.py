"""Data models for extracted and validated blocks.

This module defines the structures produced by the streaming extractor and
consumed by the validator and the rendering pipeline.
"""

from typing import Any, Optional, Union

from pydantic import Field

from uicp_parser.models.base import ModelBase
from uicp_parser.models.catalog import ComponentDescriptor
from uicp_parser.models.enums import ValidationCode


class RawBlock(ModelBase):
    """A block as emitted by the extractor, before validation.

    Attributes:
        component_id: The component identifier named by the block.
        payload: Untyped payload mapping.
        source_span: Ordinal of this block among blocks emitted so far; also
            the index used in its display-text placeholder.
    """

    component_id: str = Field(
        ..., min_length=1, description="The component identifier named by the block."
    )
    payload: dict[str, Any] = Field(
        default_factory=dict, description="Untyped payload mapping."
    )
    source_span: int = Field(
        ...,
        ge=0,
        description="Ordinal of this block among blocks emitted so far.",
    )


class ValidatedBlock(RawBlock):
    """A block whose payload satisfied its component's input schema.

    Attributes:
        descriptor: The matched catalog entry.
    """

    descriptor: ComponentDescriptor = Field(
        ..., description="The matched catalog entry."
    )

    @property
    def props(self) -> dict[str, Any]:
        """The payload with schema defaults filled in for absent fields."""
        props = dict(self.payload)
        for name, spec in self.descriptor.input_schema.items():
            if props.get(name) is None and spec.has_default:
                props[name] = spec.default
        return props


class MalformedBlock(ModelBase):
    """A closed block whose body could not be read as a component block.

    Attributes:
        source_span: Ordinal of this block among all closed blocks,
            malformed ones included.
        body: The trimmed block body.
        reason: Why the body was rejected.
    """

    source_span: int = Field(..., ge=0)
    body: str
    reason: str


class ExtractionResult(ModelBase):
    """Output of one extractor invocation.

    Attributes:
        display_text: Text safe to show, with placeholders where blocks were.
        parts: The same text as runs of text and block indices; unlike the
            display text it cannot confuse model-written placeholder text
            with a block.
        completed_blocks: Parsed blocks, indexed to match the placeholders.
        is_pending: Whether a block may still be arriving.
        in_block: Whether the opening line of a block has been confirmed and
            its body is still open.
    """

    display_text: str = ""
    parts: list[Union[str, int]] = Field(default_factory=list)
    completed_blocks: list[RawBlock] = Field(default_factory=list)
    is_pending: bool = False
    in_block: bool = False


class ValidationIssue(ModelBase):
    """A single violated constraint.

    Attributes:
        code: Machine-readable failure code.
        field: Dotted path of the offending field, if any.
        detail: Human-readable explanation.
        expected: The expected type or allowed values, if relevant.
        actual: The offending value, if any.
    """

    code: ValidationCode
    field: Optional[str] = None
    detail: str
    expected: Optional[Any] = None
    actual: Optional[Any] = None


class ValidationResult(ModelBase):
    """Outcome of validating a raw block against the catalog.

    Attributes:
        valid: True when no issue was found.
        block: The validated block, only set when valid.
        raw: The block that was validated.
        issues: Every violated constraint.
        known_component_ids: All catalog ids, set when the component was
            unknown so callers can suggest alternatives.
    """

    valid: bool
    block: Optional[ValidatedBlock] = None
    raw: RawBlock
    issues: list[ValidationIssue] = Field(default_factory=list)
    known_component_ids: list[str] = Field(default_factory=list)

    def codes(self) -> list[ValidationCode]:
        return [issue.code for issue in self.issues]

    def summary(self) -> str:
        """Renders the issues as one line per problem."""
        if self.valid:
            return f"Block {self.raw.component_id!r} is valid."
        lines = [f"Block {self.raw.component_id!r} is invalid:"]
        lines.extend(f"- {issue.detail}" for issue in self.issues)
        if self.known_component_ids:
            lines.append(
                "Known components: " + ", ".join(self.known_component_ids)
            )
        return "\n".join(lines)
