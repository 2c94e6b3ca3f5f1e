"""Enumeration definitions for the UICP parser.

This module contains standard Enum classes used across the package to keep
schema field types, extractor stages and validation codes consistent.
"""

from enum import Enum


class FieldType(str, Enum):
    """Value kinds supported by the catalog's input schema dialect.

    Attributes:
        STRING: A text value.
        NUMBER: An integer or floating point value (never a boolean).
        BOOLEAN: true or false.
        ARRAY: Any JSON array.
        OBJECT: Any JSON object, optionally with declared properties.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


class ExtractorStage(str, Enum):
    """Recognition stage of the streaming block extractor.

    Attributes:
        NONE: Not inside any candidate block; characters are display text.
        SAW_OPEN_1: One fence character seen.
        SAW_OPEN_2: Two fence characters seen.
        SAW_OPEN_3: A full opening fence seen (extra fence characters stay here).
        SAW_TAG: Part of the block tag matched after the opening fence.
        CONFIRMED_OPEN: The whole tag matched; waiting for the whitespace
            that ends the opening line.
        IN_BODY: Accumulating block body text.
        SAW_CLOSE_1: One fence character seen inside the body.
        SAW_CLOSE_2: Two fence characters seen inside the body.
        SAW_CLOSE_3: Closing fence complete; the block is finished.
    """

    NONE = "none"
    SAW_OPEN_1 = "saw_open_1"
    SAW_OPEN_2 = "saw_open_2"
    SAW_OPEN_3 = "saw_open_3"
    SAW_TAG = "saw_tag"
    CONFIRMED_OPEN = "confirmed_open"
    IN_BODY = "in_body"
    SAW_CLOSE_1 = "saw_close_1"
    SAW_CLOSE_2 = "saw_close_2"
    SAW_CLOSE_3 = "saw_close_3"


class ValidationCode(str, Enum):
    """Machine-readable codes for block validation failures.

    Attributes:
        UNKNOWN_COMPONENT: The block names a component missing from the catalog.
        MISSING_FIELD: A required field is absent and has no default.
        TYPE_MISMATCH: A field value has the wrong kind.
        INVALID_ENUM_VALUE: A field value is not one of the allowed literals.
    """

    UNKNOWN_COMPONENT = "unknown_component"
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_ENUM_VALUE = "invalid_enum_value"
