from pydantic import BaseModel, ConfigDict


class ModelBase(BaseModel):
    """
    Base class for models produced inside uicp-parser.

    Enforces strict validation, forbids unknown fields,
    and enables assignment-time validation.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        frozen=False,
    )


class DocumentModel(BaseModel):
    """
    Base class for models parsed from an external catalog document.

    Unknown keys are ignored so newer catalogs still load, fields can be
    populated by name or alias, and instances are immutable.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )
