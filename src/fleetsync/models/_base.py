"""Base model and lenient field types for fleet payloads.

Every fleet model inherits from :class:`FleetBaseModel` which provides:

* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default is used instead.
* A ``raw`` dict that captures the original payload.
* Frozen instances, so a snapshot can be shared between readers.

The ``Lenient*`` annotated types coerce loosely-typed values and turn
anything unparseable into ``None`` rather than failing validation: a
document that passes the substitute validator must always assemble.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from fleetsync._normalize import objects_only, parse_timestamp, safe_bool, safe_float, safe_int, safe_str


def identity_str(value: Any) -> Any:
    return safe_str(value) or ""


LenientFloat = Annotated[float | None, BeforeValidator(safe_float)]
LenientInt = Annotated[int | None, BeforeValidator(safe_int)]
LenientStr = Annotated[str | None, BeforeValidator(safe_str)]
LenientBool = Annotated[bool, BeforeValidator(safe_bool)]
IdentityStr = Annotated[str, BeforeValidator(identity_str)]
"""String field that also accepts numbers (``"id": 7``)."""
FleetTimestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""Annotated type that coerces ISO-8601 strings to aware UTC datetimes."""


def object_items(value: Any) -> Any:
    """Before-validator for nested record sequences: keep only objects."""
    if isinstance(value, (list, tuple)) and all(isinstance(item, BaseModel) for item in value):
        return value
    return objects_only(value, name="nested records")


class FleetBaseModel(BaseModel):
    """Base for fleet API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original payload dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop ``None`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None and key != "raw"}
        # Keep an explicit raw dict; a payload field that happens to be named "raw" is data.
        raw = values.get("raw")
        cleaned["raw"] = raw if isinstance(raw, dict) else dict(values)
        return cleaned
