"""Admin settings model (``/api/admin/config``)."""

from __future__ import annotations

from typing import Any

from pydantic import model_validator

from fleetsync.models._base import FleetBaseModel, LenientFloat, LenientInt, LenientStr

_DEFAULTS: dict[str, Any] = {
    "fy_start_month": 7,
    "due_soon_miles": 500,
    "due_soon_days": 15,
    "utilization_threshold": 1.0,
    "odometer_precedence": "",
}


class AdminConfig(FleetBaseModel):
    """Server-side admin settings shown in the admin form.

    Falsy values (``0``, ``""``) fall back to the form defaults, matching
    how the form has always been populated.
    """

    fy_start_month: LenientInt = _DEFAULTS["fy_start_month"]
    """First month (1-12) of the fiscal year."""
    due_soon_miles: LenientInt = _DEFAULTS["due_soon_miles"]
    due_soon_days: LenientInt = _DEFAULTS["due_soon_days"]
    utilization_threshold: LenientFloat = _DEFAULTS["utilization_threshold"]
    """Minimum daily miles for an asset to count as utilized."""
    odometer_precedence: LenientStr = _DEFAULTS["odometer_precedence"]
    """Comma-separated odometer source precedence (e.g. ``Engine,Transmission,ABS``)."""

    @model_validator(mode="after")
    def _apply_form_defaults(self) -> AdminConfig:
        for field_name, default in _DEFAULTS.items():
            if not getattr(self, field_name):
                object.__setattr__(self, field_name, default)
        return self

    def to_payload(self) -> dict[str, Any]:
        """Body for ``POST /api/admin/config``."""
        return self.model_dump(include=set(_DEFAULTS))
