"""Strict validator for substitute (offline) fleet documents.

The substitute data path accepts an untrusted JSON document in place of
the live endpoints. :func:`validate_substitute_document` is the only gate
between such a document and the snapshot store. It checks exactly the
production fields the dashboard relies on and reports every violation at
once, so a user can fix the whole file in one go.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from fleetsync._constants import ASSET_REQUIRED_FIELDS, RECORD_ARRAY_KEYS
from fleetsync.exceptions import FleetValidationError

ROOT_NOT_OBJECT = "Root must be an object"


@dataclasses.dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()


def _is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def _is_array(value: Any) -> bool:
    return isinstance(value, list)


def _asset_errors(index: int, asset: Any) -> list[str]:
    # Presence only: 0, "", False and null all count as provided.
    provided = asset if _is_object(asset) else {}
    return [f"assets[{index}].{key} is required" for key in ASSET_REQUIRED_FIELDS if key not in provided]


def validate_substitute_document(document: Any) -> ValidationResult:
    """Validate *document* against the production data contract.

    Parameters
    ----------
    document
        Any deserialized JSON value.

    Returns
    -------
    ValidationResult
        ``valid`` is ``True`` iff ``errors`` is empty.
    """
    if not _is_object(document):
        return ValidationResult(valid=False, errors=(ROOT_NOT_OBJECT,))

    errors: list[str] = []

    if not _is_object(document.get("info")):
        errors.append("Missing object: info")
    if not _is_object(document.get("kpis")):
        errors.append("Missing object: kpis")

    assets = document.get("assets")
    if not _is_array(assets):
        errors.append("Missing array: assets")
    else:
        for index, asset in enumerate(assets):
            errors.extend(_asset_errors(index, asset))

    for key in RECORD_ARRAY_KEYS:
        if not _is_array(document.get(key)):
            errors.append(f"Missing array: {key}")

    return ValidationResult(valid=not errors, errors=tuple(errors))


def ensure_valid(document: Any) -> Mapping[str, Any]:
    """Return *document* unchanged if valid.

    Raises
    ------
    FleetValidationError
        With one message per violated rule.
    """
    result = validate_substitute_document(document)
    if not result.valid:
        raise FleetValidationError(result.errors)
    return document
