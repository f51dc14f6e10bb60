"""Tests for the substitute document validator."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from fleetsync.exceptions import FleetValidationError
from fleetsync.substitute import build_sample_document
from fleetsync.validation import ROOT_NOT_OBJECT, ensure_valid, validate_substitute_document


@pytest.fixture
def document() -> dict[str, Any]:
    return build_sample_document()


def test_sample_document_is_valid(document: dict[str, Any]) -> None:
    result = validate_substitute_document(document)
    assert result.valid
    assert result.errors == ()


@pytest.mark.parametrize("root", [[], [{"info": {}}], None, "text", 42, True])
def test_non_object_root_stops_after_one_error(root: Any) -> None:
    result = validate_substitute_document(root)
    assert not result.valid
    assert result.errors == (ROOT_NOT_OBJECT,)


def test_empty_object_reports_every_rule_in_order() -> None:
    result = validate_substitute_document({})
    assert result.errors == (
        "Missing object: info",
        "Missing object: kpis",
        "Missing array: assets",
        "Missing array: maintenance",
        "Missing array: faults",
        "Missing array: miles",
    )


def test_missing_vin_reported_with_index(document: dict[str, Any]) -> None:
    del document["assets"][1]["vin"]

    result = validate_substitute_document(document)

    assert not result.valid
    assert "assets[1].vin is required" in result.errors
    assert result.errors == ("assets[1].vin is required",)


def test_errors_accumulate_across_rules(document: dict[str, Any]) -> None:
    document["info"] = []
    document["faults"] = {}
    del document["assets"][0]["id"]
    del document["assets"][1]["maint_status"]

    result = validate_substitute_document(document)

    assert result.errors == (
        "Missing object: info",
        "assets[0].id is required",
        "assets[1].maint_status is required",
        "Missing array: faults",
    )


@pytest.mark.parametrize("value", [0, "", False, None, 0.0])
def test_falsy_values_count_as_present(document: dict[str, Any], value: Any) -> None:
    for key in ("id", "name", "vin", "last_known_odo", "miles_7d", "active_faults", "maint_status"):
        document["assets"][0][key] = value

    assert validate_substitute_document(document).valid


def test_non_object_asset_reports_all_fields(document: dict[str, Any]) -> None:
    document["assets"] = ["not-an-asset"]

    result = validate_substitute_document(document)

    assert len(result.errors) == 7
    assert result.errors[0] == "assets[0].id is required"
    assert result.errors[-1] == "assets[0].maint_status is required"


def test_record_arrays_only_checked_for_arrayness(document: dict[str, Any]) -> None:
    document["maintenance"] = [1, "two", None]
    document["faults"] = [[]]
    document["miles"] = []

    assert validate_substitute_document(document).valid


def test_admin_section_is_optional(document: dict[str, Any]) -> None:
    document.pop("admin")
    assert validate_substitute_document(document).valid


def test_validate_is_idempotent_and_pure(document: dict[str, Any]) -> None:
    del document["assets"][0]["miles_7d"]
    before = copy.deepcopy(document)

    first = validate_substitute_document(document)
    second = validate_substitute_document(document)

    assert first == second
    assert document == before


def test_ensure_valid_raises_with_all_errors() -> None:
    with pytest.raises(FleetValidationError) as excinfo:
        ensure_valid({"info": {}, "kpis": {}})

    assert excinfo.value.errors == (
        "Missing array: assets",
        "Missing array: maintenance",
        "Missing array: faults",
        "Missing array: miles",
    )


def test_ensure_valid_returns_document(document: dict[str, Any]) -> None:
    assert ensure_valid(document) is document
