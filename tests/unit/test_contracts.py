"""
Contract-Tests für die Validatoren von ClaimSet und ConflictReport.
"""

import copy

import pytest

from conflict_lens.core.errors import SchemaValidationError
from conflict_lens.models.pydantic import ClaimSet, ConflictReport
from conflict_lens.services.contracts import validate_claim_set, validate_conflict_report


def test_valid_claim_set_is_accepted(claim_set_payload):
    claim_set = validate_claim_set(claim_set_payload(3))

    assert isinstance(claim_set, ClaimSet)
    assert [c.claim_id for c in claim_set.claims] == ["c1", "c2", "c3"]
    assert claim_set.claims[0].qualifiers == ["adults"]


def test_claim_set_with_two_claims_is_rejected(claim_set_payload):
    with pytest.raises(SchemaValidationError) as exc_info:
        validate_claim_set(claim_set_payload(2))

    assert exc_info.value.stage == "claim_set"
    assert exc_info.value.errors


def test_claim_set_requires_topic(claim_set_payload):
    payload = claim_set_payload(3)
    del payload["topic"]

    with pytest.raises(SchemaValidationError):
        validate_claim_set(payload)


def test_claim_set_rejects_non_object():
    for raw in (None, [], "claims", 42):
        with pytest.raises(SchemaValidationError):
            validate_claim_set(raw)


@pytest.mark.parametrize(
    "overrides",
    [
        {"polarity": "maybe"},
        {"confidence": 1.5},
        {"confidence": -0.1},
        {"assertion": None},
        {"qualifiers": "adults"},
        {"value": True},
    ],
)
def test_claim_shape_violations_are_rejected(claim_set_payload, claim_factory, overrides):
    payload = claim_set_payload(3)
    payload["claims"][1] = claim_factory(2, **overrides)

    with pytest.raises(SchemaValidationError):
        validate_claim_set(payload)


def test_claim_missing_required_field_is_rejected(claim_set_payload):
    payload = claim_set_payload(3)
    del payload["claims"][0]["dimension"]

    with pytest.raises(SchemaValidationError):
        validate_claim_set(payload)


def test_duplicate_claim_ids_are_rejected(claim_set_payload):
    payload = claim_set_payload(3)
    payload["claims"][2]["claim_id"] = "c1"

    with pytest.raises(SchemaValidationError) as exc_info:
        validate_claim_set(payload)

    assert "duplicate claim_id" in str(exc_info.value)


def test_unknown_fields_are_not_an_error(claim_set_payload):
    payload = claim_set_payload(3)
    payload["claims"][0]["source_hint"] = "ignored"
    payload["extra_top_level"] = True

    claim_set = validate_claim_set(payload)

    assert len(claim_set.claims) == 3


def test_optional_fields_and_numeric_value(claim_set_payload, claim_factory):
    payload = claim_set_payload(3)
    payload["claims"][0] = claim_factory(
        1,
        value=12.5,
        era_hint="1990s",
        definition_notes="per 100k",
        why_people_repeat_it="memorable number",
    )
    del payload["claims"][1]["qualifiers"]

    claim_set = validate_claim_set(payload)

    assert claim_set.claims[0].value == "12.5"
    assert claim_set.claims[0].era_hint == "1990s"
    assert claim_set.claims[1].qualifiers == []
    assert claim_set.claims[2].value is None


def test_valid_report_with_conflicts(report_payload, conflict_factory):
    report = validate_conflict_report(report_payload([conflict_factory(1, "c1", "c2")]))

    assert isinstance(report, ConflictReport)
    assert report.conflicts[0].conflict_type == "polarity_incompatible"
    assert report.summary.conflict_count == 1


def test_empty_report_is_valid(report_payload):
    report = validate_conflict_report(report_payload([]))

    assert report.conflicts == []
    assert report.summary.conflict_count == 0
    assert report.summary.top_dimensions == []


def test_report_requires_summary(report_payload):
    payload = report_payload([])
    del payload["summary"]

    with pytest.raises(SchemaValidationError) as exc_info:
        validate_conflict_report(payload)

    assert exc_info.value.stage == "conflict_report"


def test_report_rejects_negative_count(report_payload):
    with pytest.raises(SchemaValidationError):
        validate_conflict_report(report_payload([], count=-1))


@pytest.mark.parametrize(
    "overrides",
    [
        {"conflict_type": "contradiction"},
        {"severity": 2},
        {"researcher_warning": None},
    ],
)
def test_conflict_shape_violations_are_rejected(report_payload, conflict_factory, overrides):
    payload = report_payload([conflict_factory(1, "c1", "c2", **overrides)])

    with pytest.raises(SchemaValidationError):
        validate_conflict_report(payload)


def test_conflict_must_reference_two_distinct_claims(report_payload, conflict_factory):
    with pytest.raises(SchemaValidationError):
        validate_conflict_report(report_payload([conflict_factory(1, "c1", "c1")]))


def test_duplicate_conflict_ids_are_rejected(report_payload, conflict_factory):
    payload = report_payload([conflict_factory(1, "c1", "c2"), conflict_factory(1, "c2", "c3")])

    with pytest.raises(SchemaValidationError):
        validate_conflict_report(payload)


def test_dangling_claim_reference_is_rejected(report_payload, conflict_factory):
    payload = report_payload([conflict_factory(1, "c1", "c9")])

    with pytest.raises(SchemaValidationError) as exc_info:
        validate_conflict_report(payload, known_claim_ids=["c1", "c2", "c3"])

    violation = exc_info.value.errors[0]
    assert violation["loc"] == ["conflicts", 0, "claim_b"]
    assert violation["type"] == "dangling_reference"


def test_references_are_not_checked_without_known_ids(report_payload, conflict_factory):
    report = validate_conflict_report(report_payload([conflict_factory(1, "c1", "c9")]))

    assert report.conflicts[0].claim_b == "c9"


def test_validation_is_pure_and_deterministic(claim_set_payload, report_payload, conflict_factory):
    good = claim_set_payload(4)
    bad = claim_set_payload(2)
    report = report_payload([conflict_factory(1, "c1", "c2")], count=5)
    snapshots = [copy.deepcopy(x) for x in (good, bad, report)]

    first = validate_claim_set(good)
    second = validate_claim_set(good)
    assert first == second

    for _ in range(2):
        with pytest.raises(SchemaValidationError):
            validate_claim_set(bad)

    assert validate_conflict_report(report) == validate_conflict_report(report)

    # Input wird nie verändert
    assert [good, bad, report] == snapshots
