"""Tests for PointValidator (JSON Schema and kind checks)."""

from datetime import UTC, datetime

from flowtrack.application.dtos.flow import AssertionRecord, PointRecord
from flowtrack.application.services.point_validator import PointValidator

_NOW = datetime(2026, 1, 15, tzinfo=UTC)
_SCHEMA = {
    "type": "object",
    "properties": {"id": {"type": "string"}, "amount": {"type": "number"}},
    "required": ["id"],
}


def test_no_schema_is_valid() -> None:
    assert PointValidator().validate_schema({"anything": 1}, None) == []


def test_schema_violations_are_reported_with_paths() -> None:
    problems = PointValidator().validate_schema({"id": "o-1", "amount": "ten"}, _SCHEMA)
    assert len(problems) == 1
    assert problems[0].startswith("$.amount: ")


def test_missing_required_property() -> None:
    problems = PointValidator().validate_schema({"amount": 1}, _SCHEMA)
    assert len(problems) == 1
    assert "'id' is a required property" in problems[0]


def test_invalid_schema() -> None:
    problems = PointValidator().validate_schema({}, {"type": 5})
    assert len(problems) == 1
    assert problems[0].startswith("invalid schema: ")


def test_validate_kind_mismatch() -> None:
    message, ok = PointValidator().validate({"a": 1}, [1])
    assert ok is False
    assert message == "Type mismatch: expected object, got array"


def test_validate_deep_difference() -> None:
    message, ok = PointValidator().validate({"a": 1}, {"a": 2})
    assert ok is False
    assert message == "path $.a: value mismatch expected 1, got 2"


def test_validate_equal() -> None:
    assert PointValidator().validate({"a": [1]}, {"a": [1]}) == ("", True)


def test_validate_pair_collects_all_problems() -> None:
    point = PointRecord(
        id=1,
        flow_id=1,
        description="order",
        expected={"id": "o-1", "amount": 10},
        service_name="a",
        created_at=_NOW,
        schema=_SCHEMA,
    )
    assertion = AssertionRecord(
        id=2, flow_id=1, actual={"id": "o-1", "amount": "10"}, service_name="b", created_at=_NOW
    )
    problems = PointValidator().validate_pair(point, assertion)
    assert len(problems) == 2
    assert problems[0].startswith("$.amount: ")
    assert "type mismatch expected number, got string" in problems[1]
