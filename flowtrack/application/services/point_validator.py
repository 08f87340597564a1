"""Validates assertion values against a point's stored schema.

Points may carry a JSON Schema (create_point(..., schema=...)). Enforcement
is not part of Finish; callers that want it run PointValidator over the
points and assertions they fetched.
"""

from __future__ import annotations

from typing import Any

import jsonschema

from flowtrack.application.dtos.flow import AssertionRecord, PointRecord
from flowtrack.application.services.comparator import deep_compare, format_diffs
from flowtrack.domain.values import KIND_NULL, JsonValue, json_kind


class PointValidator:
    """Schema and kind checks for one point/assertion pair."""

    def validate_schema(
        self, actual: JsonValue, schema: dict[str, Any] | None
    ) -> list[str]:
        """Return schema violations for actual (empty when valid or no schema)."""
        if not schema:
            return []
        try:
            validator_cls = jsonschema.validators.validator_for(schema)
            validator_cls.check_schema(schema)
        except jsonschema.SchemaError as e:
            return [f"invalid schema: {e.message}"]
        validator = validator_cls(schema)
        return [
            f"{e.json_path}: {e.message}"
            for e in sorted(validator.iter_errors(actual), key=lambda e: e.json_path)
        ]

    def validate(self, expected: JsonValue, actual: JsonValue) -> tuple[str, bool]:
        """Check top-level kinds, then deep-compare.

        Returns:
            (message, ok). message is empty when ok.
        """
        kind, actual_kind = json_kind(expected), json_kind(actual)
        if KIND_NULL not in (kind, actual_kind) and kind != actual_kind:
            return f"Type mismatch: expected {kind}, got {actual_kind}", False
        diffs = deep_compare(expected, actual)
        return format_diffs(diffs), not diffs

    def validate_pair(
        self, point: PointRecord, assertion: AssertionRecord
    ) -> list[str]:
        """Return every problem for a paired point and assertion."""
        problems = self.validate_schema(assertion.actual, point.schema)
        message, ok = self.validate(point.expected, assertion.actual)
        if not ok:
            problems.append(message)
        return problems
