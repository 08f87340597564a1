"""Structural comparison of decoded JSON values.

deep_compare walks expected and actual together and returns one DiffEntry per
difference, each qualified by a path from the root ``$`` (``$.order.items[2]``).
An empty list means the two values are structurally equal.
"""

from __future__ import annotations

import json
from typing import Any

from flowtrack.application.dtos.reconciliation import DiffEntry
from flowtrack.domain.values import (
    KIND_ARRAY,
    KIND_NULL,
    KIND_OBJECT,
    JsonValue,
    json_kind,
)

ROOT_PATH = "$"
DIFF_SEPARATOR = "; "


def _render(value: Any) -> str:
    """Render a value for a diff message (strings unquoted, JSON otherwise)."""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def deep_compare(expected: JsonValue, actual: JsonValue) -> list[DiffEntry]:
    """Return the ordered list of differences between expected and actual.

    Mapping keys are visited in expected's order, then keys only present in
    actual. A mismatch never short-circuits sibling keys or elements.
    """
    diffs: list[DiffEntry] = []
    _collect(expected, actual, ROOT_PATH, diffs)
    return diffs


def deep_compare_json(
    expected_json: str | bytes, actual_json: str | bytes
) -> list[DiffEntry]:
    """Decode two JSON documents and compare them.

    A document that fails to decode yields a single entry at ``$``.
    """
    try:
        expected = json.loads(expected_json)
    except ValueError as e:
        return [DiffEntry(ROOT_PATH, None, None, f"failed to decode expected: {e}")]
    try:
        actual = json.loads(actual_json)
    except ValueError as e:
        return [DiffEntry(ROOT_PATH, None, None, f"failed to decode actual: {e}")]
    return deep_compare(expected, actual)


def format_diffs(diffs: list[DiffEntry]) -> str:
    """Join diff messages with '; ' (empty string for no diffs)."""
    return DIFF_SEPARATOR.join(d.message for d in diffs)


def _collect(expected: Any, actual: Any, path: str, diffs: list[DiffEntry]) -> None:
    if expected is None and actual is None:
        return
    if expected is None or actual is None:
        diffs.append(
            DiffEntry(
                path,
                expected,
                actual,
                f"path {path}: expected {_render(expected)}, got {_render(actual)}",
            )
        )
        return

    kind = json_kind(expected)
    actual_kind = json_kind(actual)
    if kind != actual_kind:
        diffs.append(
            DiffEntry(
                path,
                expected,
                actual,
                f"path {path}: type mismatch expected {kind}, got {actual_kind}",
            )
        )
        return

    if kind == KIND_OBJECT:
        for key, value in expected.items():
            child = f"{path}.{key}"
            if key not in actual:
                diffs.append(
                    DiffEntry(child, value, None, f"path {child}: key missing in actual")
                )
                continue
            _collect(value, actual[key], child, diffs)
        for key, value in actual.items():
            if key not in expected:
                child = f"{path}.{key}"
                diffs.append(
                    DiffEntry(
                        child, None, value, f"path {child}: unexpected extra key in actual"
                    )
                )
        return

    if kind == KIND_ARRAY:
        if len(expected) != len(actual):
            diffs.append(
                DiffEntry(
                    path,
                    len(expected),
                    len(actual),
                    f"path {path}: array length mismatch {len(expected)} != {len(actual)}",
                )
            )
            return
        for i, (e, a) in enumerate(zip(expected, actual)):
            _collect(e, a, f"{path}[{i}]", diffs)
        return

    if kind != KIND_NULL and expected != actual:
        diffs.append(
            DiffEntry(
                path,
                expected,
                actual,
                f"path {path}: value mismatch expected {_render(expected)}, "
                f"got {_render(actual)}",
            )
        )
