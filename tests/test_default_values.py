from __future__ import annotations

from typing import Any

import pytest

from compare.values import as_bool, defaults_differ, display_default, param_hint_changed
from symbols.models import ParameterSymbol


def _param(hint: list[str], default: str | None = None) -> ParameterSymbol:
    return ParameterSymbol(name="a", hint=[{"name": part} for part in hint], default=default)


@pytest.mark.parametrize(
    ("value_from", "value_to", "expected"),
    [
        ('"abc"', "'abc'", False),
        ('"abc"', "'abcd'", True),
        ("'it\\\"s'", "'it's'", False),
        ("1", "1", False),
        ("1", "2", True),
        (None, None, False),
        (None, "null", True),
        ({"0": "a"}, {"0": "a"}, False),
        ({"0": "a"}, {"0": "b"}, True),
        (1, True, True),
    ],
)
def test_defaults_differ(value_from: Any, value_to: Any, expected: bool) -> None:
    assert defaults_differ(value_from, value_to) is expected


def test_display_default_summarizes_arrays() -> None:
    assert display_default({}) == "[]"
    assert display_default({"0": "a"}) == "array"
    assert display_default("'a'") == "'a'"
    assert display_default(None) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), ("true", True), ("'1'", True), ("On", True), ("false", False), (None, False)],
)
def test_as_bool(value: Any, expected: bool) -> None:
    assert as_bool(value) is expected


def test_param_hint_nullable_equivalence() -> None:
    assert not param_hint_changed(_param(["string"], "null"), _param(["string", "null"], "null"))
    assert not param_hint_changed(_param(["null", "string"]), _param(["string"], "null"))
    assert param_hint_changed(_param(["string", "null"]), _param(["int", "null"]))
    assert param_hint_changed(_param(["string"]), _param(["int"]))
    assert not param_hint_changed(_param(["int"]), _param(["int"]))
