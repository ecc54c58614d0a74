"""Comparison helpers for default values and type hints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from symbols.models import ParameterSymbol

_TRUTHY_STRINGS = frozenset({"1", "true", "on", "yes"})


def defaults_differ(value_from: Any, value_to: Any) -> bool:
    """Check if two default values are materially different.

    Values are raw, so string values include their surrounding quotes. Changes
    which don't affect anything, such as swapping double quotes for single
    quotes, are ignored. Anything that isn't a string gets a straight
    equality check.
    """
    if value_from == value_to and type(value_from) is type(value_to):
        return False
    if not isinstance(value_from, str) or not isinstance(value_to, str):
        return True
    return _single_quoted(value_from) != _single_quoted(value_to)


def _single_quoted(value: str) -> str:
    return value.replace('\\"', "'").replace('"', "'")


def display_default(value: Any) -> Any:
    """Summarize array values so a changed default can be shown inline."""
    if isinstance(value, dict):
        return "array" if value else "[]"
    return value


def as_bool(value: Any) -> bool:
    """Interpret a raw config value (e.g. ``'true'``) as a boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().strip("'\"").lower() in _TRUTHY_STRINGS


def param_hint_changed(param_from: ParameterSymbol, param_to: ParameterSymbol) -> bool:
    """Check if the type hint of a parameter has changed.

    ``string $something = null`` is the same as ``?string $something = null``,
    but ``?string`` and ``?int`` are still different.
    """
    if param_from.hint_string() == param_to.hint_string():
        return False

    if _is_nullable(param_from) or _is_nullable(param_to):
        return _non_null_parts(param_from) != _non_null_parts(param_to)

    return True


def _is_nullable(param: ParameterSymbol) -> bool:
    return param.default == "null" or any(
        part.canonical.lower() == "null" for part in param.hint
    )


def _non_null_parts(param: ParameterSymbol) -> list[str]:
    return [part.canonical for part in param.hint if part.canonical.lower() != "null"]


__all__ = ["as_bool", "defaults_differ", "display_default", "param_hint_changed"]
