"""Append-only stores for breaking changes and actions to take.

Both stores are nested ``module -> kind -> symbol kind -> identifier -> record``
mappings. Each kind of change has its own insert method so the record shape
for that kind is fixed in one place.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, get_args

if TYPE_CHECKING:
    from contract.records import ApiRecord

ChangeKind = Literal[
    "removed",
    "internal",
    "visibility",
    "returnType",
    "type",
    "renamed",
    "new",
    "abstract",
    "final",
    "returnByRef",
    "passByRef",
    "readonly",
    "variadic",
    "default",
    "default-array",
    "static",
    "multirelational",
    "through",
    "through-data",
]

CHANGE_KINDS: frozenset[str] = frozenset(get_args(ChangeKind))

ActionKind = Literal["deprecate", "remove", "fix-deprecation"]

# API which has been removed, but still needs to be deprecated in the old version
ACTION_DEPRECATE: ActionKind = "deprecate"
# API which was deprecated in the old version but hasn't yet been removed
ACTION_REMOVE: ActionKind = "remove"
# API which was deprecated in the old version but the deprecation message is malformed
ACTION_FIX_DEPRECATION: ActionKind = "fix-deprecation"

ACTION_KINDS: frozenset[str] = frozenset(
    {ACTION_DEPRECATE, ACTION_REMOVE, ACTION_FIX_DEPRECATION}
)

VALUE_CHANGE_KINDS: frozenset[str] = frozenset(
    {"visibility", "type", "renamed", "default"}
)
HINT_CHANGE_KINDS: frozenset[str] = frozenset({"returnType", "type"})
FLAG_CHANGE_KINDS: frozenset[str] = frozenset(
    {
        "returnByRef",
        "passByRef",
        "readonly",
        "variadic",
        "static",
        "multirelational",
        "through",
    }
)
MARKER_CHANGE_KINDS: frozenset[str] = frozenset(
    {"abstract", "final", "default-array", "through-data"}
)

_Entries = dict[str, dict[str, dict[str, dict[str, "ApiRecord"]]]]


class _NestedStore:
    def __init__(self) -> None:
        self._entries: _Entries = {}

    def _put(self, module: str, kind: str, symbol_kind: str, ref: str, record: ApiRecord) -> None:
        by_kind = self._entries.setdefault(module, {})
        by_symbol_kind = by_kind.setdefault(kind, {})
        by_symbol_kind.setdefault(symbol_kind, {})[ref] = record

    def modules(self) -> list[str]:
        return list(self._entries)

    def records(self) -> list[tuple[str, str, str, str, ApiRecord]]:
        """Flattened ``(module, kind, symbol kind, identifier, record)`` tuples."""
        return [
            (module, kind, symbol_kind, ref, record)
            for module, by_kind in self._entries.items()
            for kind, by_symbol_kind in by_kind.items()
            for symbol_kind, by_ref in by_symbol_kind.items()
            for ref, record in by_ref.items()
        ]

    def to_dict(self) -> dict[str, Any]:
        """Plain nested mapping, with records serialized for the renderer."""
        return {
            module: {
                kind: {
                    symbol_kind: {ref: record.to_dict() for ref, record in by_ref.items()}
                    for symbol_kind, by_ref in by_symbol_kind.items()
                }
                for kind, by_symbol_kind in by_kind.items()
            }
            for module, by_kind in self._entries.items()
        }

    def __len__(self) -> int:
        return len(self.records())

    def __bool__(self) -> bool:
        return bool(self._entries)


class ChangeStore(_NestedStore):
    """Breaking API changes found while comparing two versions."""

    def removed(
        self, module: str, symbol_kind: str, ref: str, data: ApiRecord, message: str | None = None
    ) -> None:
        record = data if message is None else data.extend(message=message)
        self._put(module, "removed", symbol_kind, ref, record)

    def internal(
        self, module: str, symbol_kind: str, ref: str, data: ApiRecord, message: str
    ) -> None:
        self._put(module, "internal", symbol_kind, ref, data.extend(message=message))

    def value_changed(
        self,
        kind: ChangeKind,
        module: str,
        symbol_kind: str,
        ref: str,
        data: ApiRecord,
        from_value: Any,
        to_value: Any,
    ) -> None:
        _check_kind(kind, VALUE_CHANGE_KINDS)
        record = data.extend(from_value=from_value, to_value=to_value)
        self._put(module, kind, symbol_kind, ref, record)

    def hint_changed(
        self,
        kind: ChangeKind,
        module: str,
        symbol_kind: str,
        ref: str,
        data: ApiRecord,
        *,
        from_hint: str,
        to_hint: str,
        from_orig: str,
        to_orig: str,
    ) -> None:
        _check_kind(kind, HINT_CHANGE_KINDS)
        record = data.extend(
            from_value=from_hint,
            to_value=to_hint,
            from_orig=from_orig,
            to_orig=to_orig,
        )
        self._put(module, kind, symbol_kind, ref, record)

    def flag_changed(
        self,
        kind: ChangeKind,
        module: str,
        symbol_kind: str,
        ref: str,
        data: ApiRecord,
        is_now: bool,
    ) -> None:
        _check_kind(kind, FLAG_CHANGE_KINDS)
        self._put(module, kind, symbol_kind, ref, data.extend(is_now=is_now))

    def marked(
        self, kind: ChangeKind, module: str, symbol_kind: str, ref: str, data: ApiRecord
    ) -> None:
        _check_kind(kind, MARKER_CHANGE_KINDS)
        self._put(module, kind, symbol_kind, ref, data)

    def new_param(
        self, module: str, ref: str, data: ApiRecord, *, hint: str, hint_orig: str
    ) -> None:
        self._put(module, "new", "param", ref, data.extend(hint=hint, hint_orig=hint_orig))


class ActionStore(_NestedStore):
    """Actions developers need to take to improve the fidelity of the comparison."""

    def add(
        self,
        action: ActionKind,
        module: str,
        symbol_kind: str,
        ref: str,
        data: ApiRecord,
        message: str,
    ) -> None:
        _check_kind(action, ACTION_KINDS)
        self._put(module, action, symbol_kind, ref, data.extend(message=message))


def _check_kind(kind: str, allowed: frozenset[str]) -> None:
    if kind not in allowed:
        msg = f"'{kind}' is not one of: {', '.join(sorted(allowed))}"
        raise ValueError(msg)


__all__ = [
    "ACTION_DEPRECATE",
    "ACTION_FIX_DEPRECATION",
    "ACTION_KINDS",
    "ACTION_REMOVE",
    "ActionKind",
    "ActionStore",
    "CHANGE_KINDS",
    "ChangeKind",
    "ChangeStore",
]
