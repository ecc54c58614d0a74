"""Breaking change checks for database fields and relation configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from compare.values import as_bool
from contract.records import ApiRecord
from rules.relations import RELATION_RULES, RelationRule

if TYPE_CHECKING:
    from compare.store import ChangeStore
    from symbols.models import ClassSymbol
    from symbols.table import SymbolTable


def array_config_value(
    table: SymbolTable,
    class_symbol: ClassSymbol,
    config_name: str,
    extensions: dict[str, ClassSymbol],
) -> dict[str, Any]:
    """Merged value of an array config property such as ``$db`` or ``$has_one``.

    Config from the class itself is merged last, as it has higher priority
    than extension config.
    """
    candidates = [
        table.properties(extension, inherited=True).get(config_name)
        for extension in extensions.values()
    ]
    candidates.append(table.properties(class_symbol, inherited=True).get(config_name))

    value: dict[str, Any] = {}
    for prop in candidates:
        if prop is None or not prop.is_config:
            continue
        if isinstance(prop.default, dict):
            value.update(prop.default)
    return value


def check_db_fields_and_relations(
    changes: ChangeStore,
    fqcn: str,
    configs_from: dict[str, dict[str, Any]],
    configs_to: dict[str, dict[str, Any]],
    module: str,
) -> None:
    """Check db field and relation config, keyed by config property name."""
    for rule in RELATION_RULES:
        config_from = configs_from.get(rule.config_name, {})
        config_to = configs_to.get(rule.config_name, {})
        if rule.strategy == "has_one":
            _check_has_one(changes, fqcn, rule, config_from, config_to, module)
        elif rule.strategy == "many_many":
            _check_many_many(changes, fqcn, rule, config_from, config_to, module)
        else:
            _check_simple(changes, fqcn, rule, config_from, config_to, module)


def _ref_and_data(fqcn: str, rule: RelationRule, key: str) -> tuple[str, ApiRecord]:
    name = key.strip("'")
    ref = f"{fqcn}.{rule.config_name}-{name}"
    return ref, ApiRecord(name=name, api_type=rule.label, class_name=fqcn)


def _check_simple(
    changes: ChangeStore,
    fqcn: str,
    rule: RelationRule,
    config_from: dict[str, Any],
    config_to: dict[str, Any],
    module: str,
) -> None:
    """Removed fields or relations, and changes to field type or relation class."""
    for key in sorted(config_from):
        value = config_from[key]
        ref, data = _ref_and_data(fqcn, rule, key)

        if key not in config_to:
            changes.removed(module, rule.config_name, ref, data)
            continue

        if value != config_to[key]:
            changes.value_changed(
                "type", module, rule.config_name, ref, data, value, config_to[key]
            )


def _check_has_one(
    changes: ChangeStore,
    fqcn: str,
    rule: RelationRule,
    config_from: dict[str, Any],
    config_to: dict[str, Any],
    module: str,
) -> None:
    """Removed relations, changed relation class, and changed multi-relational flag."""
    for key in sorted(config_from):
        value = config_from[key]
        ref, data = _ref_and_data(fqcn, rule, key)

        if key not in config_to:
            changes.removed(module, rule.config_name, ref, data)
            continue

        value_to = config_to[key]
        class_from = value.get("class") if isinstance(value, dict) else value
        class_to = value_to.get("class") if isinstance(value_to, dict) else value_to
        if class_from != class_to:
            changes.value_changed(
                "type", module, rule.config_name, ref, data, class_from, class_to
            )

        multi_from = as_bool(value.get("multirelational")) if isinstance(value, dict) else False
        multi_to = (
            as_bool(value_to.get("multirelational")) if isinstance(value_to, dict) else False
        )
        if multi_from != multi_to:
            changes.flag_changed(
                "multirelational", module, rule.config_name, ref, data, multi_to
            )


def _check_many_many(
    changes: ChangeStore,
    fqcn: str,
    rule: RelationRule,
    config_from: dict[str, Any],
    config_to: dict[str, Any],
    module: str,
) -> None:
    """Removed relations, changed relation class, and changes to "through" config."""
    for key in sorted(config_from):
        value_from = config_from[key]
        ref, data = _ref_and_data(fqcn, rule, key)

        if key not in config_to:
            changes.removed(module, rule.config_name, ref, data)
            continue

        value_to = config_to[key]
        from_is_through = isinstance(value_from, dict)
        to_is_through = isinstance(value_to, dict)

        if not from_is_through and not to_is_through:
            if value_from != value_to:
                changes.value_changed(
                    "type", module, rule.config_name, ref, data, value_from, value_to
                )
            continue

        if from_is_through != to_is_through:
            changes.flag_changed("through", module, rule.config_name, ref, data, to_is_through)
            continue

        if value_from != value_to:
            changes.marked("through-data", module, rule.config_name, ref, data)


__all__ = ["array_config_value", "check_db_fields_and_relations"]
