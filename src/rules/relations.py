"""Rules for comparing database field and relation configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

RelationStrategy = Literal["simple", "has_one", "many_many"]


@dataclass(frozen=True)
class RelationRule:
    """How one relational configuration property is compared."""

    config_name: str
    label: str
    strategy: RelationStrategy


# Checked in this order.
RELATION_RULES: tuple[RelationRule, ...] = (
    RelationRule("db", "database field", "simple"),
    RelationRule("fixed_fields", "fixed database field", "simple"),
    RelationRule("has_one", "`has_one` relation", "has_one"),
    RelationRule("belongs_to", "`belongs_to` relation", "simple"),
    RelationRule("has_many", "`has_many` relation", "simple"),
    RelationRule("belongs_many_many", "`belongs_many_many` relation", "simple"),
    RelationRule("many_many", "`many_many` relation", "many_many"),
)

DB_AND_RELATION = frozenset(rule.config_name for rule in RELATION_RULES)

# Config property listing the extensions applied to a class.
EXTENSIONS_CONFIG = "extensions"


def is_relation_config(name: str) -> bool:
    return name in DB_AND_RELATION
