"""Configuration and comparison rules for deprecheck."""

from rules.config import (
    ConfigError,
    DeprecheckConfig,
    load_config,
    resolve_output_dir,
)
from rules.relations import (
    DB_AND_RELATION,
    RELATION_RULES,
    RelationRule,
    is_relation_config,
)

__all__ = [
    "DB_AND_RELATION",
    "RELATION_RULES",
    "ConfigError",
    "DeprecheckConfig",
    "RelationRule",
    "is_relation_config",
    "load_config",
    "resolve_output_dir",
]
