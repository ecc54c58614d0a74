"""Breaking-change comparison between two versions of a project."""

from compare.comparer import BreakingChangesComparer
from compare.store import (
    ACTION_DEPRECATE,
    ACTION_FIX_DEPRECATION,
    ACTION_REMOVE,
    ActionStore,
    ChangeStore,
)

__all__ = [
    "ACTION_DEPRECATE",
    "ACTION_FIX_DEPRECATION",
    "ACTION_REMOVE",
    "ActionStore",
    "BreakingChangesComparer",
    "ChangeStore",
]
