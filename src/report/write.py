from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

from compare.comparer import BreakingChangesComparer
from contract.files import FILE_ACTIONS, FILE_CHANGES
from logging_config import get_logger
from rules.config import load_config, resolve_output_dir
from symbols.provider import load_project

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import DeprecheckConfig

logger = get_logger(__name__)


def _write_json(path: Path, payload: object) -> None:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.write_bytes(orjson.dumps(payload, option=opts))


def generate_reports(
    *,
    data_dir: Path,
    out_dir: Path | None = None,
    config: DeprecheckConfig | None = None,
) -> dict[str, object]:
    """Compare both versions of a recipe and write the report files.

    Args:
        data_dir: Directory holding the config file and the symbol snapshots
        out_dir: Optional output directory for the report files
        config: Optional configuration, loaded from the data dir if omitted

    Returns:
        Dictionary with counts and list of written report paths.
    """
    if config is None:
        config = load_config(data_dir)

    if out_dir is None:
        out_dir = resolve_output_dir(data_dir, config.output_dir)

    project = load_project(data_dir / config.symbols_dir)

    comparer = BreakingChangesComparer(config)
    comparer.compare(project)

    out_dir.mkdir(parents=True, exist_ok=True)
    changes_path = out_dir / FILE_CHANGES
    actions_path = out_dir / FILE_ACTIONS
    _write_json(changes_path, comparer.get_breaking_changes())
    _write_json(actions_path, comparer.get_actions_to_take())
    logger.info("Wrote reports to %s", out_dir)

    return {
        "change_count": len(comparer.changes),
        "action_count": len(comparer.actions),
        "module_count": len(set(comparer.changes.modules()) | set(comparer.actions.modules())),
        "reports": [str(changes_path), str(actions_path)],
    }


__all__ = ["generate_reports"]
