"""Report generation entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import DeprecheckConfig


def generate_reports(
    *,
    data_dir: Path,
    out_dir: Path | None = None,
    config: DeprecheckConfig | None = None,
) -> dict[str, object]:
    """Generate reports via lazy import to avoid package import cycles."""
    from report.write import generate_reports as _generate_reports

    return _generate_reports(data_dir=data_dir, out_dir=out_dir, config=config)


__all__ = ["generate_reports"]
