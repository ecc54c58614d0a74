"""Load symbol snapshots and expose both compared versions side by side."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from contract.files import SNAPSHOT_FILES
from errors import SnapshotError
from logging_config import get_logger
from symbols.models import Snapshot
from symbols.table import SymbolTable

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)


class Version(str, Enum):
    """The two versions of the codebase being compared."""

    FROM = "from"
    TO = "to"


@dataclass(frozen=True)
class VersionedProject:
    """Independent, simultaneously valid symbol tables for both versions."""

    from_table: SymbolTable
    to_table: SymbolTable

    @classmethod
    def from_snapshots(cls, snapshot_from: Snapshot, snapshot_to: Snapshot) -> VersionedProject:
        for snapshot, expected in ((snapshot_from, Version.FROM), (snapshot_to, Version.TO)):
            if snapshot.version != expected.value:
                msg = (
                    f"Expected a '{expected.value}' snapshot but got "
                    f"'{snapshot.version}'"
                )
                raise SnapshotError(msg)
        return cls(from_table=SymbolTable(snapshot_from), to_table=SymbolTable(snapshot_to))


def load_snapshot(path: Path) -> Snapshot:
    """Load and validate one symbol snapshot file.

    Raises:
        SnapshotError: If the file is missing, isn't valid JSON, or doesn't
            match the snapshot schema.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Failed to read symbol snapshot: {exc}"
        raise SnapshotError(msg, {"path": str(path)}) from exc

    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in symbol snapshot: {exc}"
        raise SnapshotError(msg, {"path": str(path)}) from exc

    try:
        return Snapshot.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid symbol snapshot: {exc}"
        raise SnapshotError(msg, {"path": str(path)}) from exc


def load_project(symbols_dir: Path) -> VersionedProject:
    """Load the 'from' and 'to' snapshots from a directory."""
    snapshots: dict[Version, Snapshot] = {}
    for version in Version:
        path = symbols_dir / SNAPSHOT_FILES[version.value]
        logger.info("Loading '%s' symbols from %s", version.value, path)
        snapshots[version] = load_snapshot(path)
    return VersionedProject.from_snapshots(snapshots[Version.FROM], snapshots[Version.TO])


__all__ = ["Version", "VersionedProject", "load_project", "load_snapshot"]
