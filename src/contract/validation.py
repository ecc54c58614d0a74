"""Validation helpers for symbol snapshot files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from contract.files import SNAPSHOT_FILES, SNAPSHOT_SCHEMA_VERSION
from symbols.models import Snapshot

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class ValidationMessage:
    snapshot: str
    path: Path
    message: str
    location: str | None = None

    def where(self) -> str:
        if self.location is None:
            return str(self.path)
        return f"{self.path} ({self.location})"

    def to_dict(self) -> dict[str, object]:
        return {
            "snapshot": self.snapshot,
            "path": str(self.path),
            "location": self.location,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_snapshots(
    symbols_dir: Path, *, strict_schema_version: bool = False
) -> ValidationResult:
    result = ValidationResult()

    if not symbols_dir.exists():
        result.errors.append(
            ValidationMessage(
                snapshot="symbols_dir",
                path=symbols_dir,
                message="Symbols directory does not exist.",
            )
        )
        return result

    if not symbols_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                snapshot="symbols_dir",
                path=symbols_dir,
                message="Symbols path is not a directory.",
            )
        )
        return result

    for version, filename in SNAPSHOT_FILES.items():
        path = symbols_dir / filename
        if not path.exists():
            result.errors.append(
                ValidationMessage(
                    snapshot=version,
                    path=path,
                    message="Required snapshot file is missing.",
                )
            )
            continue

        _validate_snapshot(
            version,
            path,
            result,
            strict_schema_version=strict_schema_version,
        )

    return result


def _validate_snapshot(
    version: str,
    path: Path,
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> None:
    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        result.errors.append(
            ValidationMessage(
                snapshot=version,
                path=path,
                message=f"Invalid JSON: {exc}.",
            )
        )
        return

    if not isinstance(raw, dict):
        result.errors.append(
            ValidationMessage(
                snapshot=version,
                path=path,
                message="Expected a JSON object for the symbol snapshot.",
            )
        )
        return

    schema_present = "schema_version" in raw
    try:
        snapshot = Snapshot.model_validate(raw)
    except ValidationError as exc:
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"])
            result.errors.append(
                ValidationMessage(
                    snapshot=version,
                    path=path,
                    location=location or None,
                    message=f"Schema validation failed: {error['msg']}.",
                )
            )
        return

    if snapshot.version != version:
        result.errors.append(
            ValidationMessage(
                snapshot=version,
                path=path,
                location="version",
                message=(
                    f"Version tag mismatch: expected '{version}', "
                    f"got '{snapshot.version}'."
                ),
            )
        )

    _check_schema_version(
        version,
        path,
        schema_present,
        snapshot.schema_version,
        result,
        strict_schema_version=strict_schema_version,
    )


def _check_schema_version(
    version: str,
    path: Path,
    schema_present: bool,
    schema_version: int,
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> None:
    if schema_present and schema_version == SNAPSHOT_SCHEMA_VERSION:
        return

    if schema_present:
        message = (
            "Schema version mismatch: "
            f"expected {SNAPSHOT_SCHEMA_VERSION}, got {schema_version}."
        )
    else:
        message = f"Missing schema_version; defaulted to {SNAPSHOT_SCHEMA_VERSION}."

    entry = ValidationMessage(
        snapshot=version,
        path=path,
        location="schema_version",
        message=message,
    )
    if strict_schema_version:
        result.errors.append(entry)
    else:
        result.warnings.append(entry)


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_snapshots",
]
