"""Consistency checks for deprecheck reports already written to disk.

The renderer reads ``breaking-changes.json`` and ``actions-required.json``
without the symbol model. Every record in them has to parse as an
``ApiRecord``, serialize back to the same mapping, and carry the fields its
kind of change or action needs.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson
from pydantic import ValidationError

from compare.store import (
    ACTION_KINDS,
    CHANGE_KINDS,
    FLAG_CHANGE_KINDS,
    HINT_CHANGE_KINDS,
    VALUE_CHANGE_KINDS,
)
from contract.files import REPORT_FILES
from contract.records import ApiRecord
from rules.relations import DB_AND_RELATION
from symbols.api_types import ApiType

if TYPE_CHECKING:
    from pathlib import Path

_MODULE_NAME_RE = re.compile(r"^[^/]+/[^/]+$")

SYMBOL_KINDS: frozenset[str] = (
    frozenset(api_type.store_key for api_type in ApiType) | DB_AND_RELATION
)

_REPORT_KINDS: dict[str, frozenset[str]] = {
    "changes": CHANGE_KINDS,
    "actions": ACTION_KINDS,
}


@dataclass(frozen=True)
class ReportProblem:
    report: str
    location: str
    message: str

    def where(self) -> str:
        if not self.location:
            return self.report
        return f"{self.report}: {self.location}"


@dataclass
class ReportCheckResult:
    problems: list[ReportProblem] = field(default_factory=list)
    record_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.problems


def _required_fields(kind: str) -> tuple[str, ...]:
    if kind in VALUE_CHANGE_KINDS or kind in HINT_CHANGE_KINDS:
        return ("from", "to")
    if kind in FLAG_CHANGE_KINDS:
        return ("isNow",)
    if kind == "new":
        return ("hint", "hintOrig")
    if kind == "internal" or kind in ACTION_KINDS:
        return ("message",)
    return ()


def _is_object(
    value: Any, report: str, location: str, result: ReportCheckResult
) -> bool:
    if isinstance(value, dict):
        return True
    result.problems.append(ReportProblem(report, location, "Expected an object."))
    return False


def _check_record(
    report: str, location: str, kind: str, raw: Any, result: ReportCheckResult
) -> None:
    if not _is_object(raw, report, location, result):
        return

    try:
        record = ApiRecord.model_validate(raw)
    except ValidationError as exc:
        for error in exc.errors():
            loc = ".".join(str(part) for part in error.get("loc", ()))
            result.problems.append(
                ReportProblem(
                    report,
                    f"{location}.{loc}" if loc else location,
                    error.get("msg", "Invalid record."),
                )
            )
        return

    result.record_count += 1
    if record.to_dict() != raw:
        result.problems.append(
            ReportProblem(report, location, "Record does not round-trip through ApiRecord.")
        )

    missing = [name for name in _required_fields(kind) if name not in raw]
    if missing:
        result.problems.append(
            ReportProblem(
                report,
                location,
                f"Record for '{kind}' is missing: {', '.join(missing)}",
            )
        )


def _check_report(
    report: str, path: Path, kinds: frozenset[str], result: ReportCheckResult
) -> None:
    try:
        data = orjson.loads(path.read_bytes())
    except FileNotFoundError:
        result.problems.append(ReportProblem(report, "", "Report file is missing."))
        return
    except orjson.JSONDecodeError as exc:
        result.problems.append(ReportProblem(report, "", f"Invalid JSON: {exc}"))
        return

    if not _is_object(data, report, "", result):
        return

    for module, by_kind in data.items():
        if not _MODULE_NAME_RE.match(module):
            result.problems.append(
                ReportProblem(report, module, "Module name is not 'vendor/package'.")
            )
        if not _is_object(by_kind, report, module, result):
            continue

        for kind, by_symbol_kind in by_kind.items():
            location = f"{module}[{kind}]"
            if kind not in kinds:
                result.problems.append(
                    ReportProblem(report, location, f"Unknown kind '{kind}'.")
                )
                continue
            if not _is_object(by_symbol_kind, report, location, result):
                continue

            for symbol_kind, by_ref in by_symbol_kind.items():
                location = f"{module}[{kind}][{symbol_kind}]"
                if symbol_kind not in SYMBOL_KINDS:
                    result.problems.append(
                        ReportProblem(
                            report, location, f"Unknown symbol kind '{symbol_kind}'."
                        )
                    )
                    continue
                if not _is_object(by_ref, report, location, result):
                    continue

                for ref, raw in by_ref.items():
                    _check_record(report, f"{location}[{ref}]", kind, raw, result)


def verify_reports(*, output_dir: Path) -> ReportCheckResult:
    """Check both report files in ``output_dir`` against the record contract.

    Raises:
        FileNotFoundError: ``output_dir`` does not exist.
        NotADirectoryError: ``output_dir`` is not a directory.
    """
    if not output_dir.exists():
        msg = f"Output directory does not exist: {output_dir}"
        raise FileNotFoundError(msg)
    if not output_dir.is_dir():
        msg = f"Output path is not a directory: {output_dir}"
        raise NotADirectoryError(msg)

    result = ReportCheckResult()
    for name, filename in REPORT_FILES.items():
        _check_report(filename, output_dir / filename, _REPORT_KINDS[name], result)
    return result


__all__ = ["SYMBOL_KINDS", "ReportCheckResult", "ReportProblem", "verify_reports"]
