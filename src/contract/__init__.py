"""Stable file contract surface for deprecheck.

The snapshot files are what the parse stage hands over; the report files are
what the renderer reads. Treat these exports as the authoritative boundary.
"""

from contract.files import (
    FILE_ACTIONS,
    FILE_CHANGES,
    FROM_SNAPSHOT_JSON,
    REPORT_FILES,
    SNAPSHOT_FILES,
    SNAPSHOT_SCHEMA_VERSION,
    TO_SNAPSHOT_JSON,
)


def __getattr__(name: str) -> object:
    if name == "ApiRecord":
        from contract.records import ApiRecord

        return ApiRecord

    if name in {"ValidationMessage", "ValidationResult", "validate_snapshots"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_snapshots,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_snapshots": validate_snapshots,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "FILE_ACTIONS",
    "FILE_CHANGES",
    "FROM_SNAPSHOT_JSON",
    "REPORT_FILES",
    "SNAPSHOT_FILES",
    "SNAPSHOT_SCHEMA_VERSION",
    "TO_SNAPSHOT_JSON",
    "ApiRecord",
    "ValidationMessage",
    "ValidationResult",
    "validate_snapshots",
]
