"""File contract definitions.

This module defines the stable boundary with the upstream parse stage (symbol
snapshots) and with the downstream renderer (report files).
"""

from __future__ import annotations

# Schema version for symbol snapshot files.
SNAPSHOT_SCHEMA_VERSION = 1

# Symbol snapshot filenames, one per compared version.
FROM_SNAPSHOT_JSON = "from.json"
TO_SNAPSHOT_JSON = "to.json"

# Report filenames (stable contract identifiers for the renderer).
FILE_CHANGES = "breaking-changes.json"
FILE_ACTIONS = "actions-required.json"


SNAPSHOT_FILES: dict[str, str] = {
    "from": FROM_SNAPSHOT_JSON,
    "to": TO_SNAPSHOT_JSON,
}

# Both reports nest records as module -> kind -> symbol kind -> identifier.
REPORT_FILES: dict[str, str] = {
    "changes": FILE_CHANGES,
    "actions": FILE_ACTIONS,
}
