from __future__ import annotations

import json
import shutil
from pathlib import Path

from contract.files import FROM_SNAPSHOT_JSON, SNAPSHOT_SCHEMA_VERSION, TO_SNAPSHOT_JSON
from contract.validation import ValidationMessage, validate_snapshots

_FIXTURE_SYMBOLS = Path(__file__).parent / "fixtures" / "recipe" / "symbols"


def _copy_fixture_symbols(d: Path) -> Path:
    shutil.copytree(_FIXTURE_SYMBOLS, d)
    return d


def _rewrite(path: Path, **updates: object) -> None:
    data = json.loads(path.read_text(encoding="utf-8"))
    data.update(updates)
    path.write_text(json.dumps(data), encoding="utf-8")


def test_fixture_snapshots_are_valid(tmp_path: Path) -> None:
    symbols_dir = _copy_fixture_symbols(tmp_path / "symbols")

    result = validate_snapshots(symbols_dir)

    assert result.ok
    assert result.errors == []
    assert result.warnings == []


def test_missing_symbols_dir(tmp_path: Path) -> None:
    result = validate_snapshots(tmp_path / "nope")

    assert not result.ok
    assert result.errors[0].message == "Symbols directory does not exist."


def test_missing_snapshot_file(tmp_path: Path) -> None:
    symbols_dir = _copy_fixture_symbols(tmp_path / "symbols")
    (symbols_dir / TO_SNAPSHOT_JSON).unlink()

    result = validate_snapshots(symbols_dir)

    assert [(e.snapshot, e.message) for e in result.errors] == [
        ("to", "Required snapshot file is missing.")
    ]


def test_invalid_json(tmp_path: Path) -> None:
    symbols_dir = _copy_fixture_symbols(tmp_path / "symbols")
    (symbols_dir / FROM_SNAPSHOT_JSON).write_text("{not json", encoding="utf-8")

    result = validate_snapshots(symbols_dir)

    assert len(result.errors) == 1
    assert result.errors[0].message.startswith("Invalid JSON")


def test_schema_errors_carry_their_location(tmp_path: Path) -> None:
    symbols_dir = _copy_fixture_symbols(tmp_path / "symbols")
    _rewrite(
        symbols_dir / FROM_SNAPSHOT_JSON,
        classes=[{"name": "Foo", "category_id": 9}, {"file": "x.php"}],
    )

    result = validate_snapshots(symbols_dir)

    locations = {error.location for error in result.errors}
    assert "classes.0.category_id" in locations
    assert "classes.1.name" in locations
    assert all(e.message.startswith("Schema validation failed") for e in result.errors)


def test_version_tag_must_match_file(tmp_path: Path) -> None:
    symbols_dir = _copy_fixture_symbols(tmp_path / "symbols")
    _rewrite(symbols_dir / TO_SNAPSHOT_JSON, version="from")

    result = validate_snapshots(symbols_dir)

    assert result.errors == [
        ValidationMessage(
            snapshot="to",
            path=symbols_dir / TO_SNAPSHOT_JSON,
            location="version",
            message="Version tag mismatch: expected 'to', got 'from'.",
        )
    ]


def test_schema_version_mismatch_is_a_warning_unless_strict(tmp_path: Path) -> None:
    symbols_dir = _copy_fixture_symbols(tmp_path / "symbols")
    _rewrite(symbols_dir / FROM_SNAPSHOT_JSON, schema_version=SNAPSHOT_SCHEMA_VERSION + 1)

    lenient = validate_snapshots(symbols_dir)
    strict = validate_snapshots(symbols_dir, strict_schema_version=True)

    assert lenient.ok
    assert len(lenient.warnings) == 1
    assert "Schema version mismatch" in lenient.warnings[0].message
    assert not strict.ok
    assert strict.errors[0].where().endswith("(schema_version)")


def test_missing_schema_version_defaults(tmp_path: Path) -> None:
    symbols_dir = _copy_fixture_symbols(tmp_path / "symbols")
    path = symbols_dir / FROM_SNAPSHOT_JSON
    data = json.loads(path.read_text(encoding="utf-8"))
    del data["schema_version"]
    path.write_text(json.dumps(data), encoding="utf-8")

    result = validate_snapshots(symbols_dir)

    assert result.ok
    assert result.warnings[0].message == (
        f"Missing schema_version; defaulted to {SNAPSHOT_SCHEMA_VERSION}."
    )
    assert result.warnings[0].to_dict()["snapshot"] == "from"
