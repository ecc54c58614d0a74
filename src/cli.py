"""Command-line interface for deprecheck."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from contract.validation import validate_snapshots
from errors import SnapshotError
from logging_config import setup_logging
from report.write import generate_reports
from rules.config import ConfigError, load_config, resolve_output_dir
from verify.verify import verify_reports


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "data_dir",
        nargs="?",
        default=".",
        help="Data directory holding deprecheck.toml and the symbol snapshots (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="deprecheck")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every symbol that is checked"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only log errors"
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare_parser = subparsers.add_parser(
        "compare", help="Compare both versions and write the reports"
    )
    _add_common_paths(compare_parser)
    compare_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for the reports (default: config output dir)",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate symbol snapshots")
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat a missing or mismatched schema_version as an error",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Check written reports against the record contract"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--output-dir",
        default=None,
        help="Reports directory (default: config output dir)",
    )

    return parser


def _resolve_out_dir(out_dir: str | None) -> Path | None:
    if out_dir is None:
        return None
    return Path(out_dir).expanduser().resolve()


def _resolve_output_dir(data_dir: Path, output_dir: str | None) -> Path:
    if output_dir is None:
        config = load_config(data_dir)
        return resolve_output_dir(data_dir, config.output_dir)
    return Path(output_dir).expanduser().resolve()


def _handle_compare(data_dir: Path, out_dir: str | None) -> int:
    resolved_out_dir = _resolve_out_dir(out_dir)
    try:
        summary = generate_reports(data_dir=data_dir, out_dir=resolved_out_dir)
    except (ConfigError, SnapshotError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    sys.stdout.write(
        f"{summary['change_count']} breaking changes, "
        f"{summary['action_count']} actions to take\n"
    )
    return 0


def _handle_validate(data_dir: Path, strict: bool) -> int:
    try:
        config = load_config(data_dir)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    result = validate_snapshots(
        data_dir / config.symbols_dir, strict_schema_version=strict
    )
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning.where()}: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.where()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(data_dir: Path, output_dir: str | None) -> int:
    try:
        resolved_output_dir = _resolve_output_dir(data_dir, output_dir)
        result = verify_reports(output_dir=resolved_output_dir)
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"output-dir: {output_dir or '(config output dir)'}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    for problem in result.problems:
        sys.stderr.write(f"{problem.where()}: {problem.message}\n")
    if not result.ok:
        return 1
    sys.stdout.write(f"{result.record_count} report records checked\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    data_dir = Path(args.data_dir).expanduser().resolve()

    if args.command == "compare":
        return _handle_compare(data_dir, args.out_dir)

    if args.command == "validate":
        return _handle_validate(data_dir, args.strict)

    if args.command == "verify":
        return _handle_verify(data_dir, args.output_dir)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
