from __future__ import annotations

from pathlib import Path

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils import DIR_CLONE

CONFIG_FILENAME = "deprecheck.toml"


class DeprecheckConfig(BaseModel):
    """Configuration for comparing two versions of a recipe."""

    model_config = ConfigDict(extra="forbid")

    clone_dir: str = Field(
        default=DIR_CLONE,
        description="Directory (relative to the data dir) the recipe versions were cloned into",
    )
    symbols_dir: str = Field(
        default="symbols",
        description="Directory holding the from.json and to.json symbol snapshots",
    )
    output_dir: str = Field(
        default="output",
        description="Output directory for the breaking changes and actions reports",
    )
    data_object_class: str = Field(
        default="SilverStripe\\ORM\\DataObject",
        description="Base class of models that declare database fields and relations",
    )
    extension_class: str = Field(
        default="SilverStripe\\Core\\Extension",
        description="Base class of extensions that can be applied to other classes",
    )

    @field_validator("clone_dir")
    @classmethod
    def validate_clone_dir(cls, v: str) -> str:
        """The clone dir is matched as a single path segment in file paths."""
        if not v or "/" in v or "\\" in v:
            msg = "clone_dir must be a single, non-empty directory name"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the data directory.

    The config output_dir must be a non-empty relative path that remains
    within the data directory after resolution. Absolute paths and paths
    that escape the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the data directory"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the data directory"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the data directory"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> DeprecheckConfig:
    """Load configuration from deprecheck.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return DeprecheckConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return DeprecheckConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
