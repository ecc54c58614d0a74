"""Shared utilities for deprecheck."""

from __future__ import annotations

import re
from pathlib import Path

from errors import ModuleResolutionError

DIR_CLONE = "cloned"


def file_to_module(file_path: str | Path, clone_dir: str = DIR_CLONE) -> str:
    """Get the package name of the module a cloned source file lives in.

    Args:
        file_path: Path of a file inside the clone layout
            (``<root>/<clone_dir>/<from|to>/vendor/<vendor>/<package>/...``)
        clone_dir: Name of the directory the recipe was cloned into

    Returns:
        Package name (e.g., "acme/widgets")

    Raises:
        ModuleResolutionError: If the path is not inside a vendored module.

    Examples:
        >>> file_to_module("/data/cloned/from/vendor/acme/widgets/src/Foo.php")
        'acme/widgets'
    """
    path_str = file_path.as_posix() if isinstance(file_path, Path) else str(file_path)
    path_str = path_str.replace("\\", "/")

    pattern = rf"(?:^|/){re.escape(clone_dir)}/(?:from|to)/vendor/([^/]+/[^/]+)/"
    match = re.search(pattern, path_str)
    if match is None:
        msg = f"There is no module name identifiable in the path '{path_str}'"
        raise ModuleResolutionError(msg, {"clone_dir": clone_dir})
    return match.group(1)
