"""Locate YAML documents beneath a root directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Union

logger = logging.getLogger(__name__)

YAML_EXTENSIONS = (".yaml", ".yml")


def find_files_matching(root: Path, extension: str) -> List[Path]:
    """Return regular files under ``root`` ending in ``extension``."""

    return [path for path in root.rglob(f"*{extension}") if path.is_file()]


def iter_yaml_files(
    root: Union[str, Path],
    extensions: Sequence[str] = YAML_EXTENSIONS,
) -> List[Path]:
    """Return YAML-family files beneath ``root``.

    Each extension is listed on its own; failing to list one leaves the
    others intact and is only logged.
    """

    root_path = Path(root)
    if not root_path.is_dir():
        logger.warning("Location %s is not a directory, nothing to scan", root_path)
        return []

    files: List[Path] = []
    for extension in extensions:
        try:
            files.extend(find_files_matching(root_path, extension))
        except OSError as exc:
            logger.warning("Unable to find %s files under %s: %s", extension, root_path, exc)
    return files
