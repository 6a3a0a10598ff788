"""
switchboard/fs_service.py

Root-confined directory listing backing the ``/fs/list`` endpoint.
"""

from __future__ import annotations

import logging
from pathlib import Path

from switchboard.errors import PathOutsideRootError

logger = logging.getLogger(__name__)


def resolve_within_root(root: str | Path, requested: str) -> Path:
    """Resolve ``requested`` against ``root``.

    Raises:
        PathOutsideRootError: If the resolved path escapes ``root``.
    """
    root_path = Path(root).resolve()
    target = (root_path / requested).resolve()
    if not target.is_relative_to(root_path):
        raise PathOutsideRootError(f"Access denied: {requested} is outside the allowed root")
    return target


def list_directory(root: str | Path, requested: str) -> list[dict[str, object]]:
    """List the entries of ``requested`` (relative to ``root``), sorted by name.

    Raises:
        PathOutsideRootError: If the path escapes ``root``.
        FileNotFoundError: If the directory does not exist.
        NotADirectoryError: If the path is a file.
    """
    target = resolve_within_root(root, requested or ".")
    if not target.exists():
        raise FileNotFoundError(f"Directory not found: {requested}")
    if not target.is_dir():
        raise NotADirectoryError(f"Not a directory: {requested}")

    entries = [
        {"name": child.name, "is_file": child.is_file(), "is_directory": child.is_dir()}
        for child in sorted(target.iterdir(), key=lambda p: p.name)
    ]
    logger.info("[fs] listed %s (%d entries)", target, len(entries))
    return entries
