"""
Relicta GitHub plugin — Asset resolution step.

Expands the configured asset patterns into concrete paths and validates
every path before it is opened for upload. Fails fast with greppable
error messages.

Security controls, checked in this order:
  1. Path traversal: any '..' segment is rejected
  2. Existence: lstat (the link itself, never its target)
  3. Symlinks: rejected
  4. Directories: rejected
  5. Anything else that is not a regular file (FIFO, device): rejected
"""

from __future__ import annotations

import glob
import os
import re
import stat
from collections.abc import Iterable
from pathlib import Path

from relicta_github.errors import (
    AssetIsDirectoryError,
    AssetNotAccessibleError,
    AssetNotFoundError,
    InvalidAssetPathError,
    SymlinkNotAllowedError,
)
from relicta_github.utils.logging import logger

_GLOB_CHARS = set("*?[")
_SEPARATORS = re.compile(r"[\\/]")


def _has_traversal(path: str) -> bool:
    return ".." in _SEPARATORS.split(path)


def validate_asset_path(path: str | os.PathLike[str]) -> Path:
    """Return the absolute, normalised path if it is a safe regular file."""
    raw = os.fspath(path)
    if _has_traversal(raw):
        raise InvalidAssetPathError(raw)

    try:
        st = os.lstat(raw)
    except FileNotFoundError:
        raise AssetNotFoundError(raw) from None
    except OSError as exc:
        raise AssetNotAccessibleError(raw, exc.strerror or str(exc)) from exc

    if stat.S_ISLNK(st.st_mode):
        raise SymlinkNotAllowedError(raw)
    if stat.S_ISDIR(st.st_mode):
        raise AssetIsDirectoryError(raw)
    if not stat.S_ISREG(st.st_mode):
        raise AssetNotAccessibleError(raw, "not a regular file")

    return Path(os.path.abspath(raw))


def expand_asset_patterns(patterns: Iterable[str] | None) -> list[str]:
    """
    Expand glob patterns (e.g. 'dist/*.tar.gz') into sorted file paths.

    Literal entries pass through untouched so a missing file is reported by
    validate_asset_path. Patterns that match nothing are logged and skipped.
    Duplicates are dropped, first occurrence wins.
    """
    patterns = list(patterns or ())
    if not patterns:
        return []

    resolved: list[str] = []
    seen: set[str] = set()
    for pattern in patterns:
        if _GLOB_CHARS.intersection(pattern):
            matches = sorted(glob.glob(pattern))
            if not matches:
                logger.warning("  Asset pattern matched no files: %s", pattern)
                continue
        else:
            matches = [pattern]

        for match in matches:
            if match not in seen:
                seen.add(match)
                resolved.append(match)

    logger.info("  Resolved %d asset path(s) from %d pattern(s)", len(resolved), len(patterns))
    return resolved
