"""
Relicta GitHub plugin — Asset upload step.

Validates one asset path, reads the file and attaches it to an existing
release. Never called in dry-run mode.
"""

from __future__ import annotations

import errno
import hashlib
import mimetypes
import os
import stat
from pathlib import Path

from relicta_github.errors import (
    AssetNotAccessibleError,
    AssetUploadError,
    GitHubAPIError,
    SymlinkNotAllowedError,
)
from relicta_github.github.client import GitHubClient
from relicta_github.models.plugin import Artifact
from relicta_github.pipeline.resolve_assets import validate_asset_path
from relicta_github.utils.logging import logger, step_timer

_OPEN_FLAGS = (
    os.O_RDONLY
    | getattr(os, "O_NOFOLLOW", 0)
    | getattr(os, "O_NONBLOCK", 0)
    | getattr(os, "O_BINARY", 0)
)


def _read_regular_file(path: Path, display: str) -> bytes:
    """
    Read the file behind an already validated path.

    The path may have been swapped since validation: the open does not
    follow symlinks and the opened descriptor must still be a regular file.
    """
    try:
        fd = os.open(path, _OPEN_FLAGS)
    except OSError as exc:
        if exc.errno == errno.ELOOP:
            raise SymlinkNotAllowedError(display) from exc
        raise AssetNotAccessibleError(display, exc.strerror or str(exc)) from exc

    with os.fdopen(fd, "rb") as fh:
        if not stat.S_ISREG(os.fstat(fh.fileno()).st_mode):
            raise AssetNotAccessibleError(display, "not a regular file")
        try:
            return fh.read()
        except OSError as exc:
            raise AssetNotAccessibleError(display, exc.strerror or str(exc)) from exc


async def upload_asset(
    client: GitHubClient,
    owner: str,
    repo: str,
    release_id: int,
    path: str | os.PathLike[str],
) -> Artifact:
    """
    Upload a single file as a release asset named after its base name.

    Path validation errors propagate unchanged; API failures are raised
    as AssetUploadError ("failed to upload asset ...").
    """
    resolved = validate_asset_path(path)
    name = resolved.name

    content = _read_regular_file(resolved, os.fspath(path))
    size = len(content)
    content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    checksum = hashlib.sha256(content).hexdigest()

    with step_timer(f"Upload asset {name}"):
        try:
            asset = await client.upload_release_asset(
                owner, repo, release_id, name, content, content_type,
            )
        except GitHubAPIError as exc:
            raise AssetUploadError(name, exc) from exc
        logger.info("  Uploaded %s (%d bytes, %s)", name, size, checksum[:12])

    return Artifact(
        name=asset.get("name") or name,
        type="url",
        url=asset.get("browser_download_url") or "",
        size=size,
        checksum=checksum,
    )
