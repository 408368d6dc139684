"""
Relicta GitHub plugin — Structured error catalog.

Every error has a code, human message, and suggested fix.
Messages start with fixed prefixes so hosts can grep them; none of these
errors leak to the host as exceptions, they are reported in-band.
"""

from __future__ import annotations

from typing import Any


class PluginError(Exception):
    """Base error with structured code + suggestion."""

    def __init__(self, code: str, message: str, suggestion: str = "", detail: Any = None):
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "error_code": self.code,
            "message": self.message,
        }
        if self.suggestion:
            d["suggestion"] = self.suggestion
        if self.detail:
            d["detail"] = self.detail
        return d


# ── Configuration ────────────────────────────────────────


class MissingTokenError(PluginError):
    def __init__(self, message: str = "GitHub token is required"):
        super().__init__(
            code="TOKEN_MISSING",
            message=message,
            suggestion="Set 'token' in the plugin config, or export GITHUB_TOKEN or GH_TOKEN.",
        )


class MissingRepositoryError(PluginError):
    def __init__(self, owner: str, repo: str):
        super().__init__(
            code="REPOSITORY_MISSING",
            message="repository owner and name are required",
            suggestion="Set 'owner' and 'repo' in the plugin config or run from a GitHub checkout.",
            detail={"owner": owner, "repo": repo},
        )


# ── Asset paths ──────────────────────────────────────────


class InvalidAssetPathError(PluginError):
    def __init__(self, path: str):
        super().__init__(
            code="ASSET_PATH_INVALID",
            message=f"invalid asset path: {path}",
            suggestion="Asset paths must not contain '..' segments.",
        )


class AssetNotFoundError(PluginError):
    def __init__(self, path: str):
        super().__init__(
            code="ASSET_NOT_FOUND",
            message=f"file not found: {path}",
            suggestion="Build the artifact before publishing, or fix the path in 'assets'.",
        )


class AssetNotAccessibleError(PluginError):
    def __init__(self, path: str, reason: str):
        super().__init__(
            code="ASSET_NOT_ACCESSIBLE",
            message=f"asset file not accessible: {path}: {reason}",
            suggestion="Check the file permissions of the asset and its parent directories.",
        )


class SymlinkNotAllowedError(PluginError):
    def __init__(self, path: str):
        super().__init__(
            code="ASSET_SYMLINK",
            message=f"symlinks not allowed: {path}",
            suggestion="Point 'assets' at the real file instead of a symbolic link.",
        )


class AssetIsDirectoryError(PluginError):
    def __init__(self, path: str):
        super().__init__(
            code="ASSET_IS_DIRECTORY",
            message=f"asset path is a directory: {path}",
            suggestion="Archive the directory first, or use a glob such as 'dist/*'.",
        )


# ── Remote (GitHub API) ──────────────────────────────────


class GitHubAPIError(PluginError):
    """A GitHub REST call failed with a non-2xx status or a transport fault."""

    def __init__(self, api: str, status: int | None, body: str = ""):
        self.api = api
        self.status = status
        if status is None:
            message = f"GitHub {api} request failed: {body}"
        elif body:
            message = f"GitHub {api} returned HTTP {status}: {body}"
        else:
            message = f"GitHub {api} returned HTTP {status}"
        super().__init__(
            code=f"GITHUB_{api.upper().replace(' ', '_')}_ERROR",
            message=message,
            suggestion="Check the token scopes (contents:write) and the repository name.",
            detail=body[:500] if body else None,
        )


class _StageError(PluginError):
    """Wraps an underlying error with the name of the stage that failed."""

    prefix = ""

    def __init__(self, code: str, cause: Exception, suggestion: str = ""):
        self.cause = cause
        reason = cause.message if isinstance(cause, PluginError) else str(cause)
        super().__init__(
            code=code,
            message=f"{self.prefix}: {reason}",
            suggestion=suggestion or getattr(cause, "suggestion", ""),
        )


class ClientCreationError(_StageError):
    prefix = "failed to create GitHub client"

    def __init__(self, cause: Exception):
        super().__init__("CLIENT_CREATION_FAILED", cause)


class ReleaseCreationError(_StageError):
    prefix = "failed to create GitHub release"

    def __init__(self, cause: Exception):
        super().__init__("RELEASE_CREATION_FAILED", cause)


class AssetUploadError(_StageError):
    prefix = "failed to upload asset"

    def __init__(self, name: str, cause: Exception):
        self.prefix = f"failed to upload asset {name}"
        super().__init__("ASSET_UPLOAD_FAILED", cause)
