"""
Relicta GitHub plugin — Host contract models.

The host drives the plugin through three operations (info, validate,
execute). These models are the only shapes that cross that boundary.
"""

from __future__ import annotations

import enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class Hook(str, enum.Enum):
    """Lifecycle hooks fired by the release host, in firing order."""

    PRE_INIT = "pre-init"
    POST_INIT = "post-init"
    PRE_PLAN = "pre-plan"
    POST_PLAN = "post-plan"
    PRE_VERSION = "pre-version"
    POST_VERSION = "post-version"
    PRE_NOTES = "pre-notes"
    POST_NOTES = "post-notes"
    PRE_APPROVE = "pre-approve"
    POST_APPROVE = "post-approve"
    PRE_PUBLISH = "pre-publish"
    POST_PUBLISH = "post-publish"
    ON_SUCCESS = "on-success"
    ON_ERROR = "on-error"


class ChangeSummary(BaseModel):
    features: int = 0
    fixes: int = 0
    breaking: int = 0
    other: int = 0


class ReleaseContext(BaseModel):
    """Release facts computed by the host for the current run."""

    version: str = ""
    previous_version: str = ""
    tag_name: str = ""
    release_type: str = ""
    branch: str = ""
    commit_sha: str = ""
    changelog: str = ""
    release_notes: str = ""
    repository_url: str = ""
    repository_owner: str = ""
    repository_name: str = ""
    changes: ChangeSummary | None = None


class ExecuteRequest(BaseModel):
    # Unknown hook names are valid input; they are acknowledged, not rejected.
    hook: str
    config: dict[str, Any] | None = None
    context: ReleaseContext = Field(default_factory=ReleaseContext)
    dry_run: bool = False

    @field_validator("hook", mode="before")
    @classmethod
    def _hook_name(cls, value: Any) -> Any:
        return value.value if isinstance(value, Hook) else value


class Artifact(BaseModel):
    name: str = ""
    type: Literal["url", "file"] = "url"
    url: str = ""
    size: int = 0
    checksum: str = ""  # SHA-256 of the uploaded bytes


class ExecuteResponse(BaseModel):
    """Outcome of one hook invocation; the only thing the host observes."""

    success: bool
    message: str = ""
    error: str = ""
    outputs: dict[str, Any] = Field(default_factory=dict)
    artifacts: list[Artifact] = Field(default_factory=list)


class FieldError(BaseModel):
    field: str
    message: str
    code: str = ""


class ValidationResponse(BaseModel):
    valid: bool
    errors: list[FieldError] = Field(default_factory=list)


class PluginInfo(BaseModel):
    name: str
    version: str
    description: str
    author: str
    hooks: list[Hook]
    config_schema: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "name": "github",
                "version": "2.0.0",
                "description": "Create GitHub releases and upload assets",
                "author": "Relicta Team",
                "hooks": ["post-publish", "on-success", "on-error"],
            }
        }
