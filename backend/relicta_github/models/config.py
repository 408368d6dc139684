"""
Relicta GitHub plugin — Resolved plugin configuration.

Built fresh for every invocation from the raw host config and the
environment (see pipeline.resolve_config). Frozen once built.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PluginConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str = ""
    repo: str = ""
    token: str = Field(default="", repr=False)
    draft: bool = False
    prerelease: bool = False
    generate_release_notes: bool = False
    # None: key absent or null. (): key present with no entries.
    assets: tuple[str, ...] | None = None
    discussion_category: str = ""
