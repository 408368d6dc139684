"""Relicta GitHub plugin data models — typed contracts between host and plugin."""

from relicta_github.models.config import PluginConfig
from relicta_github.models.plugin import (
    Artifact,
    ChangeSummary,
    ExecuteRequest,
    ExecuteResponse,
    FieldError,
    Hook,
    PluginInfo,
    ReleaseContext,
    ValidationResponse,
)

__all__ = [
    "PluginConfig",
    "Artifact",
    "ChangeSummary",
    "ExecuteRequest",
    "ExecuteResponse",
    "FieldError",
    "Hook",
    "PluginInfo",
    "ReleaseContext",
    "ValidationResponse",
]
