"""
Relicta GitHub plugin — Configuration resolution step.

Turns the untyped config mapping supplied by the host into a PluginConfig.
Each field has exactly one coercion rule:

  - strings:  value used only when it is a str, otherwise ""
  - booleans: native bool, or the literal strings "true" / "false"
  - assets:   list/tuple of anything, coerced element-wise with str()
  - token:    config "token", then $GITHUB_TOKEN, then $GH_TOKEN

Resolution never fails; missing data surfaces later as validation errors.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from relicta_github.models.config import PluginConfig
from relicta_github.utils.logging import logger

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")


def resolve_token(config_token: str, env: Mapping[str, str] | None = None) -> str:
    """Pick the first non-empty token: explicit config, then the environment."""
    if config_token:
        return config_token
    env = os.environ if env is None else env
    for name in TOKEN_ENV_VARS:
        value = env.get(name) or ""
        if value:
            return value
    return ""


def _string(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    return value if isinstance(value, str) else ""


def _boolean(raw: Mapping[str, Any], key: str) -> bool:
    value = raw.get(key)
    if isinstance(value, bool):
        return value
    # Case-sensitive: "True" and "yes" are False.
    return value == "true"


def _string_list(raw: Mapping[str, Any], key: str) -> tuple[str, ...] | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        logger.warning("  Ignoring '%s': expected a list, got %s", key, type(value).__name__)
        return None
    return tuple(item if isinstance(item, str) else str(item) for item in value)


def resolve_config(
    raw: Mapping[str, Any] | None,
    env: Mapping[str, str] | None = None,
) -> PluginConfig:
    """Resolve the raw host config (may be None) against the environment."""
    raw = raw or {}
    return PluginConfig(
        owner=_string(raw, "owner"),
        repo=_string(raw, "repo"),
        token=resolve_token(_string(raw, "token"), env),
        draft=_boolean(raw, "draft"),
        prerelease=_boolean(raw, "prerelease"),
        generate_release_notes=_boolean(raw, "generate_release_notes"),
        assets=_string_list(raw, "assets"),
        discussion_category=_string(raw, "discussion_category"),
    )
