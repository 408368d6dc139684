"""
Relicta GitHub plugin — Validation of the raw plugin config.

Backs the host's Validate call. Only the token is mandatory: owner and repo
may still come from the release context at execution time.
"""

from collections.abc import Mapping
from typing import Any

from relicta_github.errors import MissingTokenError
from relicta_github.models.plugin import FieldError, ValidationResponse
from relicta_github.pipeline.resolve_config import resolve_config


def validate_plugin_config(
    raw: Mapping[str, Any] | None,
    env: Mapping[str, str] | None = None,
) -> ValidationResponse:
    """
    Validate the raw plugin config against the environment.
    Returns a ValidationResponse; never raises for bad input.
    """
    cfg = resolve_config(raw, env)
    errors: list[FieldError] = []

    if not cfg.token:
        err = MissingTokenError(
            "GitHub token is required (set 'token' or the GITHUB_TOKEN / GH_TOKEN environment variable)"
        )
        errors.append(FieldError(field="token", message=err.message, code=err.code))

    return ValidationResponse(valid=not errors, errors=errors)
