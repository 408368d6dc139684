"""
Relicta GitHub plugin — Host-facing plugin surface.

The host sees exactly three operations:

  get_info()          — name, version, handled hooks, config JSON schema
  validate(config)    — field-level config errors
  execute(request)    — dispatch one lifecycle hook

Only post-publish talks to GitHub. on-success / on-error are acknowledged
without any I/O, and unknown hooks are not errors.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from relicta_github.errors import MissingTokenError
from relicta_github.models.plugin import (
    ExecuteRequest,
    ExecuteResponse,
    Hook,
    PluginInfo,
    ValidationResponse,
)
from relicta_github.pipeline.release import ClientFactory, create_release
from relicta_github.pipeline.resolve_config import resolve_config
from relicta_github.utils.logging import logger
from relicta_github.utils.validate import validate_plugin_config

PLUGIN_NAME = "github"
PLUGIN_VERSION = "2.0.0"
PLUGIN_DESCRIPTION = "Create GitHub releases and upload assets"
PLUGIN_AUTHOR = "Relicta Team"
HANDLED_HOOKS = [Hook.POST_PUBLISH, Hook.ON_SUCCESS, Hook.ON_ERROR]

SUCCESS_ACK = "Release successful"
ERROR_ACK = "Release failed notification acknowledged"

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "config.schema.json"


def load_config_schema() -> str:
    return SCHEMA_PATH.read_text(encoding="utf-8")


class GitHubPlugin:
    """
    GitHub release plugin.

    `env` replaces the process environment for token lookup (None reads
    os.environ at call time); `client_factory` replaces the GitHub client
    builder. Both exist so tests never touch real state or the network.
    """

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        client_factory: ClientFactory | None = None,
    ):
        self.env = env
        self.client_factory = client_factory

    def get_info(self) -> PluginInfo:
        return PluginInfo(
            name=PLUGIN_NAME,
            version=PLUGIN_VERSION,
            description=PLUGIN_DESCRIPTION,
            author=PLUGIN_AUTHOR,
            hooks=list(HANDLED_HOOKS),
            config_schema=load_config_schema(),
        )

    def validate(self, config: Mapping[str, Any] | None) -> ValidationResponse:
        return validate_plugin_config(config, self.env)

    async def execute(self, request: ExecuteRequest) -> ExecuteResponse:
        """Dispatch one hook. Anticipated failures come back as success=False."""
        hook = request.hook
        logger.info("Hook %s (dry_run=%s)", hook, request.dry_run)

        if hook == Hook.POST_PUBLISH:
            return await self._post_publish(request)

        if hook == Hook.ON_SUCCESS:
            return ExecuteResponse(success=True, message=SUCCESS_ACK)

        if hook == Hook.ON_ERROR:
            return ExecuteResponse(success=True, message=ERROR_ACK)

        return ExecuteResponse(success=True, message=f"Hook {hook} not handled")

    async def _post_publish(self, request: ExecuteRequest) -> ExecuteResponse:
        cfg = resolve_config(request.config, self.env)
        if not cfg.token:
            err = MissingTokenError()
            logger.warning("  post-publish rejected: %s", err.message)
            return ExecuteResponse(success=False, error=f"{err.message}: {err.suggestion}")

        return await create_release(
            cfg,
            request.context,
            request.dry_run,
            client_factory=self.client_factory,
            env=self.env,
        )
