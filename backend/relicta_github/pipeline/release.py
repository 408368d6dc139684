"""
Relicta GitHub plugin — Release orchestrator.

Runs the post-publish flow as a small state machine:

  RECEIVED → REPOSITORY_RESOLVED → (DRY_RUN | RELEASE_CREATED → ASSETS_UPLOADED)

Any state can end in FAILED. Anticipated failures never raise: they are
turned into an ExecuteResponse with success=False. If the release was
created but an asset failed, the response still carries the release outputs
(release_created=True) so the host can tell the two failures apart.
"""

from __future__ import annotations

import enum
import time
import uuid
from collections.abc import Callable, Mapping
from functools import partial
from typing import Any

from relicta_github.errors import (
    AssetUploadError,
    ClientCreationError,
    GitHubAPIError,
    MissingRepositoryError,
    PluginError,
    ReleaseCreationError,
)
from relicta_github.github.client import GitHubClient, new_client
from relicta_github.models.config import PluginConfig
from relicta_github.models.plugin import Artifact, ExecuteResponse, ReleaseContext
from relicta_github.pipeline.resolve_assets import expand_asset_patterns
from relicta_github.pipeline.upload_assets import upload_asset
from relicta_github.utils.logging import logger, step_timer

ClientFactory = Callable[[PluginConfig], GitHubClient]


class ReleaseState(str, enum.Enum):
    RECEIVED = "RECEIVED"
    REPOSITORY_RESOLVED = "REPOSITORY_RESOLVED"
    DRY_RUN = "DRY_RUN"
    RELEASE_CREATED = "RELEASE_CREATED"
    ASSETS_UPLOADED = "ASSETS_UPLOADED"
    FAILED = "FAILED"


def release_body(context: ReleaseContext) -> str:
    """Public release notes win over the changelog; both may be empty."""
    return context.release_notes or context.changelog or ""


class ReleaseOrchestrator:
    """
    Creates one GitHub release and uploads its assets.

    The client factory is injectable so tests can point the client at a
    fake transport; by default it is new_client bound to `env`.
    """

    def __init__(
        self,
        config: PluginConfig,
        context: ReleaseContext,
        dry_run: bool = False,
        client_factory: ClientFactory | None = None,
        env: Mapping[str, str] | None = None,
    ):
        self.run_id = uuid.uuid4().hex[:12]
        self.config = config
        self.context = context
        self.dry_run = dry_run
        self.client_factory = client_factory or partial(new_client, env=env)
        self.state = ReleaseState.RECEIVED
        self.owner = ""
        self.repo = ""
        self.artifacts: list[Artifact] = []

    @property
    def tag_name(self) -> str:
        return self.context.tag_name

    async def run(self) -> ExecuteResponse:
        """Execute the flow. Returns a response; never raises for anticipated failures."""
        start = time.perf_counter()
        logger.info(
            "[%s] GitHub release %s (dry_run=%s)", self.run_id, self.tag_name or "<no tag>", self.dry_run,
        )

        try:
            self._step_resolve_repository()
        except MissingRepositoryError as exc:
            return self._failed(exc)

        if self.dry_run:
            return self._dry_run_response()

        try:
            client = self.client_factory(self.config)
        except PluginError as exc:
            return self._failed(ClientCreationError(exc))

        try:
            release = await self._step_create_release(client)
        except GitHubAPIError as exc:
            return self._failed(ReleaseCreationError(exc))

        outputs = self._base_outputs()
        outputs.update({
            "release_created": True,
            "release_id": release.get("id"),
            "release_url": release.get("html_url", ""),
        })

        try:
            await self._step_upload_assets(client, release["id"])
        except PluginError as exc:
            outputs["assets_uploaded"] = len(self.artifacts)
            self.state = ReleaseState.FAILED
            logger.warning("[%s] Release %s created, assets incomplete: %s", self.run_id, self.tag_name, exc.message)
            return ExecuteResponse(
                success=False,
                message=f"Created GitHub release {self.tag_name} but asset upload failed",
                error=exc.message,
                outputs=outputs,
                artifacts=self.artifacts,
            )

        outputs["assets_uploaded"] = len(self.artifacts)
        logger.info(
            "[%s] Release complete — %d asset(s), %.0f ms",
            self.run_id, len(self.artifacts), (time.perf_counter() - start) * 1000,
        )
        return ExecuteResponse(
            success=True,
            message=f"Created GitHub release {self.tag_name}",
            outputs=outputs,
            artifacts=self.artifacts,
        )

    def _step_resolve_repository(self) -> None:
        # Each field falls back independently: config owner + context repo is fine.
        self.owner = self.config.owner or self.context.repository_owner
        self.repo = self.config.repo or self.context.repository_name
        if not self.owner or not self.repo:
            raise MissingRepositoryError(self.owner, self.repo)
        self.state = ReleaseState.REPOSITORY_RESOLVED

    def _base_outputs(self) -> dict[str, Any]:
        outputs: dict[str, Any] = {
            "tag_name": self.tag_name,
            "owner": self.owner,
            "repo": self.repo,
            "draft": self.config.draft,
            "prerelease": self.config.prerelease,
        }
        if self.config.generate_release_notes:
            outputs["generate_release_notes"] = True
        if self.config.discussion_category:
            outputs["discussion_category"] = self.config.discussion_category
        if self.config.assets:
            outputs["assets"] = list(self.config.assets)
        return outputs

    def _dry_run_response(self) -> ExecuteResponse:
        self.state = ReleaseState.DRY_RUN
        logger.info(
            "[%s] Dry run — would create %s/%s@%s (%d asset pattern(s))",
            self.run_id, self.owner, self.repo, self.tag_name, len(self.config.assets or ()),
        )
        return ExecuteResponse(
            success=True,
            message=f"Would create GitHub release for {self.owner}/{self.repo}: {self.tag_name}",
            outputs=self._base_outputs(),
        )

    def _release_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "tag_name": self.tag_name,
            "name": self.tag_name,
            "body": release_body(self.context),
            "draft": self.config.draft,
            "prerelease": self.config.prerelease,
            "generate_release_notes": self.config.generate_release_notes,
        }
        if self.config.discussion_category:
            payload["discussion_category_name"] = self.config.discussion_category
        return payload

    async def _step_create_release(self, client: GitHubClient) -> dict[str, Any]:
        with step_timer(f"Create release {self.owner}/{self.repo}@{self.tag_name}"):
            release = await client.create_release(self.owner, self.repo, self._release_payload())
        if type(release.get("id")) is not int:
            raise GitHubAPIError("create release", None, "response has no release id")
        self.state = ReleaseState.RELEASE_CREATED
        logger.info("  Release id=%s url=%s", release.get("id"), release.get("html_url", ""))
        return release

    async def _step_upload_assets(self, client: GitHubClient, release_id: int) -> None:
        paths = expand_asset_patterns(self.config.assets)
        for path in paths:
            try:
                artifact = await upload_asset(client, self.owner, self.repo, release_id, path)
            except AssetUploadError:
                raise
            except PluginError as exc:
                # Path-safety failures abort the run with the same stage prefix.
                raise AssetUploadError(path, exc) from exc
            self.artifacts.append(artifact)
        self.state = ReleaseState.ASSETS_UPLOADED

    def _failed(self, exc: PluginError) -> ExecuteResponse:
        self.state = ReleaseState.FAILED
        logger.warning("[%s] Release failed: %s (%s)", self.run_id, exc.message, exc.code)
        return ExecuteResponse(success=False, error=exc.message)


async def create_release(
    config: PluginConfig,
    context: ReleaseContext,
    dry_run: bool = False,
    *,
    client_factory: ClientFactory | None = None,
    env: Mapping[str, str] | None = None,
) -> ExecuteResponse:
    """Convenience wrapper — run a ReleaseOrchestrator and return its response."""
    orchestrator = ReleaseOrchestrator(
        config=config,
        context=context,
        dry_run=dry_run,
        client_factory=client_factory,
        env=env,
    )
    return await orchestrator.run()
