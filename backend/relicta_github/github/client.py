"""
Relicta GitHub plugin — GitHub REST API client.

Only the two calls a release needs:

  POST {api}/repos/{owner}/{repo}/releases                        — create release
  POST {uploads}/repos/{owner}/{repo}/releases/{id}/assets?name=  — upload asset

Auth: bearer token on every request (see github.auth).
Each call is attempted exactly once; failures raise GitHubAPIError.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from relicta_github.core.config import GitHubAPIConfig, settings
from relicta_github.errors import GitHubAPIError, MissingTokenError
from relicta_github.github.auth import GitHubCredentials
from relicta_github.models.config import PluginConfig
from relicta_github.pipeline.resolve_config import resolve_token
from relicta_github.utils.logging import logger, mask_token


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def _error_body(resp: httpx.Response) -> str:
    """Extract GitHub's error message, falling back to the raw body."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip()
    if isinstance(data, dict) and data.get("message"):
        message = str(data["message"])
        details = data.get("errors")
        if isinstance(details, list) and details:
            codes = ", ".join(
                str(d.get("code") or d.get("message") or d) if isinstance(d, dict) else str(d)
                for d in details
            )
            message = f"{message} ({codes})"
        return message
    return resp.text.strip()


class GitHubClient:
    """Thin async wrapper around the GitHub releases REST API."""

    def __init__(
        self,
        credentials: GitHubCredentials,
        base_url: str = "https://api.github.com",
        upload_url: str = "https://uploads.github.com",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.upload_url = upload_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        h = self.credentials.as_headers()
        if extra:
            h.update(extra)
        return h

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _post(self, api: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with self._http() as client:
                resp = await client.post(url, **kwargs)
        except httpx.TransportError as exc:
            logger.error("  GitHub %s request failed: %s", api, exc)
            raise GitHubAPIError(api, None, str(exc) or type(exc).__name__) from exc

        if not resp.is_success:
            body = _error_body(resp)
            logger.error("  GitHub %s returned %d: %s", api, resp.status_code, body)
            raise GitHubAPIError(api, resp.status_code, body)

        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.error("  GitHub %s returned %d with a non-object body", api, resp.status_code)
            raise GitHubAPIError(api, resp.status_code, "invalid JSON response")
        return data

    async def create_release(self, owner: str, repo: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a release and return GitHub's release object."""
        return await self._post(
            "create release",
            f"{self.base_url}{_repo_path(owner, repo)}/releases",
            headers=self._headers(),
            json=payload,
        )

    async def upload_release_asset(
        self,
        owner: str,
        repo: str,
        release_id: int,
        name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> dict[str, Any]:
        """Attach `content` to a release as asset `name`; returns the asset object."""
        return await self._post(
            "upload asset",
            f"{self.upload_url}{_repo_path(owner, repo)}/releases/{release_id}/assets",
            headers=self._headers({
                "Content-Type": content_type,
                "Content-Length": str(len(content)),
            }),
            params={"name": name},
            content=content,
        )


def new_client(
    config: PluginConfig,
    env: Mapping[str, str] | None = None,
    *,
    api: GitHubAPIConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GitHubClient:
    """
    Build an authenticated client for one invocation.

    Token order: config token, $GITHUB_TOKEN, $GH_TOKEN.
    Raises MissingTokenError when none is set. Performs no network I/O.
    """
    token = resolve_token(config.token, env)
    if not token:
        raise MissingTokenError("no GitHub token available")

    api = api or settings.github
    logger.info("  GitHub client for %s (token %s)", api.base_url, mask_token(token))
    return GitHubClient(
        credentials=GitHubCredentials(token=token),
        base_url=api.base_url,
        upload_url=api.upload_url,
        timeout=api.timeout,
        transport=transport,
    )
