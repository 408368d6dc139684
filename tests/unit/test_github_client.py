"""Unit tests for the GitHub REST client and its factory."""

import json

import httpx
import pytest

from relicta_github.core.config import GitHubAPIConfig
from relicta_github.errors import GitHubAPIError, MissingTokenError
from relicta_github.github.auth import API_VERSION, GitHubCredentials
from relicta_github.github.client import GitHubClient, new_client
from relicta_github.models.config import PluginConfig
from relicta_github.utils.logging import mask_token


class TestCredentials:
    def test_headers(self):
        h = GitHubCredentials(token="ghp_abc").as_headers()
        assert h["Authorization"] == "Bearer ghp_abc"
        assert h["Accept"] == "application/vnd.github+json"
        assert h["X-GitHub-Api-Version"] == API_VERSION == "2022-11-28"
        assert h["User-Agent"].startswith("relicta-plugin-github/")

    def test_repr_hides_token(self):
        assert "ghp_abc" not in repr(GitHubCredentials(token="ghp_abc"))

    @pytest.mark.parametrize("token,expected", [
        ("", "<none>"),
        ("short", "****"),
        ("ghp_1234567890", "ghp_…(14 chars)"),
    ])
    def test_mask_token(self, token, expected):
        assert mask_token(token) == expected


class TestNewClient:
    def test_config_token_used(self):
        client = new_client(PluginConfig(token="ghp_config"), {"GITHUB_TOKEN": "ghp_env"})
        assert client.credentials.token == "ghp_config"

    def test_github_token_env(self):
        client = new_client(PluginConfig(), {"GITHUB_TOKEN": "ghp_env", "GH_TOKEN": "ghp_gh"})
        assert client.credentials.token == "ghp_env"

    def test_gh_token_env(self):
        client = new_client(PluginConfig(), {"GH_TOKEN": "ghp_gh"})
        assert client.credentials.token == "ghp_gh"

    def test_no_token_raises(self):
        with pytest.raises(MissingTokenError) as exc_info:
            new_client(PluginConfig(), {})
        assert exc_info.value.message == "no GitHub token available"

    def test_default_endpoints_from_settings(self):
        client = new_client(PluginConfig(token="t"), {})
        assert client.base_url.startswith("http")
        assert client.upload_url.startswith("http")
        assert client.timeout > 0

    def test_api_override(self):
        api = GitHubAPIConfig(
            base_url="https://ghe.example.com/api/v3/",
            upload_url="https://ghe.example.com/api/uploads",
            timeout=5,
        )
        client = new_client(PluginConfig(token="t"), {}, api=api)
        assert client.base_url == "https://ghe.example.com/api/v3"
        assert client.upload_url == "https://ghe.example.com/api/uploads"
        assert client.timeout == 5


@pytest.mark.asyncio
class TestCreateRelease:
    async def test_posts_payload_with_auth(self, fake_github):
        client = fake_github.client("ghp_test_token")
        release = await client.create_release("test-owner", "test-repo", {"tag_name": "v1.0.0"})

        assert release["id"] == 12345
        req = fake_github.release_requests[0]
        assert req.method == "POST"
        assert req.url.path == "/repos/test-owner/test-repo/releases"
        assert req.url.host == "api.github.com"
        assert req.headers["Authorization"] == "Bearer ghp_test_token"
        assert req.headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert json.loads(req.content) == {"tag_name": "v1.0.0"}

    async def test_owner_and_repo_are_quoted(self, fake_github):
        client = fake_github.client()
        await client.create_release("my org", "repo/x", {"tag_name": "v1"})
        assert fake_github.requests[0].url.raw_path.startswith(b"/repos/my%20org/repo%2Fx/")

    async def test_http_error_raises_with_remote_message(self, fake_github):
        fake_github.release_status = 401
        client = fake_github.client()
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.create_release("test-owner", "test-repo", {"tag_name": "v1.0.0"})
        assert exc_info.value.status == 401
        assert "Bad credentials" in exc_info.value.message

    async def test_validation_error_details_included(self):
        def handler(request):
            return httpx.Response(422, json={
                "message": "Validation Failed",
                "errors": [{"resource": "Release", "code": "already_exists", "field": "tag_name"}],
            })

        client = GitHubClient(GitHubCredentials("t"), transport=httpx.MockTransport(handler))
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.create_release("o", "r", {"tag_name": "v1"})
        assert exc_info.value.message.endswith("Validation Failed (already_exists)")

    async def test_non_json_error_body(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        client = GitHubClient(GitHubCredentials("t"), transport=httpx.MockTransport(handler))
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.create_release("o", "r", {})
        assert exc_info.value.message == "GitHub create release returned HTTP 502: Bad Gateway"

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = GitHubClient(GitHubCredentials("t"), transport=httpx.MockTransport(handler))
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.create_release("o", "r", {})
        assert exc_info.value.status is None
        assert "connection refused" in exc_info.value.message

    @pytest.mark.parametrize("response", [
        httpx.Response(201),
        httpx.Response(201, text="<html>ok</html>"),
        httpx.Response(201, json=["not", "an", "object"]),
    ])
    async def test_success_status_with_unusable_body(self, response):
        client = GitHubClient(GitHubCredentials("t"), transport=httpx.MockTransport(lambda request: response))
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.create_release("o", "r", {})
        assert exc_info.value.status == 201
        assert exc_info.value.message == "GitHub create release returned HTTP 201: invalid JSON response"

    async def test_single_attempt_on_failure(self, fake_github):
        fake_github.release_status = 500
        client = fake_github.client()
        with pytest.raises(GitHubAPIError):
            await client.create_release("o", "r", {})
        assert len(fake_github.requests) == 1


@pytest.mark.asyncio
class TestUploadReleaseAsset:
    async def test_upload_request_shape(self, fake_github):
        client = fake_github.client()
        asset = await client.upload_release_asset(
            "test-owner", "test-repo", 12345, "app.tar.gz", b"payload", "application/gzip",
        )

        req = fake_github.uploads[0]
        assert req.url.host == "uploads.github.com"
        assert req.url.path == "/repos/test-owner/test-repo/releases/12345/assets"
        assert req.url.params["name"] == "app.tar.gz"
        assert req.headers["Content-Type"] == "application/gzip"
        assert req.headers["Content-Length"] == "7"
        assert req.content == b"payload"
        assert asset["browser_download_url"].endswith("/app.tar.gz")

    async def test_upload_error(self, fake_github):
        fake_github.upload_status = 500
        client = fake_github.client()
        with pytest.raises(GitHubAPIError) as exc_info:
            await client.upload_release_asset("o", "r", 1, "a.zip", b"x")
        assert exc_info.value.api == "upload asset"
        assert exc_info.value.status == 500
