"""Shared test configuration and fixtures for the GitHub plugin test suite."""

import sys
from pathlib import Path

import httpx
import pytest

# Add backend to Python path so imports work
backend_dir = str(Path(__file__).parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from relicta_github.github.client import new_client  # noqa: E402
from relicta_github.models.config import PluginConfig  # noqa: E402


@pytest.fixture(autouse=True)
def _no_env_tokens(monkeypatch):
    """No test may pick up a real token from the developer's shell."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GH_TOKEN", raising=False)


class FakeGitHub:
    """
    In-memory stand-in for the GitHub releases API.

    Records every request; status codes are configurable per endpoint.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.release_status = 201
        self.release_error = "Bad credentials"
        self.upload_status = 201
        self.upload_error = "Internal Server Error"
        self.release_id = 12345
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path.endswith("/assets"):
            if self.upload_status >= 400:
                return httpx.Response(self.upload_status, json={"message": self.upload_error})
            name = request.url.params["name"]
            return httpx.Response(201, json={
                "id": len(self.uploads),
                "name": name,
                "size": len(request.content),
                "browser_download_url": f"https://github.com/test-owner/test-repo/releases/download/v1.0.0/{name}",
            })

        if request.method == "POST" and path.endswith("/releases"):
            if self.release_status >= 400:
                return httpx.Response(self.release_status, json={"message": self.release_error})
            return httpx.Response(self.release_status, json={
                "id": self.release_id,
                "html_url": "https://github.com/test-owner/test-repo/releases/tag/v1.0.0",
                "tag_name": "v1.0.0",
                "name": "v1.0.0",
            })

        return httpx.Response(404, json={"message": "Not Found"})

    @property
    def release_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/releases")]

    @property
    def uploads(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/assets")]

    def client_factory(self, config: PluginConfig):
        return new_client(config, env={}, transport=self.transport)

    def client(self, token: str = "ghp_test_token"):
        return new_client(PluginConfig(token=token), env={}, transport=self.transport)


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def asset_file(tmp_path):
    path = tmp_path / "relicta_1.0.0_linux_amd64.tar.gz"
    path.write_bytes(b"test asset content")
    return path
