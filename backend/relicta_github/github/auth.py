"""
Relicta GitHub plugin — GitHub REST authentication helpers.

Every request carries a bearer token plus the versioned media type
headers GitHub recommends for the REST API.
"""

from dataclasses import dataclass

API_VERSION = "2022-11-28"
USER_AGENT = "relicta-plugin-github/2.0.0"


@dataclass(frozen=True)
class GitHubCredentials:
    token: str

    def __repr__(self) -> str:
        return "GitHubCredentials(token=***)"

    def as_headers(self) -> dict[str, str]:
        """Return the auth headers required by the GitHub REST API."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        }
