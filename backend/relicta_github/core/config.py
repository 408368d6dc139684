"""
Relicta GitHub plugin — Service configuration.
Loads .env automatically, then reads all settings from environment variables.

Per-invocation plugin settings (token, owner, repo, ...) are NOT read here;
they arrive with every request and are resolved by pipeline.resolve_config.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parent.parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass(frozen=True)
class GitHubAPIConfig:
    """GitHub REST endpoints used for releases and asset uploads."""
    base_url: str
    upload_url: str
    timeout: float


@dataclass(frozen=True)
class AppConfig:
    """Top-level service configuration."""
    log_level: str
    github: GitHubAPIConfig


def _load_config() -> AppConfig:
    return AppConfig(
        log_level=os.getenv("PLUGIN_LOG_LEVEL", "INFO").upper(),
        github=GitHubAPIConfig(
            base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            upload_url=os.getenv("GITHUB_UPLOAD_URL", "https://uploads.github.com"),
            timeout=float(os.getenv("GITHUB_TIMEOUT", "60")),
        ),
    )


def _validate_config(cfg: AppConfig) -> None:
    """Fail fast on endpoints or timeouts that can never work."""
    problems: list[str] = []
    for name, url in (
        ("GITHUB_API_URL", cfg.github.base_url),
        ("GITHUB_UPLOAD_URL", cfg.github.upload_url),
    ):
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            problems.append(f"{name}={url!r} is not an http(s) URL")
    if cfg.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        problems.append(f"PLUGIN_LOG_LEVEL={cfg.log_level!r} is not a log level")
    if cfg.github.timeout <= 0:
        problems.append(f"GITHUB_TIMEOUT must be greater than 0 (got {cfg.github.timeout})")
    if problems:
        print(
            f"\n  ERROR: Invalid plugin settings: {'; '.join(problems)}\n"
            f"  Fix the environment or the .env file at the repository root.\n",
            file=sys.stderr,
        )
        sys.exit(1)


settings = _load_config()
_validate_config(settings)
