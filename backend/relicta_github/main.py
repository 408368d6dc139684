"""
Relicta GitHub plugin — FastAPI transport

The release host talks to the plugin over HTTP:

  GET  /health       — Health check
  GET  /v1/info      — Plugin metadata, handled hooks, config schema
  POST /v1/validate  — Validate a plugin config
  POST /v1/execute   — Fire one lifecycle hook

Anticipated failures are reported inside the response body
(success=false). Only malformed requests (422) and unexpected faults (500)
surface as HTTP errors.
"""

import time
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from relicta_github.models.plugin import (
    ExecuteRequest,
    ExecuteResponse,
    PluginInfo,
    ValidationResponse,
)
from relicta_github.plugin import PLUGIN_VERSION, GitHubPlugin
from relicta_github.utils.logging import logger


app = FastAPI(
    title="Relicta GitHub Plugin",
    description="Create GitHub releases and upload assets for the Relicta release host.",
    version=PLUGIN_VERSION,
)

plugin = GitHubPlugin()


@app.on_event("startup")
async def _startup_banner():
    from relicta_github.core.config import settings
    logger.setLevel(settings.log_level)
    logger.info("")
    logger.info("╔══════════════════════════════════════════════════╗")
    logger.info("║        Relicta GitHub Plugin  ·  v%-14s║", PLUGIN_VERSION)
    logger.info("╠══════════════════════════════════════════════════╣")
    logger.info("║  GET  /v1/info      → Plugin metadata           ║")
    logger.info("║  POST /v1/validate  → Config validation         ║")
    logger.info("║  POST /v1/execute   → Run a lifecycle hook      ║")
    logger.info("║  GET  /health       → Health check              ║")
    logger.info("╠══════════════════════════════════════════════════╣")
    logger.info("║  GitHub API : %-34s║", settings.github.base_url)
    logger.info("║  Uploads    : %-34s║", settings.github.upload_url)
    logger.info("╚══════════════════════════════════════════════════╝")
    logger.info("")


# ──────────────────────────────────────────────────────────
# Request models
# ──────────────────────────────────────────────────────────

class ValidateRequest(BaseModel):
    config: dict[str, Any] | None = Field(
        default=None, description="Raw plugin config from the host (token, owner, repo, ...)"
    )


# ──────────────────────────────────────────────────────────
# Endpoints
# ──────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    return {"status": "ok", "service": "relicta-plugin-github", "version": PLUGIN_VERSION}


@app.get("/v1/info", response_model=PluginInfo)
async def get_info():
    return plugin.get_info()


@app.post("/v1/validate", response_model=ValidationResponse)
async def validate_config(req: ValidateRequest):
    """Validate a plugin config. Invalid configs are a 200 with valid=false."""
    return plugin.validate(req.config)


@app.post("/v1/execute", response_model=ExecuteResponse)
async def execute_hook(req: ExecuteRequest):
    """
    Run one lifecycle hook.

    The body is the full ExecuteRequest (hook, config, context, dry_run).
    """
    request_id = uuid.uuid4().hex[:12]
    start = time.perf_counter()
    logger.info(
        "[%s] POST /v1/execute — hook=%s tag=%s dry_run=%s",
        request_id, req.hook, req.context.tag_name or "-", req.dry_run,
    )

    try:
        resp = await plugin.execute(req)
    except Exception as exc:
        logger.exception("[%s] Hook %s crashed", request_id, req.hook)
        raise HTTPException(status_code=500, detail=str(exc))

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "[%s] Complete — success=%s in %.0f ms", request_id, resp.success, elapsed_ms
    )
    return resp
