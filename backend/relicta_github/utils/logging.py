"""
Relicta GitHub plugin — Step logger with duration tracking.

Every orchestration step (create release, upload asset) is wrapped in
step_timer so the host log shows what ran and how long it took.
"""

import logging
import time
from contextlib import contextmanager
from typing import Generator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-7s | %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("relicta.github")


@contextmanager
def step_timer(step_name: str) -> Generator[None, None, None]:
    """Log the start, duration and outcome of a release step."""
    logger.info("▶ %s — started", step_name)
    start = time.perf_counter()
    try:
        yield
    except Exception:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.warning("✗ %s — failed after %.0f ms", step_name, elapsed_ms)
        raise
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("✔ %s — completed in %.0f ms", step_name, elapsed_ms)


def mask_token(token: str) -> str:
    """Return a log-safe rendering of a token: prefix only, never the secret."""
    if not token:
        return "<none>"
    if len(token) <= 8:
        return "****"
    return f"{token[:4]}…({len(token)} chars)"
