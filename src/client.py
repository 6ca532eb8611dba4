"""HTTP client factory for potawatch.

One AsyncClient is shared by the spot poller and the VOICEVOX adapter for the
whole session; callers own its lifecycle and close it on shutdown.
"""

from __future__ import annotations

import logging
import os

import httpx
from dotenv import load_dotenv

DEFAULT_USER_AGENT = "potawatch/0.1 (+https://pota.app)"


def build_http_client(timeout: float) -> httpx.AsyncClient:
    """Create the shared AsyncClient.

    POTAWATCH_USER_AGENT may be set in the environment or a .env file to
    identify the station operating the watcher.
    """

    load_dotenv()
    user_agent = os.getenv("POTAWATCH_USER_AGENT", DEFAULT_USER_AGENT)

    logging.getLogger(__name__).info("Initializing HTTP client")

    return httpx.AsyncClient(
        timeout=timeout,
        headers={"User-Agent": user_agent, "Accept": "application/json"},
        follow_redirects=True,
    )
