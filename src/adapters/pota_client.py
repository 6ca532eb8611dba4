"""POTA spot feed adapter.

Fetches the public spots endpoint once per poll cycle. Network and decode
errors are logged and produce an empty batch so the next cycle can retry.
"""

from __future__ import annotations

import logging
from typing import List

import httpx

from adapters.pota_mapper import build_spots
from core.models import Spot

LOGGER = logging.getLogger(__name__)


class PotaSpotSource:
    """SpotSourcePort backed by the POTA HTTP API."""

    def __init__(self, client: httpx.AsyncClient, url: str) -> None:
        self._client = client
        self._url = url

    async def fetch_spots(self) -> List[Spot]:
        try:
            response = await self._client.get(self._url)
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException:
            LOGGER.warning("Spot fetch timed out (%s)", self._url)
            return []
        except httpx.HTTPStatusError as exc:
            LOGGER.warning("Spot fetch failed with HTTP %s", exc.response.status_code)
            return []
        except httpx.HTTPError as exc:
            LOGGER.warning("Spot fetch failed: %s", exc)
            return []
        except ValueError:
            LOGGER.warning("Spot feed returned invalid JSON")
            return []
        return build_spots(payload)
