"""Sequential speech playback (core domain).

Utterances are handed to a single worker through a one-slot queue, so the
next synthesis request is never issued before the previous playback ends.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from core.config import SpeechConfig
from core.errors import PotaWatchError
from core.models import Spot
from core.ports import SpeechPort

LOGGER = logging.getLogger(__name__)


class SpeechQueue:
    """Drain (spot, text) pairs through one speaker, one at a time."""

    def __init__(self, speaker: SpeechPort) -> None:
        self._speaker = speaker

    async def speak_all(
        self,
        items: Sequence[tuple[Spot, str]],
        config: SpeechConfig,
    ) -> tuple[list[Spot], list[Spot]]:
        """Speak every item in order; return (spoken, failed) spots."""

        spoken: list[Spot] = []
        failed: list[Spot] = []
        if not items:
            return spoken, failed

        queue: asyncio.Queue[Optional[tuple[Spot, str]]] = asyncio.Queue(maxsize=1)
        worker = asyncio.create_task(self._drain(queue, config, spoken, failed))
        try:
            for item in items:
                await queue.put(item)
            await queue.put(None)
            await worker
        finally:
            if not worker.done():
                worker.cancel()
        return spoken, failed

    async def _drain(
        self,
        queue: asyncio.Queue[Optional[tuple[Spot, str]]],
        config: SpeechConfig,
        spoken: list[Spot],
        failed: list[Spot],
    ) -> None:
        while True:
            item = await queue.get()
            try:
                if item is None:
                    return
                spot, text = item
                if not text:
                    LOGGER.info("Speech skipped for spot %s (empty text)", spot.spot_id)
                    continue
                try:
                    await self._speaker.synthesize_and_play(text, config)
                except PotaWatchError as exc:
                    LOGGER.warning("Speech failed for spot %s: %s", spot.spot_id, exc)
                    failed.append(spot)
                    continue
                except Exception:
                    LOGGER.exception("Unexpected speech error for spot %s", spot.spot_id)
                    failed.append(spot)
                    continue
                spoken.append(spot)
            finally:
                queue.task_done()
