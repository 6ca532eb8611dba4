"""Poll cycle orchestration.

Each cycle enforces a strict order:
1) Fetch the current spot batch
2) Mark unseen spots in the novelty tracker
3) Apply the filter
4) Play the batch sound, then alerts, popups, and speech

Cycles are serialized: a tick that arrives while a cycle is still running is
skipped, so two cycles never touch the tracker at the same time.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from adapters.notification_formatting import format_log_line
from core.dispatcher import SpotDispatcher
from core.models import DispatchOutcome
from core.ports import SpotSourcePort

LOGGER = logging.getLogger(__name__)


class PollLoop:
    """Run fetch + dispatch cycles at a fixed interval without overlap."""

    def __init__(
        self,
        source: SpotSourcePort,
        dispatcher: SpotDispatcher,
        interval: float,
        initial_delay: float = 0.0,
    ) -> None:
        self._source = source
        self._dispatcher = dispatcher
        self._interval = interval
        self._initial_delay = initial_delay
        self._in_flight = asyncio.Lock()
        self.cycles_run = 0
        self.cycles_skipped = 0

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    async def run_once(self) -> Optional[DispatchOutcome]:
        """Run one cycle; return None if another cycle is still in flight."""

        if self._in_flight.locked():
            self.cycles_skipped += 1
            LOGGER.info("Previous cycle still running, skipping this tick")
            return None

        async with self._in_flight:
            spots = await self._source.fetch_spots()
            outcome = await self._dispatcher.process(spots)
            self.cycles_run += 1

        for spot in outcome.filtered_spots:
            LOGGER.info("Matched spot %s: %s", spot.spot_id, format_log_line(spot))
        if outcome.speech_failures:
            LOGGER.warning("%s utterances failed this cycle", len(outcome.speech_failures))
        return outcome

    async def run_forever(self, stop: Optional[asyncio.Event] = None) -> None:
        """Poll until `stop` is set. Errors never end the loop."""

        stop = stop or asyncio.Event()
        if await self._wait(stop, self._initial_delay):
            return

        while not stop.is_set():
            started = time.monotonic()
            try:
                await self.run_once()
            except Exception:
                LOGGER.exception("Poll cycle failed")
            elapsed = time.monotonic() - started
            if await self._wait(stop, max(self._interval - elapsed, 0.0)):
                return

    @staticmethod
    async def _wait(stop: asyncio.Event, seconds: float) -> bool:
        """Sleep up to `seconds`; return True if stop was requested."""

        if seconds <= 0:
            return stop.is_set()
        try:
            await asyncio.wait_for(stop.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True
