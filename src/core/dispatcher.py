"""Core spot dispatch pipeline.

This module is integration-agnostic. It only relies on ports for the output
channels, enabling other sinks or frontends without changes here.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from core.config import AppConfig
from core.errors import AssetMissing, ChannelUnavailable, PotaWatchError
from core.filter_engine import accepts
from core.models import DispatchOutcome, Spot
from core.novelty import NoveltyTracker
from core.ports import AlertPort, PopupPort, SoundPort, SpeechPort
from core.speech_queue import SpeechQueue
from core.speech_text import render_speech_text

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def head(items: Sequence[T], cap: int) -> tuple[T, ...]:
    """Return the first `cap` items, or all of them when cap is 0."""

    if cap > 0:
        return tuple(items[:cap])
    return tuple(items)


class SpotDispatcher:
    """Orchestrates novelty, filtering, caps, and channel fan-out per batch."""

    def __init__(
        self,
        config: AppConfig,
        tracker: NoveltyTracker,
        alerts: AlertPort,
        popups: PopupPort,
        sound: SoundPort,
        speaker: SpeechPort,
    ) -> None:
        self._config = config
        self._tracker = tracker
        self._alerts = alerts
        self._popups = popups
        self._sound = sound
        self._speech = SpeechQueue(speaker)

    @property
    def config(self) -> AppConfig:
        return self._config

    def update_config(self, config: AppConfig) -> None:
        """Swap the configuration used from the next batch on."""

        self._config = config

    def select_new(self, batch: Sequence[Spot]) -> tuple[list[Spot], list[Spot]]:
        """Mark every unseen spot and return (new, filtered) in batch order."""

        new_spots: list[Spot] = []
        filtered: list[Spot] = []
        for spot in batch:
            # Already-seen identities are never re-evaluated, even if the
            # filter changed since they were first marked.
            if not self._tracker.offer(spot.spot_id):
                continue
            new_spots.append(spot)
            if accepts(spot, self._config.filters):
                filtered.append(spot)
        return new_spots, filtered

    async def process(self, batch: Sequence[Spot]) -> DispatchOutcome:
        """Run one poll batch through the pipeline."""

        new_spots, filtered = self.select_new(batch)
        if not filtered:
            if new_spots:
                LOGGER.debug("%s new spots, none passed the filter", len(new_spots))
            return DispatchOutcome(new_spots=tuple(new_spots))

        LOGGER.info("%s new spots, %s passed the filter", len(new_spots), len(filtered))
        filters = self._config.filters
        channels = self._config.channels

        # The sound is a batch-level signal: at most one play per batch.
        sound_played = await self._play_sound_once()

        alerts: tuple[Spot, ...] = ()
        if channels.notification_enabled:
            silent = bool(filters.notification_sound_path) or not channels.sound_enabled
            alerts = await self._fan_out(
                head(filtered, filters.max_notification_count),
                lambda spot: self._alerts.emit_alert(spot, silent),
                "alert",
            )

        popups: tuple[Spot, ...] = ()
        if channels.popup_enabled:
            popups = await self._fan_out(
                head(filtered, filters.max_popup_count),
                self._popups.emit_popup,
                "popup",
            )

        spoken, failed = await self._speak(filtered)

        return DispatchOutcome(
            new_spots=tuple(new_spots),
            filtered_spots=tuple(filtered),
            alerts=alerts,
            popups=popups,
            spoken=tuple(spoken),
            sound_played=sound_played,
            speech_failures=tuple(failed),
        )

    async def _play_sound_once(self) -> bool:
        path: Optional[str] = self._config.filters.notification_sound_path
        if not self._config.channels.sound_enabled or not path:
            return False
        try:
            await self._sound.play_sound(path)
        except AssetMissing:
            LOGGER.warning("Notification sound not found: %s", path)
            return False
        except PotaWatchError as exc:
            LOGGER.warning("Notification sound skipped: %s", exc)
            return False
        return True

    @staticmethod
    async def _fan_out(
        spots: Sequence[Spot],
        emit: Callable[[Spot], Awaitable[None]],
        channel: str,
    ) -> tuple[Spot, ...]:
        delivered: list[Spot] = []
        for spot in spots:
            try:
                await emit(spot)
            except ChannelUnavailable as exc:
                LOGGER.warning("%s channel unavailable for spot %s: %s", channel, spot.spot_id, exc)
                continue
            except Exception:
                LOGGER.exception("Error while emitting %s for spot %s", channel, spot.spot_id)
                continue
            delivered.append(spot)
        return tuple(delivered)

    async def _speak(self, filtered: Sequence[Spot]) -> tuple[list[Spot], list[Spot]]:
        speech = self._config.speech
        if not self._config.channels.speech_enabled:
            return [], []
        if speech.speaker_id is None:
            LOGGER.info("Speech enabled but no speaker is configured; skipping")
            return [], []

        to_read = head(filtered, speech.max_spots_per_read)
        items = [(spot, render_speech_text(spot, speech)) for spot in to_read]
        return await self._speech.speak_all(items, speech)
