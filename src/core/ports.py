"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the spot feed and the output channels
so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from core.config import SpeechConfig
from core.models import Spot


class SpotSourcePort(Protocol):
    """Produces the current batch of spots once per poll cycle."""

    async def fetch_spots(self) -> Sequence[Spot]:
        ...


class AlertPort(Protocol):
    """Desktop alert channel."""

    async def emit_alert(self, spot: Spot, silent: bool) -> None:
        ...


class PopupPort(Protocol):
    """Popup window channel."""

    async def emit_popup(self, spot: Spot) -> None:
        ...


class SoundPort(Protocol):
    """Plays the configured notification sound."""

    async def play_sound(self, path: str) -> None:
        ...


class SpeechPort(Protocol):
    """Synthesizes text and returns only after playback has finished."""

    async def synthesize_and_play(self, text: str, config: SpeechConfig) -> None:
        ...
