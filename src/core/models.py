"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to the POTA API payload or any output sink.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Spot:
    """One activation report as seen in a single poll batch."""

    spot_id: int
    spotter: str
    activator: str
    reference: str
    comments: str
    mode: str
    frequency: str
    name: str = ""
    park_name: str = ""
    location_desc: str = ""
    spot_time: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.park_name or self.name


@dataclass(frozen=True)
class DispatchOutcome:
    """What each channel did for one poll batch."""

    new_spots: tuple[Spot, ...] = ()
    filtered_spots: tuple[Spot, ...] = ()
    alerts: tuple[Spot, ...] = ()
    popups: tuple[Spot, ...] = ()
    spoken: tuple[Spot, ...] = ()
    sound_played: bool = False
    speech_failures: tuple[Spot, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.filtered_spots
