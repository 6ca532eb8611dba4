"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

TRACKED_FIELDS = ("reference", "comments", "mode", "frequency")

MATCH_CONTAINS = "contains"
MATCH_EXACT = "exact"

OPERATOR_AND = "and"
OPERATOR_OR = "or"

DEFAULT_TEXT_TEMPLATE = "[reference] [frequency] [mode] [activator] [comments]"


@dataclass(frozen=True)
class FilterCondition:
    """A single value test against one spot field."""

    value: str
    match_type: str = MATCH_CONTAINS
    exclude: bool = False
    enabled: bool = True


@dataclass(frozen=True)
class FieldFilter:
    """Conditions for one field plus the operator joining include conditions."""

    conditions: tuple[FilterCondition, ...] = ()
    operator: str = OPERATOR_OR


@dataclass(frozen=True)
class FilterConfig:
    """Filter and per-channel cap settings consumed by the dispatcher."""

    reference: FieldFilter = field(default_factory=FieldFilter)
    comments: FieldFilter = field(default_factory=FieldFilter)
    mode: FieldFilter = field(default_factory=FieldFilter)
    frequency: FieldFilter = field(default_factory=FieldFilter)
    ignore_other_spotters: bool = False
    notification_sound_path: Optional[str] = None
    max_notification_count: int = 0
    max_popup_count: int = 0

    def field_filter(self, name: str) -> FieldFilter:
        return getattr(self, name)


@dataclass(frozen=True)
class ChannelSwitches:
    """On/off switches for each output channel. Everything starts off."""

    notification_enabled: bool = False
    popup_enabled: bool = False
    sound_enabled: bool = False
    speech_enabled: bool = False


@dataclass(frozen=True)
class SpeechConfig:
    """VOICEVOX connection, voice parameters, and text rendering options."""

    hostname: str = "localhost"
    port: int = 50021
    speaker_id: Optional[int] = None
    mhz_enabled: bool = False
    portable_enabled: bool = False
    number_english_enabled: bool = False
    text_template: str = DEFAULT_TEXT_TEMPLATE
    volume: float = 1.0
    speed: float = 1.0
    pitch: float = 0.0
    intonation: float = 1.0
    breathing: float = 0.0
    max_spots_per_read: int = 0
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class PollingConfig:
    """Spot feed location and poll cadence."""

    url: str = "https://api.pota.app/v1/spots"
    interval_seconds: float = 10.0
    initial_delay_seconds: float = 3.0
    timeout_seconds: float = 15.0


@dataclass(frozen=True)
class AppConfig:
    """Everything the watcher needs for one session."""

    filters: FilterConfig = field(default_factory=FilterConfig)
    channels: ChannelSwitches = field(default_factory=ChannelSwitches)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
