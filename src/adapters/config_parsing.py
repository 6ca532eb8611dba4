"""Turn the raw config.json document into core config dataclasses.

Every key is optional. Missing or malformed values fall back to the defaults
declared on the dataclasses so older and newer documents both load.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from core.config import (
    DEFAULT_TEXT_TEMPLATE,
    MATCH_CONTAINS,
    OPERATOR_AND,
    OPERATOR_OR,
    TRACKED_FIELDS,
    AppConfig,
    ChannelSwitches,
    FieldFilter,
    FilterCondition,
    FilterConfig,
    PollingConfig,
    SpeechConfig,
)

LOGGER = logging.getLogger(__name__)


def _section(raw: Any, key: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        return {}
    value = raw.get(key)
    if isinstance(value, dict):
        return value
    return {}


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    return bool(value)


def _as_count(value: Any) -> int:
    """Parse a non-negative cap; anything invalid or negative means 0."""

    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return 0
    return max(parsed, 0)


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        LOGGER.warning("Ignoring non-numeric speakerId %r", value)
        return None


def parse_condition(raw: Any) -> Optional[FilterCondition]:
    if not isinstance(raw, dict):
        return None
    value = raw.get("value")
    return FilterCondition(
        value="" if value is None else str(value),
        match_type=str(raw.get("type") or MATCH_CONTAINS),
        exclude=bool(raw.get("exclude", False)),
        # Only an explicit false disables a condition.
        enabled=raw.get("enabled") is not False,
    )


def parse_field_filter(raw: Any) -> FieldFilter:
    if not isinstance(raw, dict):
        return FieldFilter()
    conditions = []
    for item in raw.get("conditions") or []:
        condition = parse_condition(item)
        if condition is not None:
            conditions.append(condition)
    operator = OPERATOR_AND if raw.get("operator") == OPERATOR_AND else OPERATOR_OR
    return FieldFilter(conditions=tuple(conditions), operator=operator)


def parse_filter_config(raw: dict[str, Any]) -> FilterConfig:
    ignore = raw.get("ignoreOtherSpotters")
    if ignore is None:
        ignore = raw.get("ignoreOtherReporters", False)
    sound_path = raw.get("notificationSoundPath")
    fields = {name: parse_field_filter(raw.get(name)) for name in TRACKED_FIELDS}
    return FilterConfig(
        **fields,
        ignore_other_spotters=bool(ignore),
        notification_sound_path=str(sound_path) if sound_path else None,
        max_notification_count=_as_count(raw.get("maxNotificationCount", 0)),
        max_popup_count=_as_count(raw.get("maxPopupCount", 0)),
    )


def parse_channel_switches(raw: dict[str, Any]) -> ChannelSwitches:
    return ChannelSwitches(
        notification_enabled=_as_bool(raw.get("notificationEnabled"), False),
        popup_enabled=_as_bool(raw.get("popupEnabled"), False),
        sound_enabled=_as_bool(raw.get("soundEnabled"), False),
        speech_enabled=_as_bool(raw.get("voicevoxEnabled"), False),
    )


def parse_speech_config(raw: dict[str, Any]) -> SpeechConfig:
    defaults = SpeechConfig()
    port = raw.get("port", defaults.port)
    try:
        port = int(port)
    except (TypeError, ValueError):
        port = defaults.port
    return SpeechConfig(
        hostname=str(raw.get("hostname") or defaults.hostname),
        port=port or defaults.port,
        speaker_id=_as_optional_int(raw.get("speakerId")),
        mhz_enabled=_as_bool(raw.get("mhzEnabled"), False),
        portable_enabled=_as_bool(raw.get("portableEnabled"), False),
        number_english_enabled=_as_bool(raw.get("numberEnglishEnabled"), False),
        text_template=str(raw.get("textTemplate") or DEFAULT_TEXT_TEMPLATE),
        volume=_as_float(raw.get("volume"), defaults.volume),
        speed=_as_float(raw.get("speed"), defaults.speed),
        pitch=_as_float(raw.get("pitch"), defaults.pitch),
        intonation=_as_float(raw.get("intonation"), defaults.intonation),
        breathing=_as_float(raw.get("breathing"), defaults.breathing),
        max_spots_per_read=_as_count(raw.get("maxSpotsPerRead", 0)),
        timeout_seconds=_as_float(raw.get("timeoutSeconds"), defaults.timeout_seconds),
    )


def parse_polling_config(raw: dict[str, Any]) -> PollingConfig:
    defaults = PollingConfig()
    return PollingConfig(
        url=str(raw.get("url") or defaults.url),
        interval_seconds=max(_as_float(raw.get("intervalSeconds"), defaults.interval_seconds), 1.0),
        initial_delay_seconds=max(
            _as_float(raw.get("initialDelaySeconds"), defaults.initial_delay_seconds), 0.0
        ),
        timeout_seconds=_as_float(raw.get("timeoutSeconds"), defaults.timeout_seconds),
    )


def parse_app_config(raw: Any) -> AppConfig:
    """Build the full AppConfig from a config.json document."""

    return AppConfig(
        filters=parse_filter_config(_section(raw, "filters")),
        channels=parse_channel_switches(_section(raw, "notifications")),
        speech=parse_speech_config(_section(raw, "speech")),
        polling=parse_polling_config(_section(raw, "polling")),
    )


def default_document() -> dict[str, Any]:
    """Return the document written for a fresh install."""

    speech = SpeechConfig()
    polling = PollingConfig()
    return {
        "filters": {
            **{name: {"conditions": [], "operator": OPERATOR_OR} for name in TRACKED_FIELDS},
            "ignoreOtherSpotters": False,
            "notificationSoundPath": None,
            "maxNotificationCount": 0,
            "maxPopupCount": 0,
        },
        "notifications": {
            "notificationEnabled": False,
            "popupEnabled": False,
            "soundEnabled": False,
            "voicevoxEnabled": False,
        },
        "speech": {
            "hostname": speech.hostname,
            "port": speech.port,
            "speakerId": None,
            "mhzEnabled": False,
            "portableEnabled": False,
            "numberEnglishEnabled": False,
            "textTemplate": DEFAULT_TEXT_TEMPLATE,
            "volume": speech.volume,
            "speed": speech.speed,
            "pitch": speech.pitch,
            "intonation": speech.intonation,
            "breathing": speech.breathing,
            "maxSpotsPerRead": 0,
        },
        "polling": {
            "url": polling.url,
            "intervalSeconds": polling.interval_seconds,
            "initialDelaySeconds": polling.initial_delay_seconds,
        },
        "logging": {"enabled": True, "level": "INFO", "console": True},
    }
