"""Shared constants for the Textual UI."""

from __future__ import annotations

import settings

POTA_GREEN = "#3a9d23"
PROJECT_ROOT = settings.PROJECT_ROOT
CONFIG_PATH = settings.CONFIG_PATH

FIELD_LABELS = [
    ("reference", "Reference"),
    ("comments", "Comments"),
    ("mode", "Mode"),
    ("frequency", "Frequency"),
]

# (config key, label, min, max) for VOICEVOX voice parameters.
VOICE_PARAMETERS = [
    ("volume", "volume", 0.0, 2.0),
    ("speed", "speed", 0.5, 2.0),
    ("pitch", "pitch", -0.15, 0.15),
    ("intonation", "intonation", 0.0, 2.0),
    ("breathing", "breathing", 0.0, 1.0),
]
