"""Speech text rendering for spots (core domain)."""

from __future__ import annotations

import re

from core.config import DEFAULT_TEXT_TEMPLATE, SpeechConfig
from core.models import Spot

MHZ_SUFFIX = "メガヘルツ"
KHZ_SUFFIX = "キロヘルツ"
PORTABLE_WORD = "ポータブル"

DIGIT_WORDS = {
    "0": "ゼロ",
    "1": "ワン",
    "2": "ツー",
    "3": "スリー",
    "4": "フォー",
    "5": "ファイブ",
    "6": "シックス",
    "7": "セブン",
    "8": "エイト",
    "9": "ナイン",
}

_DIGIT_RE = re.compile(r"[0-9]")


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def spell_digits(text: str) -> str:
    """Replace each ASCII digit with its spoken English word."""

    return _DIGIT_RE.sub(lambda match: DIGIT_WORDS[match.group(0)], text)


def speak_frequency(frequency: str, mhz_enabled: bool) -> str:
    """Return the frequency phrase in kHz as given, or converted to MHz."""

    if not frequency:
        return ""
    if mhz_enabled:
        try:
            return f"{float(frequency) / 1000:.3f}{MHZ_SUFFIX}"
        except ValueError:
            pass
    return f"{frequency}{KHZ_SUFFIX}"


def speak_activator(activator: str, portable_enabled: bool, number_english_enabled: bool) -> str:
    """Apply the portable substitution first, then digit spelling."""

    if portable_enabled:
        activator = activator.replace("/", PORTABLE_WORD)
    if number_english_enabled:
        activator = spell_digits(activator)
    return activator


def render_speech_text(spot: Spot, options: SpeechConfig) -> str:
    """Fill the configured template with values from one spot.

    Every known placeholder is replaced, with an empty string when the spot
    has no value. Unknown bracketed tokens are left alone.
    """

    template = options.text_template or DEFAULT_TEXT_TEMPLATE
    replacements = {
        "[reference]": spot.reference or "",
        "[frequency]": speak_frequency(spot.frequency or "", options.mhz_enabled),
        "[mode]": spot.mode or "",
        "[activator]": speak_activator(
            spot.activator or "",
            options.portable_enabled,
            options.number_english_enabled,
        ),
        "[comments]": spot.comments or "",
        "[name]": spot.name or spot.park_name or "",
        "[locationDesc]": spot.location_desc or "",
    }
    text = template
    for placeholder, value in replacements.items():
        text = text.replace(placeholder, value)
    return _collapse_whitespace(text)
