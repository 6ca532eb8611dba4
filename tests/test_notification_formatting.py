from __future__ import annotations

import asyncio

from rich.console import Console

from adapters.desktop_notifier import ConsolePopupSink, DesktopAlertSink
from adapters.notification_formatting import (
    ALERT_TITLE,
    format_alert_body,
    format_log_line,
    park_label,
)
from adapters.pota_mapper import sample_spot


def test_alert_body_has_reference_activator_and_band() -> None:
    body = format_alert_body(sample_spot())
    assert body == "JA-0001: JA1ABC/1 - Sample Park\n7144 SSB"


def test_park_label_prefers_park_name() -> None:
    assert park_label(sample_spot(park_name="Tokyo Park")) == "Tokyo Park"
    assert park_label(sample_spot(park_name="", name="Fallback Park")) == "Fallback Park"
    assert park_label(sample_spot(name="")) == "Unknown"


def test_log_line_marks_missing_values() -> None:
    line = format_log_line(sample_spot(mode="", frequency=""))
    assert line == "JA-0001 JA1ABC/1 ? kHz ?"


def _which(name: str) -> str:
    return f"/usr/bin/{name}"


def test_notify_send_command_suppresses_sound_when_silent() -> None:
    sink = DesktopAlertSink(which=_which, platform="linux")
    loud = sink.build_command(sample_spot(), silent=False)
    quiet = sink.build_command(sample_spot(), silent=True)
    assert loud[0] == "/usr/bin/notify-send"
    assert loud[-2] == ALERT_TITLE
    assert "boolean:suppress-sound:true" not in loud
    assert "boolean:suppress-sound:true" in quiet


def test_osascript_command_plays_default_sound_unless_silent() -> None:
    sink = DesktopAlertSink(which=_which, platform="darwin")
    loud = sink.build_command(sample_spot(), silent=False)
    quiet = sink.build_command(sample_spot(), silent=True)
    assert loud[0] == "/usr/bin/osascript"
    assert 'sound name "default"' in loud[-1]
    assert "sound name" not in quiet[-1]


def test_popup_renders_panel() -> None:
    console = Console(record=True, width=80)
    asyncio.run(ConsolePopupSink(console).emit_popup(sample_spot(comments="QRV 7144")))
    output = console.export_text()
    assert "JA-0001" in output
    assert "QRV 7144" in output
    assert "POTA" in output
