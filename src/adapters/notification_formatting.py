"""Shared notification formatting helpers.

Keeping formatting here prevents drift between the alert, popup, and log
outputs so a spot reads the same regardless of channel.
"""

from __future__ import annotations

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.models import Spot

ALERT_TITLE = "POTA Notification"
POTA_GREEN = "#3a9d23"


def _or_default(value: str, default: str = "N/A") -> str:
    return value or default


def park_label(spot: Spot) -> str:
    return spot.display_name or "Unknown"


def format_alert_body(spot: Spot) -> str:
    """Return the two-line desktop alert body."""

    return (
        f"{spot.reference}: {spot.activator} - {park_label(spot)}\n"
        f"{spot.frequency} {spot.mode}"
    )


def format_log_line(spot: Spot) -> str:
    """Return a compact single-line description for logs."""

    parts = [
        _or_default(spot.reference, "?"),
        _or_default(spot.activator, "?"),
        f"{_or_default(spot.frequency, '?')} kHz",
        _or_default(spot.mode, "?"),
    ]
    return " ".join(parts)


def build_popup_panel(spot: Spot) -> Panel:
    """Create the popup panel shown on the console for one spot."""

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold", justify="right")
    grid.add_column()
    grid.add_row("Reference", _or_default(spot.reference))
    grid.add_row("Activator", _or_default(spot.activator))
    grid.add_row("Park", park_label(spot))
    grid.add_row("Frequency", _or_default(spot.frequency))
    grid.add_row("Mode", _or_default(spot.mode))
    if spot.comments:
        grid.add_row("Comments", spot.comments)

    title = Text.assemble(("POTA", f"bold {POTA_GREEN}"), (" Notification", "bold"))
    return Panel(grid, title=title, box=box.ROUNDED, expand=False)
