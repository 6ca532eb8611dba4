"""Desktop alert and console popup adapters."""

from __future__ import annotations

import asyncio
import logging
import shutil
import sys
from typing import Callable, Optional

from rich.console import Console

from adapters.notification_formatting import ALERT_TITLE, build_popup_panel, format_alert_body
from core.errors import ChannelUnavailable
from core.models import Spot

LOGGER = logging.getLogger(__name__)

NOTIFY_TIMEOUT = 5


def _applescript_quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DesktopAlertSink:
    """AlertPort using notify-send on Linux and osascript on macOS."""

    def __init__(
        self,
        which: Callable[[str], Optional[str]] = shutil.which,
        platform: str = sys.platform,
    ) -> None:
        self._which = which
        self._platform = platform

    def build_command(self, spot: Spot, silent: bool) -> list[str]:
        body = format_alert_body(spot)
        if self._platform == "darwin":
            executable = self._which("osascript")
            if not executable:
                raise ChannelUnavailable("osascript not found")
            script = f"display notification {_applescript_quote(body)} with title {_applescript_quote(ALERT_TITLE)}"
            if not silent:
                script += ' sound name "default"'
            return [executable, "-e", script]

        executable = self._which("notify-send")
        if not executable:
            raise ChannelUnavailable("notify-send not found")
        command = [executable, "--app-name", ALERT_TITLE]
        if silent:
            command += ["--hint", "boolean:suppress-sound:true"]
        return command + [ALERT_TITLE, body]

    async def emit_alert(self, spot: Spot, silent: bool) -> None:
        command = self.build_command(spot, silent)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            raise ChannelUnavailable(f"desktop alert failed: {exc}") from exc
        try:
            await asyncio.wait_for(process.wait(), timeout=NOTIFY_TIMEOUT)
        except asyncio.TimeoutError as exc:
            process.kill()
            await process.wait()
            raise ChannelUnavailable(f"{command[0]} did not finish in {NOTIFY_TIMEOUT}s") from exc
        if process.returncode:
            raise ChannelUnavailable(f"{command[0]} exited with {process.returncode}")
        LOGGER.debug("Alert shown for spot %s", spot.spot_id)


class ConsolePopupSink:
    """PopupPort that renders each spot as a rich panel on the console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    async def emit_popup(self, spot: Spot) -> None:
        self._console.print(build_popup_panel(spot))
