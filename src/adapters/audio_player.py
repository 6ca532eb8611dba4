"""Local audio playback adapter.

Playback is delegated to the first command-line player found on PATH. The
caller can either wait for playback to finish (speech) or start it and move
on (notification sound).
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Optional, Sequence

from core.errors import AssetMissing, ChannelUnavailable

LOGGER = logging.getLogger(__name__)

# Tried in order; the file path is appended as the last argument.
DEFAULT_PLAYERS: tuple[tuple[str, ...], ...] = (
    ("ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"),
    ("paplay",),
    ("afplay",),
    ("aplay", "-q"),
)


class AudioPlayer:
    """Play audio files through an external player process."""

    def __init__(
        self,
        players: Sequence[Sequence[str]] = DEFAULT_PLAYERS,
        which: Callable[[str], Optional[str]] = shutil.which,
    ) -> None:
        self._players = [tuple(cmd) for cmd in players]
        self._which = which
        self._background: set[asyncio.Task] = set()

    def resolve_command(self) -> tuple[str, ...]:
        """Return the first available player command, or raise ChannelUnavailable."""

        for command in self._players:
            executable = self._which(command[0])
            if executable:
                return (executable, *command[1:])
        names = ", ".join(cmd[0] for cmd in self._players)
        raise ChannelUnavailable(f"no audio player found (tried {names})")

    async def _spawn(self, path: Path) -> asyncio.subprocess.Process:
        if not path.is_file():
            raise AssetMissing(f"audio file not found: {path}")
        command = self.resolve_command()
        try:
            return await asyncio.create_subprocess_exec(
                *command,
                str(path),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            raise ChannelUnavailable(f"could not start {command[0]}: {exc}") from exc

    @staticmethod
    def _check_exit(process: asyncio.subprocess.Process, path: Path) -> None:
        if process.returncode:
            raise ChannelUnavailable(f"player exited with {process.returncode} for {path.name}")

    async def play_file(self, path: str | Path, wait: bool = True) -> None:
        """Play a file; when wait is False, return once the player has started."""

        path = Path(path)
        process = await self._spawn(path)
        if wait:
            await process.wait()
            self._check_exit(process, path)
            return
        task = asyncio.create_task(self._reap(process, path))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _reap(self, process: asyncio.subprocess.Process, path: Path) -> None:
        await process.wait()
        if process.returncode:
            LOGGER.warning("Player exited with %s for %s", process.returncode, path)

    async def play_bytes(self, data: bytes, suffix: str = ".wav") -> None:
        """Write audio to a temporary file and play it to the end."""

        handle, name = tempfile.mkstemp(prefix="potawatch-", suffix=suffix)
        try:
            with os.fdopen(handle, "wb") as output:
                output.write(data)
            await self.play_file(name, wait=True)
        finally:
            try:
                os.unlink(name)
            except OSError:
                LOGGER.debug("Could not remove temporary audio %s", name)

    async def play_sound(self, path: str) -> None:
        """SoundPort entry point: start the notification sound without waiting."""

        await self.play_file(path, wait=False)
