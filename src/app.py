"""Application entry point for the potawatch spot watcher."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

from art import tprint

import settings
from adapters.audio_player import AudioPlayer
from adapters.config_parsing import parse_app_config
from adapters.desktop_notifier import ConsolePopupSink, DesktopAlertSink
from adapters.json_config_store import JsonConfigStore
from adapters.pota_client import PotaSpotSource
from adapters.pota_mapper import sample_spot
from adapters.voicevox_client import VoicevoxClient
from adapters.voicevox_speaker import VoicevoxSpeaker
from client import build_http_client
from core.dispatcher import SpotDispatcher
from core.errors import PotaWatchError
from core.novelty import NoveltyTracker
from core.speech_text import render_speech_text
from pipeline import PollLoop

NAME = "POTAWATCH"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging(config: dict[str, Any]) -> None:
    if not config.get("enabled", True):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file") or {}
    if file_cfg.get("enabled", False):
        path = Path(file_cfg.get("path") or settings.DEFAULT_LOG_PATH)
        if not path.is_absolute():
            path = settings.PROJECT_ROOT / path
        path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 3)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _load_document() -> dict[str, Any]:
    store = JsonConfigStore(settings.CONFIG_PATH)
    document = store.load_or_default()
    _configure_logging(document.get("logging") or {})
    return document


async def _watch(document: dict[str, Any]) -> None:
    logger = logging.getLogger(__name__)
    config = parse_app_config(document)
    channels = config.channels
    logger.info(
        "Channels - alert: %s, popup: %s, sound: %s, speech: %s",
        channels.notification_enabled,
        channels.popup_enabled,
        channels.sound_enabled,
        channels.speech_enabled,
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except (NotImplementedError, RuntimeError):
            # add_signal_handler is unavailable on Windows event loops.
            pass

    player = AudioPlayer()
    async with build_http_client(config.polling.timeout_seconds) as http:
        dispatcher = SpotDispatcher(
            config=config,
            tracker=NoveltyTracker(settings.NOVELTY_CAPACITY),
            alerts=DesktopAlertSink(),
            popups=ConsolePopupSink(),
            sound=player,
            speaker=VoicevoxSpeaker(VoicevoxClient(http), player),
        )
        poll_loop = PollLoop(
            source=PotaSpotSource(http, config.polling.url),
            dispatcher=dispatcher,
            interval=config.polling.interval_seconds,
            initial_delay=config.polling.initial_delay_seconds,
        )
        logger.info("Polling %s every %ss", config.polling.url, config.polling.interval_seconds)
        await poll_loop.run_forever(stop)
    logger.info("Stopped after %s cycles", poll_loop.cycles_run)


def _run() -> None:
    _print_banner()
    document = _load_document()
    logging.getLogger(__name__).info("Starting potawatch (config: %s)", settings.CONFIG_PATH)
    asyncio.run(_watch(document))


def _setup() -> None:
    _print_banner()
    from frontend.app import ConfigPanelApp

    ConfigPanelApp().run()


async def _list_speakers(document: dict[str, Any]) -> int:
    speech = parse_app_config(document).speech
    async with build_http_client(speech.timeout_seconds) as http:
        try:
            speakers = await VoicevoxClient(http).list_speakers(speech)
        except PotaWatchError as exc:
            print(f"Could not list speakers: {exc}")
            return 1
    if not speakers:
        print("VOICEVOX returned no speakers.")
        return 1
    for speaker in speakers:
        marker = "*" if speaker.id == speech.speaker_id else " "
        print(f"{marker} {speaker.id:>4}  {speaker.name}")
    return 0


async def _speak_test(document: dict[str, Any], text: Optional[str]) -> int:
    speech = parse_app_config(document).speech
    if not text:
        text = render_speech_text(sample_spot(), speech)
    print(f"Speaking: {text}")
    async with build_http_client(speech.timeout_seconds) as http:
        speaker = VoicevoxSpeaker(VoicevoxClient(http), AudioPlayer())
        try:
            await speaker.synthesize_and_play(text, speech)
        except PotaWatchError as exc:
            print(f"Speech test failed: {exc}")
            return 1
    return 0


async def _sound_test(document: dict[str, Any], path: Optional[str]) -> int:
    target = path or parse_app_config(document).filters.notification_sound_path
    if not target:
        print("No notification sound is configured.")
        return 1
    try:
        await AudioPlayer().play_file(target, wait=True)
    except PotaWatchError as exc:
        print(f"Sound test failed: {exc}")
        return 1
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="potawatch")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the watcher")
    subparsers.add_parser("config", help="Launch the config TUI")
    subparsers.add_parser("speakers", help="List VOICEVOX speaker styles")
    speak_parser = subparsers.add_parser("speak-test", help="Speak a sample spot")
    speak_parser.add_argument("--text", help="Speak this text instead of a sample spot")
    sound_parser = subparsers.add_parser("sound-test", help="Play the notification sound")
    sound_parser.add_argument("--path", help="Sound file to play instead of the configured one")

    args = parser.parse_args(argv)
    if args.command == "config":
        _setup()
        return
    if args.command == "speakers":
        raise SystemExit(asyncio.run(_list_speakers(_load_document())))
    if args.command == "speak-test":
        raise SystemExit(asyncio.run(_speak_test(_load_document(), args.text)))
    if args.command == "sound-test":
        raise SystemExit(asyncio.run(_sound_test(_load_document(), args.path)))
    _run()


if __name__ == "__main__":
    main()
