from __future__ import annotations

import asyncio
from typing import Optional

import httpx

from adapters.pota_mapper import sample_spot
from adapters.voicevox_client import VoicevoxClient
from adapters.voicevox_speaker import VoicevoxSpeaker
from core.config import (
    AppConfig,
    ChannelSwitches,
    FieldFilter,
    FilterCondition,
    FilterConfig,
    SpeechConfig,
)
from core.dispatcher import SpotDispatcher, head
from core.errors import AssetMissing, ChannelUnavailable, RemoteServiceFailure
from core.models import Spot
from core.novelty import NoveltyTracker


class FakeAlerts:
    def __init__(self, fail_for: Optional[set[int]] = None) -> None:
        self.sent: list[tuple[int, bool]] = []
        self.fail_for = fail_for or set()

    async def emit_alert(self, spot: Spot, silent: bool) -> None:
        if spot.spot_id in self.fail_for:
            raise ChannelUnavailable("notify-send not found")
        self.sent.append((spot.spot_id, silent))


class FakePopups:
    def __init__(self) -> None:
        self.shown: list[int] = []

    async def emit_popup(self, spot: Spot) -> None:
        self.shown.append(spot.spot_id)


class FakeSound:
    def __init__(self, missing: bool = False) -> None:
        self.played: list[str] = []
        self.missing = missing

    async def play_sound(self, path: str) -> None:
        if self.missing:
            raise AssetMissing(path)
        self.played.append(path)


class FakePlayer:
    def __init__(self) -> None:
        self.played: list[bytes] = []

    async def play_bytes(self, data: bytes, suffix: str = ".wav") -> None:
        self.played.append(data)


class FakeSpeaker:
    def __init__(self, fail_on: Optional[set[str]] = None) -> None:
        self.spoken: list[str] = []
        self.in_flight = False
        self.overlapped = False
        self.fail_on = fail_on or set()

    async def synthesize_and_play(self, text: str, config: SpeechConfig) -> None:
        if self.in_flight:
            self.overlapped = True
        self.in_flight = True
        try:
            await asyncio.sleep(0.01)
            if text in self.fail_on:
                raise RemoteServiceFailure("VOICEVOX unreachable")
            self.spoken.append(text)
        finally:
            self.in_flight = False


def _spots(count: int) -> list[Spot]:
    return [sample_spot(spot_id=i, reference=f"JA-{i:04d}") for i in range(1, count + 1)]


def _config(
    *,
    filters: Optional[FilterConfig] = None,
    channels: Optional[ChannelSwitches] = None,
    speech: Optional[SpeechConfig] = None,
) -> AppConfig:
    return AppConfig(
        filters=filters or FilterConfig(),
        channels=channels or ChannelSwitches(True, True, True, True),
        speech=speech or SpeechConfig(speaker_id=3, text_template="[reference]"),
    )


def _dispatcher(config: AppConfig, **overrides):
    parts = {
        "alerts": FakeAlerts(),
        "popups": FakePopups(),
        "sound": FakeSound(),
        "speaker": FakeSpeaker(),
    }
    parts.update(overrides)
    dispatcher = SpotDispatcher(config=config, tracker=NoveltyTracker(), **parts)
    return dispatcher, parts


def test_head_zero_means_all() -> None:
    assert head([1, 2, 3], 0) == (1, 2, 3)
    assert head([1, 2, 3], 2) == (1, 2)
    assert head([1, 2, 3], 10) == (1, 2, 3)


def test_same_batch_twice_is_delivered_once() -> None:
    dispatcher, parts = _dispatcher(_config())
    batch = _spots(3)

    first = asyncio.run(dispatcher.process(batch))
    second = asyncio.run(dispatcher.process(batch))

    assert len(first.alerts) == 3
    assert second.is_empty
    assert second.new_spots == ()
    assert len(parts["alerts"].sent) == 3


def test_filtered_out_spots_are_still_marked_seen() -> None:
    only_cw = FilterConfig(mode=FieldFilter(conditions=(FilterCondition("CW", "exact"),)))
    dispatcher, parts = _dispatcher(_config(filters=only_cw))
    spot = sample_spot(spot_id=7, mode="SSB")

    outcome = asyncio.run(dispatcher.process([spot]))
    assert outcome.new_spots == (spot,)
    assert outcome.filtered_spots == ()

    dispatcher.update_config(_config())
    again = asyncio.run(dispatcher.process([spot]))
    assert again.new_spots == ()
    assert parts["alerts"].sent == []


def test_caps_are_independent_head_slices() -> None:
    filters = FilterConfig(max_notification_count=1, max_popup_count=3)
    speech = SpeechConfig(speaker_id=3, text_template="[reference]", max_spots_per_read=2)
    dispatcher, parts = _dispatcher(_config(filters=filters, speech=speech))

    outcome = asyncio.run(dispatcher.process(_spots(5)))

    assert [s.spot_id for s in outcome.alerts] == [1]
    assert [s.spot_id for s in outcome.popups] == [1, 2, 3]
    assert [s.spot_id for s in outcome.spoken] == [1, 2]
    assert parts["popups"].shown == [1, 2, 3]


def test_sound_plays_once_per_batch_and_alerts_are_silent() -> None:
    filters = FilterConfig(notification_sound_path="/tmp/chime.wav")
    dispatcher, parts = _dispatcher(_config(filters=filters))

    outcome = asyncio.run(dispatcher.process(_spots(4)))

    assert outcome.sound_played
    assert parts["sound"].played == ["/tmp/chime.wav"]
    assert all(silent for _, silent in parts["alerts"].sent)


def test_alerts_use_system_sound_without_custom_sound() -> None:
    dispatcher, parts = _dispatcher(_config())
    outcome = asyncio.run(dispatcher.process(_spots(1)))
    assert not outcome.sound_played
    assert parts["alerts"].sent == [(1, False)]


def test_alerts_are_silent_when_sound_disabled() -> None:
    channels = ChannelSwitches(notification_enabled=True, sound_enabled=False)
    filters = FilterConfig(notification_sound_path="/tmp/chime.wav")
    dispatcher, parts = _dispatcher(_config(filters=filters, channels=channels))

    outcome = asyncio.run(dispatcher.process(_spots(2)))

    assert not outcome.sound_played
    assert parts["sound"].played == []
    assert parts["alerts"].sent == [(1, True), (2, True)]


def test_missing_sound_file_does_not_stop_other_channels() -> None:
    filters = FilterConfig(notification_sound_path="/nope.wav")
    dispatcher, parts = _dispatcher(_config(filters=filters), sound=FakeSound(missing=True))

    outcome = asyncio.run(dispatcher.process(_spots(2)))

    assert not outcome.sound_played
    assert len(outcome.alerts) == 2
    assert len(outcome.spoken) == 2


def test_speech_is_sequential_and_in_order() -> None:
    speaker = FakeSpeaker()
    dispatcher, _ = _dispatcher(_config(), speaker=speaker)

    asyncio.run(dispatcher.process(_spots(4)))

    assert speaker.spoken == ["JA-0001", "JA-0002", "JA-0003", "JA-0004"]
    assert not speaker.overlapped


def test_speech_failure_does_not_stop_next_utterance() -> None:
    speaker = FakeSpeaker(fail_on={"JA-0002"})
    dispatcher, _ = _dispatcher(_config(), speaker=speaker)

    outcome = asyncio.run(dispatcher.process(_spots(3)))

    assert speaker.spoken == ["JA-0001", "JA-0003"]
    assert [s.spot_id for s in outcome.speech_failures] == [2]
    assert [s.spot_id for s in outcome.spoken] == [1, 3]


def test_speech_needs_a_speaker() -> None:
    speaker = FakeSpeaker()
    dispatcher, _ = _dispatcher(_config(speech=SpeechConfig(speaker_id=None)), speaker=speaker)

    outcome = asyncio.run(dispatcher.process(_spots(2)))

    assert outcome.spoken == ()
    assert speaker.spoken == []


def test_disabled_channels_emit_nothing() -> None:
    dispatcher, parts = _dispatcher(_config(channels=ChannelSwitches()))

    outcome = asyncio.run(dispatcher.process(_spots(3)))

    assert len(outcome.filtered_spots) == 3
    assert outcome.alerts == ()
    assert outcome.popups == ()
    assert outcome.spoken == ()
    assert not outcome.sound_played
    assert parts["alerts"].sent == []
    assert parts["speaker"].spoken == []


def test_failing_alert_is_skipped() -> None:
    alerts = FakeAlerts(fail_for={2})
    dispatcher, _ = _dispatcher(_config(), alerts=alerts)

    outcome = asyncio.run(dispatcher.process(_spots(3)))

    assert [s.spot_id for s in outcome.alerts] == [1, 3]
    assert len(outcome.popups) == 3


def test_timed_out_synthesis_is_a_speech_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/audio_query":
            if request.url.params["text"] == "JA-0002":
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json={"text": request.url.params["text"]})
        return httpx.Response(200, content=f"WAV {request.content.decode()}".encode())

    player = FakePlayer()

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            speaker = VoicevoxSpeaker(VoicevoxClient(http), player)
            dispatcher, _ = _dispatcher(_config(), speaker=speaker)
            return await dispatcher.process(_spots(3))

    outcome = asyncio.run(run())

    assert [s.spot_id for s in outcome.speech_failures] == [2]
    assert [s.spot_id for s in outcome.spoken] == [1, 3]
    assert len(player.played) == 2
    assert b"JA-0003" in player.played[1]
