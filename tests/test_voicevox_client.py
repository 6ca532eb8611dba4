from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from adapters.voicevox_client import VoicevoxClient, flatten_speakers
from core.config import SpeechConfig
from core.errors import ChannelUnavailable, RemoteServiceFailure

SPEAKERS = [
    {"name": "ずんだもん", "styles": [{"id": 3, "name": "ノーマル"}, {"id": 1, "name": "あまあま"}]},
    {"name": "四国めたん", "styles": [{"id": 2, "name": "ノーマル"}]},
]


def _run(handler, call):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            return await call(VoicevoxClient(http))

    return asyncio.run(run())


def test_flatten_speakers() -> None:
    styles = flatten_speakers(SPEAKERS)
    assert [(s.id, s.name) for s in styles] == [
        (3, "ずんだもん - ノーマル"),
        (1, "ずんだもん - あまあま"),
        (2, "四国めたん - ノーマル"),
    ]
    assert flatten_speakers({"detail": "x"}) == []


def test_list_speakers_uses_configured_host() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=SPEAKERS)

    config = SpeechConfig(hostname="voicevox.local", port=50121)
    styles = _run(handler, lambda client: client.list_speakers(config))
    assert len(styles) == 3
    assert seen == ["http://voicevox.local:50121/speakers"]


def test_synthesize_patches_voice_parameters() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path == "/audio_query":
            return httpx.Response(200, json={"accent_phrases": [], "volumeScale": 1.0})
        return httpx.Response(200, content=b"RIFF....WAVE")

    config = SpeechConfig(speaker_id=3, volume=1.5, speed=1.2, pitch=0.1, intonation=0.8, breathing=0.5)
    audio = _run(handler, lambda client: client.synthesize("こんにちは", config))

    assert audio == b"RIFF....WAVE"
    query, synthesis = requests
    assert query.url.params["speaker"] == "3"
    assert query.url.params["text"] == "こんにちは"
    assert synthesis.url.path == "/synthesis"
    assert synthesis.url.params["speaker"] == "3"
    body = json.loads(synthesis.content)
    assert body["volumeScale"] == 1.5
    assert body["speedScale"] == 1.2
    assert body["pitchScale"] == 0.1
    assert body["intonationScale"] == 0.8
    assert body["breathingScale"] == 0.5
    assert body["accent_phrases"] == []


def test_synthesize_without_speaker_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ChannelUnavailable):
        _run(handler, lambda client: client.synthesize("hello", SpeechConfig()))


def test_http_errors_become_remote_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, text="bad speaker")

    with pytest.raises(RemoteServiceFailure) as excinfo:
        _run(handler, lambda client: client.synthesize("hello", SpeechConfig(speaker_id=99)))
    assert "422" in str(excinfo.value)


def test_connection_errors_become_remote_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RemoteServiceFailure):
        _run(handler, lambda client: client.list_speakers(SpeechConfig()))


def test_synthesis_timeout_becomes_remote_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/synthesis":
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200, json={"accent_phrases": []})

    with pytest.raises(RemoteServiceFailure, match="timed out"):
        _run(handler, lambda client: client.synthesize("hello", SpeechConfig(speaker_id=3)))
