"""VOICEVOX Engine HTTP adapter.

Synthesis is a two-step call: /audio_query builds the query for a text and
speaker, the voice parameters are patched into it, and /synthesis renders
WAV bytes from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List

import httpx

from core.config import SpeechConfig
from core.errors import ChannelUnavailable, RemoteServiceFailure

LOGGER = logging.getLogger(__name__)

SPEAKERS_TIMEOUT = 5.0
AUDIO_QUERY_TIMEOUT = 10.0

# audio_query keys patched from SpeechConfig attributes.
VOICE_PARAMETERS = {
    "volumeScale": "volume",
    "speedScale": "speed",
    "pitchScale": "pitch",
    "intonationScale": "intonation",
    "breathingScale": "breathing",
}


@dataclass(frozen=True)
class SpeakerStyle:
    """One selectable voice: a speaker's style id and display name."""

    id: int
    name: str


def base_url(config: SpeechConfig) -> str:
    return f"http://{config.hostname or 'localhost'}:{config.port or 50021}"


def flatten_speakers(payload: Any) -> List[SpeakerStyle]:
    """Expand /speakers into one entry per style; the style id is the voice id."""

    if not isinstance(payload, list):
        return []
    styles: List[SpeakerStyle] = []
    for speaker in payload:
        if not isinstance(speaker, dict):
            continue
        for style in speaker.get("styles") or []:
            if not isinstance(style, dict) or "id" not in style:
                continue
            styles.append(
                SpeakerStyle(
                    id=int(style["id"]),
                    name=f"{speaker.get('name', '?')} - {style.get('name', '?')}",
                )
            )
    return styles


class VoicevoxClient:
    """Async client for the subset of the VOICEVOX API we use."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise RemoteServiceFailure(f"VOICEVOX request timed out: {url}") from exc
        except httpx.HTTPStatusError as exc:
            body = exc.response.text[:200]
            raise RemoteServiceFailure(
                f"VOICEVOX error {exc.response.status_code}: {body}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteServiceFailure(f"VOICEVOX unreachable: {exc}") from exc
        return response

    async def list_speakers(self, config: SpeechConfig) -> List[SpeakerStyle]:
        response = await self._request(
            "GET",
            f"{base_url(config)}/speakers",
            timeout=SPEAKERS_TIMEOUT,
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteServiceFailure("VOICEVOX returned invalid speaker JSON") from exc
        return flatten_speakers(payload)

    async def synthesize(self, text: str, config: SpeechConfig) -> bytes:
        """Return WAV bytes for the text using the configured voice."""

        if config.speaker_id is None:
            raise ChannelUnavailable("no VOICEVOX speaker selected")

        root = base_url(config)
        params = {"speaker": config.speaker_id}
        query_response = await self._request(
            "POST",
            f"{root}/audio_query",
            params={**params, "text": text},
            timeout=AUDIO_QUERY_TIMEOUT,
        )
        try:
            audio_query = query_response.json()
        except ValueError as exc:
            raise RemoteServiceFailure("VOICEVOX returned an invalid audio query") from exc
        if not isinstance(audio_query, dict):
            raise RemoteServiceFailure("VOICEVOX returned an invalid audio query")

        for key, attribute in VOICE_PARAMETERS.items():
            audio_query[key] = getattr(config, attribute)

        synthesis = await self._request(
            "POST",
            f"{root}/synthesis",
            params=params,
            json=audio_query,
            timeout=config.timeout_seconds,
        )
        LOGGER.debug("Synthesized %s bytes for %r", len(synthesis.content), text)
        return synthesis.content
