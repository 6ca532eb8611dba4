"""SpeechPort adapter: VOICEVOX synthesis followed by blocking playback."""

from __future__ import annotations

from adapters.audio_player import AudioPlayer
from adapters.voicevox_client import VoicevoxClient
from core.config import SpeechConfig


class VoicevoxSpeaker:
    """Speak text and return only once the audio has finished playing."""

    def __init__(self, client: VoicevoxClient, player: AudioPlayer) -> None:
        self._client = client
        self._player = player

    async def synthesize_and_play(self, text: str, config: SpeechConfig) -> None:
        audio = await self._client.synthesize(text, config)
        await self._player.play_bytes(audio, suffix=".wav")
