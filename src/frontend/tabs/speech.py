"""Speech tab implementation."""

from __future__ import annotations

from typing import Any

from textual import on
from textual.containers import Container, Horizontal, ScrollableContainer, Vertical
from textual.widgets import Button, Input, Select, Static, Switch

from adapters.audio_player import AudioPlayer
from adapters.config_parsing import parse_speech_config
from adapters.pota_mapper import sample_spot
from adapters.voicevox_client import VoicevoxClient
from adapters.voicevox_speaker import VoicevoxSpeaker
from client import build_http_client
from core.config import DEFAULT_TEXT_TEMPLATE
from core.errors import PotaWatchError
from core.speech_text import render_speech_text
from ..constants import VOICE_PARAMETERS
from ..validators import parse_count, parse_port, parse_scale


class SpeechTab(Container):
    """VOICEVOX connection, voice parameters and spoken text options."""

    TRANSFORM_SWITCHES = [
        ("mhzEnabled", "read frequency in MHz"),
        ("portableEnabled", "read '/' as portable"),
        ("numberEnglishEnabled", "read digits in English"),
    ]

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False
        self._speaker_options: list[tuple[str, int]] = []

    def compose(self):
        with Horizontal(id="speech-body"):
            with ScrollableContainer(id="speech-left"):
                yield Static("VOICEVOX", id="speech-title")
                yield Static("hostname", classes="form-label")
                yield Input(placeholder="localhost", id="speech-hostname")
                yield Static("port", classes="form-label")
                yield Input(placeholder="50021", id="speech-port")
                yield Static("speaker", classes="form-label")
                yield Select([], id="speech-speaker", prompt="Load speakers first")
                with Horizontal(id="speech-speaker-actions"):
                    yield Button("Load speakers", id="speech-load-speakers")
                yield Static("", id="speech-connection-error", classes="settings-error")
                for key, label, _, _ in VOICE_PARAMETERS:
                    yield Static(label, classes="form-label")
                    yield Input(id=f"voice-{key}")
                yield Static("", id="speech-voice-error", classes="settings-error")
            with Vertical(id="speech-right"):
                yield Static("Text", id="speech-text-title")
                for key, label in self.TRANSFORM_SWITCHES:
                    yield Static(label, classes="form-label")
                    yield Switch(id=f"transform-{key}")
                yield Static(
                    "template ([reference] [name] [locationDesc] [frequency] [mode] [activator] [comments])",
                    classes="form-label",
                )
                yield Input(placeholder=DEFAULT_TEXT_TEMPLATE, id="speech-template")
                yield Static("maxSpotsPerRead (0 = all)", classes="form-label")
                yield Input(placeholder="0", id="speech-max-spots")
                yield Static("", id="speech-text-error", classes="settings-error")
                yield Static("Preview", classes="form-label")
                yield Static("", id="speech-preview")
                with Horizontal(id="speech-test-actions"):
                    yield Button("Test speak", id="speech-test", variant="primary")
                yield Static("", id="speech-status")

    def on_mount(self) -> None:
        self.reload_from_config()

    def reload_from_config(self) -> None:
        self._loading_form = True
        speech = self._get_section()
        self.query_one("#speech-hostname", Input).value = str(speech.get("hostname") or "localhost")
        self.query_one("#speech-port", Input).value = str(speech.get("port") or 50021)
        for key, _ in self.TRANSFORM_SWITCHES:
            self.query_one(f"#transform-{key}", Switch).value = bool(speech.get(key, False))
        self.query_one("#speech-template", Input).value = str(
            speech.get("textTemplate") or DEFAULT_TEXT_TEMPLATE
        )
        self.query_one("#speech-max-spots", Input).value = str(speech.get("maxSpotsPerRead", 0))
        defaults = parse_speech_config({})
        for key, _, _, _ in VOICE_PARAMETERS:
            value = speech.get(key, getattr(defaults, key))
            self.query_one(f"#voice-{key}", Input).value = str(value)
        self._apply_speaker_options(speech.get("speakerId"))
        for error_id in ("speech-connection-error", "speech-voice-error", "speech-text-error"):
            self._set_error(error_id, "")
        self._loading_form = False
        self._refresh_preview()

    def _get_section(self) -> dict[str, Any]:
        return self.app.config_state.section("speech")

    def _update(self, key: str, value: Any) -> None:
        speech = self._get_section()
        speech[key] = value
        self.app.update_config_section("speech", speech)
        self._refresh_preview()

    def _set_error(self, error_id: str, message: str) -> None:
        self.query_one(f"#{error_id}", Static).update(message)

    def _refresh_preview(self) -> None:
        config = parse_speech_config(self._get_section())
        self.query_one("#speech-preview", Static).update(render_speech_text(sample_spot(), config))

    def _apply_speaker_options(self, speaker_id: Any) -> None:
        select = self.query_one("#speech-speaker", Select)
        options = list(self._speaker_options)
        known = {value for _, value in options}
        if isinstance(speaker_id, int) and speaker_id not in known:
            options.append((f"speaker {speaker_id}", speaker_id))
        select.set_options(options)
        if isinstance(speaker_id, int):
            select.value = speaker_id

    @on(Input.Changed, "#speech-hostname")
    def _on_hostname_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        self._update("hostname", event.value.strip() or "localhost")

    @on(Input.Changed, "#speech-port")
    def _on_port_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        info = parse_port(event.value)
        if info.error:
            self._set_error("speech-connection-error", info.error)
            return
        self._set_error("speech-connection-error", "")
        self._update("port", info.value)

    @on(Select.Changed, "#speech-speaker")
    def _on_speaker_changed(self, event: Select.Changed) -> None:
        if self._loading_form or event.value is Select.BLANK:
            return
        self._update("speakerId", int(event.value))

    @on(Input.Changed, "#speech-template")
    def _on_template_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        self._update("textTemplate", event.value)

    @on(Input.Changed, "#speech-max-spots")
    def _on_max_spots_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        info = parse_count(event.value)
        if info.error:
            self._set_error("speech-text-error", info.error)
            return
        self._set_error("speech-text-error", "")
        self._update("maxSpotsPerRead", info.value)

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if self._loading_form:
            return
        switch_id = event.switch.id or ""
        if switch_id.startswith("transform-"):
            self._update(switch_id.removeprefix("transform-"), bool(event.value))

    def on_input_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        input_id = event.input.id or ""
        if not input_id.startswith("voice-"):
            return
        key = input_id.removeprefix("voice-")
        for name, label, low, high in VOICE_PARAMETERS:
            if name != key:
                continue
            info = parse_scale(event.value, low, high)
            if info.error:
                self._set_error("speech-voice-error", f"{label}: {info.error}")
                return
            self._set_error("speech-voice-error", "")
            self._update(key, info.value)
            return

    @on(Button.Pressed, "#speech-load-speakers")
    def _on_load_speakers(self) -> None:
        self._set_error("speech-connection-error", "Loading speakers ...")
        self.run_worker(self._load_speakers(), exclusive=True, group="speech-speakers")

    async def _load_speakers(self) -> None:
        config = parse_speech_config(self._get_section())
        try:
            async with build_http_client(config.timeout_seconds) as http:
                speakers = await VoicevoxClient(http).list_speakers(config)
        except PotaWatchError as exc:
            self._set_error("speech-connection-error", f"Could not load speakers: {exc}")
            return
        if not speakers:
            self._set_error("speech-connection-error", "VOICEVOX returned no speakers")
            return
        self._speaker_options = [(speaker.name, speaker.id) for speaker in speakers]
        self._loading_form = True
        self._apply_speaker_options(config.speaker_id)
        self._loading_form = False
        self._set_error("speech-connection-error", f"{len(speakers)} voices available")

    @on(Button.Pressed, "#speech-test")
    def _on_test_speak(self) -> None:
        config = parse_speech_config(self._get_section())
        if config.speaker_id is None:
            self._set_error("speech-status", "Select a speaker first.")
            return
        text = render_speech_text(sample_spot(), config)
        self._set_error("speech-status", f"Speaking: {text}")
        self.run_worker(self._speak(text), exclusive=True, group="speech-test")

    async def _speak(self, text: str) -> None:
        config = parse_speech_config(self._get_section())
        try:
            async with build_http_client(config.timeout_seconds) as http:
                speaker = VoicevoxSpeaker(VoicevoxClient(http), AudioPlayer())
                await speaker.synthesize_and_play(text, config)
        except PotaWatchError as exc:
            self._set_error("speech-status", f"Speech test failed: {exc}")
            return
        self._set_error("speech-status", "Speech test finished.")
