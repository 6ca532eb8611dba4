"""Notifications tab implementation."""

from __future__ import annotations

from typing import Any

from textual import on
from textual.containers import Container, Horizontal, ScrollableContainer
from textual.widgets import Button, Input, Static, Switch

from adapters.audio_player import AudioPlayer
from core.errors import PotaWatchError
from ..validators import parse_count


class NotificationsTab(Container):
    """Channel switches, delivery caps and the notification sound."""

    CHANNEL_SWITCHES = [
        ("notificationEnabled", "desktop alert"),
        ("popupEnabled", "popup"),
        ("soundEnabled", "sound"),
        ("voicevoxEnabled", "VOICEVOX speech"),
    ]

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False

    def compose(self):
        with ScrollableContainer(id="notifications-panel"):
            yield Static("Channels", id="notifications-title")
            for key, label in self.CHANNEL_SWITCHES:
                yield Static(label, classes="form-label")
                yield Switch(id=f"channel-{key}")
            yield Static("Limits (0 = all)", id="notifications-limits-title")
            yield Static("maxNotificationCount", classes="form-label")
            yield Input(placeholder="0", id="max-notification-count")
            yield Static("maxPopupCount", classes="form-label")
            yield Input(placeholder="0", id="max-popup-count")
            yield Static("", id="limits-error", classes="settings-error")
            yield Static("notificationSoundPath (blank = system sound)", classes="form-label")
            yield Input(placeholder="/path/to/sound.wav", id="sound-path")
            with Horizontal(id="sound-actions"):
                yield Button("Test sound", id="sound-test", variant="primary")
            yield Static("", id="sound-status")

    def on_mount(self) -> None:
        self.reload_from_config()

    def reload_from_config(self) -> None:
        self._loading_form = True
        channels = self._get_section("notifications")
        for key, _ in self.CHANNEL_SWITCHES:
            self.query_one(f"#channel-{key}", Switch).value = bool(channels.get(key, False))
        filters = self._get_section("filters")
        self.query_one("#max-notification-count", Input).value = str(filters.get("maxNotificationCount", 0))
        self.query_one("#max-popup-count", Input).value = str(filters.get("maxPopupCount", 0))
        self.query_one("#sound-path", Input).value = filters.get("notificationSoundPath") or ""
        self._set_error("limits-error", "")
        self._set_error("sound-status", "")
        self._loading_form = False

    def _get_section(self, key: str) -> dict[str, Any]:
        return self.app.config_state.section(key)

    def _set_error(self, error_id: str, message: str) -> None:
        self.query_one(f"#{error_id}", Static).update(message)

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if self._loading_form:
            return
        switch_id = event.switch.id or ""
        if not switch_id.startswith("channel-"):
            return
        channels = self._get_section("notifications")
        channels[switch_id.removeprefix("channel-")] = bool(event.value)
        self.app.update_config_section("notifications", channels)

    @on(Input.Changed, "#max-notification-count")
    def _on_max_notification_changed(self, event: Input.Changed) -> None:
        self._update_count("maxNotificationCount", event.value)

    @on(Input.Changed, "#max-popup-count")
    def _on_max_popup_changed(self, event: Input.Changed) -> None:
        self._update_count("maxPopupCount", event.value)

    def _update_count(self, key: str, raw_value: str) -> None:
        if self._loading_form:
            return
        info = parse_count(raw_value)
        if info.error:
            self._set_error("limits-error", f"{key}: {info.error}")
            return
        self._set_error("limits-error", "")
        filters = self._get_section("filters")
        filters[key] = info.value
        self.app.update_config_section("filters", filters)

    @on(Input.Changed, "#sound-path")
    def _on_sound_path_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        filters = self._get_section("filters")
        filters["notificationSoundPath"] = event.value.strip() or None
        self.app.update_config_section("filters", filters)

    @on(Button.Pressed, "#sound-test")
    def _on_sound_test(self) -> None:
        path = self.query_one("#sound-path", Input).value.strip()
        if not path:
            self._set_error("sound-status", "No sound file set; alerts use the system sound.")
            return
        self._set_error("sound-status", f"Playing {path} ...")
        self.run_worker(self._play(path), exclusive=True, group="sound-test")

    async def _play(self, path: str) -> None:
        try:
            await AudioPlayer().play_file(path, wait=True)
        except PotaWatchError as exc:
            self._set_error("sound-status", f"Sound test failed: {exc}")
            return
        self._set_error("sound-status", "Sound test finished.")
