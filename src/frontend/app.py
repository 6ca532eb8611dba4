"""Main Textual app for the potawatch config panel."""

from __future__ import annotations

from typing import Any, Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import Button, ContentSwitcher, Footer, Static, Tab, Tabs

from adapters.config_parsing import default_document
from adapters.json_config_store import JsonConfigStore
from core.errors import ConfigurationMissing
from .constants import CONFIG_PATH, POTA_GREEN
from .modals import ReloadConfirmScreen, UnsavedChangesScreen
from .state import ConfigState
from .tabs.filters import FiltersTab
from .tabs.notifications import NotificationsTab
from .tabs.speech import SpeechTab

TABS = (
    ("filters", "Filters", FiltersTab),
    ("notifications", "Notifications", NotificationsTab),
    ("speech", "Speech", SpeechTab),
)


class ConfigPanelApp(App):
    """Edits config.json in memory; nothing is written until Save."""

    BINDINGS = [
        ("ctrl+s", "save_config", "Save"),
        ("ctrl+r", "reload_config", "Reload"),
        ("ctrl+q", "request_quit", "Quit"),
        ("ctrl+c", "request_quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def __init__(self, store: JsonConfigStore | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.config_state = ConfigState()
        self.store = store or JsonConfigStore(CONFIG_PATH)

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(self._title_text(), id="title")
                    yield Static("POTA spot watcher", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static(str(self.store.path), classes="subtle")
                    yield Static("", id="header-status")
                    with Horizontal(id="header-actions"):
                        yield Button("Save", id="save-btn")
                        yield Button("Reload", id="reload-btn")

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(*(Tab(label, id=tab_id) for tab_id, label, _ in TABS), id="tabs")

        with ContentSwitcher(id="content", initial=TABS[0][0]):
            for tab_id, _, tab_type in TABS:
                yield tab_type(id=tab_id)
        yield Footer()

    def on_mount(self) -> None:
        self._load_config()

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if event.tab.id:
            self.query_one("#content", ContentSwitcher).current = event.tab.id

    def on_button_pressed(self, event: Button.Pressed) -> None:
        actions: dict[str, Callable[[], None]] = {
            "save-btn": self.action_save_config,
            "reload-btn": self.action_reload_config,
        }
        action = actions.get(event.button.id or "")
        if action is not None:
            action()

    def action_save_config(self) -> None:
        self._save_config()

    def action_reload_config(self) -> None:
        if not self.config_state.dirty:
            self._load_config()
            return
        self.push_screen(ReloadConfirmScreen(), self._after_reload_prompt)

    def action_request_quit(self) -> None:
        if not self.config_state.dirty:
            self.exit()
            return
        self.push_screen(UnsavedChangesScreen(), self._after_quit_prompt)

    def _after_quit_prompt(self, choice: str | None) -> None:
        if choice == "discard" or (choice == "save" and self._save_config()):
            self.exit()

    def _after_reload_prompt(self, choice: str | None) -> None:
        if choice == "reload" or (choice == "save" and self._save_config()):
            self._load_config()

    def _load_config(self) -> None:
        state = self.config_state
        state.error = None
        try:
            state.data = self.store.load()
            state.dirty = False
        except ConfigurationMissing:
            # First run: start from defaults so Save creates the file.
            state.data = default_document()
            state.dirty = True
        except ValueError as exc:
            state.data = None
            state.dirty = False
            state.error = str(exc)
        self._refresh_header()
        for _, _, tab_type in TABS:
            tab = self.query_one(tab_type)
            # Tabs that mount later load themselves in on_mount.
            if tab.is_mounted:
                tab.reload_from_config()

    def _save_config(self) -> bool:
        state = self.config_state
        if state.data is None:
            state.error = "nothing to save"
        else:
            try:
                self.store.save(state.data)
            except OSError as exc:
                state.error = f"save failed: {exc.strerror or exc}"
            else:
                state.dirty = False
                state.error = None
        self._refresh_header()
        return state.error is None

    def mark_dirty(self) -> None:
        self.config_state.dirty = True
        self._refresh_header()

    def _refresh_header(self) -> None:
        state = self.config_state
        if state.error:
            text, css_class = f"config: {state.error}", "status-error"
        elif state.dirty:
            text, css_class = "config: modified *", "status-modified"
        else:
            text, css_class = "config: saved", "status-loaded"

        status = self.query_one("#header-status", Static)
        status.remove_class("status-loaded", "status-modified", "status-error")
        status.add_class(css_class)
        status.update(text)
        self.query_one("#save-btn", Button).disabled = state.data is None or not state.dirty

    def update_config_section(self, section: str, value: Any) -> None:
        """Replace one top-level section of the in-memory document."""
        if self.config_state.data is None:
            self.config_state.data = {}
        self.config_state.data[section] = value
        self.mark_dirty()

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("POTA", f"bold {POTA_GREEN}"),
            ("WATCH  config panel", "bold"),
        )
