"""Modal dialogs for the potawatch config panel."""

from __future__ import annotations

from typing import TypeVar

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static

ResultT = TypeVar("ResultT")


class ChoiceScreen(ModalScreen[ResultT]):
    """Small confirm dialog; each button dismisses with its mapped result.

    Subclasses list (button id, label, variant, result) in CHOICES. The last
    entry is also the result for any unknown button.
    """

    TITLE_TEXT = ""
    BODY_TEXT = ""
    CHOICES: list[tuple[str, str, str, object]] = []

    def _body(self) -> str:
        return self.BODY_TEXT

    def compose(self) -> ComposeResult:
        buttons = [
            Button(label, id=button_id, variant=variant)
            for button_id, label, variant, _ in self.CHOICES
        ]
        yield Container(
            Static(self.TITLE_TEXT, classes="modal-title"),
            Static(self._body(), classes="modal-body"),
            Horizontal(*buttons, classes="modal-actions"),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        results = {button_id: result for button_id, _, _, result in self.CHOICES}
        self.dismiss(results.get(event.button.id or "", self.CHOICES[-1][3]))


class UnsavedChangesScreen(ChoiceScreen[str]):
    """Asked on quit while the config has unsaved edits."""

    TITLE_TEXT = "Unsaved changes"
    BODY_TEXT = "Save config.json before quitting?"
    CHOICES = [
        ("unsaved-save", "Save", "success", "save"),
        ("unsaved-discard", "Discard", "error", "discard"),
        ("unsaved-cancel", "Cancel", "default", "cancel"),
    ]


class ReloadConfirmScreen(ChoiceScreen[str]):
    """Asked on reload while the config has unsaved edits."""

    TITLE_TEXT = "Reload config?"
    BODY_TEXT = "Edits made in the panel will be lost."
    CHOICES = [
        ("reload-save", "Save first", "primary", "save"),
        ("reload-reload", "Reload", "warning", "reload"),
        ("reload-cancel", "Cancel", "default", "cancel"),
    ]


class DeleteConditionScreen(ChoiceScreen[bool]):
    """Confirm removal of one filter condition."""

    TITLE_TEXT = "Delete condition?"
    CHOICES = [
        ("delete-condition-confirm", "Delete", "error", True),
        ("delete-condition-cancel", "Cancel", "default", False),
    ]

    def __init__(self, description: str) -> None:
        super().__init__()
        self._description = description or "(empty condition)"

    def _body(self) -> str:
        return self._description
