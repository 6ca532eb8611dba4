"""Filters tab implementation."""

from __future__ import annotations

from typing import Any, Optional

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Select, Static, Switch

from adapters.config_parsing import parse_filter_config
from core.filter_engine import explain
from core.models import Spot
from ..constants import FIELD_LABELS
from ..modals import DeleteConditionScreen


class FiltersTab(Container):
    """Filters tab for editing per-field conditions and testing a spot."""

    MATCH_TYPES = ["contains", "exact"]
    OPERATORS = ["or", "and"]

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False
        self._field = FIELD_LABELS[0][0]
        self._current_row_key: Optional[str] = None
        self._table_ready = False

    def compose(self):
        with Vertical(id="filters-panel"):
            with Horizontal(id="filters-toolbar"):
                yield Static("field", classes="form-label")
                yield Select(
                    [(label, key) for key, label in FIELD_LABELS],
                    id="filter-field",
                    allow_blank=False,
                    value=self._field,
                )
                yield Static("operator", classes="form-label")
                yield Select(
                    [("or", "or"), ("and", "and")],
                    id="filter-operator",
                    allow_blank=False,
                )
                yield Static("ignore other spotters", classes="form-label")
                yield Switch(id="filter-ignore-spotters")
            with Horizontal(id="filters-body"):
                with Container(id="filters-left"):
                    yield DataTable(id="conditions-table", cursor_type="row")
                with Container(id="filters-right"):
                    yield Static("Condition editor", id="filters-title")
                    yield Static("value", classes="form-label")
                    yield Input(placeholder="e.g. JA-, FT8, 7144", id="condition-value")
                    yield Static("match", classes="form-label")
                    yield Select(
                        [("contains", "contains"), ("exact", "exact")],
                        id="condition-type",
                        allow_blank=False,
                    )
                    yield Static("exclude", classes="form-label")
                    yield Switch(id="condition-exclude")
                    yield Static("enabled", classes="form-label")
                    yield Switch(value=True, id="condition-enabled")
                    yield Static("Spot tester", id="filters-test-title")
                    with Horizontal(classes="tester-row"):
                        yield Input(placeholder="reference", id="test-reference")
                        yield Input(placeholder="mode", id="test-mode")
                        yield Input(placeholder="frequency", id="test-frequency")
                    with Horizontal(classes="tester-row"):
                        yield Input(placeholder="activator", id="test-activator")
                        yield Input(placeholder="spotter", id="test-spotter")
                        yield Input(placeholder="comments", id="test-comments")
                    with Horizontal(id="filters-test-actions"):
                        yield Button("Test", id="filter-test", variant="primary")
                    yield Static("", id="filter-test-result")
            with Horizontal(id="filters-actions"):
                yield Button("Add condition", id="add-condition", variant="success")
                yield Button("Delete condition", id="delete-condition", variant="error")

    def on_mount(self) -> None:
        table = self.query_one("#conditions-table", DataTable)
        table.add_column("enabled", key="enabled", width=8)
        table.add_column("match", key="match", width=10)
        table.add_column("exclude", key="exclude", width=8)
        table.add_column("value", key="value", width=30)
        table.zebra_stripes = True
        self._table_ready = True
        self.reload_from_config()
        self._set_form_state(None)

    def reload_from_config(self) -> None:
        if not self._table_ready:
            return
        self._loading_form = True
        filters = self._get_filters()
        operator = self._get_field_filter().get("operator", "or")
        self.query_one("#filter-operator", Select).value = operator if operator in self.OPERATORS else "or"
        self.query_one("#filter-ignore-spotters", Switch).value = bool(
            filters.get("ignoreOtherSpotters", False)
        )
        self._loading_form = False

        table = self.query_one("#conditions-table", DataTable)
        table.clear()
        for index, condition in enumerate(self._get_conditions()):
            table.add_row(*self._row_for(condition), key=str(index))
        self._update_action_state()

    @staticmethod
    def _row_for(condition: dict[str, Any]) -> tuple[str, str, str, str]:
        return (
            "no" if condition.get("enabled") is False else "yes",
            str(condition.get("type", "contains")),
            "yes" if condition.get("exclude") else "no",
            str(condition.get("value", "")),
        )

    def _get_filters(self) -> dict[str, Any]:
        return self.app.config_state.section("filters")

    def _set_filters(self, filters: dict[str, Any]) -> None:
        self.app.update_config_section("filters", filters)

    def _get_field_filter(self) -> dict[str, Any]:
        field_filter = self._get_filters().get(self._field)
        if isinstance(field_filter, dict):
            return field_filter
        return {"conditions": [], "operator": "or"}

    def _get_conditions(self) -> list[dict[str, Any]]:
        conditions = self._get_field_filter().get("conditions")
        if isinstance(conditions, list):
            return conditions
        return []

    def _set_conditions(self, conditions: list[dict[str, Any]]) -> None:
        filters = self._get_filters()
        field_filter = self._get_field_filter()
        field_filter["conditions"] = conditions
        filters[self._field] = field_filter
        self._set_filters(filters)

    def _update_action_state(self) -> None:
        delete_btn = self.query_one("#delete-condition", Button)
        delete_btn.disabled = self._current_row_key is None

    @on(Select.Changed, "#filter-field")
    def _on_field_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        self._field = str(event.value)
        self._current_row_key = None
        self.reload_from_config()
        self._set_form_state(None)

    @on(Select.Changed, "#filter-operator")
    def _on_operator_changed(self, event: Select.Changed) -> None:
        if self._loading_form or event.value is Select.BLANK:
            return
        filters = self._get_filters()
        field_filter = self._get_field_filter()
        field_filter["operator"] = event.value
        filters[self._field] = field_filter
        self._set_filters(filters)

    @on(Switch.Changed, "#filter-ignore-spotters")
    def _on_ignore_spotters_changed(self, event: Switch.Changed) -> None:
        if self._loading_form:
            return
        filters = self._get_filters()
        filters["ignoreOtherSpotters"] = bool(event.value)
        self._set_filters(filters)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self._current_row_key = self._coerce_row_key(event.row_key)
        self._set_form_state(self._current_row_key)
        self._update_action_state()

    @on(Input.Changed, "#condition-value")
    def _on_value_changed(self, event: Input.Changed) -> None:
        self._update_condition("value", event.value)

    @on(Select.Changed, "#condition-type")
    def _on_type_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        self._update_condition("type", event.value)

    @on(Switch.Changed, "#condition-exclude")
    def _on_exclude_changed(self, event: Switch.Changed) -> None:
        self._update_condition("exclude", bool(event.value))

    @on(Switch.Changed, "#condition-enabled")
    def _on_enabled_changed(self, event: Switch.Changed) -> None:
        self._update_condition("enabled", bool(event.value))

    def _update_condition(self, key: str, value: Any) -> None:
        if self._loading_form:
            return
        index = self._current_index()
        if index is None:
            return
        conditions = self._get_conditions()
        if index >= len(conditions):
            return
        conditions[index][key] = value
        self._set_conditions(conditions)
        self._update_table_row(index, conditions[index])

    @on(Button.Pressed, "#add-condition")
    def _on_add_condition(self) -> None:
        conditions = self._get_conditions()
        conditions.append({"value": "", "type": "contains", "exclude": False, "enabled": True})
        self._set_conditions(conditions)
        self.reload_from_config()
        self._select_row(len(conditions) - 1)

    @on(Button.Pressed, "#delete-condition")
    def _on_delete_condition(self) -> None:
        index = self._current_index()
        if index is None:
            return
        conditions = self._get_conditions()
        if index >= len(conditions):
            return
        condition = conditions[index]
        description = f"{self._field}: {condition.get('type', 'contains')} '{condition.get('value', '')}'"
        self.app.push_screen(DeleteConditionScreen(description), self._handle_delete_condition)

    def _handle_delete_condition(self, confirmed: bool | None) -> None:
        if not confirmed:
            return
        index = self._current_index()
        if index is None:
            return
        conditions = self._get_conditions()
        if index >= len(conditions):
            return
        conditions.pop(index)
        self._set_conditions(conditions)
        self._current_row_key = None
        self.reload_from_config()
        self._set_form_state(None)

    @on(Button.Pressed, "#filter-test")
    def _on_test_filter(self) -> None:
        result = self.query_one("#filter-test-result", Static)
        spot = Spot(
            spot_id=0,
            spotter=self._input_value("#test-spotter"),
            activator=self._input_value("#test-activator"),
            reference=self._input_value("#test-reference"),
            comments=self._input_value("#test-comments"),
            mode=self._input_value("#test-mode"),
            frequency=self._input_value("#test-frequency"),
        )
        verdict = explain(spot, parse_filter_config(self._get_filters()))
        label = "Notify" if verdict.accepted else "Skip"
        result.update(f"{label}: {verdict.reason}")

    def _input_value(self, selector: str) -> str:
        return self.query_one(selector, Input).value.strip()

    def _set_form_state(self, row_key: Optional[str]) -> None:
        self._loading_form = True
        value_input = self.query_one("#condition-value", Input)
        type_select = self.query_one("#condition-type", Select)
        exclude_toggle = self.query_one("#condition-exclude", Switch)
        enabled_toggle = self.query_one("#condition-enabled", Switch)
        if row_key is None:
            value_input.value = ""
            value_input.disabled = True
            type_select.disabled = True
            exclude_toggle.value = False
            exclude_toggle.disabled = True
            enabled_toggle.value = False
            enabled_toggle.disabled = True
        else:
            index = int(row_key)
            conditions = self._get_conditions()
            if index >= len(conditions):
                self._loading_form = False
                return
            condition = conditions[index]
            match_type = condition.get("type", "contains")
            value_input.value = str(condition.get("value", ""))
            value_input.disabled = False
            type_select.value = match_type if match_type in self.MATCH_TYPES else "contains"
            type_select.disabled = False
            exclude_toggle.value = bool(condition.get("exclude", False))
            exclude_toggle.disabled = False
            enabled_toggle.value = condition.get("enabled") is not False
            enabled_toggle.disabled = False
        self._loading_form = False

    def _select_row(self, index: int) -> None:
        table = self.query_one("#conditions-table", DataTable)
        try:
            table.move_cursor(row=index)
        except Exception:
            return
        self._current_row_key = str(index)
        self._set_form_state(self._current_row_key)
        self._update_action_state()

    def _update_table_row(self, index: int, condition: dict[str, Any]) -> None:
        table = self.query_one("#conditions-table", DataTable)
        row_key = str(index)
        try:
            table.get_row(row_key)
        except Exception:
            self.reload_from_config()
            return
        for column_key, value in zip(("enabled", "match", "exclude", "value"), self._row_for(condition)):
            table.update_cell(row_key, column_key, value)

    def _current_index(self) -> Optional[int]:
        if self._current_row_key is None:
            return None
        try:
            return int(self._current_row_key)
        except ValueError:
            return None

    @staticmethod
    def _coerce_row_key(value: Any) -> str:
        if hasattr(value, "value"):
            return str(value.value)
        return str(value)
