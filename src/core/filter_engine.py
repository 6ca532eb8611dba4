"""Spot filter evaluation (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from core.config import (
    MATCH_CONTAINS,
    MATCH_EXACT,
    OPERATOR_AND,
    TRACKED_FIELDS,
    FieldFilter,
    FilterCondition,
    FilterConfig,
)
from core.models import Spot


@dataclass(frozen=True)
class FilterVerdict:
    """Filter decision with a human-readable reason."""

    accepted: bool
    reason: str


def normalize_callsign(callsign: Optional[str]) -> str:
    """Drop any portable suffix after the first '/' and upper-case."""

    if not callsign:
        return ""
    return callsign.split("/", 1)[0].strip().upper()


def callsigns_match(activator: Optional[str], spotter: Optional[str]) -> bool:
    """Return True when both callsigns refer to the same station."""

    if not activator or not spotter:
        return False
    return normalize_callsign(activator) == normalize_callsign(spotter)


def condition_matches(field_value: Optional[str], condition: FilterCondition) -> bool:
    """Test one condition against a field value, ignoring its exclude flag."""

    if not condition.value or field_value is None:
        return False

    value = str(field_value).casefold()
    pattern = condition.value.casefold()
    if condition.match_type == MATCH_EXACT:
        return value == pattern
    if condition.match_type == MATCH_CONTAINS:
        return pattern in value
    return False


def _active(conditions: Iterable[FilterCondition], exclude: bool) -> List[FilterCondition]:
    return [c for c in conditions if c.enabled and c.exclude == exclude]


def field_filter_passes(field_value: Optional[str], field_filter: Optional[FieldFilter]) -> bool:
    """Apply the include side of one field filter.

    An absent filter, an empty condition list, or a list with no enabled
    include conditions lets everything through. Exclude conditions are
    resolved by `accepts` before this runs.
    """

    if field_filter is None or not field_filter.conditions:
        return True

    includes = _active(field_filter.conditions, exclude=False)
    if not includes:
        return True

    if field_filter.operator == OPERATOR_AND:
        return all(condition_matches(field_value, c) for c in includes)
    return any(condition_matches(field_value, c) for c in includes)


def explain(spot: Spot, config: Optional[FilterConfig]) -> FilterVerdict:
    """Evaluate a spot and report which check decided the outcome.

    Order matters:
    - the spotter check runs first when ignore_other_spotters is set,
    - any enabled exclude condition on any field rejects immediately,
    - every field must then pass its include conditions.
    """

    if config is None:
        return FilterVerdict(True, "no filter configured")

    if config.ignore_other_spotters and not callsigns_match(spot.activator, spot.spotter):
        return FilterVerdict(False, f"spotted by {spot.spotter or '?'}, not the activator")

    for name in TRACKED_FIELDS:
        value = getattr(spot, name) or ""
        for condition in _active(config.field_filter(name).conditions, exclude=True):
            if condition_matches(value, condition):
                return FilterVerdict(
                    False,
                    f"{name} excluded by {condition.match_type} '{condition.value}'",
                )

    for name in TRACKED_FIELDS:
        value = getattr(spot, name) or ""
        if not field_filter_passes(value, config.field_filter(name)):
            return FilterVerdict(False, f"{name} did not match include conditions")

    return FilterVerdict(True, "all fields passed")


def accepts(spot: Spot, config: Optional[FilterConfig]) -> bool:
    """Return True when the spot passes the whole filter configuration."""

    return explain(spot, config).accepted
