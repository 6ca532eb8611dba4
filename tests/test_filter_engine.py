from __future__ import annotations

from adapters.pota_mapper import sample_spot
from core.config import FieldFilter, FilterCondition, FilterConfig
from core.filter_engine import (
    accepts,
    callsigns_match,
    condition_matches,
    explain,
    field_filter_passes,
    normalize_callsign,
)


def _include(value: str, match_type: str = "contains", enabled: bool = True) -> FilterCondition:
    return FilterCondition(value=value, match_type=match_type, exclude=False, enabled=enabled)


def _exclude(value: str, match_type: str = "contains", enabled: bool = True) -> FilterCondition:
    return FilterCondition(value=value, match_type=match_type, exclude=True, enabled=enabled)


def test_condition_match_is_case_insensitive() -> None:
    assert condition_matches("FT8", _include("ft8", "exact"))
    assert condition_matches("Special Event", _include("EVENT"))
    assert not condition_matches("FT8", _include("ft", "exact"))


def test_empty_condition_value_never_matches() -> None:
    assert not condition_matches("anything", _include(""))
    assert not condition_matches("anything", _exclude(""))


def test_unknown_match_type_never_matches() -> None:
    assert not condition_matches("FT8", _include("FT8", "regex"))


def test_empty_or_disabled_conditions_pass_everything() -> None:
    assert field_filter_passes("CW", None)
    assert field_filter_passes("CW", FieldFilter())
    disabled = FieldFilter(conditions=(_include("SSB", enabled=False),))
    assert field_filter_passes("CW", disabled)


def test_or_and_operators() -> None:
    either = FieldFilter(conditions=(_include("JA-"), _include("K-")), operator="or")
    both = FieldFilter(conditions=(_include("JA-"), _include("0001")), operator="and")
    assert field_filter_passes("K-1234", either)
    assert not field_filter_passes("VE-1234", either)
    assert field_filter_passes("JA-0001", both)
    assert not field_filter_passes("JA-0002", both)


def test_exclude_wins_over_matching_include() -> None:
    config = FilterConfig(
        mode=FieldFilter(conditions=(_include("FT8", "exact"),)),
        reference=FieldFilter(conditions=(_include("JA-"), _exclude("JA-0001", "exact"))),
    )
    spot = sample_spot(mode="FT8", reference="JA-0001")
    verdict = explain(spot, config)
    assert not verdict.accepted
    assert "excluded" in verdict.reason
    assert accepts(sample_spot(mode="FT8", reference="JA-0002"), config)


def test_exclude_ignores_operator() -> None:
    # Excludes short-circuit even under "and", where no include can pass.
    config = FilterConfig(
        comments=FieldFilter(conditions=(_exclude("QRT"), _exclude("test")), operator="and"),
    )
    assert not accepts(sample_spot(comments="going QRT"), config)
    assert accepts(sample_spot(comments="QRV"), config)


def test_fields_are_combined_with_and() -> None:
    config = FilterConfig(
        mode=FieldFilter(conditions=(_include("CW", "exact"),)),
        frequency=FieldFilter(conditions=(_include("7"),)),
    )
    assert accepts(sample_spot(mode="CW", frequency="7020"), config)
    assert not accepts(sample_spot(mode="CW", frequency="14020"), config)
    assert not accepts(sample_spot(mode="SSB", frequency="7144"), config)


def test_missing_config_accepts_everything() -> None:
    assert accepts(sample_spot(), None)
    assert accepts(sample_spot(), FilterConfig())


def test_callsign_normalization() -> None:
    assert normalize_callsign(" ja1abc/1 ") == "JA1ABC"
    assert normalize_callsign("JA1ABC/P/QRP") == "JA1ABC"
    assert normalize_callsign(None) == ""
    assert callsigns_match("JA1ABC/1", "ja1abc")
    assert not callsigns_match("JA1ABC", "JA1XYZ")
    assert not callsigns_match("", "")
    assert not callsigns_match(None, "JA1ABC")


def test_suffix_only_callsigns_normalize_to_equal() -> None:
    assert callsigns_match("/P", "/M")
    config = FilterConfig(ignore_other_spotters=True)
    assert accepts(sample_spot(activator="/P", spotter="/M"), config)


def test_ignore_other_spotters_runs_before_field_filters() -> None:
    config = FilterConfig(ignore_other_spotters=True)
    assert accepts(sample_spot(activator="JA1ABC/1", spotter="JA1ABC"), config)
    verdict = explain(sample_spot(activator="JA1ABC/1", spotter="JH1XYZ"), config)
    assert not verdict.accepted
    assert "JH1XYZ" in verdict.reason


def test_exclude_and_include_on_same_value() -> None:
    config = FilterConfig(mode=FieldFilter(conditions=(_exclude("CW"), _include("CW"))))
    assert not accepts(sample_spot(mode="CW"), config)


def test_failing_one_field_rejects_the_spot() -> None:
    config = FilterConfig(
        reference=FieldFilter(conditions=(_include("JA-"),)),
        mode=FieldFilter(conditions=(_include("SSB", "exact"),)),
        comments=FieldFilter(conditions=(_include("QRP"),)),
    )
    verdict = explain(sample_spot(comments="QRV now"), config)
    assert not verdict.accepted
    assert verdict.reason.startswith("comments")


def test_disabled_exclude_does_not_reject() -> None:
    config = FilterConfig(mode=FieldFilter(conditions=(_exclude("CW", enabled=False),)))
    assert accepts(sample_spot(mode="CW"), config)
    assert explain(sample_spot(mode="CW"), config).reason == "all fields passed"
