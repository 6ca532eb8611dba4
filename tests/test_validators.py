from __future__ import annotations

from frontend.validators import parse_count, parse_port, parse_scale


def test_parse_count() -> None:
    assert parse_count("").value == 0
    assert parse_count(" 3 ").value == 3
    assert parse_count("-1").error
    assert parse_count("x").error


def test_parse_port() -> None:
    assert parse_port("50021").value == 50021
    assert parse_port("0").error
    assert parse_port("70000").error
    assert parse_port("abc").error


def test_parse_scale_checks_range() -> None:
    assert parse_scale("0.1", -0.15, 0.15).value == 0.1
    assert parse_scale("-0.2", -0.15, 0.15).error
    assert parse_scale("fast", 0.5, 2.0).error
