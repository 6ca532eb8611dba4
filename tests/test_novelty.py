from __future__ import annotations

import importlib

import pytest

import settings

from core.novelty import NoveltyTracker


def test_offer_reports_first_sighting_only() -> None:
    tracker = NoveltyTracker()
    assert tracker.offer(42)
    assert not tracker.offer(42)
    assert 42 in tracker
    assert len(tracker) == 1


def test_capacity_evicts_oldest_insert() -> None:
    tracker = NoveltyTracker(capacity=1000)
    for identity in range(1001):
        tracker.mark_seen(identity)

    assert len(tracker) == 1000
    assert tracker.is_new(0)
    assert not tracker.is_new(1)
    assert not tracker.is_new(1000)


def test_lookup_does_not_refresh_entry() -> None:
    tracker = NoveltyTracker(capacity=2)
    tracker.mark_seen("a")
    tracker.mark_seen("b")
    assert not tracker.offer("a")
    tracker.mark_seen("c")
    assert tracker.is_new("a")
    assert not tracker.is_new("b")


def test_evicted_identity_is_new_again() -> None:
    tracker = NoveltyTracker(capacity=1)
    assert tracker.offer(1)
    assert tracker.offer(2)
    assert tracker.offer(1)


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        NoveltyTracker(capacity=0)


def test_app_capacity_ignores_environment(monkeypatch) -> None:
    monkeypatch.setenv("POTAWATCH_NOVELTY_CAPACITY", "5")
    assert importlib.reload(settings).NOVELTY_CAPACITY == 1000
