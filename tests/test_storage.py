"""Tests for typed state storage."""

import json
from dataclasses import replace
from datetime import timedelta

from fitlog.domain.biometrics import BiometricEntry
from fitlog.domain.profile import UserProfile
from fitlog.services.badges import BADGE_CATALOG
from fitlog.services.ledger import initial_stats
from fitlog.services.storage import (
    NUTRITION_LOGS_KEY,
    USER_STATS_KEY,
    InMemoryKeyValueStore,
    TrackerState,
)
from tests.conftest import TODAY, exercise_day, logged_day


def test_empty_store_returns_defaults() -> None:
    state = TrackerState(InMemoryKeyValueStore())

    assert state.load_day_logs() == {}
    assert state.load_biometrics() == []
    assert state.load_profile() == UserProfile()
    assert state.load_stats() == initial_stats()


def test_day_logs_roundtrip_as_json_values() -> None:
    store = InMemoryKeyValueStore()
    state = TrackerState(store)
    yesterday = TODAY - timedelta(days=1)
    day_logs = {
        TODAY: logged_day(TODAY, water_ml=750),
        yesterday: exercise_day(yesterday),
    }

    state.save_day_logs(day_logs)

    raw = store.load(NUTRITION_LOGS_KEY)
    assert isinstance(raw, dict)
    assert TODAY.isoformat() in raw
    json.dumps(raw)
    assert state.load_day_logs() == day_logs


def test_biometrics_load_newest_first() -> None:
    state = TrackerState(InMemoryKeyValueStore())
    older = BiometricEntry(
        id="b1", day=TODAY - timedelta(days=3), weight_kg=71, bmi=23.2
    )
    newer = BiometricEntry(id="b2", day=TODAY, weight_kg=70, bmi=22.9)

    state.save_biometrics([older, newer])

    assert [entry.id for entry in state.load_biometrics()] == ["b2", "b1"]


def test_stats_missing_catalog_badges_are_added() -> None:
    store = InMemoryKeyValueStore()
    state = TrackerState(store)
    stats = replace(initial_stats(), total_xp=320, badges=initial_stats().badges[:2])
    state.save_stats(stats)

    loaded = state.load_stats()

    assert loaded.total_xp == 320
    assert [badge.id for badge in loaded.badges] == [
        item.id for item in BADGE_CATALOG
    ]
    assert len(store.load(USER_STATS_KEY)["badges"]) == 2
