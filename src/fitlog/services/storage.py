"""Key-value storage and typed state access."""

from dataclasses import dataclass, replace
from datetime import date
from typing import Protocol

from pydantic import TypeAdapter

from fitlog.domain.biometrics import BiometricEntry
from fitlog.domain.gamification import Stats
from fitlog.domain.logs import DayLog
from fitlog.domain.profile import UserProfile
from fitlog.services.badges import sync_catalog
from fitlog.services.ledger import initial_stats

NUTRITION_LOGS_KEY = "nutrition_logs"
BIOMETRICS_LOGS_KEY = "biometrics_logs"
USER_PROFILE_KEY = "user_profile"
USER_STATS_KEY = "user_stats"

_DAY_LOGS = TypeAdapter(dict[date, DayLog])
_BIOMETRICS = TypeAdapter(list[BiometricEntry])
_PROFILE = TypeAdapter(UserProfile)
_STATS = TypeAdapter(Stats)


class KeyValueStore(Protocol):
    """Storage interface for JSON-compatible values."""

    def load(self, key: str) -> object | None:
        """Return the stored value for a key, or None when absent."""

    def save(self, key: str, value: object) -> None:
        """Store a value under a key."""


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store, used for local runs and tests."""

    def __init__(self, values: dict[str, object] | None = None) -> None:
        self._values = dict(values or {})

    def load(self, key: str) -> object | None:
        """Return the stored value, if any."""
        return self._values.get(key)

    def save(self, key: str, value: object) -> None:
        """Store a value."""
        self._values[key] = value


@dataclass
class TrackerState:
    """Typed access to the tracker aggregates kept in a key-value store."""

    store: KeyValueStore

    def load_day_logs(self) -> dict[date, DayLog]:
        """Return all day logs keyed by date."""
        raw = self.store.load(NUTRITION_LOGS_KEY)
        if raw is None:
            return {}
        return _DAY_LOGS.validate_python(raw)

    def save_day_logs(self, day_logs: dict[date, DayLog]) -> None:
        """Persist all day logs."""
        self.store.save(
            NUTRITION_LOGS_KEY, _DAY_LOGS.dump_python(day_logs, mode="json")
        )

    def load_biometrics(self) -> list[BiometricEntry]:
        """Return biometric entries, newest first."""
        raw = self.store.load(BIOMETRICS_LOGS_KEY)
        if raw is None:
            return []
        entries = _BIOMETRICS.validate_python(raw)
        return sorted(entries, key=lambda entry: entry.day, reverse=True)

    def save_biometrics(self, entries: list[BiometricEntry]) -> None:
        """Persist biometric entries."""
        self.store.save(
            BIOMETRICS_LOGS_KEY, _BIOMETRICS.dump_python(entries, mode="json")
        )

    def load_profile(self) -> UserProfile:
        """Return the user profile, or defaults before onboarding."""
        raw = self.store.load(USER_PROFILE_KEY)
        if raw is None:
            return UserProfile()
        return _PROFILE.validate_python(raw)

    def save_profile(self, profile: UserProfile) -> None:
        """Persist the user profile."""
        self.store.save(USER_PROFILE_KEY, _PROFILE.dump_python(profile, mode="json"))

    def load_stats(self) -> Stats:
        """Return stats, adding catalog badges missing from stored data."""
        raw = self.store.load(USER_STATS_KEY)
        if raw is None:
            return initial_stats()
        stats = _STATS.validate_python(raw)
        return replace(stats, badges=sync_catalog(stats.badges))

    def save_stats(self, stats: Stats) -> None:
        """Persist stats."""
        self.store.save(USER_STATS_KEY, _STATS.dump_python(stats, mode="json"))
