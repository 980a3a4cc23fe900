"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

import pytest

from fitlog.config import Settings
from fitlog.containers import AppContainer
from fitlog.domain.logs import DayLog, DaySummary, Exercise, Macros, Meal, MealItem
from fitlog.domain.profile import ProfileInput
from fitlog.services.analysis import AnalysisClient, AnalysisService
from fitlog.services.storage import InMemoryKeyValueStore, TrackerState
from fitlog.services.tracker import TrackerService

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
TODAY = NOW.date()


@dataclass
class FixedClock:
    """Clock returning a settable instant."""

    current: datetime = NOW

    def __call__(self) -> datetime:
        return self.current

    def advance(self, days: int) -> None:
        self.current = self.current + timedelta(days=days)


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "items": [
                {
                    "name": "rice",
                    "quantity": 150,
                    "unit": "g",
                    "macros": {"kcal": 195, "p": 4, "c": 42, "f": 0.5},
                }
            ]
        }
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def analyze(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        self.calls.append(
            {"model": model, "prompt": prompt, "image_data_url": image_data_url}
        )
        if self.error is not None:
            raise self.error
        return self.payload


def make_item(kcal: float, protein: float = 0.0, name: str = "food") -> MealItem:
    return MealItem(
        name=name,
        quantity=100,
        unit="g",
        macros=Macros(kcal=kcal, p=protein, c=0, f=0),
    )


def make_meal(meal_id: str = "m1", *items: MealItem) -> Meal:
    return Meal(
        id=meal_id,
        type="lunch",
        timestamp_updated=NOW,
        items=list(items) or [make_item(500, 30)],
    )


def logged_day(day: date, water_ml: int = 0, meals: int = 1) -> DayLog:
    return DayLog(
        day=day,
        summary=DaySummary(
            total_kcal=500 * meals, total_protein=0, water_intake_ml=water_ml
        ),
        meals=[make_meal(f"m{index}") for index in range(meals)],
    )


def exercise_day(day: date) -> DayLog:
    return DayLog(
        day=day,
        exercises=[
            Exercise(
                id="e1", name="Run", duration_minutes=30, met=8.0, calories_burned=280
            )
        ],
    )


def profile_input(**overrides: object) -> ProfileInput:
    values: dict[str, object] = {
        "name": "Alex",
        "sex": "M",
        "birth_date": date(1996, 1, 15),
        "height_cm": 175.0,
        "current_weight_kg": 70.0,
        "target_weight_kg": 70.0,
        "activity_factor": 1.2,
    }
    values.update(overrides)
    return ProfileInput(**values)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="memory",
        openai_api_key="openai-key",
        timezone="UTC",
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def tracker(store: InMemoryKeyValueStore, clock: FixedClock) -> TrackerService:
    return TrackerService(state=TrackerState(store), clock=clock)


@pytest.fixture
def onboarded_tracker(tracker: TrackerService) -> TrackerService:
    tracker.complete_onboarding(profile_input())
    return tracker


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def container(
    settings: Settings,
    tracker: TrackerService,
    analysis_client: FakeAnalysisClient,
) -> AppContainer:
    analysis_service = AnalysisService(
        client=analysis_client,
        text_model=settings.openai_text_model,
        image_model=settings.openai_image_model,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        tracker_service=tracker,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
