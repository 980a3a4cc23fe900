"""Tracker service: the public operations of the nutrition and fitness log."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import uuid4
from zoneinfo import ZoneInfo

from fitlog.domain.biometrics import BiometricEntry, BodyRatios, Circumferences
from fitlog.domain.errors import (
    InvalidProfileError,
    MealNotFoundError,
    OnboardingRequiredError,
    UnconfirmedWeightChangeError,
    WeightChange,
)
from fitlog.domain.gamification import AwardResult, Challenge, Stats
from fitlog.domain.logs import DailyBalance, DayLog, Exercise, Meal, MealItem, MealType
from fitlog.domain.profile import ProfileInput, UserProfile
from fitlog.services import challenges, metrics
from fitlog.services.ledger import (
    BIOMETRIC_ENTRY_XP,
    EXERCISE_XP,
    MEAL_XP,
    ONBOARDING_XP,
    WATER_XP,
    apply_streaks,
    award_xp,
)
from fitlog.services.storage import TrackerState
from fitlog.services.streaks import compute_streaks
from fitlog.services.summary import empty_day, with_meals, with_water_delta

WEIGHT_CHANGE_WARNING_RATIO = 0.2
MIN_AGE_YEARS = 10
MAX_AGE_YEARS = 120

_logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class LogUpdate:
    """Result of a day log mutation."""

    day_log: DayLog
    award: AwardResult


@dataclass(frozen=True)
class BiometricUpdate:
    """Result of recording a biometric entry."""

    entry: BiometricEntry
    award: AwardResult


@dataclass(frozen=True)
class ProfileUpdate:
    """Result of onboarding or a profile edit."""

    profile: UserProfile
    award: AwardResult


@dataclass
class TrackerService:
    """Application service owning the user's logs, profile and stats.

    Every mutation follows the same path: rebuild the affected day summary,
    recompute streaks from the full history, then award the action's XP, which
    re-evaluates badges against the fresh numbers.
    """

    state: TrackerState
    timezone_name: str = "UTC"
    clock: Callable[[], datetime] = field(default=_utc_now)

    def now(self) -> datetime:
        """Return the current instant in the configured timezone."""
        return self.clock().astimezone(ZoneInfo(self.timezone_name))

    def today(self) -> date:
        """Return the current calendar date in the configured timezone."""
        return self.now().date()

    # Day logs

    def get_day_log(self, day: date) -> DayLog:
        """Return the log for a day, empty when nothing was recorded."""
        return self.state.load_day_logs().get(day) or empty_day(day)

    def add_meal(
        self, day: date, meal_type: MealType, items: list[MealItem]
    ) -> LogUpdate:
        """Append a meal to a day."""
        day_logs = self.state.load_day_logs()
        day_log = day_logs.get(day) or empty_day(day)
        meal = Meal(
            id=uuid4().hex[:12],
            type=meal_type,
            timestamp_updated=self.now(),
            items=list(items),
        )
        updated = with_meals(day_log, [*day_log.meals, meal])
        return self._commit_day(day_logs, updated, MEAL_XP)

    def edit_meal(
        self, day: date, meal_id: str, meal_type: MealType, items: list[MealItem]
    ) -> LogUpdate:
        """Replace the type and items of an existing meal."""
        day_logs = self.state.load_day_logs()
        day_log = _require_meal(day_logs, day, meal_id)
        meals = [
            replace(
                meal, type=meal_type, items=list(items), timestamp_updated=self.now()
            )
            if meal.id == meal_id
            else meal
            for meal in day_log.meals
        ]
        return self._commit_day(day_logs, with_meals(day_log, meals), MEAL_XP)

    def delete_meal(self, day: date, meal_id: str) -> LogUpdate:
        """Remove a meal from a day."""
        day_logs = self.state.load_day_logs()
        day_log = _require_meal(day_logs, day, meal_id)
        meals = [meal for meal in day_log.meals if meal.id != meal_id]
        return self._commit_day(day_logs, with_meals(day_log, meals), MEAL_XP)

    def adjust_water(self, day: date, delta_ml: int) -> LogUpdate:
        """Add or subtract water for a day; intake never drops below zero."""
        day_logs = self.state.load_day_logs()
        day_log = day_logs.get(day) or empty_day(day)
        updated = with_water_delta(day_log, delta_ml)
        return self._commit_day(day_logs, updated, WATER_XP)

    def add_exercise(
        self, day: date, name: str, duration_minutes: int, met: float
    ) -> LogUpdate:
        """Log an exercise, estimating calories from the current weight."""
        profile = self.state.load_profile()
        if profile.current_weight_kg <= 0:
            raise OnboardingRequiredError("Body weight is needed to estimate calories")
        exercise = Exercise(
            id=uuid4().hex[:12],
            name=name,
            duration_minutes=duration_minutes,
            met=met,
            calories_burned=metrics.exercise_calories(
                met, profile.current_weight_kg, duration_minutes
            ),
        )
        day_logs = self.state.load_day_logs()
        day_log = day_logs.get(day) or empty_day(day)
        updated = replace(day_log, exercises=[*day_log.exercises, exercise])
        return self._commit_day(day_logs, updated, EXERCISE_XP)

    def get_daily_balance(self, day: date) -> DailyBalance:
        """Return consumed versus burned energy and water progress for a day."""
        profile = self.state.load_profile()
        day_log = self.get_day_log(day)
        burned = sum(exercise.calories_burned for exercise in day_log.exercises)
        consumed = day_log.summary.total_kcal
        water = day_log.summary.water_intake_ml
        water_goal = profile.daily_water_goal
        progress = 0
        if water_goal > 0:
            progress = metrics.round_half_up(water / water_goal * 100)
        return DailyBalance(
            day=day,
            consumed_kcal=consumed,
            burned_kcal=burned,
            goal_kcal=profile.daily_kcal_goal,
            remaining_kcal=profile.daily_kcal_goal + burned - consumed,
            water_intake_ml=water,
            water_goal_ml=water_goal,
            water_progress_percent=min(100, progress),
        )

    # Biometrics

    def list_biometric_entries(self) -> list[BiometricEntry]:
        """Return biometric entries, newest first."""
        return self.state.load_biometrics()

    def check_weight_change(self, day: date, weight_kg: float) -> WeightChange | None:
        """Return the change versus the latest earlier entry when above 20%."""
        previous = next(
            (entry for entry in self.state.load_biometrics() if entry.day < day),
            None,
        )
        if previous is None or previous.weight_kg <= 0:
            return None
        delta = weight_kg - previous.weight_kg
        ratio = abs(delta) / previous.weight_kg
        if ratio <= WEIGHT_CHANGE_WARNING_RATIO:
            return None
        return WeightChange(
            previous_weight_kg=previous.weight_kg,
            new_weight_kg=weight_kg,
            delta_kg=round(delta, 1),
            delta_ratio=round(ratio, 3),
        )

    def add_or_update_biometric_entry(
        self,
        day: date,
        weight_kg: float,
        circumferences: Circumferences | None = None,
        *,
        confirmed: bool = False,
    ) -> BiometricUpdate:
        """Record measurements for a date, replacing any entry for that date.

        Raises UnconfirmedWeightChangeError when the weight moved more than 20%
        from the latest earlier entry and ``confirmed`` is False.
        """
        profile = self.state.load_profile()
        if profile.height_cm <= 0:
            raise OnboardingRequiredError("Height is needed to compute BMI")
        change = self.check_weight_change(day, weight_kg)
        if change is not None and not confirmed:
            raise UnconfirmedWeightChangeError(change)

        circumferences = circumferences or Circumferences()
        entries = self.state.load_biometrics()
        existing = next((entry for entry in entries if entry.day == day), None)
        entry = BiometricEntry(
            id=existing.id if existing else uuid4().hex[:12],
            day=day,
            weight_kg=weight_kg,
            bmi=metrics.bmi(weight_kg, profile.height_cm),
            circumferences_cm=circumferences,
            ratios=BodyRatios(
                waist_hip_ratio=metrics.body_ratio(
                    circumferences.waist, circumferences.hips
                ),
                waist_height_ratio=metrics.body_ratio(
                    circumferences.waist, profile.height_cm
                ),
            ),
        )
        entries = sorted(
            [*(item for item in entries if item.day != day), entry],
            key=lambda item: item.day,
            reverse=True,
        )
        self.state.save_biometrics(entries)
        if day >= self.today():
            self.state.save_profile(replace(profile, current_weight_kg=weight_kg))
        award = self._commit_stats(BIOMETRIC_ENTRY_XP)
        return BiometricUpdate(entry=entry, award=award)

    def delete_biometric_entry(self, day: date) -> list[BiometricEntry]:
        """Remove the entry for a date, if any, and return the remaining history."""
        entries = [entry for entry in self.state.load_biometrics() if entry.day != day]
        self.state.save_biometrics(entries)
        return entries

    # Profile

    def get_profile(self) -> UserProfile:
        """Return the user profile."""
        return self.state.load_profile()

    def complete_onboarding(self, data: ProfileInput) -> ProfileUpdate:
        """Store the onboarding profile with its derived targets.

        The onboarding XP is granted only the first time.
        """
        current = self.state.load_profile()
        profile = replace(
            _derive_profile(data, self.today()), onboarding_completed=True
        )
        self.state.save_profile(profile)
        xp = 0 if current.onboarding_completed else ONBOARDING_XP
        _logger.info("Onboarding completed: first_time=%s", xp > 0)
        return ProfileUpdate(profile=profile, award=self._commit_stats(xp))

    def update_profile(self, data: ProfileInput) -> ProfileUpdate:
        """Replace profile fields and recalculate the derived targets."""
        current = self.state.load_profile()
        profile = replace(
            _derive_profile(data, self.today()),
            onboarding_completed=current.onboarding_completed,
        )
        self.state.save_profile(profile)
        return ProfileUpdate(profile=profile, award=self._commit_stats(0))

    # Stats and challenges

    def get_stats(self) -> Stats:
        """Return the gamification stats."""
        return self.state.load_stats()

    def award_xp(self, amount: int) -> AwardResult:
        """Grant XP directly, running the badge pass."""
        return self._commit_stats(amount)

    def add_challenge(self, title: str, xp_reward: int) -> Challenge:
        """Create a custom challenge."""
        stats, challenge = challenges.add_challenge(
            self.state.load_stats(), title, xp_reward
        )
        self.state.save_stats(stats)
        return challenge

    def complete_challenge(self, challenge_id: str) -> AwardResult | None:
        """Complete a challenge; unknown or completed ids are ignored."""
        stats = self._stats_with_streaks(self.state.load_day_logs())
        result = challenges.complete_challenge(stats, challenge_id, self.now())
        if result is not None:
            self.state.save_stats(result.stats)
        return result

    def delete_challenge(self, challenge_id: str) -> None:
        """Delete a challenge; unknown ids are ignored."""
        stats = self.state.load_stats()
        if challenges.find_challenge(stats, challenge_id) is None:
            return
        self.state.save_stats(challenges.delete_challenge(stats, challenge_id))

    def _commit_day(
        self, day_logs: dict[date, DayLog], day_log: DayLog, xp: int
    ) -> LogUpdate:
        day_logs = {**day_logs, day_log.day: day_log}
        self.state.save_day_logs(day_logs)
        award = self._award_with_streaks(day_logs, xp)
        return LogUpdate(day_log=day_log, award=award)

    def _commit_stats(self, xp: int) -> AwardResult:
        return self._award_with_streaks(self.state.load_day_logs(), xp)

    def _award_with_streaks(
        self, day_logs: dict[date, DayLog], xp: int
    ) -> AwardResult:
        result = award_xp(self._stats_with_streaks(day_logs), xp, self.now())
        self.state.save_stats(result.stats)
        return result

    def _stats_with_streaks(self, day_logs: dict[date, DayLog]) -> Stats:
        profile = self.state.load_profile()
        streaks = compute_streaks(day_logs, profile.daily_water_goal, self.today())
        return apply_streaks(self.state.load_stats(), streaks)


def _require_meal(day_logs: dict[date, DayLog], day: date, meal_id: str) -> DayLog:
    day_log = day_logs.get(day)
    if day_log is None or all(meal.id != meal_id for meal in day_log.meals):
        raise MealNotFoundError(f"Meal {meal_id} not found on {day.isoformat()}")
    return day_log


def _derive_profile(data: ProfileInput, today: date) -> UserProfile:
    age_years = metrics.age(data.birth_date, today)
    if data.birth_date >= today or not MIN_AGE_YEARS <= age_years <= MAX_AGE_YEARS:
        raise InvalidProfileError(
            f"Age must be between {MIN_AGE_YEARS} and {MAX_AGE_YEARS} years"
        )
    goal = metrics.goal_from_weights(data.current_weight_kg, data.target_weight_kg)
    tmb = metrics.basal_metabolic_rate(
        data.current_weight_kg,
        data.height_cm,
        age_years,
        data.sex,
    )
    return UserProfile(
        name=data.name,
        sex=data.sex,
        birth_date=data.birth_date,
        height_cm=data.height_cm,
        current_weight_kg=data.current_weight_kg,
        target_weight_kg=data.target_weight_kg,
        abdominal_circ_cm=data.abdominal_circ_cm,
        activity_factor=data.activity_factor,
        goal=goal,
        calculated_tmb=tmb,
        daily_kcal_goal=metrics.daily_calorie_target(tmb, data.activity_factor, goal),
        daily_water_goal=metrics.water_goal_ml(data.current_weight_kg),
    )
