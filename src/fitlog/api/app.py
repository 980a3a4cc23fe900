"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import date

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from fitlog.api.models import (
    AnalysisImageIn,
    AnalysisTextIn,
    BiometricIn,
    ChallengeIn,
    ExerciseIn,
    MealIn,
    ProfileIn,
    WaterIn,
    WeightCheckIn,
    XpIn,
)
from fitlog.app_logging import configure_logging
from fitlog.containers import AppContainer
from fitlog.domain.analysis import AnalyzedItem
from fitlog.domain.errors import (
    AnalysisError,
    InvalidProfileError,
    MealNotFoundError,
    OnboardingRequiredError,
    UnconfirmedWeightChangeError,
)
from fitlog.domain.gamification import AwardResult, Stats
from fitlog.services.metrics import level_progress
from fitlog.services.tracker import LogUpdate


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(MealNotFoundError)
    async def meal_not_found(_: Request, exc: MealNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(InvalidProfileError)
    async def invalid_profile(_: Request, exc: InvalidProfileError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.exception_handler(OnboardingRequiredError)
    async def onboarding_required(
        _: Request, exc: OnboardingRequiredError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(UnconfirmedWeightChangeError)
    async def unconfirmed_weight_change(
        _: Request, exc: UnconfirmedWeightChangeError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "weight_change": asdict(exc.change)},
        )

    @app.exception_handler(AnalysisError)
    async def analysis_failed(_: Request, exc: AnalysisError) -> JSONResponse:
        logger.warning("Food analysis failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/days/{day}")
    async def get_day(day: date, request: Request) -> dict[str, object]:
        """Return the log for a day."""
        tracker = _container(request).tracker_service
        return asdict(tracker.get_day_log(day))

    @app.get("/days/{day}/balance")
    async def get_balance(day: date, request: Request) -> dict[str, object]:
        """Return the energy and water balance for a day."""
        tracker = _container(request).tracker_service
        return asdict(tracker.get_daily_balance(day))

    @app.post("/days/{day}/meals", status_code=status.HTTP_201_CREATED)
    async def add_meal(
        day: date, payload: MealIn, request: Request
    ) -> dict[str, object]:
        """Add a meal to a day."""
        tracker = _container(request).tracker_service
        update = tracker.add_meal(
            day, payload.type, [item.to_domain() for item in payload.items]
        )
        return _log_update_payload(update)

    @app.put("/days/{day}/meals/{meal_id}")
    async def edit_meal(
        day: date, meal_id: str, payload: MealIn, request: Request
    ) -> dict[str, object]:
        """Replace a meal's type and items."""
        tracker = _container(request).tracker_service
        update = tracker.edit_meal(
            day, meal_id, payload.type, [item.to_domain() for item in payload.items]
        )
        return _log_update_payload(update)

    @app.delete("/days/{day}/meals/{meal_id}")
    async def delete_meal(
        day: date, meal_id: str, request: Request
    ) -> dict[str, object]:
        """Remove a meal from a day."""
        tracker = _container(request).tracker_service
        return _log_update_payload(tracker.delete_meal(day, meal_id))

    @app.post("/days/{day}/water")
    async def adjust_water(
        day: date, payload: WaterIn, request: Request
    ) -> dict[str, object]:
        """Add or subtract water for a day."""
        tracker = _container(request).tracker_service
        return _log_update_payload(tracker.adjust_water(day, payload.delta_ml))

    @app.post("/days/{day}/exercises", status_code=status.HTTP_201_CREATED)
    async def add_exercise(
        day: date, payload: ExerciseIn, request: Request
    ) -> dict[str, object]:
        """Log an exercise session."""
        tracker = _container(request).tracker_service
        update = tracker.add_exercise(
            day, payload.name, payload.duration_minutes, payload.met
        )
        return _log_update_payload(update)

    @app.get("/biometrics")
    async def list_biometrics(request: Request) -> dict[str, object]:
        """Return biometric history, newest first."""
        tracker = _container(request).tracker_service
        return {"entries": [asdict(e) for e in tracker.list_biometric_entries()]}

    @app.post("/biometrics/check")
    async def check_weight(
        payload: WeightCheckIn, request: Request
    ) -> dict[str, object]:
        """Return the weight change that would need confirmation, if any."""
        tracker = _container(request).tracker_service
        change = tracker.check_weight_change(payload.day, payload.weight_kg)
        return {
            "requires_confirmation": change is not None,
            "weight_change": asdict(change) if change else None,
        }

    @app.post("/biometrics", status_code=status.HTTP_201_CREATED)
    async def add_biometric(
        payload: BiometricIn, request: Request
    ) -> dict[str, object]:
        """Record or replace the biometric entry for a date."""
        tracker = _container(request).tracker_service
        update = tracker.add_or_update_biometric_entry(
            payload.day,
            payload.weight_kg,
            payload.circumferences_cm.to_domain(),
            confirmed=payload.confirmed,
        )
        return {"entry": asdict(update.entry), "award": _award_payload(update.award)}

    @app.delete("/biometrics/{day}")
    async def delete_biometric(day: date, request: Request) -> dict[str, object]:
        """Delete the biometric entry for a date."""
        tracker = _container(request).tracker_service
        entries = tracker.delete_biometric_entry(day)
        return {"entries": [asdict(entry) for entry in entries]}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the user profile."""
        return asdict(_container(request).tracker_service.get_profile())

    @app.post("/onboarding")
    async def complete_onboarding(
        payload: ProfileIn, request: Request
    ) -> dict[str, object]:
        """Store the onboarding profile and its derived targets."""
        tracker = _container(request).tracker_service
        update = tracker.complete_onboarding(payload.to_domain())
        return {
            "profile": asdict(update.profile),
            "award": _award_payload(update.award),
        }

    @app.patch("/profile")
    async def update_profile(payload: ProfileIn, request: Request) -> dict[str, object]:
        """Update profile fields and recalculate targets."""
        tracker = _container(request).tracker_service
        update = tracker.update_profile(payload.to_domain())
        return {
            "profile": asdict(update.profile),
            "award": _award_payload(update.award),
        }

    @app.get("/stats")
    async def get_stats(request: Request) -> dict[str, object]:
        """Return XP, level, badges, streaks and challenges."""
        return _stats_payload(_container(request).tracker_service.get_stats())

    @app.post("/stats/xp")
    async def award_xp(payload: XpIn, request: Request) -> dict[str, object]:
        """Grant XP directly."""
        tracker = _container(request).tracker_service
        return _award_payload(tracker.award_xp(payload.amount))

    @app.post("/challenges", status_code=status.HTTP_201_CREATED)
    async def add_challenge(
        payload: ChallengeIn, request: Request
    ) -> dict[str, object]:
        """Create a custom challenge."""
        tracker = _container(request).tracker_service
        return asdict(tracker.add_challenge(payload.title, payload.xp_reward))

    @app.post("/challenges/{challenge_id}/complete")
    async def complete_challenge(
        challenge_id: str, request: Request
    ) -> dict[str, object]:
        """Complete a challenge; repeated or unknown ids change nothing."""
        tracker = _container(request).tracker_service
        result = tracker.complete_challenge(challenge_id)
        return {
            "completed": result is not None,
            "award": _award_payload(result) if result else None,
        }

    @app.delete("/challenges/{challenge_id}")
    async def delete_challenge(challenge_id: str, request: Request) -> dict[str, str]:
        """Delete a challenge."""
        _container(request).tracker_service.delete_challenge(challenge_id)
        return {"status": "ok"}

    @app.post("/analysis/text")
    async def analyze_text(
        payload: AnalysisTextIn, request: Request
    ) -> dict[str, object]:
        """Recognize foods in a meal description; nothing is saved."""
        service = _container(request).analysis_service
        return _analysis_payload(await service.analyze_text(payload.text))

    @app.post("/analysis/image")
    async def analyze_image(
        payload: AnalysisImageIn, request: Request
    ) -> dict[str, object]:
        """Recognize foods in a meal photo; nothing is saved."""
        service = _container(request).analysis_service
        return _analysis_payload(await service.analyze_image(payload.image_bytes()))

    return app


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _award_payload(award: AwardResult) -> dict[str, object]:
    """Summarize an XP award for API responses."""
    return {
        "total_xp": award.stats.total_xp,
        "current_level": award.stats.current_level,
        "badge_xp": award.badge_xp,
        "leveled_up": award.leveled_up,
        "unlocked": [asdict(tier) for tier in award.unlocked],
    }


def _log_update_payload(update: LogUpdate) -> dict[str, object]:
    return {"day_log": asdict(update.day_log), "award": _award_payload(update.award)}


def _stats_payload(stats: Stats) -> dict[str, object]:
    """Serialize stats with level progress."""
    into_level, to_next = level_progress(stats.total_xp)
    payload = asdict(stats)
    payload["xp_into_level"] = into_level
    payload["xp_to_next_level"] = to_next
    return payload


def _analysis_payload(items: list[AnalyzedItem]) -> dict[str, object]:
    return {"items": [item.model_dump() for item in items]}
