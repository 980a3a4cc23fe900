"""Food analysis service backed by an LLM."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from fitlog.domain.analysis import AnalysisExtract, AnalyzedItem
from fitlog.domain.errors import AnalysisError
from fitlog.services.metrics import round_half_up

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "number", "minimum": 0},
                    "unit": {"type": "string"},
                    "macros": {
                        "type": "object",
                        "properties": {
                            "kcal": {"type": "number", "minimum": 0},
                            "p": {"type": "number", "minimum": 0},
                            "c": {"type": "number", "minimum": 0},
                            "f": {"type": "number", "minimum": 0},
                        },
                        "required": ["kcal", "p", "c", "f"],
                        "additionalProperties": False,
                    },
                },
                "required": ["name", "quantity", "unit", "macros"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

TEXT_PROMPT = (
    "Analyze the following meal description. Split composite dishes into "
    "individual ingredients (for example, 'bread with butter' becomes 'bread' "
    "and 'butter'). For each item return a name, an estimated quantity with its "
    "unit (g, ml, unit, tbsp), and kcal with protein (p), carbs (c) and fat (f) "
    "in grams. Meal: "
)
IMAGE_PROMPT = (
    "Identify the foods on this plate. List each visible ingredient separately "
    "(coffee with milk is two items: coffee and milk). Estimate the visible "
    "quantity of each with its unit, and its kcal with protein (p), carbs (c) "
    "and fat (f) in grams."
)

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9
KCAL_TOLERANCE = 0.2
KCAL_TOLERANCE_FLOOR = 50

_logger = logging.getLogger(__name__)


class AnalysisClient(Protocol):
    """Interface for LLM food analysis."""

    async def analyze(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured analysis data."""


@dataclass
class AnalysisService:
    """Service that prompts the analysis client and sanity-checks its items."""

    client: AnalysisClient
    text_model: str
    image_model: str

    async def analyze_text(self, text: str) -> list[AnalyzedItem]:
        """Return food items recognized in a free-text meal description."""
        return await self._analyze(
            model=self.text_model, prompt=f'{TEXT_PROMPT}"{text}"'
        )

    async def analyze_image(self, image_bytes: bytes) -> list[AnalyzedItem]:
        """Return food items recognized in a meal photo."""
        return await self._analyze(
            model=self.image_model,
            prompt=IMAGE_PROMPT,
            image_data_url=_to_data_url(image_bytes),
        )

    async def _analyze(
        self, *, model: str, prompt: str, image_data_url: str | None = None
    ) -> list[AnalyzedItem]:
        try:
            raw = await self.client.analyze(
                model=model,
                prompt=prompt,
                schema=ANALYSIS_SCHEMA,
                image_data_url=image_data_url,
            )
        except AnalysisError:
            raise
        except Exception as exc:
            _logger.exception("Food analysis request failed", extra={"model": model})
            raise AnalysisError("Food analysis request failed") from exc
        try:
            extract = AnalysisExtract.model_validate(raw)
        except ValidationError as exc:
            raise AnalysisError("Food analysis returned malformed items") from exc
        return [fix_macros(item) for item in extract.items]


def atwater_kcal(protein_g: float, carbs_g: float, fat_g: float) -> float:
    """Return energy implied by macronutrients using Atwater factors."""
    return (
        protein_g * KCAL_PER_G_PROTEIN
        + carbs_g * KCAL_PER_G_CARBS
        + fat_g * KCAL_PER_G_FAT
    )


def fix_macros(item: AnalyzedItem) -> AnalyzedItem:
    """Replace reported kcal when it disagrees with the item's macros.

    The reported value is kept when it lies within 20% of
    ``max(kcal, 50)`` of the Atwater estimate and is non-zero for an item
    whose macros carry energy.
    """
    macros = item.macros
    computed = atwater_kcal(macros.p, macros.c, macros.f)
    tolerance = max(macros.kcal, KCAL_TOLERANCE_FLOOR) * KCAL_TOLERANCE
    missing = macros.kcal == 0 and computed > 0
    if abs(computed - macros.kcal) <= tolerance and not missing:
        return item
    corrected = round_half_up(computed)
    _logger.info(
        "Corrected analyzed kcal: item=%s reported=%s computed=%s",
        item.name,
        macros.kcal,
        corrected,
    )
    return item.model_copy(
        update={"macros": macros.model_copy(update={"kcal": float(corrected)})}
    )


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
