"""Models for food analysis results."""

from pydantic import BaseModel, Field


class AnalyzedMacros(BaseModel):
    """Energy and macronutrients reported for an analyzed item."""

    kcal: float = Field(ge=0.0)
    p: float = Field(ge=0.0)
    c: float = Field(ge=0.0)
    f: float = Field(ge=0.0)


class AnalyzedItem(BaseModel):
    """Single food item recognized from text or an image."""

    name: str
    quantity: float = Field(ge=0.0)
    unit: str
    macros: AnalyzedMacros


class AnalysisExtract(BaseModel):
    """Structured output for food analysis."""

    items: list[AnalyzedItem]
