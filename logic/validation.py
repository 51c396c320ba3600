"""Pydantic schemas for validating recommendation requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

StyleName = Literal["traditional", "modern", "fusion", "minimalist"]
CategoryName = Literal["necklace", "earrings", "bracelet", "ring", "anklet", "set"]


class PreferenceRequest(BaseModel):
    """Shopper preferences as received at the HTTP boundary.

    Style and category are checked against their vocabularies here; the
    remaining fields are passed through and unknown values are ignored by the
    matching engine.
    """

    occasion: Optional[str] = None
    style: Optional[StyleName] = None
    budget: Optional[Union[float, str]] = None
    material: Optional[str] = None
    category: Optional[CategoryName] = None
    gender: Optional[str] = "unisex"

    @field_validator("style", "category", mode="before")
    @classmethod
    def _lowercase_choice(cls, value: Any) -> Any:
        if isinstance(value, str):
            stripped = value.strip().lower()
            return stripped or None
        return value

    @field_validator("occasion", "material", "gender", "budget", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AnalyzeRequest(PreferenceRequest):
    """Preferences sent alongside a photo; unset fields take shop defaults."""

    occasion: Optional[str] = "daily"
    style: Optional[StyleName] = "modern"
    budget: Optional[Union[float, str]] = "medium"
    image_url: Optional[str] = None


class ScoredItemPayload(BaseModel):
    item_id: str
    name: str
    price: float = Field(ge=0)
    category: str
    styles: List[str]
    occasions: List[str]
    materials: List[str]
    colors: List[str]
    gender: str
    score: float = Field(ge=0, le=100)
    score_breakdown: Dict[str, float]


class RecommendationResponse(BaseModel):
    """Structure returned to API callers."""

    status: Literal["ok"] = "ok"
    dominant_colors: List[str]
    recommendations: List[ScoredItemPayload]
    preferences: Dict[str, Any]


class ValidationResult(BaseModel):
    """Wrapper returned when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    return ValidationResult(message=message, details=exc.errors(include_url=False)).model_dump()


__all__ = [
    "PreferenceRequest",
    "AnalyzeRequest",
    "ScoredItemPayload",
    "RecommendationResponse",
    "ValidationResult",
    "validation_failure",
]
