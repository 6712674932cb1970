"""Pydantic request models for the nutrition API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from healthos_nutrition.domain.food_log import MealType
from healthos_nutrition.domain.nutrition import (
    CatalogEntry,
    CatalogSource,
    NutritionProfile,
    normalize_name,
)


class SaveFoodRequest(BaseModel):
    """Body of a request to save a food into the personal catalog."""

    name: str = Field(min_length=1, max_length=500)
    name_normalized: str | None = Field(default=None, max_length=500)
    source: CatalogSource
    source_id: str | None = None
    barcode: str | None = None
    default_portion_g: float | None = Field(default=None, gt=0)
    per_100g: dict[str, Any] = Field(default_factory=dict)

    def to_entry(self) -> CatalogEntry:
        """Convert the request into a catalog entry."""
        return CatalogEntry(
            name=self.name,
            name_normalized=normalize_name(self.name_normalized or self.name),
            source=self.source,
            source_id=self.source_id,
            barcode=self.barcode,
            default_portion_g=self.default_portion_g,
            per_100g=NutritionProfile.from_dict(self.per_100g),
        )


class LogFoodRequest(BaseModel):
    """Body of a request to log a portion of a catalog food."""

    food_catalog_id: str = Field(min_length=1)
    portion_g: float = Field(gt=0, le=50000)
    meal_type: MealType | None = None
    notes: str | None = Field(default=None, max_length=1000)
    logged_at: datetime | None = None
