"""Portion scaling for nutrition snapshots."""

import math

from healthos_nutrition.domain.errors import ValidationError
from healthos_nutrition.domain.nutrition import (
    MACRO_FIELDS,
    CatalogEntry,
    NutritionProfile,
    NutritionSnapshot,
)

MAX_PORTION_G = 50000.0


def _round_half_up(value: float, places: int) -> float:
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def scale_profile(profile: NutritionProfile, portion_g: float) -> NutritionSnapshot:
    """Scale a per-100g profile to a consumed portion.

    Only the top-level macronutrient fields are carried into the snapshot.
    Calories round to whole kcal, everything else to one decimal place.
    """
    factor = portion_g / 100
    values: dict[str, float | None] = {}
    for name in MACRO_FIELDS:
        value = getattr(profile, name)
        if value is None:
            values[name] = None
            continue
        places = 0 if name == "calories" else 1
        values[name] = _round_half_up(value * factor, places)
    return NutritionSnapshot(**values)


def validate_portion(portion_g: float) -> float:
    """Reject non-positive, non-finite, or implausibly large portions."""
    if isinstance(portion_g, bool) or not isinstance(portion_g, int | float):
        raise ValidationError("Portion must be a number of grams")
    if not math.isfinite(portion_g) or portion_g <= 0:
        raise ValidationError("Portion must be a positive number of grams")
    if portion_g > MAX_PORTION_G:
        raise ValidationError(f"Portion must be at most {MAX_PORTION_G:g} grams")
    return float(portion_g)


def build_snapshot(entry: CatalogEntry, portion_g: float) -> NutritionSnapshot:
    """Build the snapshot stored with a food log entry."""
    return scale_profile(entry.per_100g, validate_portion(portion_g))
