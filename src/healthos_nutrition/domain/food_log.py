"""Domain models for food logging."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from healthos_nutrition.domain.nutrition import NutritionSnapshot


class MealType(str, Enum):
    """Meal classification attached to a log entry."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class FoodLogEntry:
    """A logged portion of a catalog food with its nutrition snapshot."""

    id: str | None
    user_id: UUID
    food_catalog_id: str
    food_name: str
    portion_g: float
    meal_type: MealType | None
    notes: str | None
    logged_at: datetime
    nutrition_snapshot: NutritionSnapshot

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""
        return {
            "id": self.id,
            "user_id": str(self.user_id),
            "food_catalog_id": self.food_catalog_id,
            "food_name": self.food_name,
            "portion_g": self.portion_g,
            "meal_type": self.meal_type.value if self.meal_type else None,
            "notes": self.notes,
            "logged_at": self.logged_at.isoformat(),
            "nutrition_snapshot": self.nutrition_snapshot.to_dict(),
        }
