"""Supabase repository for food log entries."""

from dataclasses import dataclass, replace

from supabase import Client

from healthos_nutrition.domain.errors import StoreError
from healthos_nutrition.domain.food_log import FoodLogEntry
from healthos_nutrition.services.food_log import FoodLogRepository


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for the ``food_entries`` table."""

    client: Client

    def create_entry(self, entry: FoodLogEntry) -> FoodLogEntry:
        """Insert a food entry row and return the entry with its id."""
        response = (
            self.client.table("food_entries")
            .insert(
                {
                    "user_id": str(entry.user_id),
                    "food_catalog_id": entry.food_catalog_id,
                    "food_name": entry.food_name,
                    "portion_g": entry.portion_g,
                    "meal_type": entry.meal_type.value if entry.meal_type else None,
                    "nutrition_snapshot": entry.nutrition_snapshot.to_dict(),
                    "notes": entry.notes,
                    "logged_at": entry.logged_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise StoreError("Failed to create food entry")
        return replace(entry, id=str(response.data[0]["id"]))
