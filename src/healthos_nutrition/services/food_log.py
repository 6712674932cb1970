"""Food logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from healthos_nutrition.domain.errors import (
    CatalogEntryNotFound,
    StoreError,
    ValidationError,
)
from healthos_nutrition.domain.food_log import FoodLogEntry, MealType
from healthos_nutrition.services.catalog import CatalogService
from healthos_nutrition.services.portion import build_snapshot

MAX_NOTES_LENGTH = 1000

_logger = logging.getLogger(__name__)


class FoodLogRepository(Protocol):
    """Persistence interface for food log entries."""

    def create_entry(self, entry: FoodLogEntry) -> FoodLogEntry:
        """Persist a log entry and return it with its id."""


@dataclass
class FoodLogService:
    """Logs a portion of a catalog food with an immutable nutrition snapshot."""

    catalog: CatalogService
    repository: FoodLogRepository

    def log_food(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_catalog_id: str,
        portion_g: float,
        meal_type: MealType | None = None,
        notes: str | None = None,
        logged_at: datetime | None = None,
    ) -> FoodLogEntry:
        """Scale the catalog food to the portion and persist the log entry."""
        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationError(
                f"Notes must be at most {MAX_NOTES_LENGTH} characters"
            )
        catalog_entry = self.catalog.get(user_id, food_catalog_id)
        if catalog_entry is None:
            raise CatalogEntryNotFound(food_catalog_id)
        snapshot = build_snapshot(catalog_entry, portion_g)
        entry = FoodLogEntry(
            id=None,
            user_id=user_id,
            food_catalog_id=food_catalog_id,
            food_name=catalog_entry.name,
            portion_g=float(portion_g),
            meal_type=meal_type,
            notes=notes,
            logged_at=logged_at or datetime.now(tz=UTC),
            nutrition_snapshot=snapshot,
        )
        try:
            created = self.repository.create_entry(entry)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"Failed to log food entry: {exc}") from exc
        _logger.info(
            "Logged %sg of catalog entry %s (calories=%s)",
            entry.portion_g,
            food_catalog_id,
            snapshot.calories,
        )
        return created
