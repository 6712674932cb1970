"""Services for the user's personal food catalog."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from healthos_nutrition.domain.errors import StoreError, ValidationError
from healthos_nutrition.domain.nutrition import (
    DEFAULT_PORTION_G,
    CatalogEntry,
    CatalogSource,
    normalize_name,
)
from healthos_nutrition.services.portion import validate_portion

PERSONAL_SEARCH_LIMIT = 10
MAX_NAME_LENGTH = 500

_logger = logging.getLogger(__name__)


class CatalogStore(Protocol):
    """Persistence interface for catalog entries."""

    def find_personal(
        self, user_id: UUID, query: str, limit: int
    ) -> list[CatalogEntry]:
        """Return the user's best matching entries, at most ``limit``."""

    def find_by_source_id(
        self, user_id: UUID, source: CatalogSource, source_id: str
    ) -> CatalogEntry | None:
        """Return the user's entry for an external identifier, if saved."""

    def insert(self, user_id: UUID, entry: CatalogEntry) -> CatalogEntry:
        """Persist a new entry and return it with its id."""

    def get_entry(self, user_id: UUID, entry_id: str) -> CatalogEntry | None:
        """Return one of the user's entries by id."""


@dataclass
class CatalogService:
    """Application service for catalog lookups and saves."""

    store: CatalogStore

    def search_personal(
        self, user_id: UUID, query: str, limit: int = PERSONAL_SEARCH_LIMIT
    ) -> list[CatalogEntry]:
        """Search the personal catalog; any store failure is fatal."""
        try:
            return self.store.find_personal(user_id, query, limit)[:limit]
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"Personal catalog lookup failed: {exc}") from exc

    def save(self, user_id: UUID, entry: CatalogEntry) -> tuple[CatalogEntry, bool]:
        """Save an entry, reusing an existing one with the same source id.

        Returns the stored entry and whether a new row was inserted.
        """
        entry = _validated(entry)
        try:
            if entry.source_id:
                existing = self.store.find_by_source_id(
                    user_id, entry.source, entry.source_id
                )
                if existing is not None:
                    _logger.info(
                        "Reusing catalog entry %s for %s:%s",
                        existing.id,
                        entry.source.value,
                        entry.source_id,
                    )
                    return existing, False
            created = self.store.insert(user_id, entry)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"Failed to save catalog entry: {exc}") from exc
        _logger.info("Created catalog entry %s (%s)", created.id, entry.source.value)
        return created, True

    def get(self, user_id: UUID, entry_id: str) -> CatalogEntry | None:
        """Return a catalog entry by id."""
        try:
            return self.store.get_entry(user_id, entry_id)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"Catalog lookup failed: {exc}") from exc


def _validated(entry: CatalogEntry) -> CatalogEntry:
    """Reject malformed entries and fill in normalized defaults."""
    name = entry.name.strip()
    if not name:
        raise ValidationError("Catalog entry name must not be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Name must be at most {MAX_NAME_LENGTH} characters")
    portion = entry.default_portion_g
    if portion is not None:
        portion = validate_portion(portion)
    return replace(
        entry,
        name=name,
        name_normalized=normalize_name(entry.name_normalized or name),
        source_id=entry.source_id or None,
        default_portion_g=portion or DEFAULT_PORTION_G,
    )
