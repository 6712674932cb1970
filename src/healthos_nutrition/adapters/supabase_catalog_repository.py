"""Supabase implementation of the food catalog store."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from healthos_nutrition.domain.errors import StoreError
from healthos_nutrition.domain.nutrition import (
    CatalogEntry,
    CatalogSource,
    NutritionProfile,
    normalize_name,
)
from healthos_nutrition.services.catalog import CatalogStore

_TABLE = "food_catalog"
# Personal foods are stored as "user" in the database.
_STORED_PERSONAL = "user"


@dataclass
class SupabaseCatalogRepository(CatalogStore):
    """Supabase-backed repository for the ``food_catalog`` table."""

    client: Client

    def find_personal(
        self, user_id: UUID, query: str, limit: int
    ) -> list[CatalogEntry]:
        """Rank the user's foods with the fuzzy-match suggestion function."""
        response = self.client.rpc(
            "get_food_suggestions",
            {"p_user_id": str(user_id), "p_query": query, "p_limit": limit},
        ).execute()
        rows = response.data or []
        return [
            _parse_entry(row, default_source=CatalogSource.PERSONAL)
            for row in rows[:limit]
        ]

    def find_by_source_id(
        self, user_id: UUID, source: CatalogSource, source_id: str
    ) -> CatalogEntry | None:
        """Return the saved entry for an external identifier, if any."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .eq("source", _to_stored_source(source))
            .eq("source_id", source_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def insert(self, user_id: UUID, entry: CatalogEntry) -> CatalogEntry:
        """Insert a new entry and return the stored row."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "user_id": str(user_id),
                    "name": entry.name,
                    "name_normalized": entry.name_normalized,
                    "source": _to_stored_source(entry.source),
                    "source_id": entry.source_id,
                    "barcode": entry.barcode,
                    "default_portion_g": entry.portion_or_default(),
                    "per_100g": entry.per_100g.to_dict(),
                }
            )
            .execute()
        )
        if not response.data:
            raise StoreError("Failed to create catalog entry")
        return _parse_entry(response.data[0])

    def get_entry(self, user_id: UUID, entry_id: str) -> CatalogEntry | None:
        """Return one of the user's entries by id."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("id", entry_id)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])


def _to_stored_source(source: CatalogSource) -> str:
    if source is CatalogSource.PERSONAL:
        return _STORED_PERSONAL
    return source.value


def _from_stored_source(
    raw: object, default_source: CatalogSource | None = None
) -> CatalogSource:
    if raw is None and default_source is not None:
        return default_source
    if raw == _STORED_PERSONAL:
        return CatalogSource.PERSONAL
    try:
        return CatalogSource(str(raw))
    except ValueError as exc:
        raise StoreError(f"Unknown catalog source: {raw!r}") from exc


def _parse_entry(
    row: dict[str, object], default_source: CatalogSource | None = None
) -> CatalogEntry:
    """Parse a catalog row into a domain model."""
    name = str(row.get("name", ""))
    portion = row.get("default_portion_g")
    times_logged = row.get("times_logged")
    return CatalogEntry(
        id=str(row["id"]) if row.get("id") is not None else None,
        name=name,
        name_normalized=str(row.get("name_normalized") or normalize_name(name)),
        source=_from_stored_source(row.get("source"), default_source),
        source_id=row.get("source_id"),
        barcode=row.get("barcode"),
        default_portion_g=float(portion) if portion is not None else None,
        per_100g=NutritionProfile.from_dict(row.get("per_100g")),
        times_logged=int(times_logged) if times_logged is not None else None,
    )
