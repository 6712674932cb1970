"""Nutrition domain models."""

from dataclasses import asdict, dataclass, field, fields
from enum import Enum

DEFAULT_PORTION_G = 100.0


def coerce_float(value: object) -> float | None:
    """Coerce a stored nutrient value into a float, or None if unusable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class Vitamins:
    """Vitamin content per 100 grams."""

    a_ug: float | None = None
    c_mg: float | None = None
    d_ug: float | None = None
    e_mg: float | None = None
    k_ug: float | None = None
    b1_mg: float | None = None
    b2_mg: float | None = None
    b3_mg: float | None = None
    b6_mg: float | None = None
    b12_ug: float | None = None
    folate_ug: float | None = None


@dataclass(frozen=True)
class Minerals:
    """Mineral content per 100 grams."""

    calcium_mg: float | None = None
    iron_mg: float | None = None
    magnesium_mg: float | None = None
    zinc_mg: float | None = None
    phosphorus_mg: float | None = None
    selenium_ug: float | None = None


MACRO_FIELDS = (
    "calories",
    "protein_g",
    "fat_g",
    "carbs_g",
    "fiber_g",
    "sugar_g",
    "sodium_mg",
    "saturated_fat_g",
    "cholesterol_mg",
    "potassium_mg",
)


@dataclass(frozen=True)
class NutritionProfile:
    """Canonical nutrient profile expressed per 100 grams.

    Units are fixed by field name (kcal, grams, milligrams, micrograms).
    A ``None`` value means the nutrient is unknown, not zero.
    """

    calories: float | None = None
    protein_g: float | None = None
    fat_g: float | None = None
    carbs_g: float | None = None
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    saturated_fat_g: float | None = None
    cholesterol_mg: float | None = None
    potassium_mg: float | None = None
    vitamins: Vitamins = field(default_factory=Vitamins)
    minerals: Minerals = field(default_factory=Minerals)

    def to_dict(self) -> dict[str, object]:
        """Return the JSON shape stored in the catalog ``per_100g`` column."""
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: object) -> "NutritionProfile":
        """Build a profile from stored JSON, ignoring unknown or bad values."""
        if not isinstance(payload, dict):
            return cls()
        macros = {name: coerce_float(payload.get(name)) for name in MACRO_FIELDS}
        return cls(
            **macros,
            vitamins=_nested(Vitamins, payload.get("vitamins")),
            minerals=_nested(Minerals, payload.get("minerals")),
        )


def _nested(
    model: type[Vitamins] | type[Minerals], payload: object
) -> Vitamins | Minerals:
    if not isinstance(payload, dict):
        return model()
    values = {
        item.name: coerce_float(payload.get(item.name)) for item in fields(model)
    }
    return model(**values)


@dataclass(frozen=True)
class NutritionSnapshot:
    """Portion-scaled macronutrients attached to one food log entry."""

    calories: float | None = None
    protein_g: float | None = None
    fat_g: float | None = None
    carbs_g: float | None = None
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None
    saturated_fat_g: float | None = None
    cholesterol_mg: float | None = None
    potassium_mg: float | None = None

    def to_dict(self) -> dict[str, float | None]:
        """Return the snapshot as a plain mapping for persistence."""
        return asdict(self)


class CatalogSource(str, Enum):
    """Origin of a catalog entry."""

    PERSONAL = "personal"
    USDA = "usda"
    OPENFOODFACTS = "openfoodfacts"


def normalize_name(name: str) -> str:
    """Return the lowercased, trimmed form used for matching."""
    return name.strip().lower()


@dataclass(frozen=True)
class CatalogEntry:
    """A food known to the catalog, persisted or freshly resolved."""

    name: str
    name_normalized: str
    source: CatalogSource
    per_100g: NutritionProfile
    source_id: str | None = None
    barcode: str | None = None
    default_portion_g: float | None = None
    id: str | None = None
    times_logged: int | None = None
    brand: str | None = None

    def portion_or_default(self) -> float:
        """Return the default portion, falling back to 100 grams."""
        return self.default_portion_g or DEFAULT_PORTION_G

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""
        return {
            "id": self.id,
            "name": self.name,
            "name_normalized": self.name_normalized,
            "source": self.source.value,
            "source_id": self.source_id,
            "barcode": self.barcode,
            "brand": self.brand,
            "default_portion_g": self.default_portion_g,
            "per_100g": self.per_100g.to_dict(),
            "times_logged": self.times_logged,
        }


@dataclass(frozen=True)
class UsdaFoodSummary:
    """Lightweight USDA search hit."""

    fdc_id: int
    description: str
    data_type: str | None
    brand_owner: str | None


@dataclass(frozen=True)
class SearchResultEnvelope:
    """Search results grouped by source, each in provider relevance order."""

    personal: list[CatalogEntry] = field(default_factory=list)
    usda: list[CatalogEntry] = field(default_factory=list)
    openfoodfacts: list[CatalogEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, object]]]:
        """Return the envelope as the search response body."""
        return {
            "personal": [entry.to_dict() for entry in self.personal],
            "usda": [entry.to_dict() for entry in self.usda],
            "openfoodfacts": [entry.to_dict() for entry in self.openfoodfacts],
        }
