"""Translate provider nutrient encodings into the canonical per-100g profile.

This is the only place units are converted. USDA FoodData Central already
reports amounts in the canonical unit for each nutrient number, so values
pass through. OpenFoodFacts stores sodium, cholesterol, potassium and most
micronutrients in grams; those are scaled to milligrams or micrograms here.
"""

from healthos_nutrition.domain.nutrition import (
    Minerals,
    NutritionProfile,
    Vitamins,
    coerce_float,
)

_USDA_MACROS = {
    1008: "calories",
    1003: "protein_g",
    1004: "fat_g",
    1005: "carbs_g",
    1079: "fiber_g",
    2000: "sugar_g",
    1093: "sodium_mg",
    1258: "saturated_fat_g",
    1253: "cholesterol_mg",
    1092: "potassium_mg",
}

_USDA_VITAMINS = {
    1106: "a_ug",
    1162: "c_mg",
    1114: "d_ug",
    1109: "e_mg",
    1185: "k_ug",
    1165: "b1_mg",
    1166: "b2_mg",
    1167: "b3_mg",
    1175: "b6_mg",
    1178: "b12_ug",
    1177: "folate_ug",
}

_USDA_MINERALS = {
    1087: "calcium_mg",
    1089: "iron_mg",
    1090: "magnesium_mg",
    1095: "zinc_mg",
    1091: "phosphorus_mg",
    1103: "selenium_ug",
}

_USDA_CODES = {*_USDA_MACROS, *_USDA_VITAMINS, *_USDA_MINERALS}

_G_TO_MG = 1000.0
_G_TO_UG = 1_000_000.0

# field -> (OpenFoodFacts key, multiplier from the provider's unit)
_OFF_MACROS = {
    "calories": ("energy-kcal_100g", 1.0),
    "protein_g": ("proteins_100g", 1.0),
    "fat_g": ("fat_100g", 1.0),
    "carbs_g": ("carbohydrates_100g", 1.0),
    "fiber_g": ("fiber_100g", 1.0),
    "sugar_g": ("sugars_100g", 1.0),
    "sodium_mg": ("sodium_100g", _G_TO_MG),
    "saturated_fat_g": ("saturated-fat_100g", 1.0),
    "cholesterol_mg": ("cholesterol_100g", _G_TO_MG),
    "potassium_mg": ("potassium_100g", _G_TO_MG),
}

_OFF_VITAMINS = {
    "a_ug": ("vitamin-a_100g", _G_TO_UG),
    "c_mg": ("vitamin-c_100g", _G_TO_MG),
    "d_ug": ("vitamin-d_100g", _G_TO_UG),
    "e_mg": ("vitamin-e_100g", _G_TO_MG),
    "k_ug": ("vitamin-k_100g", _G_TO_UG),
    "b1_mg": ("vitamin-b1_100g", _G_TO_MG),
    "b2_mg": ("vitamin-b2_100g", _G_TO_MG),
    "b3_mg": ("vitamin-b3_100g", _G_TO_MG),
    "b6_mg": ("vitamin-b6_100g", _G_TO_MG),
    "b12_ug": ("vitamin-b12_100g", _G_TO_UG),
    "folate_ug": ("vitamin-b9_100g", _G_TO_UG),
}

_OFF_MINERALS = {
    "calcium_mg": ("calcium_100g", _G_TO_MG),
    "iron_mg": ("iron_100g", _G_TO_MG),
    "magnesium_mg": ("magnesium_100g", _G_TO_MG),
    "zinc_mg": ("zinc_100g", _G_TO_MG),
    "phosphorus_mg": ("phosphorus_100g", _G_TO_MG),
    "selenium_ug": ("selenium_100g", _G_TO_UG),
}


def map_usda_nutrients(food_nutrients: object) -> NutritionProfile:
    """Map an FDC ``foodNutrients`` list into a canonical profile."""
    macros: dict[str, float] = {}
    vitamins: dict[str, float] = {}
    minerals: dict[str, float] = {}
    if not isinstance(food_nutrients, list):
        return NutritionProfile()

    for nutrient in food_nutrients:
        if not isinstance(nutrient, dict):
            continue
        number = _usda_nutrient_code(nutrient)
        amount = coerce_float(nutrient.get("amount", nutrient.get("value")))
        if number is None or amount is None:
            continue
        if number in _USDA_MACROS:
            macros[_USDA_MACROS[number]] = amount
        elif number in _USDA_VITAMINS:
            vitamins[_USDA_VITAMINS[number]] = amount
        elif number in _USDA_MINERALS:
            minerals[_USDA_MINERALS[number]] = amount

    return NutritionProfile(
        **macros,
        vitamins=Vitamins(**vitamins),
        minerals=Minerals(**minerals),
    )


def map_openfoodfacts_nutriments(nutriments: object) -> NutritionProfile:
    """Map an OpenFoodFacts ``nutriments`` object into a canonical profile."""
    if not isinstance(nutriments, dict):
        return NutritionProfile()
    return NutritionProfile(
        **_convert(nutriments, _OFF_MACROS),
        vitamins=Vitamins(**_convert(nutriments, _OFF_VITAMINS)),
        minerals=Minerals(**_convert(nutriments, _OFF_MINERALS)),
    )


def _convert(
    nutriments: dict[str, object], table: dict[str, tuple[str, float]]
) -> dict[str, float | None]:
    values: dict[str, float | None] = {}
    for field_name, (key, multiplier) in table.items():
        raw = coerce_float(nutriments.get(key))
        values[field_name] = raw * multiplier if raw is not None else None
    return values


def _usda_nutrient_code(nutrient: dict[str, object]) -> int | None:
    """Read the FDC nutrient id from the detail or abridged payload format."""
    info = nutrient.get("nutrient")
    candidates: list[object] = []
    if isinstance(info, dict):
        candidates.extend([info.get("id"), info.get("number")])
    candidates.extend([nutrient.get("nutrientId"), nutrient.get("number")])
    for raw in candidates:
        if isinstance(raw, bool) or raw is None:
            continue
        try:
            code = int(str(raw).strip())
        except ValueError:
            continue
        if code in _USDA_CODES:
            return code
    return None
