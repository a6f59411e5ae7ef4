"""Standard unit tables, aliases and symbol normalisation.

Conversion strategy:
- Mass units convert through grams
- Volume units convert through millilitres
- Count units convert through single items
Anything else is a custom unit and needs an explicit conversion rule.
"""

from enum import Enum


class Dimension(Enum):
    MASS = "mass"
    VOLUME = "volume"
    COUNT = "count"


MASS_TO_GRAMS = {
    "mg": 0.001,
    "g": 1.0,
    "kg": 1000.0,
    "oz": 28.349523125,
    "lb": 453.59237,
}

VOLUME_TO_ML = {
    "ml": 1.0,
    "cl": 10.0,
    "l": 1000.0,
    "tsp": 4.92892159375,
    "tbsp": 14.78676478125,
    "fl-oz": 29.5735295625,
    "cup": 236.5882365,
    "pt": 473.176473,
    "qt": 946.352946,
    "gal": 3785.411784,
}

COUNT_TO_EACH = {
    "each": 1.0,
    "piece": 1.0,
    "dozen": 12.0,
}

TABLES = {
    Dimension.MASS: MASS_TO_GRAMS,
    Dimension.VOLUME: VOLUME_TO_ML,
    Dimension.COUNT: COUNT_TO_EACH,
}

UNIT_ALIASES = {
    # Mass
    "gram": "g",
    "gramme": "g",
    "gr": "g",
    "kilogram": "kg",
    "kilo": "kg",
    "milligram": "mg",
    "ounce": "oz",
    "pound": "lb",
    "lbs": "lb",
    # Volume
    "millilitre": "ml",
    "milliliter": "ml",
    "centilitre": "cl",
    "centiliter": "cl",
    "litre": "l",
    "liter": "l",
    "ltr": "l",
    "teaspoon": "tsp",
    "tablespoon": "tbsp",
    "tbs": "tbsp",
    "fl oz": "fl-oz",
    "floz": "fl-oz",
    "fluid ounce": "fl-oz",
    "pint": "pt",
    "quart": "qt",
    "gallon": "gal",
    # Count
    "ea": "each",
    "pc": "piece",
    "pcs": "piece",
}

DESCRIPTIVE_QUANTITIES = ("to taste", "pinch", "handful", "dash", "splash")

_IRREGULAR_PLURALS = {
    "loaves": "loaf",
    "leaves": "leaf",
    "halves": "half",
    "knives": "knife",
    "potatoes": "potato",
    "tomatoes": "tomato",
    "pies": "pie",
}


def singularize(word: str) -> str:
    """Best-effort English singular for a unit word ("boxes" -> "box")."""
    if word in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[word]
    if len(word) > 3 and word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith(("ches", "shes", "sses", "xes", "zes")):
        return word[:-2]
    if len(word) > 2 and word.endswith("s") and not word.endswith(("ss", "us")):
        return word[:-1]
    return word


def _is_known(symbol: str) -> bool:
    return any(symbol in table for table in TABLES.values())


def normalize_unit(symbol: str) -> str:
    """Lower-case, fold aliases and plurals: "Grams" -> "g", "loaves" -> "loaf"."""
    unit = " ".join(symbol.lower().split())
    if unit in UNIT_ALIASES:
        return UNIT_ALIASES[unit]
    if _is_known(unit):
        return unit

    single = singularize(unit)
    return UNIT_ALIASES.get(single, single)


def dimension_of(symbol: str) -> Dimension | None:
    """Dimension of a normalised unit, or None for custom units."""
    for dimension, table in TABLES.items():
        if symbol in table:
            return dimension
    return None
