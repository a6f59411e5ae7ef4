import pytest

from recipecost.config import CostingConfig
from recipecost.data.loader import CatalogDatabase
from recipecost.models import CostingPolicy, EntityKind, Ingredient, IngredientLine, Recipe


def ing(slug, quantity, notes=""):
    return IngredientLine(slug, EntityKind.INGREDIENT, quantity, notes)


def sub(slug, quantity, notes=""):
    return IngredientLine(slug, EntityKind.RECIPE, quantity, notes)


@pytest.fixture
def config():
    return CostingConfig(vat_rate=0.2, margin_target=60.0, max_depth=10)


@pytest.fixture
def pizza_catalog():
    """Pepperoni pizza built on a base pizza that is itself a recipe."""
    ingredients = [
        Ingredient("flour", "Flour", 100, "1000g"),
        Ingredient("cheese", "Mozzarella", 800, "1kg"),
        Ingredient("tomato-sauce", "Tomato Sauce", 300, "1 l"),
        Ingredient("pepperoni", "Pepperoni", 1200, "1kg", includes_vat=True),
        Ingredient("bread", "Sourdough", 400, "1 loaf", conversion_rule="1 loaf = 16 slices"),
    ]
    recipes = [
        Recipe(
            "base-pizza",
            "Base Pizza",
            lines=(ing("flour", "250g"), ing("cheese", "125g"), ing("tomato-sauce", "80ml")),
        ),
        Recipe(
            "pepperoni-pizza",
            "Pepperoni Pizza",
            lines=(ing("pepperoni", "60g"), sub("base-pizza", "1 each")),
            costing=CostingPolicy(sell_price=1200, target_margin=70),
        ),
        Recipe(
            "garlic-bread",
            "Garlic Bread",
            lines=(ing("bread", "4 slices"),),
            costing=CostingPolicy(target_margin=75),
        ),
    ]
    return CatalogDatabase(ingredients, recipes)
