import pytest

from conftest import ing, sub
from recipecost.config import CostingConfig
from recipecost.data.loader import CatalogDatabase
from recipecost.engine import CostCalculator, compute_recipe_cost
from recipecost.errors import (
    IncompatibleUnitsError,
    MaxDepthExceeded,
    MissingEntityError,
    UnitParseError,
)
from recipecost.models import EntityKind, Ingredient, Recipe
from recipecost.engine.calculator import round_minor


def test_round_minor():
    assert round_minor(20.000000000000004) == 20
    assert round_minor(19.999999999) == 20
    assert round_minor(2.5) == 3
    assert round_minor(3.5) == 4
    assert round_minor(-2.5) == -3


def test_single_ingredient_line():
    flour = Ingredient("flour", "Flour", 100, "1000g")
    recipe = Recipe("dough", "Dough", lines=(ing("flour", "200g"),))
    db = CatalogDatabase([flour], [recipe])

    node = compute_recipe_cost(recipe, db)

    assert node.total_cost == 20
    assert len(node.lines) == 1
    line = node.lines[0]
    assert line.cost == 20
    assert line.kind is EntityKind.INGREDIENT
    assert line.converted_quantity == pytest.approx(200)
    assert line.unit_cost == pytest.approx(0.1)


def test_nested_recipe(pizza_catalog, config):
    calc = CostCalculator(pizza_catalog, config)
    node = calc.cost("pepperoni-pizza")

    # pepperoni: 1200 inc VAT -> 1000 net per kg, 60g -> 60
    # base: flour 25 + cheese 100 + sauce 24 = 149
    assert [line.slug for line in node.lines] == ["pepperoni", "base-pizza"]
    assert node.lines[0].cost == 60
    base_line = node.lines[1]
    assert base_line.kind is EntityKind.RECIPE
    assert base_line.recipe is not None
    assert base_line.recipe.total_cost == 149
    assert [line.cost for line in base_line.recipe.lines] == [25, 100, 24]
    assert base_line.cost == 149
    assert node.total_cost == 209


def test_custom_unit_with_conversion_rule(pizza_catalog, config):
    node = CostCalculator(pizza_catalog, config).cost("garlic-bread")
    # 4 slices of a 16 slice loaf costing 400
    assert node.total_cost == 100
    assert node.lines[0].converted_quantity == pytest.approx(0.25)


def test_sub_recipe_scaled_by_yield(config):
    db = CatalogDatabase(
        [
            Ingredient("tomato", "Tomato", 400, "1kg"),
            Ingredient("oil", "Olive Oil", 1000, "1 l"),
            Ingredient("dough", "Dough Ball", 50, "1 each"),
        ],
        [
            Recipe(
                "sauce",
                "Sauce",
                lines=(ing("tomato", "1kg"), ing("oil", "100ml")),
                yield_amount=1.0,
                yield_unit="kg",
            ),
            Recipe("pizza", "Pizza", lines=(ing("dough", "1 each"), sub("sauce", "80g"))),
        ],
    )
    node = CostCalculator(db, config).cost("pizza")

    sauce_line = node.lines[1]
    assert sauce_line.recipe.total_cost == 500
    # 80g of a 1kg batch
    assert sauce_line.converted_quantity == pytest.approx(0.08)
    assert sauce_line.cost == 40
    assert node.total_cost == 90


def test_sub_recipe_yield_not_convertible_uses_full_cost(config, caplog):
    db = CatalogDatabase(
        [Ingredient("tomato", "Tomato", 400, "1kg")],
        [
            Recipe("sauce", "Sauce", lines=(ing("tomato", "500g"),), yield_amount=1, yield_unit="kg"),
            Recipe("pizza", "Pizza", lines=(sub("sauce", "1 portion"),)),
        ],
    )
    with caplog.at_level("WARNING"):
        node = CostCalculator(db, config).cost("pizza")

    assert node.total_cost == 200
    assert "using full cost" in caplog.text


def test_missing_ingredient(config):
    recipe = Recipe("dough", "Dough", lines=(ing("flour", "200g"),))
    db = CatalogDatabase([], [recipe])
    with pytest.raises(MissingEntityError) as exc:
        CostCalculator(db, config).cost("dough")
    assert exc.value.slug == "flour"
    assert exc.value.kind == "ingredient"


def test_missing_recipe(config):
    with pytest.raises(MissingEntityError):
        CostCalculator(CatalogDatabase(), config).cost("nope")


def test_incompatible_units(config):
    db = CatalogDatabase(
        [Ingredient("milk", "Milk", 100, "1 l")],
        [Recipe("custard", "Custard", lines=(ing("milk", "200g"),))],
    )
    with pytest.raises(IncompatibleUnitsError):
        CostCalculator(db, config).cost("custard")


def test_unparseable_quantity(config):
    db = CatalogDatabase(
        [Ingredient("salt", "Salt", 50, "1kg")],
        [Recipe("fries", "Fries", lines=(ing("salt", "to taste"),))],
    )
    with pytest.raises(UnitParseError):
        CostCalculator(db, config).cost("fries")


def test_zero_purchase_amount(config):
    db = CatalogDatabase(
        [Ingredient("salt", "Salt", 50, "0g")],
        [Recipe("fries", "Fries", lines=(ing("salt", "5g"),))],
    )
    with pytest.raises(UnitParseError) as exc:
        CostCalculator(db, config).cost("fries")
    assert "purchase amount must be positive" in str(exc.value)


def test_max_depth_circuit_breaker():
    recipes = [
        Recipe(f"r{i}", f"R{i}", lines=(sub(f"r{i + 1}", "1 each"),)) for i in range(5)
    ]
    recipes.append(Recipe("r5", "R5"))
    db = CatalogDatabase([], recipes)

    assert CostCalculator(db, CostingConfig(max_depth=5)).cost("r0").total_cost == 0
    with pytest.raises(MaxDepthExceeded):
        CostCalculator(db, CostingConfig(max_depth=4)).cost("r0")


def test_cycle_trips_circuit_breaker():
    db = CatalogDatabase(
        [],
        [
            Recipe("a", "A", lines=(sub("b", "1 each"),)),
            Recipe("b", "B", lines=(sub("a", "1 each"),)),
        ],
    )
    with pytest.raises(MaxDepthExceeded):
        CostCalculator(db, CostingConfig(max_depth=10)).cost("a")


def test_does_not_mutate_catalog(pizza_catalog, config):
    before = dict(pizza_catalog.recipes)
    CostCalculator(pizza_catalog, config).cost("pepperoni-pizza")
    assert pizza_catalog.recipes == before
