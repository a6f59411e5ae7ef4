import pytest

from conftest import ing, sub
from recipecost.data.loader import CatalogDatabase
from recipecost.engine import CostCalculator
from recipecost.errors import CycleError, MissingEntityError
from recipecost.graph import Projection
from recipecost.models import EntityKind, Recipe

INGREDIENTS_TSV = """Slug\tName\tCost\tUnit\tConversion\tVAT
flour\tFlour\t100\t1000g\t\t
cheese\tMozzarella\t800\t1kg\t\tno
bread\tSourdough\t400\t1 loaf\t1 loaf = 16 slices\t
pepperoni\tPepperoni\t1200\t1kg\t\tyes
# comment\t\t\t\t\t
broken\tBroken\tabc\t1kg\t\t
nounit\tNo Unit\t100\t\t\t
"""

RECIPES_TSV = """Recipe\tName\tStage\tCategory\tSellPrice\tTargetMargin\tVAT\tYield\tItem\tKind\tQuantity\tNotes
base-pizza\tBase Pizza\tprep\tbase\t\t\t\t1 each\tflour\tingredient\t250g\t
base-pizza\t\t\t\t\t\t\t\tcheese\tingredient\t125g\tgrated
pepperoni-pizza\tPepperoni Pizza\tmenu\tpizza\t1200\t70\tyes\t\tpepperoni\tingredient\t60g\t
pepperoni-pizza\t\t\t\t\t\t\t\tbase-pizza\trecipe\t1 each\t
pepperoni-pizza\t\t\t\t\t\t\t\tbasil\tgarnish\t2 leaves\t
pepperoni-pizza\t\t\t\t\t\t\t\tolives\tingredient\t\t
"""


@pytest.fixture
def tsv_db(tmp_path):
    ingredients = tmp_path / "ingredients.tsv"
    recipes = tmp_path / "recipes.tsv"
    ingredients.write_text(INGREDIENTS_TSV, encoding="utf-8")
    recipes.write_text(RECIPES_TSV, encoding="utf-8")
    return CatalogDatabase.from_tsv(ingredients, recipes)


def test_load_ingredients(tsv_db):
    assert set(tsv_db.ingredients) == {"flour", "cheese", "bread", "pepperoni"}
    bread = tsv_db.get_ingredient("bread")
    assert bread.purchase_cost == 400
    assert bread.conversion_rule == "1 loaf = 16 slices"
    assert not bread.includes_vat
    assert tsv_db.get_ingredient("pepperoni").includes_vat
    assert tsv_db.get_ingredient("flour").conversion_rule is None


def test_load_recipes(tsv_db):
    pizza = tsv_db.get_recipe("pepperoni-pizza")
    assert pizza.name == "Pepperoni Pizza"
    assert pizza.stage == "menu"
    assert pizza.category == "pizza"
    assert pizza.costing.sell_price == 1200
    assert pizza.costing.target_margin == 70
    assert pizza.costing.includes_vat
    # Unknown kind and missing quantity rows are skipped
    assert [line.slug for line in pizza.lines] == ["pepperoni", "base-pizza"]
    assert pizza.lines[1].kind is EntityKind.RECIPE
    assert pizza.sub_recipes() == ["base-pizza"]
    assert pizza.ingredients() == ["pepperoni"]

    base = tsv_db.get_recipe("base-pizza")
    assert base.lines[1].notes == "grated"
    assert base.yield_amount == 1
    assert base.yield_unit == "each"
    assert base.has_yield


def test_loaded_catalog_costs(tsv_db):
    node = CostCalculator(tsv_db).cost("pepperoni-pizza")
    # pepperoni 60 + base (flour 25 + cheese 100)
    assert node.total_cost == 185


def test_skipped_rows_logged(tmp_path, caplog):
    ingredients = tmp_path / "ingredients.tsv"
    recipes = tmp_path / "recipes.tsv"
    ingredients.write_text(INGREDIENTS_TSV, encoding="utf-8")
    recipes.write_text(RECIPES_TSV, encoding="utf-8")

    with caplog.at_level("WARNING"):
        CatalogDatabase.from_tsv(ingredients, recipes)

    assert "Skipping ingredient broken" in caplog.text
    assert "Skipping ingredient nounit" in caplog.text
    assert "unknown kind" in caplog.text


def test_build_graph(pizza_catalog):
    graph = pizza_catalog.build_graph()

    assert graph.size == 8
    assert graph.get("base-pizza") is pizza_catalog.get_recipe("base-pizza")
    assert graph.dependencies("pepperoni-pizza", Projection.ID) == [
        "tomato-sauce",
        "cheese",
        "flour",
        "base-pizza",
        "pepperoni",
    ]


def test_calculation_order_and_usage_paths(pizza_catalog):
    graph = pizza_catalog.build_graph()
    assert pizza_catalog.calculation_order(graph, "pepperoni-pizza") == ["base-pizza"]
    assert pizza_catalog.usage_paths(graph, "pepperoni-pizza", "cheese") == [
        ["pepperoni-pizza", "base-pizza", "cheese"]
    ]


def test_build_graph_detects_cycles():
    db = CatalogDatabase(
        [],
        [
            Recipe("a", "A", lines=(sub("b", "1 each"),)),
            Recipe("b", "B", lines=(sub("c", "1 each"),)),
            Recipe("c", "C", lines=(sub("a", "1 each"),)),
        ],
    )
    with pytest.raises(CycleError) as exc:
        db.build_graph()
    assert exc.value.cycle[0] == exc.value.cycle[-1]
    assert set(exc.value.cycle) == {"a", "b", "c"}


def test_build_graph_missing_reference():
    db = CatalogDatabase([], [Recipe("a", "A", lines=(ing("ghost", "1 each"),))])
    with pytest.raises(MissingEntityError) as exc:
        db.build_graph()
    assert exc.value.slug == "ghost"
