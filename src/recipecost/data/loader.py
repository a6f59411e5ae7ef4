"""TSV parser and catalog database."""

import csv
import logging
from collections import defaultdict
from pathlib import Path
from typing import Iterable

from recipecost.errors import MissingEntityError, RecipeCostError
from recipecost.graph import DependencyGraph, Projection
from recipecost.models.recipe import (
    CostingPolicy,
    EntityKind,
    Ingredient,
    IngredientLine,
    Recipe,
)
from recipecost.units import parse_unit

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "y"}


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUE


def _optional_number(value: str | None, cast=float):
    value = (value or "").strip()
    return cast(value) if value else None


class CatalogDatabase:
    """Indexes ingredients and recipes by slug and builds their dependency graph."""

    def __init__(
        self,
        ingredients: Iterable[Ingredient] = (),
        recipes: Iterable[Recipe] = (),
    ):
        self.ingredients: dict[str, Ingredient] = {}  # slug -> Ingredient
        self.recipes: dict[str, Recipe] = {}  # slug -> Recipe

        for ingredient in ingredients:
            self.ingredients[ingredient.slug] = ingredient
        for recipe in recipes:
            self.recipes[recipe.slug] = recipe

    @classmethod
    def from_tsv(cls, ingredients_path: Path, recipes_path: Path) -> "CatalogDatabase":
        db = cls()
        db._load_ingredients(ingredients_path)
        db._load_recipes(recipes_path)
        return db

    def _load_ingredients(self, path: Path) -> None:
        """Parse ingredient TSV: Slug, Name, Cost, Unit, Conversion, VAT."""
        with open(path, "r", encoding="utf-8") as f:
            reader = csv.DictReader(f, delimiter="\t")
            for row in reader:
                slug = (row.get("Slug") or "").strip()
                if not slug or slug.startswith("#"):
                    continue

                unit = (row.get("Unit") or "").strip()
                try:
                    cost = int((row.get("Cost") or "").strip())
                except ValueError:
                    logger.warning("Skipping ingredient %s: invalid cost %r", slug, row.get("Cost"))
                    continue
                if not unit:
                    logger.warning("Skipping ingredient %s: no purchase unit", slug)
                    continue

                self.ingredients[slug] = Ingredient(
                    slug=slug,
                    name=(row.get("Name") or slug).strip(),
                    purchase_cost=cost,
                    purchase_unit=unit,
                    conversion_rule=(row.get("Conversion") or "").strip() or None,
                    includes_vat=_flag(row.get("VAT")),
                )

    def _load_recipes(self, path: Path) -> None:
        """Parse recipe TSV, one row per ingredient-line, grouped by recipe slug."""
        # Group rows by recipe slug
        recipe_rows: dict[str, list[dict]] = defaultdict(list)

        with open(path, "r", encoding="utf-8") as f:
            reader = csv.DictReader(f, delimiter="\t")
            for row in reader:
                slug = (row.get("Recipe") or "").strip()
                if not slug or slug.startswith("#"):
                    continue
                recipe_rows[slug].append(row)

        for slug, rows in recipe_rows.items():
            first_row = rows[0]

            try:
                costing = CostingPolicy(
                    sell_price=_optional_number(first_row.get("SellPrice"), int),
                    target_margin=_optional_number(first_row.get("TargetMargin")),
                    includes_vat=_flag(first_row.get("VAT")),
                )
            except ValueError:
                logger.warning("Skipping recipe %s: invalid costing columns", slug)
                continue

            yield_amount = yield_unit = None
            yield_text = (first_row.get("Yield") or "").strip()
            if yield_text:
                try:
                    parsed = parse_unit(yield_text)
                    yield_amount, yield_unit = parsed.amount, parsed.unit
                except RecipeCostError as e:
                    logger.warning("Ignoring yield of recipe %s: %s", slug, e)

            lines = []
            for row in rows:
                item = (row.get("Item") or "").strip()
                if not item:
                    continue
                quantity = (row.get("Quantity") or "").strip()
                if not quantity:
                    logger.warning("Skipping line %s in recipe %s: no quantity", item, slug)
                    continue
                try:
                    kind = EntityKind((row.get("Kind") or "ingredient").strip().lower())
                except ValueError:
                    logger.warning("Skipping line %s in recipe %s: unknown kind", item, slug)
                    continue
                lines.append(
                    IngredientLine(item, kind, quantity, (row.get("Notes") or "").strip())
                )

            self.recipes[slug] = Recipe(
                slug=slug,
                name=(first_row.get("Name") or slug).strip(),
                lines=tuple(lines),
                costing=costing,
                stage=(first_row.get("Stage") or "").strip(),
                category=(first_row.get("Category") or "").strip(),
                yield_amount=yield_amount,
                yield_unit=yield_unit,
            )

    def get_ingredient(self, slug: str) -> Ingredient | None:
        return self.ingredients.get(slug)

    def get_recipe(self, slug: str) -> Recipe | None:
        return self.recipes.get(slug)

    def build_graph(self) -> DependencyGraph[Ingredient | Recipe]:
        """One node per entity, one edge per ingredient-line, validated acyclic.

        Raises MissingEntityError for lines referencing unknown slugs and
        CycleError for circular recipe references.
        """
        graph: DependencyGraph[Ingredient | Recipe] = DependencyGraph()

        for slug, ingredient in self.ingredients.items():
            graph.add_node(slug, ingredient)
        for slug, recipe in self.recipes.items():
            if slug in self.ingredients:
                logger.warning("Recipe %s shadows an ingredient with the same slug", slug)
            graph.add_node(slug, recipe)

        for recipe in self.recipes.values():
            for line in recipe.lines:
                lookup = (
                    self.ingredients if line.kind is EntityKind.INGREDIENT else self.recipes
                )
                if line.slug not in lookup:
                    raise MissingEntityError(line.slug, line.kind.value)
                graph.set_dependency(recipe.slug, line.slug)

        graph.validate()
        logger.debug("Built dependency graph with %d nodes", graph.size)
        return graph

    def calculation_order(self, graph: DependencyGraph, slug: str) -> list[str]:
        """Sub-recipes of ``slug`` in the order they must be costed."""
        return [s for s in graph.dependencies(slug, Projection.ID) if s in self.recipes]

    def usage_paths(self, graph: DependencyGraph, recipe: str, ingredient: str) -> list[list[str]]:
        """Every route by which ``recipe`` ends up using ``ingredient``."""
        return graph.find(recipe, ingredient, Projection.ID)
