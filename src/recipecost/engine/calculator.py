"""Recipe cost and margin calculator."""

import logging
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal
from typing import Protocol

from recipecost.config import CostingConfig
from recipecost.errors import (
    IncompatibleUnitsError,
    InvalidCostingError,
    MaxDepthExceeded,
    MissingEntityError,
    UnitParseError,
)
from recipecost.models.cost import CostLine, MarginResult, RecipeCostNode
from recipecost.models.recipe import (
    CostingPolicy,
    EntityKind,
    Ingredient,
    IngredientLine,
    Recipe,
)
from recipecost.units import convert_units, parse_unit

logger = logging.getLogger(__name__)


class CostLookup(Protocol):
    """Resolves slugs referenced by ingredient-lines."""

    def get_ingredient(self, slug: str) -> Ingredient | None: ...

    def get_recipe(self, slug: str) -> Recipe | None: ...


def round_minor(value: float) -> int:
    """Round to whole minor currency units, halves away from zero."""
    return int(Decimal(repr(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _ceil_cents(value: float) -> float:
    """Round up to two decimal places: 12.583 -> 12.59, -10.004 -> -10.0."""
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_CEILING))


@dataclass
class _Frame:
    """Recipe being costed on the explicit work stack."""

    recipe: Recipe
    depth: int
    node: RecipeCostNode
    position: int = 0  # Index of the next ingredient-line to cost


class CostCalculator:
    """Costs recipes through a lookup and prices them against a costing policy.

    Sub-recipes are expanded with an explicit stack. The calculator assumes
    the caller has already validated the dependency graph for cycles; nesting
    deeper than ``config.max_depth`` raises MaxDepthExceeded regardless.
    """

    def __init__(self, lookup: CostLookup, config: CostingConfig | None = None):
        self.lookup = lookup
        self.config = config or CostingConfig()

    def cost(self, slug: str) -> RecipeCostNode:
        """Cost a recipe by slug."""
        return self.compute_recipe_cost(self._get_recipe(slug))

    def compute_recipe_cost(self, recipe: Recipe) -> RecipeCostNode:
        """Build the cost tree for ``recipe``; the root carries the total cost."""
        stack = [_Frame(recipe, 0, self._new_node(recipe))]

        while True:
            frame = stack[-1]

            if frame.position < len(frame.recipe.lines):
                line = frame.recipe.lines[frame.position]
                if line.kind is EntityKind.INGREDIENT:
                    frame.node.lines.append(self._ingredient_line(line))
                    frame.position += 1
                else:
                    depth = frame.depth + 1
                    if depth > self.config.max_depth:
                        raise MaxDepthExceeded(depth)
                    sub = self._get_recipe(line.slug)
                    stack.append(_Frame(sub, depth, self._new_node(sub)))
                continue

            # All lines costed
            stack.pop()
            node = frame.node
            node.total_cost = sum(line.cost for line in node.lines)
            logger.debug("Costed %s: %d", node.slug, node.total_cost)

            if not stack:
                return node

            parent = stack[-1]
            line = parent.recipe.lines[parent.position]
            parent.node.lines.append(self._recipe_line(line, frame.recipe, node))
            parent.position += 1

    def compute_margin(
        self, cost: int, costing: CostingPolicy, cost_includes_vat: bool = False
    ) -> MarginResult:
        """Derive sell price, margin and profit from a cost and a costing policy.

        Margin arithmetic is done ex-VAT. A sell price flagged as VAT-inclusive
        is reduced to its net value first, as is ``cost`` when
        ``cost_includes_vat`` is set.
        """
        vat_rate = self.config.vat_rate
        net_cost = cost / (1 + vat_rate) if cost_includes_vat else float(cost)
        target = costing.target_margin

        if target is not None and target >= 100:
            raise InvalidCostingError(f"Target margin must be below 100%, got {target}%")

        if costing.sell_price is not None:
            if costing.sell_price <= 0:
                raise InvalidCostingError(
                    f"Sell price must be positive, got {costing.sell_price}"
                )
            net_sell = (
                costing.sell_price / (1 + vat_rate)
                if costing.includes_vat
                else float(costing.sell_price)
            )
        elif target is not None:
            net_sell = net_cost / (1 - target / 100)
        else:
            raise InvalidCostingError("Costing needs either a sell price or a target margin")

        sell_price = round_minor(net_sell)
        if sell_price <= 0:
            raise InvalidCostingError(f"Derived sell price is not positive ({sell_price})")

        cost_minor = round_minor(net_cost)
        profit = sell_price - cost_minor
        exact_margin = 100 * profit / sell_price
        target_margin = target if target is not None else self.config.margin_target

        # Customer pays VAT on top of the net price when it applies
        if costing.includes_vat:
            if costing.sell_price is not None:
                customer_price = costing.sell_price
            else:
                customer_price = round_minor(sell_price * (1 + vat_rate))
        else:
            customer_price = sell_price

        return MarginResult(
            sell_price=sell_price,
            cost=cost_minor,
            margin_percent=round_minor(exact_margin),
            profit=profit,
            customer_price=customer_price,
            vat_amount=customer_price - sell_price,
            target_margin=target_margin,
            margin_delta=_ceil_cents(exact_margin - target_margin),
            meets_target=exact_margin >= target_margin,
            vat_applicable=costing.includes_vat,
        )

    def margin(self, node: RecipeCostNode, recipe: Recipe) -> MarginResult:
        """Price a computed cost tree using the recipe's own costing policy."""
        return self.compute_margin(node.total_cost, recipe.costing)

    def _get_recipe(self, slug: str) -> Recipe:
        recipe = self.lookup.get_recipe(slug)
        if recipe is None:
            raise MissingEntityError(slug, EntityKind.RECIPE.value)
        return recipe

    def _new_node(self, recipe: Recipe) -> RecipeCostNode:
        return RecipeCostNode(
            slug=recipe.slug,
            name=recipe.name,
            yield_amount=recipe.yield_amount,
            yield_unit=recipe.yield_unit,
        )

    def _ingredient_line(self, line: IngredientLine) -> CostLine:
        """Cost a line that uses a leaf ingredient."""
        ingredient = self.lookup.get_ingredient(line.slug)
        if ingredient is None:
            raise MissingEntityError(line.slug, EntityKind.INGREDIENT.value)

        usage = parse_unit(line.quantity)
        purchase = parse_unit(ingredient.purchase_unit)
        if purchase.amount <= 0:
            raise UnitParseError(ingredient.purchase_unit, "purchase amount must be positive")

        # Usage expressed in purchase units
        converted = convert_units(
            usage.amount, usage.unit, purchase.unit, ingredient.conversion_rule
        )

        purchase_cost = (
            ingredient.purchase_cost / (1 + self.config.vat_rate)
            if ingredient.includes_vat
            else float(ingredient.purchase_cost)
        )
        unit_cost = purchase_cost / purchase.amount

        return CostLine(
            slug=line.slug,
            name=ingredient.name,
            kind=EntityKind.INGREDIENT,
            quantity=usage.amount,
            unit=usage.unit,
            converted_quantity=converted,
            unit_cost=unit_cost,
            cost=round_minor(converted * unit_cost),
            notes=line.notes,
        )

    def _recipe_line(
        self, line: IngredientLine, recipe: Recipe, node: RecipeCostNode
    ) -> CostLine:
        """Cost a line that uses a sub-recipe, scaled by its yield if known."""
        usage = parse_unit(line.quantity)
        converted = usage.amount
        unit_cost = float(node.total_cost)
        share = 1.0

        if recipe.has_yield:
            unit_cost = node.total_cost / recipe.yield_amount
            try:
                converted = convert_units(usage.amount, usage.unit, recipe.yield_unit)
                share = converted / recipe.yield_amount
            except IncompatibleUnitsError:
                converted = usage.amount
                logger.warning(
                    "Cannot convert %s to %s for recipe '%s', using full cost",
                    line.quantity,
                    f"{recipe.yield_amount:g} {recipe.yield_unit}",
                    recipe.slug,
                )

        return CostLine(
            slug=line.slug,
            name=recipe.name,
            kind=EntityKind.RECIPE,
            quantity=usage.amount,
            unit=usage.unit,
            converted_quantity=converted,
            unit_cost=unit_cost,
            cost=round_minor(node.total_cost * share),
            notes=line.notes,
            recipe=node,
        )


def compute_recipe_cost(
    recipe: Recipe, lookup: CostLookup, config: CostingConfig | None = None
) -> RecipeCostNode:
    return CostCalculator(lookup, config).compute_recipe_cost(recipe)


def compute_margin(
    cost: int, costing: CostingPolicy, config: CostingConfig | None = None
) -> MarginResult:
    return CostCalculator(None, config).compute_margin(cost, costing)
