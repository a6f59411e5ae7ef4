"""Aggregator for flattening cost trees into per-ingredient totals."""

from dataclasses import dataclass, field

from recipecost.models.cost import RecipeCostNode
from recipecost.models.recipe import EntityKind


@dataclass
class AggregatedCosts:
    """Flattened view of one or more cost trees."""

    # Ingredient slug -> attributed cost (minor units, fractional)
    ingredient_costs: dict[str, float] = field(default_factory=dict)

    # Ingredient slug -> quantity used, in purchase units
    ingredient_quantities: dict[str, float] = field(default_factory=dict)

    # Sub-recipe slug -> number of times used (scaled by share used)
    recipe_usage: dict[str, float] = field(default_factory=dict)

    # Sum of root totals
    total_cost: int = 0

    def share_of(self, slug: str) -> float:
        """Fraction of the total cost attributed to an ingredient."""
        if not self.total_cost:
            return 0.0
        return self.ingredient_costs.get(slug, 0.0) / self.total_cost


class CostAggregator:
    """Calculates aggregate totals for cost trees."""

    def aggregate(self, node: RecipeCostNode) -> AggregatedCosts:
        """Attribute a recipe's total cost to the leaf ingredients it uses."""
        totals = AggregatedCosts(total_cost=node.total_cost)
        self._aggregate_node(node, 1.0, totals)
        return totals

    def _aggregate_node(
        self, node: RecipeCostNode, multiplier: float, totals: AggregatedCosts
    ) -> None:
        """Walk a node's lines, scaling sub-recipes by the share actually used."""
        stack = [(node, multiplier)]
        while stack:
            current, scale = stack.pop()
            for line in current.lines:
                if line.kind is EntityKind.INGREDIENT:
                    totals.ingredient_costs[line.slug] = (
                        totals.ingredient_costs.get(line.slug, 0.0) + line.cost * scale
                    )
                    totals.ingredient_quantities[line.slug] = (
                        totals.ingredient_quantities.get(line.slug, 0.0)
                        + line.converted_quantity * scale
                    )
                    continue

                sub = line.recipe
                if sub is None:
                    continue
                # Share of the sub-recipe this line consumes
                share = line.cost / sub.total_cost if sub.total_cost else 0.0
                totals.recipe_usage[line.slug] = (
                    totals.recipe_usage.get(line.slug, 0.0) + share * scale
                )
                stack.append((sub, share * scale))

    def combine(self, nodes: list[tuple[RecipeCostNode, float]]) -> AggregatedCosts:
        """
        Combine multiple recipes with portion counts (linear combination).

        Example: 40x Margherita + 25x Pepperoni for a service
        """
        combined = AggregatedCosts()
        total = 0.0

        for node, multiplier in nodes:
            recipe_totals = self.aggregate(node)

            for slug, cost in recipe_totals.ingredient_costs.items():
                combined.ingredient_costs[slug] = (
                    combined.ingredient_costs.get(slug, 0.0) + cost * multiplier
                )

            for slug, qty in recipe_totals.ingredient_quantities.items():
                combined.ingredient_quantities[slug] = (
                    combined.ingredient_quantities.get(slug, 0.0) + qty * multiplier
                )

            for slug, count in recipe_totals.recipe_usage.items():
                combined.recipe_usage[slug] = (
                    combined.recipe_usage.get(slug, 0.0) + count * multiplier
                )

            total += node.total_cost * multiplier

        combined.total_cost = round(total)
        return combined
