"""Tabular and text summaries of cost trees and margins."""

import pandas as pd

from recipecost.engine.aggregator import AggregatedCosts
from recipecost.engine.runner import AggregatedResults
from recipecost.models.cost import RecipeCostNode

BREAKDOWN_COLUMNS = ["Depth", "Slug", "Name", "Kind", "Quantity", "Unit", "Unit Cost", "Cost"]
MARGIN_COLUMNS = [
    "Recipe",
    "Cost",
    "Sell Price",
    "Customer Price",
    "Profit",
    "Margin %",
    "Target %",
    "Meets Target",
    "Error",
]


def format_money(minor: float, symbol: str = "£") -> str:
    """Format minor currency units as major units: 1234 -> £12.34."""
    sign = "-" if minor < 0 else ""
    return f"{sign}{symbol}{abs(minor) / 100:,.2f}"


def cost_breakdown_frame(node: RecipeCostNode) -> pd.DataFrame:
    """One row per ingredient-line, sub-recipe lines followed by their own lines."""
    rows = []
    stack = [(line, 0) for line in reversed(node.lines)]
    while stack:
        line, depth = stack.pop()
        rows.append(
            {
                "Depth": depth,
                "Slug": line.slug,
                "Name": line.name,
                "Kind": line.kind.value,
                "Quantity": line.quantity,
                "Unit": line.unit,
                "Unit Cost": line.unit_cost,
                "Cost": line.cost,
            }
        )
        if line.recipe:
            stack.extend((child, depth + 1) for child in reversed(line.recipe.lines))

    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def ingredient_totals_frame(totals: AggregatedCosts) -> pd.DataFrame:
    """Attributed cost per leaf ingredient, most expensive first."""
    rows = [
        {
            "Ingredient": slug,
            "Quantity": totals.ingredient_quantities.get(slug, 0.0),
            "Cost": cost,
            "Share %": round(100 * totals.share_of(slug), 1),
        }
        for slug, cost in totals.ingredient_costs.items()
    ]
    df = pd.DataFrame(rows, columns=["Ingredient", "Quantity", "Cost", "Share %"])
    return df.sort_values("Cost", ascending=False, ignore_index=True)


def margin_frame(aggregated: AggregatedResults) -> pd.DataFrame:
    """One row per recipe in a batch run; failed recipes carry their error."""
    rows = []
    for result in aggregated.results:
        row = dict.fromkeys(MARGIN_COLUMNS)
        row["Recipe"] = result.slug
        if result.success and result.margin:
            margin = result.margin
            row.update(
                {
                    "Cost": margin.cost,
                    "Sell Price": margin.sell_price,
                    "Customer Price": margin.customer_price,
                    "Profit": margin.profit,
                    "Margin %": margin.margin_percent,
                    "Target %": margin.target_margin,
                    "Meets Target": margin.meets_target,
                }
            )
        else:
            row["Error"] = result.failure_message
        rows.append(row)

    return pd.DataFrame(rows, columns=MARGIN_COLUMNS)


def render_cost_tree(node: RecipeCostNode, symbol: str = "£") -> str:
    """Box-drawing text tree of a cost breakdown."""
    out = [f"{node.name}: {format_money(node.total_cost, symbol)}"]

    def walk(lines, prefix: str) -> None:
        for i, line in enumerate(lines):
            is_last = i == len(lines) - 1
            connector = "└── " if is_last else "├── "
            out.append(
                f"{prefix}{connector}{line.name}: {format_money(line.cost, symbol)}"
                f" ({line.quantity:g} {line.unit})"
            )
            if line.recipe:
                walk(line.recipe.lines, prefix + ("    " if is_last else "│   "))

    walk(node.lines, "")
    return "\n".join(out)
