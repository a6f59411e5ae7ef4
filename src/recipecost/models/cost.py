"""Cost attribution tree and margin models."""

from dataclasses import dataclass, field
from typing import Optional

from recipecost.models.recipe import EntityKind


@dataclass
class CostLine:
    """Costed ingredient-line inside a RecipeCostNode."""

    slug: str = ""
    name: str = ""
    kind: EntityKind = EntityKind.INGREDIENT
    quantity: float = 0.0  # Usage amount as written on the line
    unit: str = ""  # Usage unit as written on the line
    converted_quantity: float = 0.0  # Usage in purchase (or yield) units
    unit_cost: float = 0.0  # Net cost per purchase (or yield) unit
    cost: int = 0  # Line subtotal in minor currency units
    notes: str = ""

    # Set for sub-recipe lines only
    recipe: Optional["RecipeCostNode"] = None

    def to_dict(self) -> dict:
        """Serialize for JSON storage."""
        return {
            "slug": self.slug,
            "name": self.name,
            "kind": self.kind.value,
            "quantity": self.quantity,
            "unit": self.unit,
            "converted_quantity": self.converted_quantity,
            "unit_cost": self.unit_cost,
            "cost": self.cost,
            "notes": self.notes,
            "recipe": self.recipe.to_dict() if self.recipe else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CostLine":
        """Deserialize from JSON."""
        return cls(
            slug=data["slug"],
            name=data.get("name", ""),
            kind=EntityKind(data.get("kind", EntityKind.INGREDIENT.value)),
            quantity=data.get("quantity", 0.0),
            unit=data.get("unit", ""),
            converted_quantity=data.get("converted_quantity", 0.0),
            unit_cost=data.get("unit_cost", 0.0),
            cost=data.get("cost", 0),
            notes=data.get("notes", ""),
            recipe=RecipeCostNode.from_dict(data["recipe"]) if data.get("recipe") else None,
        )


@dataclass
class RecipeCostNode:
    """Cost breakdown of one recipe, mirroring its ingredient-lines."""

    slug: str = ""
    name: str = ""
    lines: list[CostLine] = field(default_factory=list)
    total_cost: int = 0  # Sum of line subtotals, minor currency units
    yield_amount: float | None = None
    yield_unit: str | None = None

    def to_dict(self) -> dict:
        """Serialize for JSON storage."""
        return {
            "slug": self.slug,
            "name": self.name,
            "lines": [line.to_dict() for line in self.lines],
            "total_cost": self.total_cost,
            "yield_amount": self.yield_amount,
            "yield_unit": self.yield_unit,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RecipeCostNode":
        """Deserialize from JSON."""
        return cls(
            slug=data["slug"],
            name=data.get("name", ""),
            lines=[CostLine.from_dict(line) for line in data.get("lines", [])],
            total_cost=data.get("total_cost", 0),
            yield_amount=data.get("yield_amount"),
            yield_unit=data.get("yield_unit"),
        )


@dataclass(frozen=True)
class MarginResult:
    """Pricing figures for a recipe. Money in minor currency units, ex-VAT."""

    sell_price: int
    cost: int
    margin_percent: int
    profit: int

    customer_price: int = 0  # What the customer pays, VAT included if applicable
    vat_amount: int = 0
    target_margin: float = 0.0
    margin_delta: float = 0.0  # margin_percent - target_margin
    meets_target: bool = True
    vat_applicable: bool = False

    def to_dict(self) -> dict:
        return {
            "sell_price": self.sell_price,
            "cost": self.cost,
            "margin_percent": self.margin_percent,
            "profit": self.profit,
            "customer_price": self.customer_price,
            "vat_amount": self.vat_amount,
            "target_margin": self.target_margin,
            "margin_delta": self.margin_delta,
            "meets_target": self.meets_target,
            "vat_applicable": self.vat_applicable,
        }
