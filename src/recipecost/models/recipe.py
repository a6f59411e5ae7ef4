"""Ingredient and recipe data models."""

from dataclasses import dataclass, field
from enum import Enum


class EntityKind(Enum):
    """What an ingredient-line refers to."""

    INGREDIENT = "ingredient"
    RECIPE = "recipe"


@dataclass(frozen=True)
class Ingredient:
    """Leaf purchasable item."""

    slug: str
    name: str
    purchase_cost: int  # Minor currency units (pence) per purchase unit
    purchase_unit: str  # e.g. "1000g", "1 loaf"
    conversion_rule: str | None = None  # e.g. "1 loaf = 800 g"
    includes_vat: bool = False  # Purchase cost is VAT-inclusive


@dataclass(frozen=True)
class IngredientLine:
    """Single usage of an ingredient or sub-recipe inside a recipe."""

    slug: str
    kind: EntityKind
    quantity: str  # Usage quantity + unit, e.g. "200g"
    notes: str = ""


@dataclass(frozen=True)
class CostingPolicy:
    """How a recipe is priced.

    ``sell_price`` wins when both it and ``target_margin`` are set; the target
    is then only used for reporting the delta.
    """

    sell_price: int | None = None  # Minor currency units
    target_margin: float | None = None  # Percent
    includes_vat: bool = False  # VAT applies; a given sell price is VAT-inclusive


@dataclass(frozen=True)
class Recipe:
    """Costed item built from ingredient-lines."""

    slug: str
    name: str
    lines: tuple[IngredientLine, ...] = ()  # Frozen for hashability
    costing: CostingPolicy = field(default_factory=CostingPolicy)
    stage: str = ""
    category: str = ""
    yield_amount: float | None = None  # e.g. 1.2 for "1.2 kg" of sauce
    yield_unit: str | None = None

    @property
    def has_yield(self) -> bool:
        return bool(self.yield_amount and self.yield_unit)

    def sub_recipes(self) -> list[str]:
        """Slugs of recipes used as ingredient-lines."""
        return [line.slug for line in self.lines if line.kind is EntityKind.RECIPE]

    def ingredients(self) -> list[str]:
        """Slugs of leaf ingredients used directly."""
        return [line.slug for line in self.lines if line.kind is EntityKind.INGREDIENT]
