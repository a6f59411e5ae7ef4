"""Data models for recipes, ingredients and computed costs."""

from .recipe import CostingPolicy, EntityKind, Ingredient, IngredientLine, Recipe
from .cost import CostLine, MarginResult, RecipeCostNode

__all__ = [
    "Ingredient",
    "IngredientLine",
    "Recipe",
    "CostingPolicy",
    "EntityKind",
    "RecipeCostNode",
    "CostLine",
    "MarginResult",
]
