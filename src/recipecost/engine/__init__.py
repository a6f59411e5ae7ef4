"""Calculation engine for recipe costing."""

from .calculator import CostCalculator, compute_margin, compute_recipe_cost
from .aggregator import AggregatedCosts, CostAggregator
from .runner import AggregatedResults, CalculationResult, run_calculations

__all__ = [
    "CostCalculator",
    "compute_recipe_cost",
    "compute_margin",
    "CostAggregator",
    "AggregatedCosts",
    "run_calculations",
    "CalculationResult",
    "AggregatedResults",
]
