"""Batch cost and margin runs over many recipes."""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional, Protocol

from recipecost.engine.calculator import CostCalculator, CostLookup
from recipecost.errors import RecipeCostError
from recipecost.models.cost import MarginResult, RecipeCostNode
from recipecost.models.recipe import Recipe

logger = logging.getLogger(__name__)


@dataclass
class CalculationResult:
    """Outcome for a single recipe; exactly one of cost/failure is set."""

    slug: str
    recipe: Optional[Recipe] = None
    cost: Optional[RecipeCostNode] = None
    margin: Optional[MarginResult] = None
    failure_message: str = ""

    @property
    def success(self) -> bool:
        return self.cost is not None and not self.failure_message


@dataclass
class AggregatedResults:
    start_time: float = field(default_factory=time.monotonic)
    results: list[CalculationResult] = field(default_factory=list)
    num_total: int = 0
    num_complete: int = 0

    @property
    def num_pending(self) -> int:
        return self.num_total - self.num_complete

    @property
    def succeeded(self) -> list[CalculationResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[CalculationResult]:
        return [r for r in self.results if not r.success]

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time


class Reporter(Protocol):
    def on_start(self, slugs: list[str]) -> None: ...

    def on_calculation(
        self, result: CalculationResult, aggregated: AggregatedResults
    ) -> None: ...

    def on_finish(self, aggregated: AggregatedResults) -> None: ...


def run_calculations(
    calculator: CostCalculator,
    lookup: CostLookup,
    slugs: list[str],
    reporter: Optional[Reporter] = None,
) -> AggregatedResults:
    """Cost and price each recipe in turn; one failure never stops the rest."""
    aggregated = AggregatedResults(num_total=len(slugs))

    if reporter:
        reporter.on_start(slugs)

    for slug in slugs:
        result = CalculationResult(slug=slug, recipe=lookup.get_recipe(slug))

        if result.recipe is None:
            result.failure_message = f"Recipe '{slug}' not found"
        else:
            try:
                result.cost = calculator.compute_recipe_cost(result.recipe)
                result.margin = calculator.margin(result.cost, result.recipe)
            except RecipeCostError as e:
                result.cost = None
                result.failure_message = str(e)

        if result.failure_message:
            logger.warning("Skipping %s: %s", slug, result.failure_message)

        aggregated.results.append(result)
        aggregated.num_complete += 1

        if reporter:
            reporter.on_calculation(result, aggregated)

    if reporter:
        reporter.on_finish(aggregated)

    return aggregated
