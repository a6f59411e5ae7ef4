"""Exception hierarchy for graph resolution, unit handling and costing."""


class RecipeCostError(Exception):
    """Base class for every error raised by recipecost."""


class ConfigError(RecipeCostError):
    """Raised when a config file exists but cannot be parsed."""


# Graph


class GraphError(RecipeCostError):
    pass


class NodeNotFound(GraphError):
    """Raised when an operation references an id that is not in the graph."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Cannot find '{node_id}' inside graph")


class CycleError(GraphError):
    """Raised when resolution meets a node already on the active path.

    ``path`` is the full traversal path (start first), ``cycle`` the slice of it
    that starts and ends with the repeated id.
    """

    def __init__(self, path: list[str]):
        self.path = list(path)
        repeated = self.path[-1]
        self.cycle = self.path[self.path.index(repeated):]
        super().__init__("Dependency cycle found: " + " -> ".join(self.path))


# Units


class UnitError(RecipeCostError):
    pass


class UnitParseError(UnitError):
    def __init__(self, text: str, reason: str = "unrecognised unit expression"):
        self.text = text
        super().__init__(f"Cannot parse unit '{text}': {reason}")


class ConversionRuleParseError(UnitError):
    def __init__(self, text: str):
        self.text = text
        super().__init__(
            f"Cannot parse conversion rule '{text}' (expected e.g. '1 loaf = 800 g')"
        )


class IncompatibleUnitsError(UnitError):
    def __init__(self, from_unit: str, to_unit: str):
        self.from_unit = from_unit
        self.to_unit = to_unit
        super().__init__(f"No conversion available for {from_unit} -> {to_unit}")


# Costing


class CostingError(RecipeCostError):
    pass


class InvalidCostingError(CostingError):
    """Raised when a costing policy cannot produce a sell price."""


class MissingEntityError(CostingError):
    def __init__(self, slug: str, kind: str):
        self.slug = slug
        self.kind = kind
        super().__init__(f"{kind.capitalize()} '{slug}' not found")


class MaxDepthExceeded(CostingError):
    def __init__(self, depth: int):
        self.depth = depth
        super().__init__(f"Maximum recipe nesting depth exceeded ({depth})")
