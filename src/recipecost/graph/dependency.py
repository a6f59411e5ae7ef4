"""Mutable dependency graph of recipes and ingredients."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from recipecost.errors import NodeNotFound
from recipecost.graph.algorithms import DFS, BackTracking

logger = logging.getLogger(__name__)

V = TypeVar("V")


class Projection(Enum):
    """What a resolution returns for each node."""

    ID = "id"
    VALUE = "value"


@dataclass
class Node(Generic[V]):
    """Single graph node. ``edges`` is an insertion-ordered set of target ids."""

    id: str
    value: V
    edges: dict[str, None] = field(default_factory=dict)


class DependencyGraph(Generic[V]):
    """Directed graph where an edge ``a -> b`` means "a depends on b".

    Edges may only join existing nodes; ``set_dependency`` raises
    ``NodeNotFound`` rather than creating nodes implicitly. Each call to
    ``dependencies`` or ``find`` resolves from scratch, so value and edge
    changes made between calls are always seen.
    """

    def __init__(self):
        self.nodes: dict[str, Node[V]] = {}

    @property
    def size(self) -> int:
        return len(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, key: str) -> bool:
        return key in self.nodes

    def has(self, key: str) -> bool:
        return key in self.nodes

    def clear(self) -> None:
        self.nodes.clear()

    def get(self, key: str) -> V | None:
        node = self.nodes.get(key)
        return node.value if node else None

    def add_node(self, key: str, value: V) -> None:
        """Insert a node, or replace the value of an existing one."""
        node = self.nodes.get(key)
        if node is None:
            self.nodes[key] = Node(key, value)
        else:
            node.value = value

    def set_value(self, key: str, value: V) -> None:
        if key not in self.nodes:
            raise NodeNotFound(key)
        self.nodes[key].value = value

    def set_dependency(self, from_key: str, to_key: str) -> None:
        """Declare that ``from_key`` depends on ``to_key``. Duplicates are no-ops."""
        for key in (from_key, to_key):
            if key not in self.nodes:
                raise NodeNotFound(key)
        self.nodes[from_key].edges[to_key] = None
        logger.debug("Dependency %s -> %s", from_key, to_key)

    @property
    def edges(self) -> dict[str, dict[str, None]]:
        """Adjacency view keyed by node id."""
        return {key: node.edges for key, node in self.nodes.items()}

    def _project(self, ids: list[str], projection: Projection) -> list[Any]:
        if projection is Projection.ID:
            return list(ids)
        return [self.nodes[i].value for i in ids]

    def dependencies(
        self, key: str, projection: Projection = Projection.ID
    ) -> list[Any]:
        """Everything ``key`` transitively depends on, dependencies first.

        Raises ``CycleError`` if a cycle is reachable from ``key``.
        """
        if key not in self.nodes:
            raise NodeNotFound(key)

        ids = DFS(self.edges).resolve(key)
        ids.remove(key)
        return self._project(ids, projection)

    def find(
        self, start: str, end: str, projection: Projection = Projection.ID
    ) -> list[list[Any]]:
        """All simple dependency paths from ``start`` down to ``end``.

        Answers "how does recipe X use ingredient Y, via which sub-recipes".
        """
        for key in (start, end):
            if key not in self.nodes:
                raise NodeNotFound(key)

        paths = BackTracking(self.edges).resolve(start, end)
        return [self._project(p, projection) for p in paths]

    def validate(self) -> None:
        """Check the whole graph for cycles, raising ``CycleError`` on the first."""
        dfs = DFS(self.edges)
        for key in self.nodes:
            dfs.resolve(key)
