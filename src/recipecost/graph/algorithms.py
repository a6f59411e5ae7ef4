"""Graph search algorithms over an id adjacency mapping."""

from dataclasses import dataclass
from typing import Iterable, Mapping, TypeVar

from recipecost.errors import CycleError

T = TypeVar("T")

Edges = Mapping[str, Iterable[str]]


def peek(stack: list[T]) -> T | None:
    """Return the top of a stack without popping it."""
    return stack[-1] if stack else None


@dataclass
class _Frame:
    node: str
    processed: bool = False


class DFS:
    """Depth-first post-order resolution with cycle detection.

    Uses an explicit frame stack. Nodes fully processed by an earlier
    ``resolve`` call on the same instance are skipped; call ``reset`` or use a
    fresh instance to resolve from scratch.
    """

    def __init__(self, edges: Edges):
        self.edges = edges
        self.visited: set[str] = set()

    def reset(self) -> None:
        self.visited.clear()

    def resolve(self, start: str) -> list[str]:
        """Return ``start`` and everything reachable from it, dependencies first.

        The most recently declared edge of a node is explored first.
        """
        if start in self.visited:
            return []

        path: list[str] = []
        on_path: set[str] = set()
        result: list[str] = []
        stack = [_Frame(start)]

        while stack:
            current = peek(stack)
            if not current.processed:
                if current.node in self.visited:
                    stack.pop()
                    continue
                if current.node in on_path:
                    raise CycleError(path + [current.node])

                path.append(current.node)
                on_path.add(current.node)
                for dep in self.edges.get(current.node, ()):
                    stack.append(_Frame(dep))
                current.processed = True
            else:
                stack.pop()
                on_path.discard(path.pop())
                self.visited.add(current.node)
                result.append(current.node)

        return result


class BackTracking:
    """Enumerates every simple path between two nodes."""

    def __init__(self, edges: Edges):
        self.edges = edges

    def resolve(self, start: str, end: str) -> list[list[str]]:
        """Return all paths from ``start`` to ``end`` in edge declaration order."""
        paths: list[list[str]] = []
        stack: list[list[str]] = [[start]]

        while stack:
            partial = stack.pop()
            node = partial[-1]
            if node == end:
                paths.append(partial)
                continue

            # Reversed so the first declared edge is extended first
            for dep in reversed(list(self.edges.get(node, ()))):
                if dep not in partial:
                    stack.append(partial + [dep])

        return paths
