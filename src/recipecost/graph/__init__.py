"""Dependency graph and its search algorithms."""

from .algorithms import DFS, BackTracking, peek
from .dependency import DependencyGraph, Node, Projection

__all__ = ["DependencyGraph", "Node", "Projection", "DFS", "BackTracking", "peek"]
