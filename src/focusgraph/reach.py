# reach.py
from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Set, Tuple

from .model import DependencyGraph


def compute_included(
    graph: DependencyGraph,
    focused: Iterable[str],
    hops: int,
) -> frozenset:
    """
    Focused projects plus every dependent within `hops` reverse edges.

    - No focus means the whole universe is included.
    - hops == 0 returns exactly the focused projects.
    - Walks reverse adjacency only (towards dependents, never dependencies).

    All seeds start at distance 0 in one breadth-first walk, so a project
    is always reached by its shortest path and membership does not depend
    on seed order. The seen-set makes cycles safe.
    """
    if hops < 0:
        raise ValueError(f"hops must be >= 0, got {hops}")

    seeds = list(dict.fromkeys(focused))
    if not seeds:
        return frozenset(graph.projects)

    seen: Set[str] = set(seeds)
    q: Deque[Tuple[str, int]] = deque((s, 0) for s in seeds)

    while q:
        node, depth = q.popleft()
        if depth == hops:
            continue
        for dependent in graph.dependents(node):
            if dependent not in seen:
                seen.add(dependent)
                q.append((dependent, depth + 1))

    return frozenset(seen)


def compute_excluded(graph: DependencyGraph, included: Iterable[str]) -> List[str]:
    """Universe minus `included`, in registry order."""
    inc = set(included)
    return [p for p in graph.projects if p not in inc]


def split_projects(
    graph: DependencyGraph,
    focused: Iterable[str],
    hops: int,
) -> Tuple[List[str], List[str]]:
    """(included, excluded), both in registry order."""
    included = compute_included(graph, focused, hops)
    ordered = [p for p in graph.projects if p in included]
    # focused ids outside the universe still count as included
    ordered.extend(sorted(included.difference(graph.projects)))
    return ordered, compute_excluded(graph, included)
