"""
Rank Engine — BFS distances for temporal layout

The rank of an argument is its shortest-path distance from a set of
root arguments over the attack graph with direction ignored. Ranks
reflect structural proximity, not attack polarity; the report uses
them to place arguments in horizontal bands from the top and from
the bottom of the drawing.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, Optional

from .models import AttackLike, RankMap, as_attack

logger = logging.getLogger("argblazer.rank")

AdjacencyList = dict[str, set[str]]


def build_undirected_graph(attacks: Iterable[AttackLike]) -> AdjacencyList:
    """Adjacency sets with every attack added in both directions."""
    graph: AdjacencyList = {}
    for attack in attacks:
        u, v = as_attack(attack).as_pair()
        graph.setdefault(u, set()).add(v)
        graph.setdefault(v, set()).add(u)
    return graph


def shortest_path_lengths(graph: AdjacencyList, source: str) -> dict[str, int]:
    """Single-source BFS; nodes not reachable from ``source`` are absent."""
    distances = {source: 0}
    queue = deque([source])
    while queue:
        node = queue.popleft()
        dist = distances[node]
        for neighbor in graph.get(node, ()):
            if neighbor not in distances:
                distances[neighbor] = dist + 1
                queue.append(neighbor)
    return distances


class RankEngine:
    """Computes rank maps from explicit roots or a fallback argument."""

    def compute_rank(
        self,
        attacks: Iterable[AttackLike],
        roots: Iterable[str] = (),
        fallback_first: Optional[str] = None,
        fallback_last: Optional[str] = None,
        is_top_side: bool = True,
    ) -> RankMap:
        """
        Rank every argument reachable from the effective roots.

        Args:
            attacks: Attack pairs; direction is ignored
            roots: Explicit roots (``top`` or ``bottom`` markers)
            fallback_first: Root used on the top side when ``roots`` is empty
            fallback_last: Root used on the bottom side when ``roots`` is empty
            is_top_side: Selects which fallback applies

        Returns:
            Mapping argument → distance. Every effective root has rank 0;
            with several roots each argument keeps its minimum distance.
        """
        effective = list(dict.fromkeys(roots))
        if not effective:
            fallback = fallback_first if is_top_side else fallback_last
            if fallback is None:
                return {}
            effective = [fallback]

        graph = build_undirected_graph(attacks)

        rank: dict[str, int] = {}
        for root in effective:
            for node, dist in shortest_path_lengths(graph, root).items():
                if node not in rank or dist < rank[node]:
                    rank[node] = dist

        side = "top" if is_top_side else "bottom"
        logger.debug(
            f"Rank ({side}) from {effective}: {len(rank)} of {len(graph)} nodes reached"
        )
        return rank


def compute_rank(
    attacks: Iterable[AttackLike],
    roots: Iterable[str] = (),
    fallback_first: Optional[str] = None,
    fallback_last: Optional[str] = None,
    is_top_side: bool = True,
) -> RankMap:
    """Module-level shortcut for :meth:`RankEngine.compute_rank`."""
    return RankEngine().compute_rank(
        attacks, roots, fallback_first, fallback_last, is_top_side
    )
