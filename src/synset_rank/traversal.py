"""Breadth-first search and Dijkstra shortest paths over a KnowledgeGraph."""

from __future__ import annotations

import heapq
import math
from collections import deque

from synset_rank.exceptions import NegativeWeightError
from synset_rank.graph import KnowledgeGraph


def bfs(graph: KnowledgeGraph, source: int) -> list[int] | None:
    """Vertices reachable from ``source`` along out-edges, in discovery order.

    The source comes first and every vertex appears after the vertex that
    discovered it. Returns None when ``source`` is not a vertex of ``graph``.
    """
    if not graph.has_vertex(source):
        return None
    source = int(source)
    seen = {source}
    order = [source]
    queue = deque([source])
    while queue:
        u = queue.popleft()
        for v in graph.successors(u):
            if v not in seen:
                seen.add(v)
                order.append(v)
                queue.append(v)
    return order


def dijkstra_distances(
    graph: KnowledgeGraph, source: int
) -> tuple[list[float], list[int]] | None:
    """Single-source shortest paths by cumulative edge weight.

    Returns ``(distances, parents)``; unreached vertices have distance
    ``math.inf`` and are their own parent, as is the source. Returns None
    when ``source`` is not a vertex of ``graph``.

    Ties are broken by discovery: a vertex's parent only changes on a
    strictly shorter path, and equal-distance frontier entries are settled
    in the order they were pushed. Results are therefore reproducible for
    a given insertion order of edges.
    """
    if not graph.has_vertex(source):
        return None
    source = int(source)
    n = graph.size()
    dist = [math.inf] * n
    parents = list(range(n))
    settled = [False] * n
    dist[source] = 0.0

    counter = 0
    heap: list[tuple[float, int, int]] = [(0.0, counter, source)]
    while heap:
        d, _, u = heapq.heappop(heap)
        if settled[u]:
            continue
        settled[u] = True
        for e in graph.out_edges(u):
            w = graph.edge_weight(e)
            v = graph.edge_target(e)
            if w < 0:
                raise NegativeWeightError(
                    f"Edge {graph.get_vertex_name(u)!r} -> "
                    f"{graph.get_vertex_name(v)!r} has negative weight {w}"
                )
            nd = d + w
            if nd < dist[v]:
                dist[v] = nd
                parents[v] = u
                counter += 1
                heapq.heappush(heap, (nd, counter, v))
    return dist, parents


def dijkstra(graph: KnowledgeGraph, source: int) -> list[int] | None:
    """Shortest-path tree from ``source`` as a parent list (see above)."""
    result = dijkstra_distances(graph, source)
    if result is None:
        return None
    return result[1]


def shortest_path(parents: list[int], source: int, target: int) -> list[int]:
    """Follow ``parents`` from ``target`` back to ``source``.

    Returns the vertices from source to target, or an empty list when
    ``target`` was not reached.
    """
    if target == source:
        return [source]
    path = [target]
    v = target
    while parents[v] != v:
        v = parents[v]
        path.append(v)
        if v == source:
            path.reverse()
            return path
        if len(path) > len(parents):
            break
    return []
