"""Personalized PageRank over a KnowledgeGraph.

The rank vector is found by power iteration::

    r' = (1 - d) * ppv + d * (T^T r + dangling(r) * ppv)

where ``T`` holds the transition probabilities of the graph's edges and
``dangling(r)`` is the rank held by vertices with no outgoing mass. That
mass is sent back through the teleportation vector, so every iterate sums
to one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import numpy as np

from synset_rank.config import RankingConfig
from synset_rank.exceptions import PersonalizationError
from synset_rank.graph import KnowledgeGraph
from synset_rank.models import VertexKind

logger = logging.getLogger(__name__)

# Allowed deviation of the personalization vector's sum from 1.
PPV_TOLERANCE = 1e-4


def check_ppv(graph: KnowledgeGraph, ppv: Sequence[float] | np.ndarray) -> np.ndarray:
    """Validate a personalization vector and return it as a float array."""
    vec = np.asarray(ppv, dtype=np.float64)
    if vec.ndim != 1 or vec.shape[0] != graph.size():
        raise PersonalizationError(
            f"Personalization vector has shape {vec.shape}, "
            f"graph has {graph.size()} vertices"
        )
    if not np.all(np.isfinite(vec)) or np.any(vec < 0.0):
        raise PersonalizationError("Personalization vector entries must be >= 0")
    total = float(vec.sum())
    if abs(total - 1.0) > PPV_TOLERANCE:
        raise PersonalizationError(
            f"Personalization vector sums to {total}, expected 1"
        )
    return vec


def pagerank_ppv(
    graph: KnowledgeGraph,
    ppv: Sequence[float] | np.ndarray,
    use_weight: bool | None = None,
    config: RankingConfig | None = None,
) -> np.ndarray:
    """Rank the vertices of ``graph`` by personalized PageRank.

    Args:
        graph: Graph to rank.
        ppv: Teleportation probability per vertex, indexed like the
            vertices. Must be nonnegative and sum to 1.
        use_weight: Use edge weights for the transition probabilities.
            Defaults to ``config.use_weight``.
        config: Damping factor, convergence threshold and iteration cap.

    Returns:
        Array of ranks, indexed like the vertices, summing to 1.

    Raises:
        PersonalizationError: If ``ppv`` is not a valid distribution.
    """
    config = config or RankingConfig()
    if use_weight is None:
        use_weight = config.use_weight
    teleport = check_ppv(graph, ppv)

    n = graph.size()
    d = config.damping
    sources, targets, _ = graph.edge_arrays()
    trans = graph.weights.transitions(use_weight)
    dangling = graph.weights.dangling(use_weight)

    ranks = np.full(n, 1.0 / n)
    for iteration in range(1, config.max_iterations + 1):
        flow = np.bincount(targets, weights=ranks[sources] * trans, minlength=n)
        dangling_mass = float(ranks[dangling].sum())
        new_ranks = (1.0 - d) * teleport + d * (flow + dangling_mass * teleport)
        change = float(np.abs(new_ranks - ranks).sum())
        ranks = new_ranks
        logger.debug("PageRank iteration %d: L1 change %.3g", iteration, change)
        if change < config.epsilon:
            break
    else:
        logger.warning(
            "PageRank did not converge after %d iterations (last change %.3g)",
            config.max_iterations, change,
        )
    return ranks


# ---------------------------------------------------------------------------
# Teleportation vectors and read-outs
# ---------------------------------------------------------------------------

def ppv_from_vertices(graph: KnowledgeGraph, vertices: Iterable[int]) -> np.ndarray:
    """Uniform teleportation vector over ``vertices``."""
    chosen = sorted({int(u) for u in vertices if graph.has_vertex(u)})
    if not chosen:
        raise PersonalizationError("No valid vertices to personalize on")
    ppv = np.zeros(graph.size(), dtype=np.float64)
    ppv[chosen] = 1.0 / len(chosen)
    return ppv


def ppv_from_names(graph: KnowledgeGraph, names: Iterable[str]) -> np.ndarray:
    """Uniform teleportation vector over the vertices called ``names``.

    Names are looked up like :meth:`KnowledgeGraph.get_vertex_by_name`;
    unknown names are skipped with a warning.
    """
    vertices = []
    for name in names:
        u, found = graph.get_vertex_by_name(name)
        if not found:
            logger.warning("Context name %r is not in the graph", name)
            continue
        vertices.append(u)
    return ppv_from_vertices(graph, vertices)


def top_ranked(
    graph: KnowledgeGraph,
    ranks: Sequence[float] | np.ndarray,
    k: int = 10,
    kind: VertexKind | None = None,
) -> list[tuple[str, float]]:
    """The ``k`` best-ranked vertices as (name, rank), best first."""
    if k <= 0:
        return []
    scores = np.asarray(ranks, dtype=np.float64)
    # stable sort keeps vertex order among equal ranks
    order = np.argsort(-scores, kind="stable")
    result: list[tuple[str, float]] = []
    for u in order:
        u = int(u)
        if kind is not None and graph.vertex(u).kind is not kind:
            continue
        result.append((graph.get_vertex_name(u), float(scores[u])))
        if len(result) >= k:
            break
    return result


def rank_synsets_for_word(
    graph: KnowledgeGraph, word: str, ranks: Sequence[float] | np.ndarray
) -> list[tuple[str, float]]:
    """Candidate synsets of ``word`` ordered by rank, best first."""
    w = graph.get_word(word)
    if w is None:
        return []
    scores = np.asarray(ranks, dtype=np.float64)
    candidates = [
        (graph.get_vertex_name(v), float(scores[v]))
        for v in graph.successors(w)
        if graph.vertex_is_synset(v)
    ]
    candidates.sort(key=lambda item: -item[1])
    return candidates
