"""Out-degree normalization coefficients for random-walk transitions.

The coefficients are cached on the graph's :class:`WeightEngine` and
recomputed lazily: every vertex or edge insertion calls
:meth:`WeightEngine.invalidate`, and the next ranking call recomputes them
in the mode it asks for. Reusing the cache saves a pass over all edges per
ranking call; the price is that callers running rankings with different
``use_weight`` values must not interleave them across threads.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from synset_rank.exceptions import NegativeWeightError, PersonalizationError
from synset_rank.models import CoefStatus

if TYPE_CHECKING:
    from synset_rank.graph import KnowledgeGraph

logger = logging.getLogger(__name__)


class WeightEngine:
    """Per-vertex out-degree coefficients of one graph.

    ``coef[u]`` is ``1 / outdegree(u)`` in unweighted mode and
    ``1 / sum(weight(u, *))`` in weighted mode. Dangling vertices (no
    out-edges, or zero total out-weight) get a coefficient of 0 and their
    mass is redistributed by the ranking step.
    """

    def __init__(self, graph: KnowledgeGraph) -> None:
        self._graph = graph
        self._coefs = np.zeros(0, dtype=np.float64)
        self._status = CoefStatus.UNCOMPUTED

    @property
    def status(self) -> CoefStatus:
        return self._status

    @property
    def out_coefs(self) -> np.ndarray:
        return self._coefs

    def invalidate(self) -> None:
        """Drop the cached coefficients (topology changed)."""
        self._status = CoefStatus.UNCOMPUTED

    def is_valid_for(self, use_weight: bool) -> bool:
        wanted = CoefStatus.WEIGHTED if use_weight else CoefStatus.UNWEIGHTED
        return self._status is wanted

    def compute(self, use_weight: bool) -> np.ndarray:
        """Recompute the coefficients for every vertex."""
        n = self._graph.size()
        sources, _, weights = self._graph.edge_arrays()
        if use_weight:
            if weights.size and weights.min() < 0:
                raise NegativeWeightError(
                    "Weighted transitions need nonnegative edge weights"
                )
            totals = np.bincount(sources, weights=weights, minlength=n)
        else:
            totals = np.bincount(sources, minlength=n).astype(np.float64)

        coefs = np.zeros(n, dtype=np.float64)
        np.divide(1.0, totals, out=coefs, where=totals > 0)
        self._coefs = coefs
        self._status = CoefStatus.WEIGHTED if use_weight else CoefStatus.UNWEIGHTED
        logger.debug(
            "Computed %s out-degree coefficients for %d vertices",
            self._status.value, n,
        )
        return coefs

    def ensure(self, use_weight: bool) -> np.ndarray:
        """Return coefficients for the mode, recomputing them if stale."""
        if not self.is_valid_for(use_weight):
            return self.compute(use_weight)
        return self._coefs

    def transitions(self, use_weight: bool) -> np.ndarray:
        """Transition probability of every edge, indexed by edge."""
        coefs = self.ensure(use_weight)
        sources, _, weights = self._graph.edge_arrays()
        if use_weight:
            return coefs[sources] * weights
        return coefs[sources]

    def dangling(self, use_weight: bool) -> np.ndarray:
        """Boolean mask of vertices with no outgoing probability mass."""
        return self.ensure(use_weight) == 0.0


def ppv_weights(
    graph: KnowledgeGraph,
    ppv: Sequence[float],
    use_weight: bool = False,
) -> np.ndarray:
    """(Re)compute the graph's out-degree coefficients.

    ``ppv`` is only checked for length; the coefficients depend on the
    topology and edge weights alone.
    """
    if len(ppv) != graph.size():
        raise PersonalizationError(
            f"Personalization vector has {len(ppv)} entries, "
            f"graph has {graph.size()} vertices"
        )
    return graph.weights.compute(use_weight)
