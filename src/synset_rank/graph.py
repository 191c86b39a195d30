"""KnowledgeGraph: the vertex/edge store ranked by synset-rank."""

from __future__ import annotations

import math
import operator
import random
import sys
from collections.abc import Iterable, Iterator
from typing import Any, TextIO

import numpy as np

from synset_rank.exceptions import (
    EdgeNotFoundError,
    GraphCopyError,
    InvalidWeightError,
    VertexNotFoundError,
)
from synset_rank.models import IS_WORD, Edge, GraphInfo, Vertex, VertexKind
from synset_rank.relations import MASK_WIDTH, RelationTypeRegistry
from synset_rank.weights import WeightEngine

# Process-wide random source for get_random_vertex().
_rng = random.Random()


def seed_random(seed: Any) -> None:
    """Seed the random source used by :meth:`KnowledgeGraph.get_random_vertex`."""
    _rng.seed(seed)


class KnowledgeGraph:
    """A directed, weighted graph of word and synset vertices.

    Vertices and edges live in append-only parallel lists and are addressed
    by dense integer indices. There is at most one edge per ordered pair of
    vertices; several relation types between the same pair are folded into
    the edge's relation-type mask.
    """

    def __init__(self, mask_width: int = MASK_WIDTH) -> None:
        if not 1 <= mask_width <= MASK_WIDTH:
            raise ValueError(
                f"mask_width must be between 1 and {MASK_WIDTH}, got {mask_width!r}"
            )
        # vertex arena
        self._names: list[str] = []
        self._glosses: list[str] = []
        self._flags: list[int] = []
        self._out: list[list[int]] = []
        self._in: list[list[int]] = []
        self._synset_map: dict[str, int] = {}
        self._word_map: dict[str, int] = {}

        # edge arena
        self._sources: list[int] = []
        self._targets: list[int] = []
        self._weights: list[float] = []
        self._masks: list[int] = []
        self._edge_map: dict[tuple[int, int], int] = {}
        self._edge_arrays: tuple[np.ndarray, np.ndarray, np.ndarray] | None = None

        self._rtypes = RelationTypeRegistry(capacity=mask_width)
        self._rel_sources: set[str] = set()
        self._notes: list[str] = []
        self._weight_engine = WeightEngine(self)

    def __copy__(self) -> KnowledgeGraph:
        raise GraphCopyError("KnowledgeGraph objects cannot be copied")

    def __deepcopy__(self, memo: dict) -> KnowledgeGraph:
        raise GraphCopyError("KnowledgeGraph objects cannot be copied")

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return (
            f"<KnowledgeGraph vertices={self.size()} edges={self.num_edges()} "
            f"relation_types={len(self._rtypes)}>"
        )

    # ------------------------------------------------------------------
    # Sizes and accessors
    # ------------------------------------------------------------------

    def size(self) -> int:
        """Number of vertices."""
        return len(self._names)

    def num_edges(self) -> int:
        return len(self._sources)

    @property
    def weights(self) -> WeightEngine:
        """The out-degree coefficient cache of this graph."""
        return self._weight_engine

    @property
    def relation_types(self) -> RelationTypeRegistry:
        return self._rtypes

    @property
    def rel_sources(self) -> frozenset[str]:
        return frozenset(self._rel_sources)

    def has_vertex(self, u: object) -> bool:
        try:
            u = operator.index(u)  # type: ignore[arg-type]
        except TypeError:
            return False
        return 0 <= u < len(self._names)

    def _check_vertex(self, u: int) -> int:
        if not self.has_vertex(u):
            raise VertexNotFoundError(f"No vertex with index {u!r}")
        return operator.index(u)

    def _check_edge(self, e: int) -> int:
        try:
            e = operator.index(e)
        except TypeError:
            raise EdgeNotFoundError(f"No edge with index {e!r}") from None
        if not 0 <= e < len(self._sources):
            raise EdgeNotFoundError(f"No edge with index {e!r}")
        return e

    def vertex(self, u: int) -> Vertex:
        u = self._check_vertex(u)
        return Vertex(u, self._names[u], self._glosses[u], self._flags[u])

    def edge(self, e: int) -> Edge:
        e = self._check_edge(e)
        return Edge(
            e, self._sources[e], self._targets[e], self._weights[e], self._masks[e]
        )

    def vertices(self) -> Iterator[Vertex]:
        for u in range(len(self._names)):
            yield Vertex(u, self._names[u], self._glosses[u], self._flags[u])

    def edges(self) -> Iterator[Edge]:
        for e in range(len(self._sources)):
            yield Edge(
                e, self._sources[e], self._targets[e], self._weights[e], self._masks[e]
            )

    def get_vertex_name(self, u: int) -> str:
        return self._names[self._check_vertex(u)]

    def get_vertex_gloss(self, u: int) -> str:
        return self._glosses[self._check_vertex(u)]

    def set_vertex_gloss(self, u: int, gloss: str) -> None:
        self._glosses[self._check_vertex(u)] = gloss

    def vertex_is_word(self, u: int) -> bool:
        return bool(self._flags[self._check_vertex(u)] & IS_WORD)

    def vertex_is_synset(self, u: int) -> bool:
        return not self.vertex_is_word(u)

    def out_edges(self, u: int) -> list[int]:
        """Indices of the edges leaving ``u``, in insertion order."""
        return list(self._out[self._check_vertex(u)])

    def in_edges(self, v: int) -> list[int]:
        """Indices of the edges entering ``v``, in insertion order."""
        return list(self._in[self._check_vertex(v)])

    def out_degree(self, u: int) -> int:
        return len(self._out[self._check_vertex(u)])

    def successors(self, u: int) -> list[int]:
        return [self._targets[e] for e in self._out[self._check_vertex(u)]]

    def edge_source(self, e: int) -> int:
        return self._sources[self._check_edge(e)]

    def edge_target(self, e: int) -> int:
        return self._targets[self._check_edge(e)]

    def edge_weight(self, e: int) -> float:
        return self._weights[self._check_edge(e)]

    def edge_mask(self, e: int) -> int:
        return self._masks[self._check_edge(e)]

    def find_edge(self, u: int, v: int) -> int | None:
        """Index of the edge u->v, or None."""
        return self._edge_map.get((u, v))

    def edge_arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """(sources, targets, weights) of all edges as numpy arrays."""
        if self._edge_arrays is None:
            self._edge_arrays = (
                np.asarray(self._sources, dtype=np.int64),
                np.asarray(self._targets, dtype=np.int64),
                np.asarray(self._weights, dtype=np.float64),
            )
        return self._edge_arrays

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def _topology_changed(self) -> None:
        self._edge_arrays = None
        self._weight_engine.invalidate()

    def _insert_vertex(self, name: str, flags: int, gloss: str = "") -> int:
        u = len(self._names)
        self._names.append(name)
        self._glosses.append(gloss)
        self._flags.append(flags)
        self._out.append([])
        self._in.append([])
        if flags & IS_WORD:
            self._word_map[name] = u
        else:
            self._synset_map[name] = u
        self._topology_changed()
        return u

    def find_or_insert_synset(self, name: str) -> int:
        """Return the synset vertex called ``name``, creating it if needed."""
        u = self._synset_map.get(name)
        if u is None:
            u = self._insert_vertex(name, VertexKind.SYNSET.flags)
        return u

    def find_or_insert_word(self, name: str) -> int:
        """Return the word vertex called ``name``, creating it if needed."""
        u = self._word_map.get(name)
        if u is None:
            u = self._insert_vertex(name, VertexKind.WORD.flags)
        return u

    def find_or_insert_edge(self, u: int, v: int, weight: float) -> int:
        """Return the edge u->v, creating it with ``weight`` if needed.

        An existing edge keeps the weight it was created with. Weights must
        be finite; negative weights are stored but rejected by Dijkstra and
        weighted ranking.
        """
        u = self._check_vertex(u)
        v = self._check_vertex(v)
        e = self._edge_map.get((u, v))
        if e is not None:
            return e
        weight = float(weight)
        if not math.isfinite(weight):
            raise InvalidWeightError(f"Edge weight must be finite, got {weight!r}")
        e = len(self._sources)
        self._sources.append(u)
        self._targets.append(v)
        self._weights.append(weight)
        self._masks.append(0)
        self._edge_map[(u, v)] = e
        self._out[u].append(e)
        self._in[v].append(e)
        self._topology_changed()
        return e

    def edge_add_reltype(self, e: int, rel: str) -> None:
        """Tag edge ``e`` with relation type ``rel``, registering it if new."""
        e = self._check_edge(e)
        self._masks[e] = self._rtypes.add_to_mask(self._masks[e], rel)

    def get_edge_reltypes(self, e: int) -> list[str]:
        return self._rtypes.decode(self._masks[self._check_edge(e)])

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_vertex_by_name(self, name: str) -> tuple[int | None, bool]:
        """Look ``name`` up among synsets, then among words."""
        u = self._synset_map.get(name)
        if u is None:
            u = self._word_map.get(name)
        if u is None:
            return None, False
        return u, True

    def get_synset(self, name: str) -> int | None:
        return self._synset_map.get(name)

    def get_word(self, name: str) -> int | None:
        return self._word_map.get(name)

    def get_random_vertex(self) -> int:
        if not self._names:
            raise VertexNotFoundError("Cannot pick a vertex from an empty graph")
        return _rng.randrange(len(self._names))

    # ------------------------------------------------------------------
    # Provenance
    # ------------------------------------------------------------------

    def add_rel_source(self, tag: str) -> None:
        self._rel_sources.add(tag)

    def add_comment(self, text: str) -> None:
        self._notes.append(text)

    def get_comments(self) -> list[str]:
        return list(self._notes)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def info(self) -> GraphInfo:
        words = len(self._word_map)
        return GraphInfo(
            vertices=self.size(),
            words=words,
            synsets=self.size() - words,
            edges=self.num_edges(),
            relation_types=self._rtypes.names(),
            rel_sources=sorted(self._rel_sources),
            notes=list(self._notes),
        )

    def display_info(self, stream: TextIO | None = None) -> None:
        """Write a short human-readable summary of the graph."""
        out = stream if stream is not None else sys.stdout
        info = self.info()
        out.write(f"Relation sources: {' '.join(info.rel_sources)}\n")
        out.write(f"Relation types: {' '.join(info.relation_types)}\n")
        out.write("Notes:\n")
        for note in info.notes:
            out.write(f"  {note}\n")
        out.write(
            f"{info.vertices} vertices ({info.synsets} synsets, "
            f"{info.words} words) and {info.edges} edges\n"
        )

    def dump_graph(self, stream: TextIO | None = None) -> None:
        """Write every vertex with its outgoing edges."""
        out = stream if stream is not None else sys.stdout
        for u in range(self.size()):
            kind = "W" if self._flags[u] & IS_WORD else "S"
            gloss = f"  # {self._glosses[u]}" if self._glosses[u] else ""
            out.write(f"{kind} {self._names[u]}{gloss}\n")
            for e in self._out[u]:
                rels = ",".join(self.get_edge_reltypes(e))
                out.write(
                    f"    -> {self._names[self._targets[e]]} "
                    f"w={self._weights[e]:g} [{rels}]\n"
                )

    # ------------------------------------------------------------------
    # Bulk restore (used by the snapshot reader)
    # ------------------------------------------------------------------

    @classmethod
    def _restore(
        cls,
        *,
        relation_types: Iterable[str],
        rel_sources: Iterable[str],
        notes: Iterable[str],
        vertices: Iterable[tuple[str, str, int]],
        edges: Iterable[tuple[int, int, float, int]],
    ) -> KnowledgeGraph:
        graph = cls()
        for name in relation_types:
            graph._rtypes.register(name)
        graph._rel_sources.update(rel_sources)
        graph._notes.extend(notes)
        for name, gloss, flags in vertices:
            graph._insert_vertex(name, flags, gloss)
        for u, v, weight, mask in edges:
            e = graph.find_or_insert_edge(u, v, weight)
            graph._masks[e] = mask
        return graph
