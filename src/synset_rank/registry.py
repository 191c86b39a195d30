"""Holder for the process-wide knowledge graph."""

from __future__ import annotations

from synset_rank.graph import KnowledgeGraph


class Registry:
    """Owns at most one :class:`KnowledgeGraph`, created on first access.

    Code that wants several graphs (tests, for instance) creates its own
    ``Registry`` or passes graphs around explicitly; the module-level
    :data:`default_registry` serves the rest of the process.
    """

    def __init__(self) -> None:
        self._graph: KnowledgeGraph | None = None

    def instance(self) -> KnowledgeGraph:
        if self._graph is None:
            self._graph = KnowledgeGraph()
        return self._graph

    def install(self, graph: KnowledgeGraph) -> KnowledgeGraph:
        """Replace the held graph with ``graph``."""
        self._graph = graph
        return graph

    def reset(self) -> None:
        self._graph = None

    @property
    def is_initialized(self) -> bool:
        return self._graph is not None


default_registry = Registry()


def instance() -> KnowledgeGraph:
    """The process-wide graph, created lazily."""
    return default_registry.instance()


def resolve(registry: Registry | None) -> Registry:
    return default_registry if registry is None else registry
