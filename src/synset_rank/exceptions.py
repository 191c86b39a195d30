"""Custom exception hierarchy for synset-rank."""

from __future__ import annotations


class SynsetRankError(Exception):
    """Base exception for all synset-rank errors."""


class VertexNotFoundError(SynsetRankError, IndexError):
    """Vertex index is outside the graph."""


class EdgeNotFoundError(SynsetRankError, IndexError):
    """Edge index is outside the graph."""


class RelationTypeOverflowError(SynsetRankError):
    """Relation-type registry is full (one bit per type in the edge mask)."""


class RelationFormatError(SynsetRankError):
    """Malformed line in a relation or dictionary text file."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        super().__init__(message)


class SnapshotError(SynsetRankError):
    """Binary snapshot is truncated, corrupt or of another format version."""


class NegativeWeightError(SynsetRankError):
    """Shortest-path search reached an edge with negative weight."""


class PersonalizationError(SynsetRankError):
    """Personalization vector has wrong length, negative entries or bad sum."""


class GraphCopyError(SynsetRankError):
    """Attempt to copy a graph (indices and caches would desynchronize)."""


class ConfigError(SynsetRankError):
    """Invalid ranking configuration."""


class InvalidWeightError(SynsetRankError, ValueError):
    """Edge weight is NaN or infinite."""
