"""Domain model dataclasses and enums for synset-rank."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

# Bit 0 of the vertex flags marks a word vertex; synsets have it cleared.
IS_WORD = 1


class VertexKind(str, Enum):
    """The two vertex namespaces of the graph."""

    WORD = "word"
    SYNSET = "synset"

    @classmethod
    def from_flags(cls, flags: int) -> VertexKind:
        return cls.WORD if flags & IS_WORD else cls.SYNSET

    @property
    def flags(self) -> int:
        return IS_WORD if self is VertexKind.WORD else 0


class CoefStatus(str, Enum):
    """State of the out-degree coefficient cache."""

    UNCOMPUTED = "uncomputed"
    UNWEIGHTED = "unweighted"
    WEIGHTED = "weighted"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Vertex:
    """Snapshot of a vertex's attributes."""

    index: int
    name: str
    gloss: str
    flags: int

    @property
    def kind(self) -> VertexKind:
        return VertexKind.from_flags(self.flags)

    @property
    def is_word(self) -> bool:
        return bool(self.flags & IS_WORD)


@dataclass(frozen=True)
class Edge:
    """Snapshot of an edge's attributes."""

    index: int
    source: int
    target: int
    weight: float
    rtype_mask: int


@dataclass(frozen=True)
class RelationRecord:
    """One parsed line of a relation text file."""

    source: str
    target: str
    rel_type: str | None = None
    rel_source: str | None = None
    weight: float = 1.0
    directed: bool = False


@dataclass
class LoadStats:
    """Counters collected while loading a relation file."""

    path: str = ""
    lines: int = 0
    added: int = 0
    filtered: int = 0
    malformed: int = 0


@dataclass
class GraphInfo:
    """Summary used by diagnostics and the CLI."""

    vertices: int
    words: int
    synsets: int
    edges: int
    relation_types: list[str] = field(default_factory=list)
    rel_sources: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
