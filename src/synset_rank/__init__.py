"""synset-rank: personalized PageRank over word/synset knowledge graphs."""

__version__ = "0.1.0"

from synset_rank.builder import (
    add_dictionary,
    add_from_txt,
    add_rel_source,
    add_token,
    create_from_txt,
    parse_relation_line,
)
from synset_rank.config import RankingConfig, load_config
from synset_rank.dictionary import StaticDictionary, TextDictionary, WnDictionary
from synset_rank.exceptions import (
    ConfigError,
    EdgeNotFoundError,
    GraphCopyError,
    InvalidWeightError,
    NegativeWeightError,
    PersonalizationError,
    RelationFormatError,
    RelationTypeOverflowError,
    SnapshotError,
    SynsetRankError,
    VertexNotFoundError,
)
from synset_rank.graph import KnowledgeGraph, seed_random
from synset_rank.models import CoefStatus, Edge, LoadStats, RelationRecord, Vertex, VertexKind
from synset_rank.ranking import (
    pagerank_ppv,
    ppv_from_names,
    ppv_from_vertices,
    rank_synsets_for_word,
    top_ranked,
)
from synset_rank.registry import Registry, default_registry, instance
from synset_rank.relations import MASK_WIDTH, RelationTypeRegistry
from synset_rank.serialization import create_from_binfile, load_binfile, write_to_binfile
from synset_rank.traversal import bfs, dijkstra, dijkstra_distances, shortest_path
from synset_rank.weights import WeightEngine, ppv_weights

__all__ = [
    "__version__",
    # Graph
    "KnowledgeGraph",
    "seed_random",
    "Registry",
    "default_registry",
    "instance",
    "RelationTypeRegistry",
    "MASK_WIDTH",
    # Models
    "CoefStatus",
    "Edge",
    "LoadStats",
    "RelationRecord",
    "Vertex",
    "VertexKind",
    # Construction
    "add_dictionary",
    "add_from_txt",
    "add_rel_source",
    "add_token",
    "create_from_txt",
    "parse_relation_line",
    "StaticDictionary",
    "TextDictionary",
    "WnDictionary",
    # Algorithms
    "WeightEngine",
    "ppv_weights",
    "bfs",
    "dijkstra",
    "dijkstra_distances",
    "shortest_path",
    "pagerank_ppv",
    "ppv_from_names",
    "ppv_from_vertices",
    "rank_synsets_for_word",
    "top_ranked",
    "RankingConfig",
    "load_config",
    # Persistence
    "create_from_binfile",
    "load_binfile",
    "write_to_binfile",
    # Exceptions
    "SynsetRankError",
    "ConfigError",
    "EdgeNotFoundError",
    "GraphCopyError",
    "InvalidWeightError",
    "NegativeWeightError",
    "PersonalizationError",
    "RelationFormatError",
    "RelationTypeOverflowError",
    "SnapshotError",
    "VertexNotFoundError",
]
