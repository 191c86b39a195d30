"""Graph construction from relation files and dictionaries."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from pathlib import Path

from synset_rank.dictionary import Dictionary, decode_line
from synset_rank.exceptions import RelationFormatError
from synset_rank.graph import KnowledgeGraph
from synset_rank.models import LoadStats, RelationRecord
from synset_rank.registry import Registry, resolve
from synset_rank.relations import WORD_RELATION

logger = logging.getLogger(__name__)

_KEYS = frozenset({"u", "v", "t", "s", "w", "d"})


# ---------------------------------------------------------------------------
# Relation file parsing
# ---------------------------------------------------------------------------

def parse_relation_line(line: str, lineno: int | None = None) -> RelationRecord | None:
    """Parse one relation line into a :class:`RelationRecord`.

    Lines are whitespace-separated ``key:value`` tokens::

        u:00001740-n v:00002137-n t:hyponym s:wn30 w:0.5 d:1

    Returns None for blank and comment lines. Raises
    :class:`RelationFormatError` for anything else that does not parse.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    fields: dict[str, str] = {}
    for token in line.split():
        key, sep, value = token.partition(":")
        if not sep:
            raise RelationFormatError(f"Token {token!r} is not key:value", line=lineno)
        if key not in _KEYS:
            raise RelationFormatError(f"Unknown key {key!r}", line=lineno)
        fields[key] = value

    source = fields.get("u")
    target = fields.get("v")
    if not source or not target:
        raise RelationFormatError("Relation needs both u: and v:", line=lineno)

    weight = 1.0
    if "w" in fields:
        try:
            weight = float(fields["w"])
        except ValueError:
            raise RelationFormatError(
                f"Invalid weight {fields['w']!r}", line=lineno
            ) from None
        if not (math.isfinite(weight) and weight >= 0.0):
            raise RelationFormatError(
                f"Weight must be finite and nonnegative, got {fields['w']!r}", line=lineno
            )

    return RelationRecord(
        source=source,
        target=target,
        rel_type=fields.get("t") or None,
        rel_source=fields.get("s") or None,
        weight=weight,
        directed=fields.get("d") == "1",
    )


def iter_relation_file(
    path: str | Path, stats: LoadStats | None = None
) -> Iterable[RelationRecord]:
    """Yield the well-formed records of a relation file.

    Malformed lines are logged and skipped.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "rb") as f:
        for lineno, raw in enumerate(f, start=1):
            if stats is not None:
                stats.lines += 1
            try:
                record = parse_relation_line(decode_line(raw, lineno), lineno)
            except RelationFormatError as e:
                logger.warning("%s:%d: skipping malformed relation: %s", path, lineno, e)
                if stats is not None:
                    stats.malformed += 1
                continue
            if record is not None:
                yield record


# ---------------------------------------------------------------------------
# Insertion
# ---------------------------------------------------------------------------

def _insert_link(
    graph: KnowledgeGraph, u: int, v: int, weight: float, rel_type: str | None
) -> None:
    e = graph.find_or_insert_edge(u, v, weight)
    if rel_type:
        graph.edge_add_reltype(e, rel_type)


def insert_relation(graph: KnowledgeGraph, record: RelationRecord) -> None:
    """Add the synsets and edge(s) of one relation record."""
    u = graph.find_or_insert_synset(record.source)
    v = graph.find_or_insert_synset(record.target)
    _insert_link(graph, u, v, record.weight, record.rel_type)
    if not record.directed:
        _insert_link(graph, v, u, record.weight, record.rel_type)


def add_from_txt(graph: KnowledgeGraph, rel_file: str | Path) -> LoadStats:
    """Merge the relations of ``rel_file`` into ``graph``.

    Only records whose ``s:`` tag is one of the graph's accepted relation
    sources are inserted.
    """
    stats = LoadStats(path=str(rel_file))
    accepted = graph.rel_sources
    for record in iter_relation_file(rel_file, stats):
        if record.rel_source not in accepted:
            stats.filtered += 1
            continue
        insert_relation(graph, record)
        stats.added += 1

    if stats.filtered:
        logger.debug(
            "%s: %d records from sources not in %s were skipped",
            rel_file, stats.filtered, sorted(accepted),
        )
    logger.info(
        "Loaded %d relations from %s (%d malformed lines skipped)",
        stats.added, rel_file, stats.malformed,
    )
    return stats


def create_from_txt(
    rel_file: str | Path,
    accepted_sources: Iterable[str],
    registry: Registry | None = None,
) -> KnowledgeGraph:
    """Build a fresh graph from ``rel_file`` and install it in the registry."""
    graph = KnowledgeGraph()
    for tag in accepted_sources:
        graph.add_rel_source(tag)
    add_from_txt(graph, rel_file)
    return resolve(registry).install(graph)


def add_rel_source(graph: KnowledgeGraph, tag: str) -> None:
    """Accept relations tagged ``tag`` in later merges."""
    graph.add_rel_source(tag)


# ---------------------------------------------------------------------------
# Dictionary wiring
# ---------------------------------------------------------------------------

def add_token(
    graph: KnowledgeGraph,
    dictionary: Dictionary,
    word: str,
    with_weight: bool = False,
) -> int:
    """Link the word vertex of ``word`` to each of its dictionary synsets.

    The edge weight is 1.0, or ``1 / rank`` when ``with_weight`` is set so
    that the first sense gets the strongest link. Returns the number of
    senses linked.
    """
    senses = dictionary.senses(word)
    if not senses:
        logger.warning("Word %r is not in the dictionary", word)
        return 0
    w = graph.find_or_insert_word(word)
    for synset, rank in senses:
        weight = 1.0 / rank if with_weight else 1.0
        _insert_link(graph, w, graph.find_or_insert_synset(synset), weight, WORD_RELATION)
    return len(senses)


def add_dictionary(
    graph: KnowledgeGraph, dictionary: Dictionary, with_weight: bool = False
) -> int:
    """Add every word of ``dictionary`` to ``graph``; returns the word count."""
    count = 0
    for word in dictionary.words():
        if add_token(graph, dictionary, word, with_weight):
            count += 1
    logger.info("Linked %d dictionary words into the graph", count)
    return count
