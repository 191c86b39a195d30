"""Binary snapshots of a KnowledgeGraph.

Layout (little-endian)::

    magic     4 bytes  b"SRKG"
    version   uint32   FORMAT_VERSION
    relation types     uint32 count, then strings
    relation sources   uint32 count, then strings (sorted)
    notes              uint32 count, then strings
    vertices           uint32 count, then (name, gloss, uint8 flags)
    edges              uint32 count, then (uint32 source, uint32 target,
                                           float64 weight, uint32 mask)

Strings are a uint32 byte length followed by UTF-8 bytes.
"""

from __future__ import annotations

import io
import logging
import math
import struct
from pathlib import Path
from typing import BinaryIO

from synset_rank.exceptions import SnapshotError
from synset_rank.graph import KnowledgeGraph
from synset_rank.models import IS_WORD
from synset_rank.registry import Registry, resolve
from synset_rank.relations import MASK_WIDTH

logger = logging.getLogger(__name__)

MAGIC = b"SRKG"
FORMAT_VERSION = 1

_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")
_EDGE = struct.Struct("<IIdI")


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------

def _write_str(f: BinaryIO, s: str) -> None:
    data = s.encode("utf-8")
    f.write(_U32.pack(len(data)))
    f.write(data)


def _write_strings(f: BinaryIO, items: list[str]) -> None:
    f.write(_U32.pack(len(items)))
    for s in items:
        _write_str(f, s)


def write_graph(graph: KnowledgeGraph, f: BinaryIO) -> None:
    """Serialize ``graph`` to an open binary stream."""
    f.write(MAGIC)
    f.write(_U32.pack(FORMAT_VERSION))
    _write_strings(f, graph.relation_types.names())
    _write_strings(f, sorted(graph.rel_sources))
    _write_strings(f, graph.get_comments())

    f.write(_U32.pack(graph.size()))
    for vertex in graph.vertices():
        _write_str(f, vertex.name)
        _write_str(f, vertex.gloss)
        f.write(_U8.pack(vertex.flags))

    f.write(_U32.pack(graph.num_edges()))
    for edge in graph.edges():
        f.write(_EDGE.pack(edge.source, edge.target, edge.weight, edge.rtype_mask))


def dump_bytes(graph: KnowledgeGraph) -> bytes:
    """Encode ``graph`` as snapshot bytes."""
    buf = io.BytesIO()
    try:
        write_graph(graph, buf)
    except struct.error as e:
        raise SnapshotError(f"Graph cannot be encoded as a snapshot: {e}") from e
    return buf.getvalue()


def write_to_binfile(graph: KnowledgeGraph, path: str | Path) -> None:
    """Write a binary snapshot of ``graph`` to ``path``.

    The graph is fully encoded before the file is opened, so a graph that
    cannot be encoded leaves ``path`` untouched.
    """
    data = dump_bytes(graph)
    with open(path, "wb") as f:
        f.write(data)
    logger.info(
        "Wrote %d vertices and %d edges to %s",
        graph.size(), graph.num_edges(), path,
    )


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

class _Reader:
    """Bounds-checked cursor over a snapshot's bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise SnapshotError(
                f"Snapshot truncated: needed {size} bytes at offset {self._pos}"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def unpack(self, fmt: struct.Struct) -> tuple:
        return fmt.unpack(self.take(fmt.size))

    def u32(self) -> int:
        return self.unpack(_U32)[0]

    def string(self) -> str:
        data = self.take(self.u32())
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SnapshotError(f"Invalid UTF-8 string in snapshot: {e}") from e

    def strings(self) -> list[str]:
        return [self.string() for _ in range(self.u32())]

    @property
    def exhausted(self) -> bool:
        return self._pos == len(self._data)


def read_graph(data: bytes) -> KnowledgeGraph:
    """Rebuild a graph from snapshot bytes."""
    reader = _Reader(data)
    magic = reader.take(len(MAGIC))
    if magic != MAGIC:
        raise SnapshotError(f"Not a graph snapshot (magic {magic!r})")
    version = reader.u32()
    if version != FORMAT_VERSION:
        raise SnapshotError(
            f"Snapshot format version {version} is not supported "
            f"(expected {FORMAT_VERSION})"
        )

    relation_types = reader.strings()
    if len(relation_types) > MASK_WIDTH or len(set(relation_types)) != len(relation_types):
        raise SnapshotError("Snapshot relation-type registry is invalid")
    rel_sources = reader.strings()
    notes = reader.strings()

    vertices = []
    seen: set[tuple[str, bool]] = set()
    for _ in range(reader.u32()):
        name = reader.string()
        gloss = reader.string()
        (flags,) = reader.unpack(_U8)
        key = (name, bool(flags & IS_WORD))
        if key in seen:
            raise SnapshotError(f"Duplicate vertex {name!r} in snapshot")
        seen.add(key)
        vertices.append((name, gloss, flags))

    n = len(vertices)
    valid_bits = (1 << len(relation_types)) - 1
    edges = []
    pairs: set[tuple[int, int]] = set()
    for _ in range(reader.u32()):
        u, v, weight, mask = reader.unpack(_EDGE)
        if u >= n or v >= n:
            raise SnapshotError(f"Edge {u}->{v} refers to a missing vertex")
        if not math.isfinite(weight):
            raise SnapshotError(f"Edge {u}->{v} has non-finite weight {weight!r}")
        if mask & ~valid_bits:
            raise SnapshotError(f"Edge {u}->{v} uses unregistered relation types")
        if (u, v) in pairs:
            raise SnapshotError(f"Duplicate edge {u}->{v} in snapshot")
        pairs.add((u, v))
        edges.append((u, v, weight, mask))

    if not reader.exhausted:
        raise SnapshotError("Unexpected trailing data after snapshot")

    return KnowledgeGraph._restore(
        relation_types=relation_types,
        rel_sources=rel_sources,
        notes=notes,
        vertices=vertices,
        edges=edges,
    )


def load_binfile(path: str | Path) -> KnowledgeGraph:
    """Read a snapshot file without touching any registry."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    graph = read_graph(path.read_bytes())
    logger.info(
        "Loaded %d vertices and %d edges from %s",
        graph.size(), graph.num_edges(), path,
    )
    return graph


def create_from_binfile(
    path: str | Path, registry: Registry | None = None
) -> KnowledgeGraph:
    """Load a snapshot and make it the registry's graph."""
    return resolve(registry).install(load_binfile(path))
