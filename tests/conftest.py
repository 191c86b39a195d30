"""Shared test fixtures for synset-rank."""

import pytest

from synset_rank import KnowledgeGraph, Registry


@pytest.fixture
def graph():
    """An empty graph."""
    return KnowledgeGraph()


@pytest.fixture
def registry():
    """A registry independent of the process-wide one."""
    return Registry()


@pytest.fixture
def abc_graph(graph):
    """Synsets A, B, C with A->B, A->C (0.5 each) and word w linked to A."""
    a = graph.find_or_insert_synset("A")
    b = graph.find_or_insert_synset("B")
    c = graph.find_or_insert_synset("C")
    graph.edge_add_reltype(graph.find_or_insert_edge(a, b, 0.5), "hyponym")
    graph.edge_add_reltype(graph.find_or_insert_edge(a, c, 0.5), "hyponym")
    w = graph.find_or_insert_word("w")
    graph.edge_add_reltype(graph.find_or_insert_edge(w, a, 1.0), "word")
    return graph, a, b, c, w


@pytest.fixture
def rel_file(tmp_path):
    """A relation file mixing two sources, comments and a bad line."""
    path = tmp_path / "rels.txt"
    path.write_text(
        "# sample relations\n"
        "u:dog-n v:canine-n t:hypernym s:wn30 w:1 d:1\n"
        "u:canine-n v:carnivore-n t:hypernym s:wn30 d:1\n"
        "u:dog-n v:bark-v t:related s:xwn\n"
        "u:cat-n v:carnivore-n t:hypernym s:wn30 w:2.5\n"
        "\n"
        "this line is broken\n",
        encoding="utf-8",
    )
    return path
