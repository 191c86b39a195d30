"""Tests for graph construction from relation files and dictionaries."""

import logging

import pytest

from synset_rank import (
    KnowledgeGraph,
    RelationFormatError,
    StaticDictionary,
    add_dictionary,
    add_from_txt,
    add_rel_source,
    add_token,
    create_from_txt,
    parse_relation_line,
)


class TestParseRelationLine:

    def test_full_record(self):
        rec = parse_relation_line("u:a v:b t:hypernym s:wn30 w:0.25 d:1")
        assert rec.source == "a"
        assert rec.target == "b"
        assert rec.rel_type == "hypernym"
        assert rec.rel_source == "wn30"
        assert rec.weight == 0.25
        assert rec.directed is True

    def test_defaults(self):
        rec = parse_relation_line("u:a v:b")
        assert rec.weight == 1.0
        assert rec.directed is False
        assert rec.rel_type is None
        assert rec.rel_source is None

    @pytest.mark.parametrize("line", ["", "   ", "# comment"])
    def test_blank_and_comment_lines(self, line):
        assert parse_relation_line(line) is None

    @pytest.mark.parametrize(
        "line",
        [
            "u:a",
            "v:b",
            "u:a v:b w:heavy",
            "u:a v:b w:-1",
            "u:a v:b w:nan",
            "u:a v:b w:inf",
            "u:a v:b w:1e400",
            "u:a v:b x:1",
            "u:a v:b oops",
        ],
    )
    def test_malformed(self, line):
        with pytest.raises(RelationFormatError):
            parse_relation_line(line, lineno=7)

    def test_error_carries_line_number(self):
        with pytest.raises(RelationFormatError) as exc_info:
            parse_relation_line("u:a", lineno=3)
        assert exc_info.value.line == 3


class TestAddFromTxt:

    def test_filters_by_source(self, graph, rel_file):
        add_rel_source(graph, "wn30")
        stats = add_from_txt(graph, rel_file)
        assert stats.added == 3
        assert stats.filtered == 1
        assert stats.malformed == 1
        found = {graph.get_vertex_name(u) for u in range(graph.size())}
        assert found == {"dog-n", "canine-n", "carnivore-n", "cat-n"}
        assert graph.get_vertex_by_name("bark-v") == (None, False)

    def test_directed_and_undirected(self, graph, rel_file):
        add_rel_source(graph, "wn30")
        add_from_txt(graph, rel_file)
        dog = graph.get_synset("dog-n")
        canine = graph.get_synset("canine-n")
        cat = graph.get_synset("cat-n")
        carnivore = graph.get_synset("carnivore-n")
        assert graph.find_edge(dog, canine) is not None
        assert graph.find_edge(canine, dog) is None
        # undirected record inserts both directions with the same weight
        e1 = graph.find_edge(cat, carnivore)
        e2 = graph.find_edge(carnivore, cat)
        assert graph.edge_weight(e1) == graph.edge_weight(e2) == 2.5
        assert graph.get_edge_reltypes(e2) == ["hypernym"]

    def test_merge_keeps_existing_state(self, graph, rel_file, tmp_path):
        add_rel_source(graph, "wn30")
        add_from_txt(graph, rel_file)
        before = graph.size()

        more = tmp_path / "more.txt"
        more.write_text("u:dog-n v:bark-v t:related s:xwn\n", encoding="utf-8")
        stats = add_from_txt(graph, more)
        assert stats.added == 0
        assert graph.size() == before

        add_rel_source(graph, "xwn")
        stats = add_from_txt(graph, more)
        assert stats.added == 1
        assert graph.size() == before + 1
        assert graph.get_synset("dog-n") == 0

    def test_invalid_utf8_line_is_skipped(self, graph, tmp_path):
        path = tmp_path / "latin.txt"
        path.write_bytes(
            b"u:a v:b s:wn30\n"
            b"u:\xff\xfe v:c s:wn30\n"
            b"u:c v:d s:wn30\n"
        )
        add_rel_source(graph, "wn30")
        stats = add_from_txt(graph, path)
        assert stats.added == 2
        assert stats.malformed == 1
        assert graph.size() == 4
        assert graph.get_synset("c") is not None

    def test_malformed_line_is_warned(self, graph, rel_file, caplog):
        add_rel_source(graph, "wn30")
        with caplog.at_level(logging.WARNING, logger="synset_rank.builder"):
            add_from_txt(graph, rel_file)
        assert any("malformed" in r.getMessage() for r in caplog.records)

    def test_missing_file(self, graph, tmp_path):
        with pytest.raises(FileNotFoundError):
            add_from_txt(graph, tmp_path / "missing.txt")


class TestCreateFromTxt:

    def test_installs_in_registry(self, registry, rel_file):
        old = registry.instance()
        graph = create_from_txt(rel_file, ["wn30", "xwn"], registry=registry)
        assert registry.instance() is graph
        assert graph is not old
        assert graph.rel_sources == frozenset({"wn30", "xwn"})
        assert graph.get_synset("bark-v") is not None

    def test_replaces_previous_graph(self, registry, rel_file):
        create_from_txt(rel_file, ["xwn"], registry=registry)
        graph = create_from_txt(rel_file, ["wn30"], registry=registry)
        assert graph.get_synset("bark-v") is None
        assert registry.instance() is graph

    def test_missing_file_is_fatal(self, registry, tmp_path):
        with pytest.raises(FileNotFoundError):
            create_from_txt(tmp_path / "nope.txt", ["wn30"], registry=registry)


class TestDictionaryWiring:

    @pytest.fixture
    def dictionary(self):
        return StaticDictionary({"bank": ["bank-1", "bank-2", "bank-3"], "cat": ["cat-1"]})

    def test_add_token_unweighted(self, graph, dictionary):
        assert add_token(graph, dictionary, "bank", with_weight=False) == 3
        w = graph.get_word("bank")
        weights = [graph.edge_weight(e) for e in graph.out_edges(w)]
        assert weights == [1.0, 1.0, 1.0]
        targets = [graph.get_vertex_name(v) for v in graph.successors(w)]
        assert targets == ["bank-1", "bank-2", "bank-3"]
        assert all(graph.vertex_is_synset(v) for v in graph.successors(w))

    def test_add_token_weighted_by_rank(self, graph, dictionary):
        add_token(graph, dictionary, "bank", with_weight=True)
        w = graph.get_word("bank")
        weights = [graph.edge_weight(e) for e in graph.out_edges(w)]
        assert weights == pytest.approx([1.0, 0.5, 1.0 / 3.0])
        assert graph.get_edge_reltypes(graph.out_edges(w)[0]) == ["word"]

    def test_add_token_reuses_existing_synsets(self, graph, dictionary):
        s = graph.find_or_insert_synset("bank-2")
        add_token(graph, dictionary, "bank")
        assert s in graph.successors(graph.get_word("bank"))
        assert graph.size() == 4

    def test_unknown_word(self, graph, dictionary, caplog):
        with caplog.at_level(logging.WARNING):
            assert add_token(graph, dictionary, "zebra") == 0
        assert graph.size() == 0
        assert "zebra" in caplog.text

    def test_add_dictionary(self, graph, dictionary):
        assert add_dictionary(graph, dictionary, with_weight=True) == 2
        assert graph.get_word("cat") is not None
        assert graph.num_edges() == 4

    def test_add_dictionary_is_idempotent(self, graph, dictionary):
        add_dictionary(graph, dictionary)
        size, edges = graph.size(), graph.num_edges()
        add_dictionary(graph, dictionary)
        assert (graph.size(), graph.num_edges()) == (size, edges)

    def test_words_link_into_relation_graph(self, rel_file):
        graph = KnowledgeGraph()
        add_rel_source(graph, "wn30")
        add_from_txt(graph, rel_file)
        add_token(graph, StaticDictionary({"dog": ["dog-n"]}), "dog")
        w = graph.get_word("dog")
        assert graph.successors(w) == [graph.get_synset("dog-n")]
