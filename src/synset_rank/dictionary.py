"""Dictionary feeds mapping words to their candidate synsets.

A dictionary yields, for each word, its synsets in sense order; the
1-based position of a synset is its sense rank. Three feeds are provided:
a text file, an in-memory mapping and a ``wn`` lexicon.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any, Protocol

import wn

from synset_rank.exceptions import RelationFormatError

logger = logging.getLogger(__name__)


class Dictionary(Protocol):
    """Interface expected by :func:`synset_rank.builder.add_dictionary`."""

    def words(self) -> Iterable[str]: ...

    def senses(self, word: str) -> list[tuple[str, int]]:
        """(synset, rank) pairs for ``word``; empty if unknown."""
        ...


class StaticDictionary:
    """Dictionary backed by a ``word -> [synset, ...]`` mapping."""

    def __init__(self, entries: Mapping[str, Iterable[str]] | None = None) -> None:
        self._entries: dict[str, list[str]] = {}
        for word, synsets in (entries or {}).items():
            for synset in synsets:
                self.add(word, synset)

    def add(self, word: str, synset: str) -> None:
        """Append ``synset`` as the next sense of ``word`` (duplicates ignored)."""
        senses = self._entries.setdefault(word, [])
        if synset not in senses:
            senses.append(synset)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, word: object) -> bool:
        return word in self._entries

    def words(self) -> Iterator[str]:
        return iter(self._entries)

    def senses(self, word: str) -> list[tuple[str, int]]:
        return [
            (synset, rank)
            for rank, synset in enumerate(self._entries.get(word, ()), start=1)
        ]


class TextDictionary(StaticDictionary):
    """Dictionary read from a text file.

    One word per line, followed by its synsets in sense order::

        bank 08420278-n:25 09213565-n:10 ...

    An optional ``:count`` suffix on a synset is accepted and ignored; the
    sense rank is the position on the line.
    """

    @classmethod
    def from_file(cls, path: str | Path) -> TextDictionary:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        dictionary = cls()
        with open(path, "rb") as f:
            for lineno, raw in enumerate(f, start=1):
                try:
                    parsed = parse_dictionary_line(decode_line(raw, lineno), lineno)
                except RelationFormatError as e:
                    logger.warning("%s:%d: %s", path, lineno, e)
                    continue
                if parsed is None:
                    continue
                word, synsets = parsed
                for synset in synsets:
                    dictionary.add(word, synset)
        logger.info("Loaded %d dictionary words from %s", len(dictionary), path)
        return dictionary


def decode_line(raw: bytes, lineno: int | None = None) -> str:
    """Decode one UTF-8 line of a text input file."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RelationFormatError(f"Invalid UTF-8: {e.reason}", line=lineno) from None


def parse_dictionary_line(
    line: str, lineno: int | None = None
) -> tuple[str, list[str]] | None:
    """Split a dictionary line into (word, synsets); None for blank lines."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    fields = line.split()
    if len(fields) < 2:
        raise RelationFormatError(
            f"Dictionary entry {fields[0]!r} lists no synsets", line=lineno
        )
    synsets = []
    for token in fields[1:]:
        synset, sep, count = token.rpartition(":")
        if not sep:
            synset = token
        elif not count.isdigit() or not synset:
            # not a count suffix; keep the token whole (ids may contain ':')
            synset = token
        synsets.append(synset)
    return fields[0], synsets


class WnDictionary:
    """Dictionary over a lexicon loaded with the ``wn`` package.

    Pass a ``wn.Wordnet`` object, or a lexicon specifier (``"oewn:2024"``)
    to open one. Senses come in the order ``wn`` reports them, which follows
    the lexicon's sense ordering.
    """

    def __init__(self, wordnet: Any = None, *, lexicon: str | None = None) -> None:
        if wordnet is None:
            wordnet = wn.Wordnet(lexicon)
        self._wordnet = wordnet

    def words(self) -> Iterator[str]:
        seen: set[str] = set()
        for word in self._wordnet.words():
            lemma = str(word.lemma())
            if lemma not in seen:
                seen.add(lemma)
                yield lemma

    def senses(self, word: str) -> list[tuple[str, int]]:
        result: list[tuple[str, int]] = []
        seen: set[str] = set()
        for w in self._wordnet.words(word):
            if str(w.lemma()) != word:
                continue
            for sense in w.senses():
                synset_id = sense.synset().id
                if synset_id not in seen:
                    seen.add(synset_id)
                    result.append((synset_id, len(result) + 1))
        return result
