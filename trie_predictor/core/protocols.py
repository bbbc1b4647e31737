# trie_predictor/core/protocols.py
"""
Small typing surface shared by the trie, the corpus loader and the front ends.

Collaborators depend on these Protocols rather than on concrete classes so tests
can hand in a seeded random source or a recording sink.
"""

from __future__ import annotations

from typing import Any, MutableSequence, Protocol, runtime_checkable
from typing_extensions import TypedDict


class TrieStats(TypedDict):
    """
    Result of one depth-first pass over the tree.

    Example:
      {"total_inserts": 9, "nodes": 12, "distinct_words": 6, "max_depth": 9}
    """
    total_inserts: int  # root pass count, duplicates included
    nodes: int  # root included
    distinct_words: int
    max_depth: int


class RandomSource(Protocol):
    """Anything that can shuffle a list in place (random.Random, a seeded stub...)."""

    def shuffle(self, x: MutableSequence[Any]) -> None:
        ...


@runtime_checkable
class WordSink(Protocol):
    """Receiver for normalized words, e.g. PrefixTrie."""

    def insert(self, word: str) -> None:
        ...
