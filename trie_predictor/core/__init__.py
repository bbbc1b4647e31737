"""
trie_predictor.core

The prediction engine.
Contains:
 - the frequency-counting prefix trie with cached best answers (PrefixTrie)
 - its config and result types (TrieConfig, ScoredOption)
 - small typing protocols shared with collaborators
"""

from .trie import PrefixTrie, TrieConfig, TrieNode, ScoredOption, format_options
from .protocols import RandomSource, TrieStats, WordSink

__all__ = [
    "PrefixTrie",
    "TrieConfig",
    "TrieNode",
    "ScoredOption",
    "format_options",
    "RandomSource",
    "TrieStats",
    "WordSink",
]
