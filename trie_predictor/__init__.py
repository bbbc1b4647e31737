"""
trie_predictor

Next-letter and next-word prediction over a frequency-counting character trie.
"""

from trie_predictor.core import PrefixTrie, TrieConfig, ScoredOption, format_options

__all__ = ["PrefixTrie", "TrieConfig", "ScoredOption", "format_options"]

__version__ = "0.1.0"
