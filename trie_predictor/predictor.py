# predictor.py
"""
TriePredictor - application facade.

Purpose:
 - Own the PrefixTrie, its config and the random source used by the samplers
 - Turn raw front-end input into normalized words
 - Simple public API for CLI/TUI/tests:
     train_words(words), train_file(path), learn(text), forget(word),
     snapshot(fragment), top(prefix, k), stats()
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from trie_predictor.context import load_corpus, normalize_text, simple_tokenize
from trie_predictor.core.protocols import RandomSource, TrieStats
from trie_predictor.core.trie import PrefixTrie, ScoredOption, TrieConfig
from trie_predictor.utils.cache_utils import timed
from trie_predictor.utils.config_manager import Config
from trie_predictor.utils.logger_utils import log


@dataclass
class Prediction:
    """Everything a front end shows for the word being typed."""
    word: str
    is_word: bool = False
    next_char: Optional[str] = None
    next_word: str = ""
    top_letters: List[ScoredOption] = field(default_factory=list)
    alt_letters: List[ScoredOption] = field(default_factory=list)
    top_words: List[ScoredOption] = field(default_factory=list)
    alt_words: List[ScoredOption] = field(default_factory=list)
    latency: float = 0.0

    @property
    def color(self) -> str:
        """
        Colour for the typed word:
        - green: it is a known word
        - red: nothing can follow it (unknown prefix, or nothing typed)
        - white: a valid prefix that is not a word yet
        """
        if self.is_word:
            return "green"
        if self.next_char is None:
            return "red"
        return "white"


def last_word(fragment: str) -> str:
    """Normalized last token of a fragment ("I saw Th" -> "th")."""
    toks = simple_tokenize(normalize_text(fragment))
    return toks[-1] if toks else ""


class TriePredictor:
    """Facade over PrefixTrie used by the CLI and the TUI."""

    def __init__(
        self,
        config: Optional[Config] = None,
        rng: Optional[RandomSource] = None,
        trie: Optional[PrefixTrie] = None,
    ) -> None:
        self.cfg = config
        trie_cfg = config.trie_config() if config else TrieConfig()
        seed = config.get("seed") if config else None
        self.rng = rng or random.Random(seed)
        self.trie = trie or PrefixTrie(trie_cfg, rng=self.rng)
        self.suggestions = int(config.get("suggestions", 5)) if config else 5

    # training -----------------------------------------------------------
    def train_words(self, words: Iterable[str]) -> int:
        """Insert already-normalized words; returns the number inserted."""
        return self.trie.insert_many(words)

    def train_file(self, path: str) -> int:
        return load_corpus(self.trie, path)

    def learn(self, text: str) -> List[str]:
        """Normalize free text and insert each word. Returns the words learned."""
        words = simple_tokenize(normalize_text(text))
        self.trie.insert_many(words)
        if words:
            log.debug(f"learned {words}")
        return words

    def forget(self, word: str) -> bool:
        """Remove one occurrence of the normalized word."""
        w = last_word(word)
        removed = self.trie.delete(w)
        log.info(f"forget '{w}': {'removed' if removed else 'not present'}")
        return removed

    # prediction ---------------------------------------------------------
    def snapshot(self, fragment: str) -> Prediction:
        pred, elapsed = self._predict(last_word(fragment))
        pred.latency = elapsed
        return pred

    @timed
    def _predict(self, word: str) -> Prediction:
        t, k = self.trie, self.suggestions
        if not word:
            return Prediction(word)
        return Prediction(
            word=word,
            is_word=t.contains(word),
            next_char=t.most_likely_next_char(word),
            next_word=t.most_likely_next_word(word),
            top_letters=t.ranked_next_letters(word, k),
            alt_letters=t.alternative_next_letters(word, k),
            top_words=t.ranked_next_words(word, k),
            alt_words=t.alternative_next_words(word, k),
        )

    def top(self, prefix: str, k: Optional[int] = None) -> List[Tuple[str, int]]:
        """Most frequent words under prefix with their counts."""
        words = self.trie.top_k_words(last_word(prefix), k or self.suggestions)
        return [(w, self.trie.frequency(w)) for w in words]

    def stats(self) -> TrieStats:
        return self.trie.stats()
