# trie.py
# Character trie with cached best answers at every node.
# Keeps pass/end counts per node so it can answer "most likely next letter"
# and "most likely completion" in O(len(prefix)) without scanning subtrees.
# - insert updates the caches incrementally along the word's path
# - delete prunes dead nodes, then recomputes the caches on the path
# - a small table of short prefixes mirrors the node caches for the hottest lookups
# All walks use an explicit stack (no recursion), so word length is unbounded.
# Single-threaded: there is no locking, callers must serialise insert/delete.

from __future__ import annotations

import heapq
import random
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from trie_predictor.core.protocols import RandomSource, TrieStats
from trie_predictor.utils.logger_utils import log

Word = str
Count = int
WordCount = Tuple[Word, Count]


@dataclass(frozen=True)
class TrieConfig:
    """Knobs for the prefix accelerator and the alternative samplers. Negative values clamp to 0."""
    cache_prefix_len: int = 2  # prefixes up to this length live in the accelerator
    alt_skip_top: int = 5  # alternatives skip this many top candidates when there are more

    def __post_init__(self):
        object.__setattr__(self, "cache_prefix_len", max(0, int(self.cache_prefix_len)))
        object.__setattr__(self, "alt_skip_top", max(0, int(self.alt_skip_top)))


class ScoredOption(NamedTuple):
    """A ranked candidate (letter or word) and its share of the total, in percent."""
    label: str
    percent: float

    def display(self) -> str:
        return f"{self.label} ({self.percent:.1f}%)"


def format_options(options: Iterable[ScoredOption]) -> List[str]:
    """['r (42.9%)', 'm (14.3%)', ...]"""
    return [o.display() for o in options]


class TrieNode:
    """
    A single node in the trie.
    children: char -> TrieNode (owned)
    parent/char: back-reference to the owning node and the edge label, used only for pruning
    pass_count: insertions whose path stepped into this node
    end_count: insertions that ended exactly here (word frequency)
    best_word/best_word_count: most frequent word in this subtree, alphabetical tie-break
    best_next_char/best_next_pass: child with the highest pass_count, alphabetical tie-break
    """

    __slots__ = (
        "children",
        "parent",
        "char",
        "pass_count",
        "end_count",
        "best_word",
        "best_word_count",
        "best_next_char",
        "best_next_pass",
    )

    def __init__(self, parent: Optional[TrieNode] = None, char: str = "") -> None:
        self.children: Dict[str, TrieNode] = {}
        self.parent = parent
        self.char = char
        self.pass_count = 0
        self.end_count = 0
        self.best_word = ""
        self.best_word_count = 0
        self.best_next_char: Optional[str] = None
        self.best_next_pass = 0

    def is_word(self) -> bool:
        return self.end_count > 0

    def reset_caches(self) -> None:
        self.best_word = ""
        self.best_word_count = 0
        self.best_next_char = None
        self.best_next_pass = 0

    def __repr__(self) -> str:
        return f"(pass={self.pass_count}, end={self.end_count})"


@dataclass
class CacheEntry:
    """Accelerator copy of a node's cached answers."""
    best_word: str = ""
    best_word_count: int = 0
    best_next_char: Optional[str] = None


# cache rules -----------------------------------------------------------------
def _beats(word: str, count: int, best_word: str, best_count: int) -> bool:
    """Higher count wins; equal positive counts go to the alphabetically smaller word."""
    if count != best_count:
        return count > best_count
    return count > 0 and (not best_word or word < best_word)


def _offer_word(target, word: str, count: int) -> None:
    # target: TrieNode or CacheEntry
    if _beats(word, count, target.best_word, target.best_word_count):
        target.best_word = word
        target.best_word_count = count


def _offer_next_char(node: TrieNode, ch: str, pass_count: int) -> None:
    if pass_count > node.best_next_pass or (
        pass_count == node.best_next_pass
        and pass_count > 0
        and (node.best_next_char is None or ch < node.best_next_char)
    ):
        node.best_next_char = ch
        node.best_next_pass = pass_count


def _recompute(node: TrieNode, prefix: str) -> None:
    """
    Rebuild a node's caches from its own end count and its children's caches.
    Children must already be correct; the max/alphabetical order is total, so the
    best over the children's bests equals the best over the whole subtree.
    """
    node.reset_caches()
    if node.end_count:
        _offer_word(node, prefix, node.end_count)
    for ch, child in sorted(node.children.items()):
        _offer_next_char(node, ch, child.pass_count)
        _offer_word(node, child.best_word, child.best_word_count)


class PrefixTrie:
    """
    Frequency-counting trie for next-letter / next-word prediction.
     - insert(word), delete(word) -> bool
     - contains, contains_prefix, frequency, count_words_with_prefix
     - most_likely_next_char / most_likely_next_word in O(len(prefix))
     - ranked_* and alternative_* percentage lists, top_k_words
     - diagnostics: all_words, words_with_prefix, word_frequencies, structure, stats
    Words are taken as given; normalization belongs to the caller.
    Not thread-safe.
    """

    def __init__(
        self, config: Optional[TrieConfig] = None, rng: Optional[RandomSource] = None
    ) -> None:
        self.cfg = config or TrieConfig()
        self._rng: RandomSource = rng or random.Random()
        self._root = TrieNode()
        self._prefix_cache: Dict[str, CacheEntry] = {}
        self._distinct = 0

    # insertion -----------------------------------------------------
    def insert(self, word: str) -> None:
        """
        Add one occurrence of `word`. Empty input is a no-op.
        Counts go up along the path, then every node on the path is offered the
        word (and the child stepped into) as a new best candidate.
        """
        if not word:
            return

        node = self._root
        node.pass_count += 1
        path = [node]
        for ch in word:
            child = node.children.get(ch)
            if child is None:
                child = TrieNode(node, ch)
                node.children[ch] = child
            child.pass_count += 1
            path.append(child)
            node = child

        if node.end_count == 0:
            self._distinct += 1
        node.end_count += 1
        freq = node.end_count

        # only this word's count grew, so offering it is enough to keep every best on the path
        _offer_word(path[0], word, freq)
        for i, ch in enumerate(word):
            parent, child = path[i], path[i + 1]
            _offer_next_char(parent, ch, child.pass_count)
            _offer_word(child, word, freq)

        self._extend_prefix_cache(word, freq, path)

    def insert_many(self, words: Iterable[str]) -> int:
        """Bulk insert; returns how many non-empty words went in."""
        n = 0
        for w in words:
            if w:
                self.insert(w)
                n += 1
        return n

    # deletion -----------------------------------------------------
    def delete(self, word: str) -> bool:
        """
        Remove one occurrence of `word`.
        Returns False (and changes nothing) if the word is not stored.
        """
        if not word:
            return False

        path = self._path(word)
        if path is None or path[-1].end_count == 0:
            return False

        terminal = path[-1]
        terminal.end_count -= 1
        if terminal.end_count == 0:
            self._distinct -= 1
        for node in path:
            node.pass_count -= 1

        pruned = self._prune(terminal)
        self._refresh_path(word)
        self._rebuild_prefix_cache()
        log.debug(f"delete '{word}': pruned {pruned} node(s), {len(self._prefix_cache)} prefix entries")
        return True

    def _prune(self, node: TrieNode) -> int:
        """Unlink empty leaves walking upward; the root is never removed."""
        pruned = 0
        while node is not self._root and node.end_count == 0 and not node.children:
            parent = node.parent
            assert parent is not None and parent.children.get(node.char) is node
            del parent.children[node.char]
            node.parent = None
            node = parent
            pruned += 1
        return pruned

    def _refresh_path(self, word: str) -> None:
        """Recompute caches on the surviving part of the path, deepest node first."""
        survivors = [(self._root, "")]
        node = self._root
        for i, ch in enumerate(word):
            node = node.children.get(ch)
            if node is None:
                break
            survivors.append((node, word[: i + 1]))
        for node, prefix in reversed(survivors):
            _recompute(node, prefix)

    # navigation -----------------------------------------------------
    def _node(self, prefix: str) -> Optional[TrieNode]:
        """Node at the end of `prefix`, or None. Never creates nodes."""
        node = self._root
        for ch in prefix:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def _path(self, word: str) -> Optional[List[TrieNode]]:
        node = self._root
        path = [node]
        for ch in word:
            node = node.children.get(ch)
            if node is None:
                return None
            path.append(node)
        return path

    def _walk(self, start: TrieNode, prefix: str) -> Iterator[Tuple[str, TrieNode, int]]:
        """Pre-order (path, node, depth) walk in alphabetical order."""
        stack = [(start, prefix, 0)]
        while stack:
            node, path, depth = stack.pop()
            yield path, node, depth
            for ch, child in sorted(node.children.items(), reverse=True):
                stack.append((child, path + ch, depth + 1))

    def _iter_words(self, start: TrieNode, prefix: str) -> Iterator[WordCount]:
        for path, node, _ in self._walk(start, prefix):
            if node.end_count:
                yield path, node.end_count

    # membership -----------------------------------------------------
    def contains(self, word: str) -> bool:
        if not word:
            return False
        node = self._node(word)
        return node is not None and node.is_word()

    def __contains__(self, word: str) -> bool:
        return self.contains(word)

    def contains_prefix(self, prefix: str) -> bool:
        """True if the path exists, complete word or not."""
        if not prefix:
            return False
        return self._node(prefix) is not None

    def frequency(self, word: str) -> int:
        """How many times `word` was inserted (minus deletions); 0 if absent."""
        if not word:
            return 0
        node = self._node(word)
        return node.end_count if node is not None else 0

    get_frequency = frequency

    def count_words_with_prefix(self, prefix: str) -> int:
        """Traffic through the prefix node (insertions, not distinct words)."""
        if not prefix:
            return 0
        node = self._node(prefix)
        return node.pass_count if node is not None else 0

    @property
    def total_words(self) -> int:
        return self._root.pass_count

    def __len__(self) -> int:
        return self._distinct

    # single-best queries ------------------------------------------------
    def most_likely_next_char(self, prefix: str) -> Optional[str]:
        """Cached best next letter after `prefix`; None when there is no prediction."""
        if not prefix:
            return None

        if len(prefix) <= self.cfg.cache_prefix_len:
            entry = self._prefix_cache.get(prefix)
            if entry is not None:
                return entry.best_next_char

        node = self._node(prefix)
        if node is None:
            return None
        return node.best_next_char

    def most_likely_next_word(self, prefix: str) -> str:
        """Cached most frequent completion of `prefix` (may be prefix itself); "" if none."""
        if not prefix:
            return ""

        if len(prefix) <= self.cfg.cache_prefix_len:
            entry = self._prefix_cache.get(prefix)
            if entry is not None:
                return entry.best_word

        node = self._node(prefix)
        if node is None:
            return ""
        return node.best_word

    # ranked/weighted queries --------------------------------------------
    def ranked_next_letters(self, prefix: str, k: int) -> List[ScoredOption]:
        """Top k children of `prefix` by share of traffic, e.g. [('r', 42.9), ...]."""
        if k <= 0:
            return []
        return self._next_letter_options(prefix)[:k]

    def ranked_next_words(self, prefix: str, k: int) -> List[ScoredOption]:
        """Top k complete words under `prefix` by share of frequency."""
        if k <= 0:
            return []
        return self._next_word_options(prefix)[:k]

    def alternative_next_letters(self, prefix: str, k: int) -> List[ScoredOption]:
        """Random sample of less likely letters (uses the trie's random source)."""
        return self._sample_alternatives(self._next_letter_options(prefix), k)

    def alternative_next_words(self, prefix: str, k: int) -> List[ScoredOption]:
        """Random sample of less likely words (uses the trie's random source)."""
        return self._sample_alternatives(self._next_word_options(prefix), k)

    def _next_letter_options(self, prefix: str) -> List[ScoredOption]:
        if not prefix:
            return []
        node = self._node(prefix)
        if node is None or not node.children:
            return []

        total = sum(child.pass_count for child in node.children.values())
        if total <= 0:
            return []

        out = [
            ScoredOption(ch, child.pass_count * 100.0 / total)
            for ch, child in node.children.items()
        ]
        out.sort(key=lambda o: (-o.percent, o.label))
        return out

    def _next_word_options(self, prefix: str) -> List[ScoredOption]:
        if not prefix:
            return []
        node = self._node(prefix)
        if node is None:
            return []

        words = list(self._iter_words(node, prefix))
        total = sum(c for _, c in words)
        if total <= 0:
            return []

        out = [ScoredOption(w, c * 100.0 / total) for w, c in words]
        out.sort(key=lambda o: (-o.percent, o.label))
        return out

    def _sample_alternatives(self, options: List[ScoredOption], k: int) -> List[ScoredOption]:
        if k <= 0 or not options:
            return []
        skip = self.cfg.alt_skip_top
        pool = options[skip:] if len(options) > skip else list(options)
        self._rng.shuffle(pool)
        return pool[:k]

    def top_k_words(self, prefix: str, k: int) -> List[str]:
        """
        k most frequent words under `prefix`, descending, alphabetical tie-break.
        Keeps a k-sized min-heap and skips subtrees whose pass_count cannot beat the
        current k-th best (a later word in alphabetical order never wins a tie).
        """
        if not prefix or k <= 0:
            return []
        start = self._node(prefix)
        if start is None:
            return []

        # entries are (freq, -seq, word): heap[0] is the worst kept word
        heap: List[Tuple[int, int, str]] = []
        seq = 0
        stack = [(start, prefix)]
        while stack:
            node, path = stack.pop()
            if len(heap) == k and node.pass_count <= heap[0][0]:
                continue
            if node.end_count:
                seq += 1
                item = (node.end_count, -seq, path)
                if len(heap) < k:
                    heapq.heappush(heap, item)
                elif node.end_count > heap[0][0]:
                    heapq.heapreplace(heap, item)
            for ch, child in sorted(node.children.items(), reverse=True):
                stack.append((child, path + ch))

        heap.sort(key=lambda e: (-e[0], e[2]))
        return [w for _, _, w in heap]

    # prefix accelerator -------------------------------------------------
    def _extend_prefix_cache(self, word: str, freq: int, path: List[TrieNode]) -> None:
        for length in range(1, min(self.cfg.cache_prefix_len, len(word)) + 1):
            entry = self._prefix_cache.setdefault(word[:length], CacheEntry())
            _offer_word(entry, word, freq)
            entry.best_next_char = path[length].best_next_char

    def _rebuild_prefix_cache(self) -> None:
        """Throw the accelerator away and copy it back from the node caches."""
        self._prefix_cache.clear()
        limit = self.cfg.cache_prefix_len
        if limit <= 0:
            return
        stack = [(child, ch) for ch, child in self._root.children.items()]
        while stack:
            node, prefix = stack.pop()
            self._prefix_cache[prefix] = CacheEntry(
                node.best_word, node.best_word_count, node.best_next_char
            )
            if len(prefix) < limit:
                stack.extend((child, prefix + ch) for ch, child in node.children.items())

    def rebuild_caches(self) -> None:
        """Recompute every node cache bottom-up plus the accelerator, from counts alone."""
        order = list(self._walk(self._root, ""))
        # reversed pre-order visits every child before its parent
        for prefix, node, _ in reversed(order):
            _recompute(node, prefix)
        self._rebuild_prefix_cache()
        log.debug(f"rebuilt caches for {len(order)} nodes")

    # diagnostics -----------------------------------------------------
    def all_words(self) -> List[WordCount]:
        """Every stored word with its count, alphabetical."""
        return list(self._iter_words(self._root, ""))

    def words_with_prefix(self, prefix: str) -> List[WordCount]:
        """Words starting with `prefix`, alphabetical."""
        if not prefix:
            return []
        node = self._node(prefix)
        if node is None:
            return []
        return list(self._iter_words(node, prefix))

    def word_frequencies(self) -> List[WordCount]:
        """Every stored word, most frequent first."""
        return sorted(self.all_words(), key=lambda wc: (-wc[1], wc[0]))

    def structure(self) -> List[str]:
        """One line per complete word: counts and cached bests of its terminal node."""
        out = []
        for path, node, _ in self._walk(self._root, ""):
            if node.end_count:
                out.append(
                    f"{path} -> {node!r} best_word={node.best_word} "
                    f"best_word_count={node.best_word_count} "
                    f"best_next_char={node.best_next_char or '_'}"
                )
        return out

    def stats(self) -> TrieStats:
        nodes = distinct = max_depth = 0
        for _, node, depth in self._walk(self._root, ""):
            nodes += 1
            if node.end_count:
                distinct += 1
            max_depth = max(max_depth, depth)
        return {
            "total_inserts": self._root.pass_count,
            "nodes": nodes,
            "distinct_words": distinct,
            "max_depth": max_depth,
        }

    def check_invariants(self) -> List[str]:
        """
        Compare counts, links and every cache against brute-force scans.
        Returns human-readable problems; [] means healthy. Slow: O(nodes * subtree).
        """
        problems: List[str] = []
        for prefix, node, _ in self._walk(self._root, ""):
            label = prefix or "<root>"
            child_pass = sum(c.pass_count for c in node.children.values())
            if node.pass_count != node.end_count + child_pass:
                problems.append(f"{label}: pass {node.pass_count} != end + children {node.end_count + child_pass}")
            if node is not self._root and not node.end_count and not node.children:
                problems.append(f"{label}: dead leaf not pruned")
            for ch, child in node.children.items():
                if child.parent is not node or child.char != ch:
                    problems.append(f"{label}: bad back-reference at '{ch}'")

            best = ("", 0)
            for w, c in self._iter_words(node, prefix):
                if _beats(w, c, *best):
                    best = (w, c)
            if (node.best_word, node.best_word_count) != best:
                problems.append(f"{label}: best word {node.best_word!r}/{node.best_word_count} != {best}")

            best_char, best_pass = None, 0
            for ch, child in sorted(node.children.items()):
                if child.pass_count > best_pass:
                    best_char, best_pass = ch, child.pass_count
            if node.best_next_char != best_char:
                problems.append(f"{label}: best next char {node.best_next_char!r} != {best_char!r}")

        for prefix, entry in self._prefix_cache.items():
            node = self._node(prefix)
            if node is None:
                problems.append(f"prefix cache '{prefix}': no such node")
            elif (entry.best_word, entry.best_word_count, entry.best_next_char) != (
                node.best_word, node.best_word_count, node.best_next_char
            ):
                problems.append(f"prefix cache '{prefix}': {entry} diverges from node")

        if self._root.pass_count != sum(c for _, c in self.all_words()):
            problems.append("root pass count != total word frequency")
        if self._distinct != len(self.all_words()):
            problems.append(f"distinct counter {self._distinct} is stale")
        return problems
