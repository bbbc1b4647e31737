# tests/test_trie_delete.py
# delete: counts, pruning and cache repair

import pytest
from trie_predictor.core.trie import PrefixTrie

CORPUS = ["the"] * 3 + ["them", "then"] + ["there"] * 2 + ["these", "therefore"]
PREFIXES = ["t", "th", "the", "ther", "there", "c", "ca", "car", "x"]


@pytest.fixture
def trie():
    t = PrefixTrie()
    t.insert_many(CORPUS)
    return t


def _state(t: PrefixTrie):
    """Everything observable, to compare before/after a no-op."""
    return (
        t.stats(),
        t.all_words(),
        t.structure(),
        [(p, t.most_likely_next_char(p), t.most_likely_next_word(p)) for p in PREFIXES],
    )


def test_delete_repairs_best_word(trie):
    for _ in range(3):
        assert trie.delete("the")
    assert not trie.delete("the")

    assert not trie.contains("the")
    assert trie.contains_prefix("the")  # still has children
    # cache must re-resolve, both through the node and the short-prefix table
    assert trie.most_likely_next_word("the") == "there"
    assert trie.most_likely_next_word("t") == "there"
    assert trie.most_likely_next_word("th") == "there"
    assert trie.count_words_with_prefix("the") == 6
    assert trie.check_invariants() == []


def test_delete_repairs_best_next_char():
    t = PrefixTrie()
    t.insert_many(["ab", "ab", "ac"])
    assert t.most_likely_next_char("a") == "b"
    t.delete("ab")
    assert t.most_likely_next_char("a") == "b"  # tie 1:1, alphabetical
    t.delete("ab")
    assert t.most_likely_next_char("a") == "c"
    assert t.check_invariants() == []


def test_delete_prunes_dead_branch():
    t = PrefixTrie()
    t.insert("cat")
    nodes_before = PrefixTrie().stats()["nodes"]
    assert t.delete("cat")
    assert not t.contains_prefix("c")
    assert t.stats()["nodes"] == nodes_before
    assert t.most_likely_next_char("c") is None
    assert t.most_likely_next_word("ca") == ""
    assert t.total_words == 0


def test_delete_prunes_only_up_to_shared_prefix():
    t = PrefixTrie()
    t.insert_many(["car", "cart", "cab"])
    assert t.delete("cart")
    assert not t.contains_prefix("cart")
    assert t.contains("car")
    assert t.contains("cab")
    assert t.most_likely_next_char("car") is None
    # 'c' -> 'a' -> {b, r}: both 1, alphabetical
    assert t.most_likely_next_char("ca") == "b"
    assert t.check_invariants() == []


def test_delete_keeps_word_that_is_also_a_prefix():
    t = PrefixTrie()
    t.insert_many(["car", "cart"])
    assert t.delete("car")
    assert not t.contains("car")
    assert t.contains("cart")
    assert t.most_likely_next_word("car") == "cart"
    assert t.check_invariants() == []


def test_delete_missing_word_changes_nothing(trie):
    before = _state(trie)
    assert not trie.delete("cat")
    assert not trie.delete("th")  # path exists, not a word
    assert not trie.delete("thesis")
    assert not trie.delete("")
    assert _state(trie) == before


def test_insert_then_delete_round_trip(trie):
    for word in ["the", "thesis", "zebra", "therefore"]:
        had, freq = trie.contains(word), trie.frequency(word)
        trie.insert(word)
        assert trie.delete(word)
        assert trie.contains(word) == had
        assert trie.frequency(word) == freq
    assert trie.check_invariants() == []


def test_delete_everything_leaves_empty_root(trie):
    for word in CORPUS:
        assert trie.delete(word)
    assert trie.stats() == {"total_inserts": 0, "nodes": 1, "distinct_words": 0, "max_depth": 0}
    assert len(trie) == 0
    assert trie.all_words() == []
    assert trie.check_invariants() == []
