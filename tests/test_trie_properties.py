# tests/test_trie_properties.py
# random insert/delete interleavings checked against brute-force answers

import itertools
import random
from collections import Counter

import pytest
from trie_predictor.core.trie import PrefixTrie, TrieConfig

ALPHABET = "abc"
ALL_PREFIXES = [
    "".join(p) for n in range(1, 4) for p in itertools.product(ALPHABET, repeat=n)
]


def brute_best_word(model: Counter, prefix: str) -> str:
    cands = [(-c, w) for w, c in model.items() if c > 0 and w.startswith(prefix)]
    return min(cands)[1] if cands else ""


def brute_next_char(model: Counter, prefix: str):
    passes = Counter()
    for w, c in model.items():
        if c > 0 and len(w) > len(prefix) and w.startswith(prefix):
            passes[w[len(prefix)]] += c
    if not passes:
        return None
    return min(passes, key=lambda ch: (-passes[ch], ch))


def brute_top_k(model: Counter, prefix: str, k: int):
    cands = sorted((-c, w) for w, c in model.items() if c > 0 and w.startswith(prefix))
    return [w for _, w in cands[:k]]


def random_word(rng: random.Random) -> str:
    return "".join(rng.choice(ALPHABET) for _ in range(rng.randint(1, 4)))


@pytest.mark.parametrize("seed,cache_len", [(1, 2), (7, 2), (11, 0), (23, 3)])
def test_interleaved_ops_match_brute_force(seed, cache_len):
    rng = random.Random(seed)
    trie = PrefixTrie(TrieConfig(cache_prefix_len=cache_len))
    model = Counter()

    for step in range(400):
        if rng.random() < 0.6 or not +model:
            w = random_word(rng)
            trie.insert(w)
            model[w] += 1
        else:
            # mostly delete something present, sometimes something random
            w = rng.choice(sorted(+model)) if rng.random() < 0.8 else random_word(rng)
            expected = model[w] > 0
            assert trie.delete(w) == expected
            if expected:
                model[w] -= 1

        if step % 20 == 0:
            assert trie.check_invariants() == []

        for p in ALL_PREFIXES:
            assert trie.most_likely_next_word(p) == brute_best_word(model, p), (step, p)
            assert trie.most_likely_next_char(p) == brute_next_char(model, p), (step, p)

    assert trie.check_invariants() == []
    for w in set(model) | {random_word(rng) for _ in range(20)}:
        assert trie.frequency(w) == model[w]
        assert trie.contains(w) == (model[w] > 0)


def test_ranked_letters_sum_to_100():
    rng = random.Random(3)
    trie = PrefixTrie()
    for _ in range(300):
        trie.insert(random_word(rng))

    for p in ALL_PREFIXES:
        full = trie.ranked_next_letters(p, 100)
        if not full:
            continue
        assert sum(o.percent for o in full) == pytest.approx(100.0)
        assert sum(o.percent for o in trie.ranked_next_letters(p, 2)) <= 100.0 + 1e-9
        # descending, alphabetical tie-break
        keys = [(-o.percent, o.label) for o in full]
        assert keys == sorted(keys)

        words = trie.ranked_next_words(p, 1000)
        if words:
            assert sum(o.percent for o in words) == pytest.approx(100.0)


def test_top_k_matches_brute_force():
    rng = random.Random(5)
    trie = PrefixTrie()
    model = Counter()
    for _ in range(500):
        w = random_word(rng)
        trie.insert(w)
        model[w] += 1
    for _ in range(100):
        w = rng.choice(sorted(+model))
        trie.delete(w)
        model[w] -= 1

    for p in ALL_PREFIXES:
        for k in (1, 3, 7, 50):
            got = trie.top_k_words(p, k)
            assert got == brute_top_k(model, p, k)
            assert len(got) <= k


def test_rebuild_caches_is_ground_truth():
    rng = random.Random(9)
    trie = PrefixTrie()
    for _ in range(200):
        trie.insert(random_word(rng))
    answers = [(p, trie.most_likely_next_char(p), trie.most_likely_next_word(p)) for p in ALL_PREFIXES]

    trie.rebuild_caches()
    assert trie.check_invariants() == []
    assert answers == [
        (p, trie.most_likely_next_char(p), trie.most_likely_next_word(p)) for p in ALL_PREFIXES
    ]


def test_long_words_do_not_hit_recursion_limit():
    trie = PrefixTrie()
    long_word = "ab" * 3000
    trie.insert(long_word)
    trie.insert(long_word[:-1])
    assert trie.stats()["max_depth"] == 6000
    # equal counts: the shorter word sorts first
    assert trie.top_k_words("ab", 1) == [long_word[:-1]]
    assert trie.delete(long_word[:-1])
    assert trie.most_likely_next_word("a") == long_word
    assert trie.most_likely_next_char(long_word[:-1]) == "b"
    assert trie.all_words() == [(long_word, 1)]
