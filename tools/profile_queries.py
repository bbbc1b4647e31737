# tools/profile_queries.py
"""
Small profiling harness for the trie queries.
Usage:
  python tools/profile_queries.py --corpus book.txt --iters 2000 --prefix th

Prints mean/median/stdev/p90/max latency (ms) per query kind.
"""
import argparse
import random
import statistics
import time

from trie_predictor.predictor import TriePredictor
from trie_predictor.utils.logger_utils import log

# small synthetic dataset used when no corpus is given
SAMPLE_SENTENCES = [
    "the quick brown fox jumps over the lazy dog",
    "it is a truth universally acknowledged that a single man in possession of a good fortune",
    "there then these them therefore the the the",
    "thank you for your contribution to the project",
]


def benchmark(fn, queries, iterations):
    times = []
    for _ in range(iterations):
        q = random.choice(queries)
        t0 = time.perf_counter()
        fn(q)
        times.append((time.perf_counter() - t0) * 1000.0)  # ms
    return times


def summarize(times):
    times_sorted = sorted(times)
    return {
        "mean": statistics.mean(times_sorted),
        "median": statistics.median(times_sorted),
        "stdev": statistics.pstdev(times_sorted),
        "p90": times_sorted[min(len(times_sorted) - 1, int(0.9 * len(times_sorted)))],
        "max": times_sorted[-1],
    }


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--corpus", type=str, default=None, help="text file to load")
    parser.add_argument("--iters", type=int, default=1000, help="measured iterations per query kind")
    parser.add_argument("--prefix", type=str, action="append", help="prefix to query (repeatable)")
    args = parser.parse_args()

    log.configure(level="INFO", echo=True)
    tp = TriePredictor()
    if args.corpus:
        tp.train_file(args.corpus)
    else:
        for s in SAMPLE_SENTENCES:
            tp.learn(s)

    queries = args.prefix or ["t", "th", "the", "a", "fo", "qu", "pos"]
    t = tp.trie
    kinds = {
        "next_char": t.most_likely_next_char,
        "next_word": t.most_likely_next_word,
        "ranked_letters": lambda p: t.ranked_next_letters(p, 5),
        "ranked_words": lambda p: t.ranked_next_words(p, 5),
        "top_k_words": lambda p: t.top_k_words(p, 5),
    }
    print(f"stats: {tp.stats()}")
    for name, fn in kinds.items():
        s = summarize(benchmark(fn, queries, args.iters))
        print("%-15s mean=%.4f median=%.4f stdev=%.4f p90=%.4f max=%.4f (ms)" % (
            name, s["mean"], s["median"], s["stdev"], s["p90"], s["max"],
        ))


if __name__ == "__main__":
    main()
