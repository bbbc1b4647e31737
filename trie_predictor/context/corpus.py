# trie_predictor/context/corpus.py
# reads a plain text file and feeds its normalized words to a trie (or any WordSink)

from typing import Iterator

from trie_predictor.core.protocols import WordSink
from trie_predictor.utils.logger_utils import log
from .normalizer import normalize_text
from .tokenizer import simple_tokenize


def iter_corpus_words(path: str) -> Iterator[str]:
    """Stream words from a UTF-8 text file one line at a time."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            yield from simple_tokenize(normalize_text(line))


def load_corpus(sink: WordSink, path: str) -> int:
    """
    Insert every word of `path` into `sink` and return how many went in.
    An unreadable file is logged and stops the load; words read so far stay inserted.
    """
    count = 0
    try:
        with log.time_block(f"load {path}"):
            for word in iter_corpus_words(path):
                sink.insert(word)
                count += 1
    except OSError as e:
        log.error(f"could not read corpus {path}: {e}")
        return count

    log.info(f"loaded {count} words from {path}")
    return count
