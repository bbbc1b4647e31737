# trie_predictor/context/__init__.py
# corpus collaborators: turn raw text into the normalized words the trie expects

from .normalizer import normalize_text  # letters only, lower-cased
from .tokenizer import simple_tokenize  # whitespace split
from .corpus import iter_corpus_words, load_corpus  # file -> words -> sink

__all__ = [
    "normalize_text",
    "simple_tokenize",
    "iter_corpus_words",
    "load_corpus",
]
