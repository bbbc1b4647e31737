# trie_predictor/context/normalizer.py
import re

_non_letter_re = re.compile(r"[^A-Za-z]+")  # hyphens, digits, apostrophes all split words


def normalize_text(s: str) -> str:
    """Letters only, lower-cased, single spaces: "Mr. Darcy's" -> "mr darcy s"."""
    if not s:
        return ""
    s = _non_letter_re.sub(" ", s)
    return " ".join(s.lower().split())
