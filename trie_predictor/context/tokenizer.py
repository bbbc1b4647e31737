# trie_predictor/context/tokenizer.py
# simple whitespace tokenizer


def simple_tokenize(s: str):
    """
    Return list of tokens (words), run after normalize_text.
    Simple, could swap in a real tokenizer later.
    """
    if not s:
        return []
    return [t for t in s.split() if t]
