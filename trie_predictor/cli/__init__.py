from trie_predictor.cli.cli import CLI, main

__all__ = ["CLI", "main"]
