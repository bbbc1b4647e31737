# config_manager.py - JSON config manager

import json
import os

from trie_predictor.core.trie import TrieConfig
from trie_predictor.utils.logger_utils import log

DEFAULTS = {
    "cache_prefix_len": 2,  # accelerator covers prefixes up to this length
    "suggestions": 5,  # letters/words shown per list
    "alt_skip_top": 5,  # alternatives skip this many top candidates
    "seed": None,  # seed for the alternative samplers (None = nondeterministic)
    "log_level": "INFO",
    "log_path": os.path.join("logs", "trie_predictor.log"),
    "corpus": "",  # text file loaded at startup
}


def _coerce(default, val):
    """
    Convert a value (a CLI string or a JSON scalar) to the type of the option's default.
    Raises ValueError or TypeError when it doesn't convert.
    """
    if default is None:
        # seed: int or none
        if val is None:
            return None
        if isinstance(val, str) and val.strip().lower() in ("", "none", "null"):
            return None
        if isinstance(val, (bool, float)):
            raise TypeError(f"expected an integer seed, got {val!r}")
        return int(val)
    if isinstance(default, int) and isinstance(val, (bool, float, list, dict)):
        raise TypeError(f"expected an integer, got {val!r}")
    if isinstance(default, str) and not isinstance(val, str):
        raise TypeError(f"expected a string, got {val!r}")
    return type(default)(val)


class Config:
    def __init__(self, path="config.json", autosave=True):
        self.path = path
        self.data = dict(DEFAULTS)
        self._load(autosave)

    def _load(self, autosave):
        if not os.path.exists(self.path):
            if autosave:
                self.save()
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            log.warning(f"config {self.path} unreadable, using defaults: {e}")
            return
        if not isinstance(raw, dict):
            log.warning(f"config {self.path} is not a JSON object, using defaults")
            return
        for key, val in raw.items():
            if key not in DEFAULTS:
                self.data[key] = val
                continue
            try:
                self.data[key] = _coerce(DEFAULTS[key], val)
            except (TypeError, ValueError) as e:
                log.warning(f"config {key}={val!r} rejected, using {DEFAULTS[key]!r}: {e}")

    def save(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def get(self, key, default=None):
        return self.data.get(key, default)

    def rows(self):
        """(key, value) pairs for display."""
        return [(k, self.data[k]) for k in sorted(self.data)]

    def set(self, key, val) -> bool:
        """
        Update one known option and persist it.
        Returns False for unknown keys; raises ValueError when the value doesn't convert.
        """
        if key not in DEFAULTS:
            return False
        self.data[key] = _coerce(DEFAULTS[key], val)
        self.save()
        return True

    def trie_config(self) -> TrieConfig:
        return TrieConfig(
            cache_prefix_len=int(self.data["cache_prefix_len"]),
            alt_skip_top=int(self.data["alt_skip_top"]),
        )
