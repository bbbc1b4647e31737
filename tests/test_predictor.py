# tests/test_predictor.py
import random

import pytest
from trie_predictor.predictor import Prediction, TriePredictor, last_word
from trie_predictor.tui_app import prediction_lines
from trie_predictor.utils.config_manager import Config

CORPUS = ["the"] * 3 + ["them", "then"] + ["there"] * 2 + ["these", "therefore"]


@pytest.fixture
def tp():
    p = TriePredictor(rng=random.Random(1))
    p.train_words(CORPUS)
    return p


def test_last_word():
    assert last_word("I saw THE") == "the"
    assert last_word("well-known") == "known"
    assert last_word("  ") == ""


def test_snapshot_known_word(tp):
    pred = tp.snapshot("and then THE")
    assert pred.word == "the"
    assert pred.is_word
    assert pred.next_char == "r"
    assert pred.next_word == "the"
    assert pred.top_words[0].label == "the"
    assert [o.label for o in pred.top_letters] == ["r", "m", "n", "s"]
    assert [o.label for o in pred.alt_words] == ["these"]
    assert pred.latency >= 0.0
    assert pred.color == "green"


def test_snapshot_colors(tp):
    assert tp.snapshot("ther").color == "white"
    assert tp.snapshot("thx").color == "red"
    empty = tp.snapshot("")
    assert empty == Prediction("", latency=empty.latency)
    assert empty.color == "red"


def test_learn_and_forget(tp):
    assert tp.learn("Then, THERE!") == ["then", "there"]
    assert tp.trie.frequency("there") == 3
    assert tp.forget("The")
    assert tp.trie.frequency("the") == 2
    assert not tp.forget("zebra")
    assert tp.learn("123") == []


def test_top_and_stats(tp):
    assert tp.top("the", 2) == [("the", 3), ("there", 2)]
    assert len(tp.top("the")) == 5
    assert tp.stats()["total_inserts"] == 9


def test_config_driven(tmp_path):
    cfg = Config(str(tmp_path / "c.json"), autosave=False)
    cfg.data.update({"suggestions": 2, "seed": 3, "cache_prefix_len": 1})
    tp = TriePredictor(cfg)
    tp.train_words(CORPUS)
    assert tp.trie.cfg.cache_prefix_len == 1
    pred = tp.snapshot("the")
    assert len(pred.top_words) == 2
    assert len(pred.alt_letters) == 2


def test_train_file(tmp_path, tp):
    p = tmp_path / "t.txt"
    p.write_text("zebra zebra zoo", encoding="utf-8")
    assert tp.train_file(str(p)) == 3
    assert tp.snapshot("z").next_word == "zebra"


def test_prediction_lines(tp):
    lines = prediction_lines(tp.snapshot("the"))
    assert len(lines) == 4
    assert "the (33.3%)" in lines[2]
    assert "r (50.0%)" in lines[0]
    assert "Type letters" in prediction_lines(Prediction(""))[0]
