# test_cli.py - CLI command handling against a recording console
import io
import random
from unittest.mock import patch

import pytest
from rich.console import Console

from trie_predictor.cli.cli import CLI
from trie_predictor.predictor import TriePredictor
from trie_predictor.utils.config_manager import Config


@pytest.fixture
def cli(tmp_path):
    cfg = Config(str(tmp_path / "config.json"))
    console = Console(file=io.StringIO(), width=200, color_system=None)
    c = CLI(cfg, TriePredictor(cfg, rng=random.Random(0)), console)
    c.handle_command("/add the the the them then there there these therefore")
    return c


def output(cli: CLI) -> str:
    return cli.console.file.getvalue()


def test_add_and_predict(cli):
    assert "Learned: the, the, the" in output(cli)
    cli.show_prediction("the")
    out = output(cli)
    assert "Top next letters" in out
    assert "r (50.0%)" in out
    assert "the (33.3%)" in out


def test_top_and_words(cli):
    cli.handle_command("/top the 2")
    out = output(cli)
    assert "there" in out
    cli.handle_command("/top the x")
    assert "Bad count" in output(cli)
    cli.handle_command("/words ther")
    assert "therefore" in output(cli)


def test_delete(cli):
    cli.handle_command("/del the")
    assert "Removed one 'the'" in output(cli)
    assert cli.tp.trie.frequency("the") == 2
    cli.handle_command("/del zebra")
    assert "Not stored" in output(cli)


def test_stats_freq_structure(cli):
    cli.handle_command("/stats")
    cli.handle_command("/freq")
    cli.handle_command("/structure")
    out = output(cli)
    assert "total_inserts" in out
    assert "Word Frequencies" in out
    assert "best_word=the" in out


def test_config_command(cli):
    cli.handle_command("/config suggestions 3")
    assert cli.cfg.get("suggestions") == 3
    cli.handle_command("/config suggestions lots")
    assert "Bad value" in output(cli)
    cli.handle_command("/config nope 1")
    assert "No such option" in output(cli)
    cli.handle_command("/config")
    assert "cache_prefix_len" in output(cli)


def test_load(cli, tmp_path):
    p = tmp_path / "book.txt"
    p.write_text("zebra zoo", encoding="utf-8")
    cli.handle_command(f"/load {p}")
    assert "Loaded 2 words" in output(cli)
    cli.handle_command(f"/load {tmp_path / 'missing.txt'}")
    assert "Could not read file" in output(cli)


def test_unknown_and_quit(cli):
    cli.handle_command("/bogus")
    assert "Unknown command" in output(cli)
    cli.handle_command('/add "unterminated')
    assert "Bad command" in output(cli)
    cli.handle_command("/quit")
    assert not cli.running


def test_run_loop(cli):
    with patch("trie_predictor.cli.cli.Prompt.ask", side_effect=["", "th", "/quit"]):
        cli.run()
    out = output(cli)
    assert "Predictions" in out
    assert "Exiting" in out
    assert not cli.running


def test_run_loop_eof(cli):
    with patch("trie_predictor.cli.cli.Prompt.ask", side_effect=EOFError):
        cli.run()
    assert not cli.running
