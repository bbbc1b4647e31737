# tui_app.py - Trie Predictor TUI Application
# -------------------------------------------------------
# Text based terminal UI over TriePredictor.
# Features:
#  - Live next-letter / next-word likelihoods as you type
#  - Random alternatives drawn from outside the top picks
#  - Space commits the word into a history line (green = known, red = unknown)
#  - F2 learns the current word, F3 forgets one occurrence of it
#  - Real-time latency readout
# -------------------------------------------------------

from __future__ import annotations

import argparse
from typing import List, Optional, Tuple

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, Static

from trie_predictor.core.trie import format_options
from trie_predictor.predictor import Prediction, TriePredictor, last_word
from trie_predictor.utils.config_manager import Config
from trie_predictor.utils.logger_utils import log


def prediction_lines(pred: Prediction) -> List[str]:
    """The four lists shown under the input, as markup lines."""
    if not pred.word:
        return ["[dim]Type letters to view next-letter and next-word likelihoods.[/dim]"]
    return [
        "[yellow]Top next letters ->[/yellow] " + ", ".join(format_options(pred.top_letters)),
        "[yellow]Random letters ->[/yellow] " + ", ".join(format_options(pred.alt_letters)),
        "[yellow]Top next words ->[/yellow] " + ", ".join(format_options(pred.top_words)),
        "[yellow]Random words ->[/yellow] " + ", ".join(format_options(pred.alt_words)),
    ]


class HistoryLine(Static):
    """Committed words, coloured by whether the trie knows them."""
    def show(self, words: List[Tuple[str, str]], current: str, color: str):
        parts = [f"[{c}]{w}[/{c}]" for w, c in words]
        if current:
            parts.append(f"[b {color}]{current}[/b {color}]")
        self.update(" ".join(parts) or "[dim]Start typing:[/dim]")


class SuggestionPanel(Static):
    def show(self, pred: Prediction):
        self.update("\n".join(prediction_lines(pred)))


class TypingLatency(Static):
    """Bottom readout showing how long the last prediction took."""
    def set_latency(self, seconds: float):
        self.update(f"[dim]Latency:[/dim] {seconds * 1000:.2f}ms")


# Main Application -----------------------------------------------------------------
class TUIPredictor(App):
    """
    The main Textual app.
     - input changes -> TriePredictor.snapshot -> reactive prediction -> widgets
     - a trailing space commits the word to the history line
    """
    CSS = """
    #history { height: 3; padding: 1 2; }
    #predictions { padding: 1 2; }
    #bottom { height: 1; padding: 0 2; }
    """

    BINDINGS = [
        ("f2", "learn_word", "Learn word"),
        ("f3", "forget_word", "Forget word"),
    ]

    prediction = reactive(Prediction(""), init=False, always_update=True)
    latency = reactive(0.0, init=False)

    def __init__(self, predictor: Optional[TriePredictor] = None, corpus: Optional[str] = None):
        super().__init__()
        self.tp = predictor or TriePredictor()
        self.corpus = corpus
        self.history: List[Tuple[str, str]] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Container():
            yield HistoryLine(id="history")
            yield Input(placeholder="Start typing…", id="text_input")
            yield SuggestionPanel(id="predictions")
        yield TypingLatency(id="bottom")
        yield Static(id="status")
        yield Footer()

    def on_mount(self):
        if self.corpus:
            n = self.tp.train_file(self.corpus)
            self._status(f"[green]Loaded {n} words[/green]")
        self._refresh("")

    # Handle typing ------------------------------------------------------------
    def on_input_changed(self, event: Input.Changed) -> None:
        text = event.value
        if text.endswith(" "):
            self._commit(text)
            event.input.value = ""
            return
        self._refresh(text)

    def _commit(self, text: str):
        word = last_word(text)
        if word:
            color = "green" if self.tp.trie.contains(word) else "red"
            self.history.append((word, color))
        self._refresh("")

    def _refresh(self, text: str):
        pred = self.tp.snapshot(text)
        self.prediction = pred
        self.latency = pred.latency

    # Reactive state (watcher functions) ---------------------------------------
    def watch_prediction(self, pred: Prediction):
        self.query_one(SuggestionPanel).show(pred)
        self.query_one(HistoryLine).show(self.history, pred.word, pred.color)

    def watch_latency(self, latency: float):
        self.query_one(TypingLatency).set_latency(latency)

    # Actions ----------------------------------------------------------------------
    def action_learn_word(self):
        text = self.query_one(Input).value
        learned = self.tp.learn(text)
        self._status(f"[cyan]Learned:[/cyan] {', '.join(learned) or '(nothing)'}")
        self._refresh(text)

    def action_forget_word(self):
        text = self.query_one(Input).value
        if self.tp.forget(text):
            self._status(f"[yellow]Forgot one '{last_word(text)}'[/yellow]")
        else:
            self._status("[red]Not stored[/red]")
        self._refresh(text)

    def _status(self, msg: str):
        self.query_one("#status", Static).update(msg)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Live next-letter / next-word prediction")
    parser.add_argument("--config", default="config.json")
    parser.add_argument("--corpus", default=None)
    args = parser.parse_args(argv)

    cfg = Config(args.config)
    log.configure(cfg.get("log_path"), cfg.get("log_level", "INFO"))
    TUIPredictor(TriePredictor(cfg), corpus=args.corpus or cfg.get("corpus") or None).run()


if __name__ == "__main__":
    main()
