"""
cli.py - command line prediction shell
Features:
- Type a fragment to see the likely next letters and words for its last word
- Random "alternative" letters/words drawn from outside the top picks
- Corpus loading, learn/forget of single words, frequency and structure dumps
- Uses Rich for tables and formatting
"""

import argparse
import os
import shlex
from typing import List, Optional

# ui styling with Rich
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from trie_predictor.core.trie import format_options
from trie_predictor.predictor import Prediction, TriePredictor
from trie_predictor.utils.config_manager import Config
from trie_predictor.utils.logger_utils import log

HELP = (
    "Commands: /load <file> /add <word>.. /del <word> /top <prefix> [k] /words [prefix]\n"
    "          /freq /stats /structure /config [key val] /help /quit"
)


class CLI:
    """Interactive shell around TriePredictor."""
    def __init__(
        self,
        config: Optional[Config] = None,
        predictor: Optional[TriePredictor] = None,
        console: Optional[Console] = None,
    ):
        self.cfg = config or Config()
        self.console = console or Console()
        self.tp = predictor or TriePredictor(self.cfg)
        self.running = True

    def run(self):
        """
        Main interactive loop:
        - Prompts the user for input.
        - Slash commands are dispatched, anything else is predicted on.
        """
        self.console.rule("[bold magenta]Trie Predictor[/bold magenta]")
        self.console.print("[cyan]Type letters to view next-letter and next-word likelihoods.[/cyan]")
        self.console.print(HELP + "\n")

        while self.running:
            try:
                fragment = Prompt.ask("[green]You[/green]", default="", console=self.console)
                if not fragment:
                    continue
                if fragment.startswith("/"):
                    self.handle_command(fragment)
                    continue
                self.show_prediction(fragment)
            except (EOFError, KeyboardInterrupt):
                self._exit()
                break

    # COMMAND HANDLING -----------------------------------------------------------
    def handle_command(self, line: str):
        """Handles slash commands. Bad input is reported, never raised."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.console.print(f"[red]Bad command:[/red] {e}")
            return
        if not parts:
            return
        cmd, args = parts[0].lower(), parts[1:]

        if cmd in ("/q", "/quit", "/exit"):
            self._exit()
        elif cmd == "/help":
            self.console.print(HELP)
        elif cmd == "/load" and args:
            self._load(args[0])
        elif cmd == "/add" and args:
            learned = self.tp.learn(" ".join(args))
            self.console.print(f"[cyan]Learned:[/cyan] {', '.join(learned) or '(nothing)'}")
        elif cmd == "/del" and args:
            if self.tp.forget(args[0]):
                self.console.print(f"[yellow]Removed one '{args[0]}'[/yellow]")
            else:
                self.console.print(f"[red]Not stored:[/red] {args[0]}")
        elif cmd == "/top" and args:
            self._show_top(args)
        elif cmd == "/words":
            self._show_words(args[0] if args else "")
        elif cmd == "/freq":
            self._show_word_table("Word Frequencies", self.tp.trie.word_frequencies())
        elif cmd == "/stats":
            self._show_stats()
        elif cmd == "/structure":
            body = "\n".join(self.tp.trie.structure()) or "(empty)"
            self.console.print(Panel(Text(body), title="Structure"))
        elif cmd == "/config":
            self._config(args)
        else:
            self.console.print(f"[red]Unknown command:[/red] {line}")

    # DISPLAY -------------------------------------------------------------------------------
    def show_prediction(self, fragment: str):
        pred = self.tp.snapshot(fragment)
        self.console.print(self.prediction_table(pred))

    @staticmethod
    def prediction_table(pred: Prediction) -> Table:
        """
        One row per list, word coloured green (known), red (dead end) or white.
        """
        table = Table(title="Predictions", box=box.SIMPLE, show_edge=False)
        table.add_column("Kind", style="cyan")
        table.add_column("Candidates", style="bold")

        table.add_row("Word", Text(pred.word or "(none)", style=pred.color))
        table.add_row("Next letter", pred.next_char or "_")
        table.add_row("Next word", pred.next_word or "-")
        table.add_row("Top next letters", ", ".join(format_options(pred.top_letters)))
        table.add_row("Random letters", ", ".join(format_options(pred.alt_letters)))
        table.add_row("Top next words", ", ".join(format_options(pred.top_words)))
        table.add_row("Random words", ", ".join(format_options(pred.alt_words)))
        table.caption = f"{pred.latency * 1000:.2f} ms"
        return table

    def _show_top(self, args: List[str]):
        try:
            k = int(args[1]) if len(args) > 1 else None
        except ValueError:
            self.console.print(f"[red]Bad count:[/red] {args[1]}")
            return
        self._show_word_table(f"Top words for '{args[0]}'", self.tp.top(args[0], k))

    def _show_words(self, prefix: str):
        words = self.tp.trie.words_with_prefix(prefix) if prefix else self.tp.trie.all_words()
        self._show_word_table(f"Words '{prefix}'" if prefix else "All Words", words)

    def _show_word_table(self, title: str, rows):
        table = Table(title=title, box=box.MINIMAL)
        table.add_column("Word")
        table.add_column("Freq", justify="right", style="magenta")
        for w, c in rows:
            table.add_row(w, str(c))
        self.console.print(table)

    def _show_stats(self):
        t = Table(title="Trie Stats", box=box.MINIMAL)
        t.add_column("Metric", style="cyan")
        t.add_column("Value", style="white", justify="right")
        for k, v in self.tp.stats().items():
            t.add_row(k, str(v))
        self.console.print(t)

    # COMMAND: LOAD/CONFIG --------------------------------------
    def _load(self, path: str):
        if not os.path.exists(path):
            self.console.print(f"[red]Could not read file:[/red] {path}")
            return
        n = self.tp.train_file(path)
        self.console.print(f"[green]Loaded {n} words[/green]")

    def _config(self, args: List[str]):
        if not args:
            t = Table(title="Config", box=box.MINIMAL)
            t.add_column("Key", style="cyan")
            t.add_column("Value")
            for k, v in self.cfg.rows():
                t.add_row(k, str(v))
            self.console.print(t)
            return
        if len(args) != 2:
            self.console.print("usage: /config [key val]")
            return
        try:
            ok = self.cfg.set(args[0], args[1])
        except ValueError as e:
            log.error(f"config {args[0]}={args[1]}: {e}")
            self.console.print(f"[red]Bad value:[/red] {args[1]}")
            return
        if not ok:
            self.console.print(f"[red]No such option:[/red] {args[0]}")
            return
        self.console.print(f"[green]{args[0]} = {self.cfg.get(args[0])}[/green] (applies on restart)")

    # EXIT ------------------------------------------------------------------------
    def _exit(self):
        self.console.rule("[red]Exiting[/red]")
        self.running = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Next-letter / next-word prediction shell")
    parser.add_argument("--config", default="config.json", help="JSON config path")
    parser.add_argument("--corpus", default=None, help="text file to load at startup")
    parser.add_argument("--verbose", action="store_true", help="echo log lines to the console")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    cfg = Config(args.config)
    log.configure(cfg.get("log_path"), cfg.get("log_level", "INFO"), echo=args.verbose)

    cli = CLI(cfg)
    corpus = args.corpus or cfg.get("corpus")
    if corpus:
        cli._load(corpus)
    cli.run()


if __name__ == "__main__":
    main()
