# logger_utils.py -  for logging messages and performance metrics, timestamps etc

import os
import time
from datetime import datetime
from typing import Optional

# Directory where log files go when a front end enables file logging
LOG_DIR = "logs"
DEFAULT_LOG_PATH = os.path.join(LOG_DIR, "trie_predictor.log")

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


class Log:
    """
    Lightweight levelled logger for writing messages and tracking metrics.
    path: file to append to (None = no file)
    echo: also print each line to the console
    """
    COLORS = {
        "DEBUG": "\033[90m",   # gray
        "INFO": "\033[94m",    # blue
        "WARNING": "\033[93m", # yellow
        "ERROR": "\033[91m",   # red
        "RESET": "\033[0m",
    }

    def __init__(
        self,
        path: Optional[str] = None,
        level: str = "INFO",
        use_color: bool = True,
        echo: bool = False,
    ):
        self.configure(path, level, use_color, echo)

    def configure(
        self,
        path: Optional[str] = None,
        level: str = "INFO",
        use_color: bool = True,
        echo: bool = False,
    ) -> "Log":
        """Reset destination and threshold. Unknown levels fall back to INFO."""
        self.path = path
        self.level = level.upper() if level.upper() in LEVELS else "INFO"
        self.use_color = use_color
        self.echo = echo
        return self

    def enabled(self, level: str) -> bool:
        return LEVELS.get(level, 0) >= LEVELS[self.level]

    def write(self, level: str, msg: str):
        """
        Append a log message with a timestamp.
        Each entry is written as: [YYYY-MM-DD HH:MM:SS] LEVEL   | message
        """
        if not self.enabled(level):
            return

        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{ts}] {level:<7} | {msg}"

        if self.path:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

        if not self.echo:
            return
        if self.use_color and level in self.COLORS:
            print(f"{self.COLORS[level]}{line}{self.COLORS['RESET']}")
        else:
            print(line)

    # Public logging methods
    def debug(self, msg: str):
        self.write("DEBUG", msg)

    def info(self, msg: str):
        self.write("INFO", msg)

    def warning(self, msg: str):
        self.write("WARNING", msg)

    def error(self, msg: str):
        self.write("ERROR", msg)

    def metric(self, tag: str, value, unit: str = ""):
        """
        Record a metric (timing, counts...).
        Example: [2026-01-01 12:45:02] INFO    | load corpus done: 0.123s
        """
        self.write("INFO", f"{tag}: {value}{unit}")

    def time_block(self, label: str) -> "_Timer":
        """
        Helper for measuring execution time of a code block.
        To use:
            with log.time_block("load corpus"):
                do_some_work()
        """
        return _Timer(self, label)


class _Timer:
    """Context manager used internally to measure time for a code block."""
    def __init__(self, logger: Log, label: str):
        self.logger = logger
        self.label = label
        self.start = time.perf_counter()
        self.elapsed = 0.0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        self.logger.metric(f"{self.label} done", round(self.elapsed, 3), "s")


# shared instance; front ends call log.configure(...) at startup
log = Log()
