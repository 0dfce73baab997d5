"""Live score monitor: interactive TUI for a running byte stream.

Shows the five sub-scores and the composite while bytes are being read:
- Score table with per-score bars
- Composite history (sparkline)
- Sample count and ingestion rate
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import BinaryIO

from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from bytestat.report import SCORE_NAMES, format_percent, is_sufficient
from bytestat.shared import SharedByteStat

logger = logging.getLogger(__name__)

# ── Sparkline characters ──
SPARK = "▁▂▃▄▅▆▇█"


def _sparkline(values: list[float], width: int = 40) -> str:
    """Render a sparkline string from values."""
    if not values:
        return ""
    recent = values[-width:]
    mn, mx = min(recent), max(recent)
    rng = mx - mn if mx > mn else 1.0
    return "".join(SPARK[min(int((v - mn) / rng * 7), 7)] for v in recent)


def _score_bar(value: float, max_val: float = 1.0, width: int = 24) -> Text:
    """Colored bar for a score."""
    ratio = min(value / max_val, 1.0) if max_val else 0.0
    filled = int(ratio * width)
    if ratio >= 0.99:
        color = "green"
    elif ratio > 0.8:
        color = "yellow"
    elif ratio > 0.5:
        color = "red"
    else:
        color = "bright_black"
    return Text("█" * filled + "░" * (width - filled), style=color)


class StreamMonitor:
    """Feed a binary stream into a shared engine and display its scores."""

    def __init__(
        self,
        stream: BinaryIO,
        refresh_rate: float = 0.5,
        chunk_size: int = 4096,
        limit: int = 0,
        console: Console | None = None,
    ) -> None:
        self.stream = stream
        self.refresh_rate = refresh_rate
        self.chunk_size = chunk_size
        self.limit = limit
        self.console = console or Console()
        self.stats = SharedByteStat()
        self.error: OSError | None = None
        self._done = threading.Event()
        self._history: deque = deque(maxlen=120)
        self._start_time = 0.0

    def _read_loop(self) -> None:
        """Read until exhaustion, the byte limit, or a stop request."""
        try:
            while not self._done.is_set():
                want = self.chunk_size
                if self.limit:
                    want = min(want, self.limit - self.stats.samples)
                    if want <= 0:
                        break
                chunk = self.stream.read(want)
                if not chunk:
                    break
                self.stats.analyze_bytes(chunk)
        except OSError as e:
            logger.warning("read failed after %d bytes: %s", self.stats.samples, e)
            self.error = e
        finally:
            self._done.set()

    def _build_table(self) -> Table:
        table = Table(
            title="Randomness Scores",
            show_header=True,
            header_style="bold cyan",
            border_style="bright_black",
            expand=True,
        )
        table.add_column("Score", style="bold", no_wrap=True)
        table.add_column("Value", justify="right")
        table.add_column("", ratio=2)

        values = self.stats.scores_as_sequence()
        for name, value in zip(SCORE_NAMES[:-1], values[:-1]):
            table.add_row(name, f"{value:.6f}", _score_bar(value))
        table.add_row("composite", f"{values[-1]:.4f}", _score_bar(values[-1], max_val=100.0))
        return table

    def _build_panel(self) -> Panel:
        scores = self.stats.scores()
        self._history.append(scores.composite)
        elapsed = time.monotonic() - self._start_time if self._start_time else 0
        rate = scores.samples / elapsed if elapsed > 0 else 0

        text = Text()
        text.append("  Score: ", style="bold")
        color = "green" if is_sufficient(scores.samples) else "yellow"
        text.append(format_percent(scores.composite, scores.samples), style=f"bold {color}")
        text.append(f"  Samples: {scores.samples:,}")
        text.append(f"  Rate: {rate:,.0f} B/s\n", style="dim")
        text.append("  History: ", style="dim")
        text.append(_sparkline(list(self._history)), style="cyan")
        return Panel(text, title="bytestat", border_style="green")

    def _render(self) -> Table:
        grid = Table.grid(expand=True)
        grid.add_row(self._build_table())
        grid.add_row(self._build_panel())
        return grid

    def run(self) -> SharedByteStat:
        """Run the live monitor until the stream is exhausted."""
        self._start_time = time.monotonic()
        reader = threading.Thread(target=self._read_loop, daemon=True)
        reader.start()

        try:
            with Live(self._render(), console=self.console, refresh_per_second=4) as live:
                while not self._done.wait(self.refresh_rate):
                    live.update(self._render())
                live.update(self._render())
        except KeyboardInterrupt:
            self._done.set()
        reader.join(timeout=self.refresh_rate)

        scores = self.stats.scores()
        self.console.print(f"  Total bytes: {scores.samples:,}", highlight=False)
        self.console.print(f"  Final score: {format_percent(scores.composite, scores.samples)}", highlight=False)
        return self.stats
