"""Thread-safe wrapper for feeding one engine from several producers."""

from __future__ import annotations

import threading

import numpy as np

from bytestat.engine import ByteStat, Scores, format_score


class SharedByteStat:
    """Lock-guarded :class:`ByteStat`.

    Each ingestion updates four accumulators; the lock makes readers see it
    as a single step. Producers still have to agree on arrival order
    themselves, the lock only serializes.

    The table accessors return copies taken under the lock, since a view
    would keep changing once other producers resume.
    """

    def __init__(self, engine: ByteStat | None = None) -> None:
        self._engine = engine or ByteStat()
        self._lock = threading.Lock()

    @property
    def samples(self) -> int:
        with self._lock:
            return self._engine.samples

    @property
    def is_fresh(self) -> bool:
        with self._lock:
            return self._engine.is_fresh

    def analyze(self, value: int) -> None:
        with self._lock:
            self._engine.analyze(value)

    def analyze_bytes(self, data) -> None:
        with self._lock:
            self._engine.analyze_bytes(data)

    # ── accumulators ──

    def frequency_table(self) -> np.ndarray:
        with self._lock:
            return self._engine.frequency_table().copy()

    def last_seen_table(self) -> np.ndarray:
        with self._lock:
            return self._engine.last_seen_table().copy()

    def interval_histogram(self) -> np.ndarray:
        with self._lock:
            return self._engine.interval_histogram().copy()

    # ── scoring ──

    def scores(self) -> Scores:
        with self._lock:
            return self._engine.scores()

    def interval_range(self) -> tuple[int | None, int | None]:
        s = self.scores()
        return s.interval_min, s.interval_max

    def score_coverage(self) -> float:
        return self.scores().coverage

    def score_uniqueness(self) -> float:
        return self.scores().uniqueness

    def score_amplitude(self) -> float:
        return self.scores().amplitude

    def score_interval_continuity(self) -> float:
        return self.scores().interval_continuity

    def score_interval_amplitude(self) -> float:
        return self.scores().interval_amplitude

    def score_composite(self) -> float:
        return self.scores().composite

    def scores_as_sequence(self) -> tuple[float, float, float, float, float, float]:
        return self.scores().as_tuple()

    def scores_as_text(self, separator: str) -> str:
        return separator.join(format_score(v) for v in self.scores_as_sequence())
