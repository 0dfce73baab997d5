"""Streaming byte statistics engine.

Architecture:
1. Fixed-size accumulators indexed by byte value and by gap length
2. O(1) per-byte ingestion, vectorized ingestion for ordered buffers
3. Five sub-scores derived lazily from the accumulators
4. Snapshot memoized against the sample counter

Bytes must be fed in true arrival order. The interval scores depend on
occurrence order and there is no way to detect a reordered stream.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

BYTE_VALUES = 256
INTERVAL_BUCKETS = 65536  # gaps wrap modulo 2**16
INTERVAL_MASK = INTERVAL_BUCKETS - 1
SIGNIFICANCE_DIVISOR = 4096
INTERVAL_SPAN = 2 * BYTE_VALUES
SUBSCORE_WEIGHT = 20
# last-seen positions are stored as uint64
MAX_SAMPLES = 2**64 - 1


@dataclass(frozen=True)
class Scores:
    """Score snapshot taken at a given sample count."""

    coverage: float
    uniqueness: float
    amplitude: float
    interval_continuity: float
    interval_amplitude: float
    composite: float
    samples: int = 0
    interval_min: int | None = None
    interval_max: int | None = None

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        return (
            self.coverage,
            self.uniqueness,
            self.amplitude,
            self.interval_continuity,
            self.interval_amplitude,
            self.composite,
        )


EMPTY_SCORES = Scores(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


def _as_uint8(data) -> np.ndarray:
    """View *data* as a flat uint8 array without copying."""
    if isinstance(data, np.ndarray):
        if data.dtype != np.uint8:
            raise TypeError(f"expected a uint8 array, got dtype {data.dtype}")
        return data.ravel()
    return np.frombuffer(data, dtype=np.uint8)


class ByteStat:
    """Randomness quality estimator for a byte stream.

    Usage::

        stats = ByteStat()
        for b in data:
            stats.analyze(b)
        stats.score_composite()   # 0..100

    Not safe for concurrent mutation; see :class:`bytestat.shared.SharedByteStat`.
    """

    def __init__(self) -> None:
        self._counter = 0
        self._dist = np.zeros(BYTE_VALUES, dtype=np.uint64)
        self._last = np.zeros(BYTE_VALUES, dtype=np.uint64)
        self._intervals = np.zeros(INTERVAL_BUCKETS, dtype=np.uint64)
        # An empty engine reports zeros instead of dividing by zero.
        self._scores = EMPTY_SCORES

    def __repr__(self) -> str:
        return f"<ByteStat samples={self._counter} fresh={self.is_fresh}>"

    # ── ingestion ──

    def analyze(self, value: int) -> None:
        """Ingest one byte. Bytes must arrive in sequence.

        Raises ``OverflowError`` once :data:`MAX_SAMPLES` bytes have been
        ingested, without touching any accumulator.
        """
        value = operator.index(value)
        if not 0 <= value < BYTE_VALUES:
            raise ValueError(f"byte value out of range: {value}")
        if self._counter >= MAX_SAMPLES:
            raise OverflowError(f"sample counter exhausted at {self._counter}")
        self._counter += 1
        self._dist[value] += 1
        self._intervals[(self._counter - int(self._last[value])) & INTERVAL_MASK] += 1
        self._last[value] = self._counter

    def analyze_bytes(self, data) -> None:
        """Ingest an ordered buffer of bytes.

        Equivalent to calling :meth:`analyze` on every element in order, but
        the gaps are computed with a stable sort instead of a Python loop.

        Parameters
        ----------
        data:
            ``bytes``, ``bytearray``, ``memoryview`` or a uint8 numpy array.
        """
        values = _as_uint8(data)
        n = len(values)
        if n == 0:
            return
        if self._counter + n > MAX_SAMPLES:
            raise OverflowError(f"sample counter exhausted at {self._counter}")

        positions = np.arange(self._counter + 1, self._counter + n + 1, dtype=np.uint64)

        # Group occurrences by byte value, keeping arrival order inside a group.
        order = np.argsort(values, kind="stable")
        grouped = values[order]
        pos = positions[order]

        first = np.empty(n, dtype=bool)
        first[0] = True
        np.not_equal(grouped[1:], grouped[:-1], out=first[1:])
        last = np.empty(n, dtype=bool)
        last[-1] = True
        last[:-1] = first[1:]

        prev = np.empty_like(pos)
        prev[1:] = pos[:-1]
        prev[first] = self._last[grouped[first]]
        gaps = ((pos - prev) & np.uint64(INTERVAL_MASK)).astype(np.int64)

        self._dist += np.bincount(values, minlength=BYTE_VALUES).astype(np.uint64)
        self._intervals += np.bincount(gaps, minlength=INTERVAL_BUCKETS).astype(np.uint64)
        self._last[grouped[last]] = pos[last]
        self._counter += n

    # ── accumulators ──

    @property
    def samples(self) -> int:
        return self._counter

    @property
    def is_fresh(self) -> bool:
        return self._scores.samples == self._counter

    def frequency_table(self) -> np.ndarray:
        return _readonly(self._dist)

    def last_seen_table(self) -> np.ndarray:
        return _readonly(self._last)

    def interval_histogram(self) -> np.ndarray:
        return _readonly(self._intervals)

    # ── scoring ──

    def _update_scores(self) -> Scores:
        if self._scores.samples != self._counter:
            self._scores = self._compute_scores()
        return self._scores

    def _compute_scores(self) -> Scores:
        samples = self._counter
        dist = self._dist

        # 1. share of byte values seen at least once
        coverage = int(np.count_nonzero(dist)) / BYTE_VALUES

        # 2. share of byte values whose count no other value has
        _, sharing = np.unique(dist, return_counts=True)
        uniqueness = int(np.count_nonzero(sharing == 1)) / BYTE_VALUES

        # 3. least over most frequent
        lo, hi = int(dist.min()), int(dist.max())
        amplitude = (hi - (hi - lo)) / hi if hi else 0.0

        # 4. contiguity of significant gap lengths
        threshold = np.uint64(samples // SIGNIFICANCE_DIVISOR)
        significant = np.flatnonzero(self._intervals[1:] > threshold) + 1
        if len(significant):
            interval_min, interval_max = int(significant[0]), int(significant[-1])
        else:
            interval_min = interval_max = None
        top = interval_max or 0
        populated = 1 + int(np.count_nonzero(significant < top))
        interval_continuity = min(populated, INTERVAL_SPAN) / INTERVAL_SPAN

        # 5. reach of significant gap lengths
        interval_amplitude = min(top, INTERVAL_SPAN) / INTERVAL_SPAN

        composite = coverage * SUBSCORE_WEIGHT
        composite += uniqueness * SUBSCORE_WEIGHT
        composite += amplitude * SUBSCORE_WEIGHT
        composite += interval_continuity * SUBSCORE_WEIGHT
        composite += interval_amplitude * SUBSCORE_WEIGHT

        logger.debug("recomputed scores at %d samples: %.4f", samples, composite)
        return Scores(
            coverage=coverage,
            uniqueness=uniqueness,
            amplitude=amplitude,
            interval_continuity=interval_continuity,
            interval_amplitude=interval_amplitude,
            composite=composite,
            samples=samples,
            interval_min=interval_min,
            interval_max=interval_max,
        )

    def scores(self) -> Scores:
        """Current snapshot, recomputed only if bytes arrived since the last one."""
        return self._update_scores()

    def score_coverage(self) -> float:
        """Fraction of the 256 byte values present in the stream."""
        return self._update_scores().coverage

    def score_uniqueness(self) -> float:
        """Fraction of byte values whose occurrence count is unique.

        Many values sharing identical counts is a sign of a generator
        cycling through the byte space rather than sampling it.
        """
        return self._update_scores().uniqueness

    def score_amplitude(self) -> float:
        """Ratio of the least to the most frequent byte value count."""
        return self._update_scores().amplitude

    def score_interval_continuity(self) -> float:
        """How contiguously significant gap lengths fill ``1..interval_max``."""
        return self._update_scores().interval_continuity

    def score_interval_amplitude(self) -> float:
        """Largest significant gap length relative to 512, capped at 1."""
        return self._update_scores().interval_amplitude

    def score_composite(self) -> float:
        """Sum of the five sub-scores weighted 20 each. Good data rounds to 100."""
        return self._update_scores().composite

    def interval_range(self) -> tuple[int | None, int | None]:
        """Smallest and largest significant gap length, ``(None, None)`` if none."""
        s = self._update_scores()
        return s.interval_min, s.interval_max

    def scores_as_sequence(self) -> tuple[float, float, float, float, float, float]:
        return self._update_scores().as_tuple()

    def scores_as_text(self, separator: str) -> str:
        return separator.join(format_score(v) for v in self.scores_as_sequence())


def format_score(value: float) -> str:
    """Shortest round-trip text for a score, ``1`` rather than ``1.0``."""
    return str(int(value)) if value.is_integer() else repr(value)


def _readonly(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.flags.writeable = False
    return view
