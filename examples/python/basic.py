#!/usr/bin/env python3
"""Basic randomness scoring with bytestat.

Scores a good source (os.urandom) against two broken ones: a byte counter
and a generator biased towards low values.

Usage:
    pip install -e .
    python examples/python/basic.py
"""

import os

import numpy as np

from bytestat import ByteStat, __version__
from bytestat.report import format_percent

print(f"bytestat v{__version__}")

N = 4 * 1024 * 1024

sources = {
    "os.urandom": np.frombuffer(os.urandom(N), dtype=np.uint8),
    "counter": np.arange(N, dtype=np.uint64).astype(np.uint8),
    "biased": np.minimum(
        np.random.default_rng().exponential(64, N), 255
    ).astype(np.uint8),
}

for name, data in sources.items():
    stats = ByteStat()
    stats.analyze_bytes(data)
    print(f"\n{name}: {format_percent(stats.score_composite(), stats.samples)}")
    print(f"  {stats.scores_as_text('  ')}")
