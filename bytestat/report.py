"""Display-layer helpers for bytestat results."""

from __future__ import annotations

from bytestat.engine import ByteStat

# Below this many bytes the composite is shown with an "insufficient" marker.
SIGNIFICANT_SAMPLES = 256 * 4096 * 100
INSUFFICIENT_MARKER = "~"

SCORE_NAMES = (
    "coverage",
    "uniqueness",
    "amplitude",
    "interval_continuity",
    "interval_amplitude",
    "composite",
)


def is_sufficient(samples: int) -> bool:
    return samples >= SIGNIFICANT_SAMPLES


def format_percent(composite: float, samples: int) -> str:
    """Composite score as ``"NN%"``, prefixed with ``~`` for small samples.

    ``~68%`` is a bad score, but there was not enough data for it to be precise.
    """
    marker = "" if is_sufficient(samples) else INSUFFICIENT_MARKER
    return f"{marker}{composite:.0f}%"


def render_text(stats: ByteStat, separator: str = "\n") -> str:
    """Raw scores followed by the sample count and the final percentage."""
    lines = [
        "",
        "RAW SCORES AS STRING",
        stats.scores_as_text(separator),
        "",
        "FINAL SCORE",
        f"{stats.samples} samples",
        format_percent(stats.score_composite(), stats.samples),
    ]
    return "\n".join(lines)


def as_dict(stats: ByteStat) -> dict:
    """JSON-ready summary of the engine state."""
    s = stats.scores()
    return {
        "samples": s.samples,
        "scores": dict(zip(SCORE_NAMES, s.as_tuple())),
        "interval_min": s.interval_min,
        "interval_max": s.interval_max,
        "sufficient": is_sufficient(s.samples),
        "percent": format_percent(s.composite, s.samples),
    }
