"""
bytestat: measure the randomness of a byte stream.

Bytes are analysed one at a time, in sequence. The distribution and the
recurrence interval of each byte value feed five sub-scores, combined into
a final score between 0 and 100. Good quality random data scores 100 when
rounded.
"""

__version__ = "0.1.0"

from bytestat.engine import ByteStat, Scores
from bytestat.shared import SharedByteStat

__all__ = [
    "ByteStat",
    "Scores",
    "SharedByteStat",
    "__version__",
]
