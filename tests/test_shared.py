"""Tests for the lock-guarded engine."""

import threading

from bytestat.engine import ByteStat
from bytestat.shared import SharedByteStat


class TestShared:
    def test_delegates(self):
        shared = SharedByteStat()
        shared.analyze(5)
        assert shared.samples == 1
        assert shared.score_composite() == 0.234375
        assert shared.scores_as_text(",").endswith(",0.234375")

    def test_concurrent_producers(self):
        engine = ByteStat()
        shared = SharedByteStat(engine)

        def _producer(value):
            for _ in range(2000):
                shared.analyze(value)

        threads = [threading.Thread(target=_producer, args=(v,)) for v in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert shared.samples == 8000
        assert list(engine.frequency_table()[:4]) == [2000] * 4
        assert int(engine.interval_histogram().sum()) == 8000
        assert shared.score_coverage() == 4 / 256

    def test_concurrent_readers(self):
        shared = SharedByteStat()
        errors = []

        def _reader():
            for _ in range(200):
                values = shared.scores_as_sequence()
                if not all(0.0 <= v <= 1.0 for v in values[:5]):
                    errors.append(values)

        readers = [threading.Thread(target=_reader) for _ in range(3)]
        for t in readers:
            t.start()
        for _ in range(50):
            shared.analyze_bytes(bytes(range(256)))
        for t in readers:
            t.join()

        assert not errors
        assert shared.samples == 50 * 256

    def test_accumulator_snapshots(self):
        shared = SharedByteStat()
        shared.analyze_bytes(bytes(range(256)) * 4)
        dist = shared.frequency_table()
        last = shared.last_seen_table()
        hist = shared.interval_histogram()
        shared.analyze_bytes(bytes(range(256)))
        # copies taken earlier do not follow later ingestion
        assert int(dist.sum()) == 1024
        assert int(last[255]) == 1024
        assert int(hist.sum()) == 1024
        assert int(shared.frequency_table().sum()) == 1280

    def test_freshness_and_interval_range(self):
        shared = SharedByteStat()
        assert shared.is_fresh
        assert shared.interval_range() == (None, None)
        shared.analyze(5)
        assert not shared.is_fresh
        assert shared.interval_range() == (1, 1)
        assert shared.is_fresh
