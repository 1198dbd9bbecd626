"""
Tests for job pools, threshold updates and reclassification.
"""

import random
import threading

import pytest

from fitscore.classify import BORDERLINE, REJECTED, SHORTLISTED, classify
from fitscore.errors import InsufficientCandidates
from fitscore.logger import get_logger
from fitscore.models import ScoreRecord
from fitscore.pool import JobPool, PoolRegistry


def record(total):
    return ScoreRecord(skills=total, experience=total, projects=total, education=total, total=total)


@pytest.fixture
def pool(requirement):
    return JobPool("job-1", requirement, threshold=70)


class TestAdd:
    """Filing candidates into a pool."""

    def test_classified_on_add(self, pool):
        assert pool.add("a", record(85)).classification == SHORTLISTED
        assert pool.add("b", record(65)).classification == BORDERLINE
        assert pool.add("c", record(40)).classification == REJECTED
        assert len(pool) == 3

    def test_creation_order_assigned(self, pool):
        first = pool.add("a", record(50))
        second = pool.add("b", record(50))
        assert first.created_seq < second.created_seq

    def test_readd_keeps_creation_order(self, pool):
        pool.add("a", record(50))
        pool.add("b", record(50))
        updated = pool.add("a", record(90))
        assert updated.created_seq == 1
        assert updated.total == 90
        assert len(pool) == 2

    def test_reserved_sequence_used(self, pool):
        seq = pool.reserve_sequence()
        pool.add("late", record(50))
        entry = pool.add("early", record(50), created_seq=seq)
        assert [r.candidate.candidate_id for r in pool.ranked()] == ["early", "late"]
        assert entry.created_seq == seq

    def test_remove(self, pool):
        pool.add("a", record(50))
        assert pool.remove("a") is True
        assert pool.remove("a") is False
        assert pool.get("a") is None

    def test_attach_explanation(self, pool):
        pool.add("a", record(65))
        entry = pool.attach_explanation("a", {"summary": "ok"})
        assert entry.explanation == {"summary": "ok"}
        assert pool.get("a").classification == BORDERLINE

    def test_invalid_initial_threshold(self, requirement):
        with pytest.raises(ValueError):
            JobPool("job-x", requirement, threshold=150)


class TestUpdateThreshold:
    """Threshold changes relabel every candidate."""

    def test_counts(self, pool):
        for cid, total in [("a", 90), ("b", 75), ("c", 68), ("d", 55), ("e", 30)]:
            pool.add(cid, record(total))

        counts = pool.update_threshold(60)

        assert counts == {"total": 5, "shortlisted": 3, "borderline": 1, "rejected": 1, "threshold": 60}
        assert pool.threshold == 60

    def test_no_stale_labels(self, pool):
        rng = random.Random(5)
        for i in range(40):
            pool.add(f"c{i}", record(rng.randint(0, 100)))

        for threshold in (90, 10, 55, 100, 0):
            pool.update_threshold(threshold)
            for c in pool.candidates():
                assert c.classification == classify(c.total, threshold)

    def test_new_candidates_use_new_threshold(self, pool):
        pool.update_threshold(50)
        assert pool.add("a", record(55)).classification == SHORTLISTED

    def test_invalid_threshold_rejected(self, pool):
        pool.add("a", record(65))
        with pytest.raises(ValueError):
            pool.update_threshold(101)
        with pytest.raises(ValueError):
            pool.update_threshold(-5)
        assert pool.threshold == 70
        assert pool.get("a").classification == BORDERLINE

    def test_empty_pool(self, pool):
        counts = pool.update_threshold(80)
        assert counts["total"] == 0

    def test_reclassification_metric(self, pool):
        pool.add("a", record(65))
        pool.add("b", record(90))
        pool.update_threshold(60)
        assert get_logger().get_metrics()["reclassifications"] == 1

    def test_concurrent_adds_and_updates(self, pool):
        """After adds race with threshold changes, every label matches the final threshold."""
        rng = random.Random(17)
        totals = [rng.randint(0, 100) for _ in range(200)]
        thresholds = [rng.randint(0, 100) for _ in range(30)]

        def adder(offset):
            for i in range(offset, len(totals), 4):
                pool.add(f"c{i}", record(totals[i]))

        def updater():
            for t in thresholds:
                pool.update_threshold(t)

        threads = [threading.Thread(target=adder, args=(k,)) for k in range(4)]
        threads.append(threading.Thread(target=updater))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        final = pool.threshold
        assert final == thresholds[-1]
        assert len(pool) == 200
        for c in pool.candidates():
            assert c.classification == classify(c.total, final)


class TestQueries:
    """Ranking, stats and comparison through the pool."""

    @pytest.fixture
    def filled(self, pool):
        for cid, total in [("a", 60), ("b", 90), ("c", 90), ("d", 20)]:
            pool.add(cid, record(total))
        return pool

    def test_ranked(self, filled):
        assert [r.candidate.candidate_id for r in filled.ranked()] == ["b", "c", "a", "d"]

    def test_ranked_with_filters(self, filled):
        ranked = filled.ranked(classification=SHORTLISTED)
        assert [(r.rank, r.candidate.candidate_id) for r in ranked] == [(1, "b"), (2, "c")]
        assert [r.candidate.candidate_id for r in filled.ranked(min_score=50, max_score=70)] == ["a"]

    def test_stats(self, filled):
        stats = filled.stats()
        assert stats["total"] == 4
        assert stats["shortlisted"] == 2
        assert stats["borderline"] == 1
        assert stats["rejected"] == 1
        assert stats["average_score"] == 65
        assert stats["threshold"] == 70

    def test_compare(self, filled):
        result = filled.compare(["a", "b"])
        assert result.overall_winner == "b"

    def test_compare_skips_unknown_ids(self, filled):
        result = filled.compare(["a", "missing", "c"])
        assert [c.candidate_id for c in result.candidates] == ["a", "c"]

    def test_compare_needs_two_known(self, filled):
        with pytest.raises(InsufficientCandidates):
            filled.compare(["a", "missing"])


class TestPoolRegistry:
    def test_create_and_get(self, requirement):
        registry = PoolRegistry()
        pool = registry.create("job-1", requirement)
        assert registry.get("job-1") is pool
        assert pool.threshold == 70

    def test_custom_threshold(self, requirement):
        registry = PoolRegistry()
        assert registry.create("job-1", requirement, threshold=55).threshold == 55

    def test_duplicate_job(self, requirement):
        registry = PoolRegistry()
        registry.create("job-1", requirement)
        with pytest.raises(ValueError):
            registry.create("job-1", requirement)

    def test_unknown_job(self):
        with pytest.raises(KeyError):
            PoolRegistry().get("nope")

    def test_update_threshold(self, requirement):
        registry = PoolRegistry()
        registry.create("job-1", requirement).add("a", record(65))
        counts = registry.update_threshold("job-1", 60)
        assert counts["shortlisted"] == 1

    def test_remove(self, requirement):
        registry = PoolRegistry()
        registry.create("job-1", requirement)
        assert registry.remove("job-1") is True
        with pytest.raises(KeyError):
            registry.get("job-1")
