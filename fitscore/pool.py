"""
Per-job candidate pools.

A JobPool owns the mutable threshold of one requirement profile and the
scored candidates filed under it. Classifying a new candidate and
reclassifying everyone after a threshold change both run under the same
lock, so each candidate is labelled against exactly one threshold value
and no label survives a threshold change.
"""

import dataclasses
import itertools
import threading
from typing import Any, Dict, Iterable, List, Optional

from .classify import BORDERLINE, REJECTED, SHORTLISTED, classify
from .config import BORDERLINE_BAND, DEFAULT_THRESHOLD, validate_threshold
from .logger import get_logger
from .models import RequirementProfile, ScoreRecord
from .ranking import Comparison, RankedCandidate, ScoredCandidate, compare, filter_candidates, rank, summarize_scores


class JobPool:
    """Scored candidates and the classification threshold for one job."""

    def __init__(
        self,
        job_id: str,
        requirement: RequirementProfile,
        threshold: int = DEFAULT_THRESHOLD,
        borderline_band: int = BORDERLINE_BAND,
    ):
        self.job_id = job_id
        self.requirement = requirement
        self.borderline_band = borderline_band
        self._threshold = validate_threshold(threshold)
        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._candidates: Dict[str, ScoredCandidate] = {}

    @property
    def threshold(self) -> int:
        with self._lock:
            return self._threshold

    def __len__(self) -> int:
        with self._lock:
            return len(self._candidates)

    def reserve_sequence(self) -> int:
        """Claim a creation slot ahead of scoring, fixing tie-break order."""
        with self._lock:
            return next(self._sequence)

    def add(
        self,
        candidate_id: str,
        scores: ScoreRecord,
        name: str = "Unknown",
        explanation: Optional[Any] = None,
        created_seq: Optional[int] = None,
    ) -> ScoredCandidate:
        """
        File a scored candidate and classify it against the current threshold.

        Re-adding an existing id replaces its scores but keeps its original
        creation order.
        """
        with self._lock:
            existing = self._candidates.get(candidate_id)
            if existing is not None:
                seq = existing.created_seq
            elif created_seq is not None:
                seq = created_seq
            else:
                seq = next(self._sequence)
            entry = ScoredCandidate(
                candidate_id=candidate_id,
                scores=scores,
                created_seq=seq,
                name=name,
                classification=classify(scores.total, self._threshold, self.borderline_band),
                explanation=explanation,
            )
            self._candidates[candidate_id] = entry
            return entry

    def attach_explanation(self, candidate_id: str, explanation: Any) -> ScoredCandidate:
        with self._lock:
            entry = dataclasses.replace(self._candidates[candidate_id], explanation=explanation)
            self._candidates[candidate_id] = entry
            return entry

    def get(self, candidate_id: str) -> Optional[ScoredCandidate]:
        with self._lock:
            return self._candidates.get(candidate_id)

    def remove(self, candidate_id: str) -> bool:
        with self._lock:
            return self._candidates.pop(candidate_id, None) is not None

    def candidates(self) -> List[ScoredCandidate]:
        with self._lock:
            return list(self._candidates.values())

    def update_threshold(self, threshold: int) -> Dict[str, int]:
        """
        Set a new threshold and reclassify every candidate in the pool.

        Returns:
            Counts: total, shortlisted, borderline, rejected and the threshold
        """
        validate_threshold(threshold)
        changed = 0
        with self._lock:
            self._threshold = threshold
            for candidate_id, entry in self._candidates.items():
                label = classify(entry.total, threshold, self.borderline_band)
                if label != entry.classification:
                    changed += 1
                self._candidates[candidate_id] = dataclasses.replace(entry, classification=label)
            labels = [c.classification for c in self._candidates.values()]

        logger = get_logger()
        logger.record_reclassification(changed)
        logger.info("Threshold updated", job_id=self.job_id, threshold=threshold, relabelled=changed)
        return {
            "total": len(labels),
            SHORTLISTED: labels.count(SHORTLISTED),
            BORDERLINE: labels.count(BORDERLINE),
            REJECTED: labels.count(REJECTED),
            "threshold": threshold,
        }

    def ranked(
        self,
        classification: Optional[str] = None,
        min_score: Optional[int] = None,
        max_score: Optional[int] = None,
    ) -> List[RankedCandidate]:
        """Ranked candidates after optional filters; ranks are over the filtered set."""
        return rank(filter_candidates(self.candidates(), classification, min_score, max_score))

    def stats(self) -> Dict[str, int]:
        with self._lock:
            summary = summarize_scores(list(self._candidates.values()))
            summary["threshold"] = self._threshold
        return summary

    def compare(self, candidate_ids: Iterable[str]) -> Comparison:
        """Compare candidates by id; unknown ids are skipped."""
        with self._lock:
            resolved = [self._candidates.get(cid) for cid in candidate_ids]
        return compare(resolved)


class PoolRegistry:
    """JobPools keyed by job id."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pools: Dict[str, JobPool] = {}

    def create(self, job_id: str, requirement: RequirementProfile, threshold: Optional[int] = None) -> JobPool:
        with self._lock:
            if job_id in self._pools:
                raise ValueError(f"Job already registered: {job_id}")
            pool = JobPool(job_id, requirement, DEFAULT_THRESHOLD if threshold is None else threshold)
            self._pools[job_id] = pool
            return pool

    def get(self, job_id: str) -> JobPool:
        with self._lock:
            if job_id not in self._pools:
                raise KeyError(f"Job not found: {job_id}")
            return self._pools[job_id]

    def remove(self, job_id: str) -> bool:
        with self._lock:
            return self._pools.pop(job_id, None) is not None

    def update_threshold(self, job_id: str, threshold: int) -> Dict[str, int]:
        return self.get(job_id).update_threshold(threshold)
