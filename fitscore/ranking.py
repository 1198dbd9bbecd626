"""
Ranking and side-by-side comparison of scored candidates.

Ordering is by total score, highest first. Equal totals keep creation
order: a candidate created earlier always ranks above a later one with
the same score.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .classify import BORDERLINE, REJECTED, SHORTLISTED
from .config import DIMENSIONS
from .errors import InsufficientCandidates
from .models import ScoreRecord, round_half_up


@dataclass(frozen=True)
class ScoredCandidate:
    candidate_id: str
    scores: ScoreRecord
    created_seq: int
    name: str = "Unknown"
    classification: Optional[str] = None
    explanation: Optional[Any] = None

    @property
    def total(self) -> int:
        return self.scores.total


@dataclass(frozen=True)
class RankedCandidate:
    rank: int
    candidate: ScoredCandidate

    def as_dict(self) -> Dict[str, Any]:
        c = self.candidate
        explanation = c.explanation.as_dict() if hasattr(c.explanation, "as_dict") else c.explanation
        return {
            "id": c.candidate_id,
            "rank": self.rank,
            "name": c.name,
            "scores": c.scores.as_dict(),
            "classification": c.classification,
            "explanation": explanation,
        }


@dataclass(frozen=True)
class DimensionComparison:
    dimension: str
    scores: Dict[str, int]
    winner: str


@dataclass(frozen=True)
class Comparison:
    candidates: List[ScoredCandidate]
    dimensions: List[DimensionComparison] = field(default_factory=list)
    overall_winner: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return {
            "candidates": [
                {
                    "id": c.candidate_id,
                    "name": c.name,
                    "scores": c.scores.as_dict(),
                    "classification": c.classification,
                }
                for c in self.candidates
            ],
            "dimensions": [
                {"dimension": d.dimension, "scores": dict(d.scores), "winner": d.winner}
                for d in self.dimensions
            ],
            "overall_winner": self.overall_winner,
        }


def rank(candidates: Iterable[ScoredCandidate]) -> List[RankedCandidate]:
    """Order by total descending, then creation order; positions start at 1."""
    ordered = sorted(candidates, key=lambda c: (-c.total, c.created_seq))
    return [RankedCandidate(rank=i + 1, candidate=c) for i, c in enumerate(ordered)]


def _winner(candidates: Sequence[ScoredCandidate], score_of) -> ScoredCandidate:
    # Strictly greater replaces the leader, so ties stay with the first listed
    best = candidates[0]
    for c in candidates[1:]:
        if score_of(c) > score_of(best):
            best = c
    return best


def compare(candidates: Sequence[Optional[ScoredCandidate]]) -> Comparison:
    """
    Per-dimension and overall winners among two or more candidates.

    None entries (unresolvable ids) are skipped.

    Raises:
        InsufficientCandidates: If fewer than two candidates remain
    """
    valid = [c for c in candidates if c is not None]
    if len(valid) < 2:
        raise InsufficientCandidates(len(valid))

    dimensions = []
    for dim in DIMENSIONS:
        scores = {c.candidate_id: getattr(c.scores, dim) for c in valid}
        best = _winner(valid, lambda c, dim=dim: getattr(c.scores, dim))
        dimensions.append(DimensionComparison(dimension=dim, scores=scores, winner=best.candidate_id))

    overall = _winner(valid, lambda c: c.total)
    return Comparison(candidates=valid, dimensions=dimensions, overall_winner=overall.candidate_id)


def filter_candidates(
    candidates: Iterable[ScoredCandidate],
    classification: Optional[str] = None,
    min_score: Optional[int] = None,
    max_score: Optional[int] = None,
) -> List[ScoredCandidate]:
    result = []
    for c in candidates:
        if classification is not None and c.classification != classification:
            continue
        if min_score is not None and c.total < min_score:
            continue
        if max_score is not None and c.total > max_score:
            continue
        result.append(c)
    return result


def summarize_scores(candidates: Sequence[ScoredCandidate]) -> Dict[str, int]:
    """Classification counts plus average, highest and lowest total."""
    totals = [c.total for c in candidates]
    labels = [c.classification for c in candidates]
    return {
        "total": len(candidates),
        SHORTLISTED: labels.count(SHORTLISTED),
        BORDERLINE: labels.count(BORDERLINE),
        REJECTED: labels.count(REJECTED),
        "average_score": round_half_up(sum(totals) / len(totals)) if totals else 0,
        "highest_score": max(totals) if totals else 0,
        "lowest_score": min(totals) if totals else 0,
    }
