"""
Batch scoring of many candidates against one job.

Candidates are scored in parallel and filed into the job's pool as soon
as their numbers are ready. A candidate that fails validation or scoring
is reported and skipped; the rest of the batch carries on. Explanations
are requested only after every numeric score has been filed.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from .errors import ContractViolation
from .explain import explain
from .logger import get_logger
from .models import CandidateProfile
from .pool import JobPool
from .ranking import ScoredCandidate
from .schema import require_valid
from .scoring import score_candidate


@dataclass
class BatchResult:
    scored: List[ScoredCandidate] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.scored)

    @property
    def failed(self) -> int:
        return len(self.errors)


def _score_one(pool: JobPool, candidate_id: str, data: Dict[str, Any], seq: int):
    require_valid(data, "candidate")
    profile = CandidateProfile.from_dict(data)
    scores = score_candidate(pool.requirement, profile)
    entry = pool.add(candidate_id, scores, name=profile.name, created_seq=seq)
    return profile, entry


def score_batch(
    pool: JobPool,
    candidates: Iterable[Tuple[str, Dict[str, Any]]],
    client=None,
    max_workers: int = 4,
    explain_results: bool = True,
) -> BatchResult:
    """
    Score (candidate_id, profile_dict) pairs into pool.

    Args:
        pool: Target job pool; its requirement profile is used for scoring
        candidates: Pairs in creation order
        client: Narrative client for explanations (None = fallback text)
        max_workers: Thread count
        explain_results: Attach explanations after scoring

    Returns:
        BatchResult with scored entries in submission order and per-candidate errors
    """
    logger = get_logger()
    items = list(candidates)
    # Sequence numbers follow submission order, not completion order
    slots = [pool.reserve_sequence() for _ in items]
    result = BatchResult()
    profiles: List[Tuple[str, CandidateProfile]] = []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            (candidate_id, executor.submit(_score_one, pool, candidate_id, data, seq))
            for (candidate_id, data), seq in zip(items, slots)
        ]
        for candidate_id, future in futures:
            try:
                profile, entry = future.result()
            except ContractViolation as e:
                logger.record_scoring_failure("ContractViolation")
                logger.warning("Candidate rejected by contract check", candidate_id=candidate_id, errors=e.errors)
                result.errors.append({"candidate_id": candidate_id, "error": str(e)})
                continue
            except Exception as e:  # noqa: BLE001
                logger.record_scoring_failure(type(e).__name__)
                logger.error("Candidate scoring failed", candidate_id=candidate_id, error=str(e))
                result.errors.append({"candidate_id": candidate_id, "error": str(e)})
                continue
            logger.record_scored()
            result.scored.append(entry)
            profiles.append((candidate_id, profile))

        if explain_results and profiles:
            explained = {
                candidate_id: executor.submit(
                    explain, pool.requirement, profile, pool.get(candidate_id).scores, client
                )
                for candidate_id, profile in profiles
            }
            for candidate_id, future in explained.items():
                try:
                    pool.attach_explanation(candidate_id, future.result())
                except Exception as e:  # noqa: BLE001
                    logger.error("Explanation step failed", candidate_id=candidate_id, error=str(e))

    result.scored = [pool.get(candidate_id) for candidate_id, _ in profiles]
    logger.info(
        "Batch scored",
        job_id=pool.job_id,
        processed=result.processed,
        failed=result.failed,
    )
    return result
