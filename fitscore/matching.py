"""Single requirement/candidate evaluation: scores, explanation and analyses."""

from dataclasses import dataclass
from typing import Any, Dict

from .explain import Explanation, explain
from .logger import get_logger
from .models import CandidateProfile, RequirementProfile, ScoreRecord
from .scoring import experience_analysis, score_candidate, skills_analysis


@dataclass(frozen=True)
class MatchResult:
    scores: ScoreRecord
    explanation: Explanation
    skills_analysis: Dict[str, Any]
    experience_analysis: Dict[str, Any]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "scores": self.scores.as_dict(),
            "explanation": self.explanation.as_dict(),
            "match_details": {
                "skills_analysis": self.skills_analysis,
                "experience_analysis": self.experience_analysis,
            },
        }


def evaluate(requirement: RequirementProfile, candidate: CandidateProfile, client=None) -> MatchResult:
    """Score a candidate, then explain the scores.

    Scores are computed before the collaborator is contacted and are
    returned even when it fails.
    """
    scores = score_candidate(requirement, candidate)
    logger = get_logger()
    logger.record_scored()
    logger.debug("Scored candidate", candidate=candidate.name, **scores.as_dict())

    return MatchResult(
        scores=scores,
        explanation=explain(requirement, candidate, scores, client=client),
        skills_analysis=skills_analysis(requirement, candidate),
        experience_analysis=experience_analysis(requirement, candidate),
    )
