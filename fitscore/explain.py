"""
Explanation assembly.

Builds a size-bounded evidence payload from the profiles and scores,
hands it to the narrative collaborator, and falls back to a deterministic
explanation built from the numbers alone when the collaborator fails.
Scores never depend on the collaborator being up.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .classify import RECOMMENDATIONS, recommendation_for
from .errors import CollaboratorFailure
from .logger import get_logger
from .models import CandidateProfile, RequirementProfile, ScoreRecord

TOP_SKILLS = 15
TOP_POSITIONS = 3
TOP_PROJECTS = 3

MATCH_EXPLANATION_PROMPT = """You are an experienced HR advisor helping recruiters understand how well a candidate fits a role. Explain clearly and concisely why the candidate received their score.

RULES:
1. Output ONLY valid JSON, with no markdown and no surrounding text
2. Be specific about strengths and gaps, citing evidence from the profile
3. Keep the language professional and objective
4. Give the recruiter actionable insights, including red flags or exceptional strengths

INPUT: structured job requirements, a structured candidate profile, the four dimension scores (skills, experience, projects, education) and the overall score.

OUTPUT: a JSON object with exactly this structure:

{
  "summary": "2-3 sentence overall assessment",
  "strengths": ["specific strength with evidence"],
  "gaps": ["specific gap or missing requirement"],
  "skill_analysis": {
    "matched_required": ["required skills the candidate has"],
    "missing_required": ["required skills the candidate lacks"],
    "matched_preferred": ["preferred skills the candidate has"],
    "bonus_skills": ["relevant skills beyond the requirements"]
  },
  "experience_analysis": {
    "meets_requirement": true,
    "relevant_experience": "summary of the most relevant experience",
    "domain_fit": "assessment of domain or industry fit"
  },
  "project_analysis": {
    "relevant_projects": ["projects demonstrating relevant skills"],
    "impact_evidence": "evidence of measurable impact, or null"
  },
  "education_analysis": {
    "meets_requirement": true,
    "relevance": "how the education relates to the role"
  },
  "recommendation": "one of: strong_hire, hire, maybe, no_hire",
  "interview_focus_areas": ["areas to probe in the interview"],
  "risk_factors": ["potential concerns to consider"]
}

Generate an explanation for the following match:"""


@dataclass(frozen=True)
class Explanation:
    summary: str
    recommendation: str
    strengths: List[str] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)
    interview_focus_areas: List[str] = field(default_factory=list)
    risk_factors: List[str] = field(default_factory=list)
    skill_analysis: Optional[Dict[str, Any]] = None
    experience_analysis: Optional[Dict[str, Any]] = None
    project_analysis: Optional[Dict[str, Any]] = None
    education_analysis: Optional[Dict[str, Any]] = None
    is_fallback: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _str_items(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value if v is not None]


def _section(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


def build_evidence(
    requirement: RequirementProfile,
    candidate: CandidateProfile,
    scores: ScoreRecord,
    top_skills: int = TOP_SKILLS,
) -> Dict[str, Any]:
    """Compact, bounded context for the collaborator."""
    return {
        "job": requirement.requirement_summary(),
        "candidate": {
            "name": candidate.name,
            "skills": [s.name for s in candidate.skills[:top_skills]],
            "total_experience_years": candidate.summary.total_experience_years,
            "positions": [
                {"title": p.title, "company": p.company, "duration_months": p.duration_months}
                for p in candidate.positions[:TOP_POSITIONS]
            ],
            "projects": [p.name for p in candidate.projects[:TOP_PROJECTS]],
            "education": candidate.summary.highest_degree,
        },
        "scores": scores.as_dict(),
    }


def render_context(evidence: Dict[str, Any]) -> str:
    scores = evidence["scores"]
    return "\n".join([
        "Job Requirements:",
        json.dumps(evidence["job"], indent=2),
        "",
        "Candidate Profile:",
        json.dumps(evidence["candidate"], indent=2),
        "",
        "Scores:",
        f"- Overall: {scores['total']}/100",
        f"- Skills: {scores['skills']}/100",
        f"- Experience: {scores['experience']}/100",
        f"- Projects: {scores['projects']}/100",
        f"- Education: {scores['education']}/100",
    ])


def fallback_explanation(scores: ScoreRecord) -> Explanation:
    """Deterministic explanation from the numeric scores only."""
    return Explanation(
        summary=(
            f"Candidate scored {scores.total}/100 based on weighted evaluation "
            f"of skills, experience, projects, and education."
        ),
        recommendation=recommendation_for(scores.total),
        is_fallback=True,
    )


def parse_explanation(data: Dict[str, Any], scores: ScoreRecord) -> Explanation:
    """
    Build an Explanation from collaborator JSON.

    Raises:
        CollaboratorFailure: If the reply has no usable summary
    """
    if not isinstance(data, dict):
        raise CollaboratorFailure("Collaborator response is not a JSON object")
    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise CollaboratorFailure("Collaborator response has no summary")

    recommendation = data.get("recommendation")
    if recommendation not in RECOMMENDATIONS:
        recommendation = recommendation_for(scores.total)

    return Explanation(
        summary=summary.strip(),
        recommendation=recommendation,
        strengths=_str_items(data.get("strengths")),
        gaps=_str_items(data.get("gaps")),
        interview_focus_areas=_str_items(data.get("interview_focus_areas")),
        risk_factors=_str_items(data.get("risk_factors")),
        skill_analysis=_section(data.get("skill_analysis")),
        experience_analysis=_section(data.get("experience_analysis")),
        project_analysis=_section(data.get("project_analysis")),
        education_analysis=_section(data.get("education_analysis")),
    )


def explain(
    requirement: RequirementProfile,
    candidate: CandidateProfile,
    scores: ScoreRecord,
    client=None,
) -> Explanation:
    """
    Narrative explanation for a scored candidate.

    Args:
        client: Object with complete(system_prompt, user_content) -> dict,
            usually a NarrativeClient. None skips straight to the fallback.

    Returns:
        Collaborator explanation, or the fallback if it failed
    """
    logger = get_logger()
    if client is None:
        logger.record_fallback()
        return fallback_explanation(scores)

    context = render_context(build_evidence(requirement, candidate, scores))
    logger.record_collaborator_call()
    try:
        reply = client.complete(MATCH_EXPLANATION_PROMPT, context)
        return parse_explanation(reply, scores)
    except CollaboratorFailure as e:
        logger.record_collaborator_failure(type(e).__name__ if e.status is None else f"HTTP_{e.status}")
        logger.record_fallback()
        logger.warning("Explanation collaborator failed, using fallback", candidate=candidate.name, error=str(e))
        return fallback_explanation(scores)
    except Exception as e:  # noqa: BLE001
        logger.record_collaborator_failure(type(e).__name__)
        logger.record_fallback()
        logger.error("Unexpected explanation error, using fallback", candidate=candidate.name, error=str(e))
        return fallback_explanation(scores)
