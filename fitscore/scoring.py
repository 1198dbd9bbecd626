"""
Dimension scorers and the weighted combiner.

Each scorer is a pure function of (requirement, candidate) returning an
integer in [0, 100]. Missing optional data never raises; it scores as the
neutral value documented on each function.

Weights: skills 50%, experience 25%, projects 15%, education 10%.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .config import (
    DEFAULT_PREFERRED_IMPORTANCE,
    DEFAULT_REQUIRED_IMPORTANCE,
    DEGREE_RANKS,
    DIMENSIONS,
    PREFERRED_SKILL_SHARE,
    REQUIRED_SKILL_SHARE,
    WEIGHTS,
)
from .models import CandidateProfile, RequirementProfile, ScoreRecord, SkillRequirement, round_half_up
from .normalize import contains_either, has_skill, normalize_skill, text_matches_any


def clamp(value: float, low: int = 0, high: int = 100) -> int:
    return int(max(low, min(high, value)))


def _match_rate(skills: Tuple[SkillRequirement, ...], tokens: frozenset, default_importance: int) -> float:
    """Importance-weighted share of skills the candidate covers; 1.0 when empty."""
    hit = 0
    possible = 0
    for skill in skills:
        importance = skill.importance or default_importance
        possible += importance
        if has_skill(tokens, skill.token):
            hit += importance
    return hit / possible if possible > 0 else 1.0


def skills_score(requirement: RequirementProfile, candidate: CandidateProfile) -> int:
    """Required skills count 70%, preferred 30%."""
    tokens = candidate.summary.tokens
    required_rate = _match_rate(requirement.required_skills, tokens, DEFAULT_REQUIRED_IMPORTANCE)
    preferred_rate = _match_rate(requirement.preferred_skills, tokens, DEFAULT_PREFERRED_IMPORTANCE)
    combined = (required_rate * REQUIRED_SKILL_SHARE + preferred_rate * PREFERRED_SKILL_SHARE) * 100
    return clamp(round_half_up(combined))


def experience_score(requirement: RequirementProfile, candidate: CandidateProfile) -> int:
    """
    Years against the required minimum, with an overqualification penalty
    and up to 10 bonus points for matching required domains.
    """
    required = requirement.min_years or 0
    maximum = requirement.max_years
    years = candidate.summary.total_experience_years

    if years >= required:
        base = 100
        # A max of 0 is treated as "no maximum", as upstream emits 0 for unset
        if maximum and years > maximum + 3:
            base -= min(20, (years - maximum - 3) * 5)
    else:
        base = round_half_up(years / required * 100)

    bonus = 0.0
    domains = requirement.required_domains
    if domains:
        matched = [d for d in domains if text_matches_any(d, candidate.summary.domains)]
        bonus = len(matched) / len(domains) * 10

    return clamp(round_half_up(base + bonus))


def _project_relevance(technologies: Iterable[str], required_tokens: List[str]) -> float:
    techs = [normalize_skill(t) for t in technologies]
    matched = [t for t in techs if any(contains_either(t, r) for r in required_tokens)]
    return len(matched) / max(len(techs), 1)


def projects_score(requirement: RequirementProfile, candidate: CandidateProfile) -> int:
    """50 with no projects; 60-100 with relevant ones; 40 otherwise."""
    projects = candidate.projects
    if not projects:
        return 50

    required_tokens = [t for t in (s.token for s in requirement.required_skills) if t]
    relevances = [_project_relevance(p.technologies, required_tokens) for p in projects]
    relevant = [r for r in relevances if r > 0]

    if not relevant:
        return 40
    average = sum(relevances) / len(projects)
    return clamp(round_half_up(60 + min(40, average * 100)))


def degree_rank(degree: Optional[str]) -> int:
    if not degree:
        return 0
    return DEGREE_RANKS.get(degree.lower(), 0)


def education_score(requirement: RequirementProfile, candidate: CandidateProfile) -> int:
    required_rank = degree_rank(requirement.min_degree)
    # An absent or unranked preferred degree falls back to the required one
    preferred_rank = degree_rank(requirement.preferred_degree) or required_rank
    candidate_rank = degree_rank(candidate.summary.highest_degree)

    if candidate_rank >= preferred_rank:
        score = 100
    elif candidate_rank >= required_rank:
        score = 80
    else:
        score = round_half_up(candidate_rank / max(required_rank, 1) * 70)

    fields = [e.field for e in candidate.education if e.field]
    if fields and any(text_matches_any(f, requirement.required_fields) for f in fields):
        score = min(100, score + 10)

    return clamp(score)


SCORERS = {
    "skills": skills_score,
    "experience": experience_score,
    "projects": projects_score,
    "education": education_score,
}


def combine(dimensions: Mapping[str, int], weights: Mapping[str, float] = WEIGHTS) -> int:
    """Weighted total of the four dimension scores, rounded to an integer."""
    total = sum(dimensions[d] * weights[d] for d in DIMENSIONS)
    return clamp(round_half_up(total))


def score_candidate(requirement: RequirementProfile, candidate: CandidateProfile) -> ScoreRecord:
    """Score all four dimensions and their weighted total."""
    dimensions = {name: scorer(requirement, candidate) for name, scorer in SCORERS.items()}
    return ScoreRecord(total=combine(dimensions), **dimensions)


def skills_analysis(requirement: RequirementProfile, candidate: CandidateProfile) -> Dict[str, List[str]]:
    """Which required/preferred skills matched, which are missing, and extras."""
    tokens = candidate.summary.tokens
    matched_required, missing_required, matched_preferred = [], [], []

    for skill in requirement.required_skills:
        if has_skill(tokens, skill.token):
            matched_required.append(skill.name)
        else:
            missing_required.append(skill.name)

    for skill in requirement.preferred_skills:
        if has_skill(tokens, skill.token):
            matched_preferred.append(skill.name)

    named = {s.token for s in requirement.required_skills + requirement.preferred_skills}
    bonus = [s.name for s in candidate.skills if s.token and s.token not in named]

    return {
        "matched_required": matched_required,
        "missing_required": missing_required,
        "matched_preferred": matched_preferred,
        "bonus_skills": bonus[:10],
    }


def experience_analysis(requirement: RequirementProfile, candidate: CandidateProfile) -> Dict[str, object]:
    years = candidate.summary.total_experience_years
    return {
        "required": requirement.min_years,
        "candidate": years,
        "meets_requirement": years >= requirement.min_years,
        "relevant_domains": list(candidate.summary.domains),
    }
