"""
Value objects for requirement profiles, candidate profiles and scores.

Profiles arrive as JSON-shaped dicts from the upstream extraction step.
`from_dict` constructors read that shape with defaults for every optional
field; contract checks live in fitscore.schema. Nothing here is mutated
after construction.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import DEGREE_RANKS
from .normalize import normalize_skill


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values, like Math.round."""
    return int(math.floor(round(value, 9) + 0.5))


def _str_list(values: Any) -> Tuple[str, ...]:
    if not values:
        return ()
    return tuple(str(v) for v in values if v is not None and str(v).strip())


def _number(value: Any, default: float = 0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _lower_or(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip().lower()
    return default


@dataclass(frozen=True)
class SkillRequirement:
    name: str
    category: Optional[str] = None
    importance: Optional[int] = None
    normalized: Optional[str] = None

    @property
    def token(self) -> str:
        return normalize_skill(self.normalized or self.name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SkillRequirement":
        importance = data.get("importance")
        return cls(
            name=str(data.get("name") or ""),
            category=data.get("category"),
            importance=int(importance) if importance else None,
            normalized=data.get("normalized"),
        )


@dataclass(frozen=True)
class RequirementProfile:
    title: str
    seniority: Optional[str] = None
    required_skills: Tuple[SkillRequirement, ...] = ()
    preferred_skills: Tuple[SkillRequirement, ...] = ()
    min_years: float = 0
    max_years: Optional[float] = None
    required_domains: Tuple[str, ...] = ()
    preferred_domains: Tuple[str, ...] = ()
    min_degree: str = "none"
    preferred_degree: Optional[str] = None
    required_fields: Tuple[str, ...] = ()
    preferred_fields: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequirementProfile":
        experience = data.get("experience") or {}
        education = data.get("education") or {}
        max_years = experience.get("max_years")
        return cls(
            title=str(data.get("title") or ""),
            seniority=data.get("seniority_level") or data.get("seniority"),
            required_skills=tuple(
                SkillRequirement.from_dict(s) for s in data.get("required_skills") or []
            ),
            preferred_skills=tuple(
                SkillRequirement.from_dict(s) for s in data.get("preferred_skills") or []
            ),
            min_years=_number(experience.get("min_years")),
            max_years=None if max_years is None else _number(max_years),
            required_domains=_str_list(experience.get("required_domains")),
            preferred_domains=_str_list(experience.get("preferred_domains")),
            min_degree=_lower_or(education.get("min_degree"), "none"),
            preferred_degree=_lower_or(education.get("preferred_degree"), "") or None,
            required_fields=_str_list(education.get("required_fields")),
            preferred_fields=_str_list(education.get("preferred_fields")),
        )

    def requirement_summary(self) -> Dict[str, Any]:
        """Compact view used in explanation payloads."""
        return {
            "title": self.title,
            "required_skills": [s.name for s in self.required_skills],
            "preferred_skills": [s.name for s in self.preferred_skills],
            "experience": {
                "min_years": self.min_years,
                "max_years": self.max_years,
                "required_domains": list(self.required_domains),
            },
            "education": {
                "min_degree": self.min_degree,
                "preferred_degree": self.preferred_degree,
                "required_fields": list(self.required_fields),
            },
        }


@dataclass(frozen=True)
class Contact:
    name: str = "Unknown"
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class CandidateSkill:
    name: str
    category: Optional[str] = None
    proficiency: Optional[str] = None
    years_used: Optional[float] = None

    @property
    def token(self) -> str:
        return normalize_skill(self.name)


@dataclass(frozen=True)
class Position:
    title: Optional[str] = None
    company: Optional[str] = None
    duration_months: float = 0
    technologies: Tuple[str, ...] = ()
    domain: Optional[str] = None


@dataclass(frozen=True)
class Project:
    name: Optional[str] = None
    technologies: Tuple[str, ...] = ()
    impact: Optional[str] = None


@dataclass(frozen=True)
class EducationEntry:
    degree: str = "unknown"
    field: Optional[str] = None
    institution: Optional[str] = None


@dataclass(frozen=True)
class CandidateSummary:
    total_experience_months: float = 0
    total_experience_years: float = 0
    skill_set: frozenset = frozenset()
    technology_set: frozenset = frozenset()
    domains: Tuple[str, ...] = ()
    highest_degree: str = "unknown"
    position_count: int = 0
    project_count: int = 0

    @property
    def tokens(self) -> frozenset:
        """Every skill and technology token the candidate can be matched on."""
        return self.skill_set | self.technology_set


def highest_degree(entries: Tuple[EducationEntry, ...]) -> str:
    """Highest-ranked degree label; "unknown" when there are no entries."""
    best: Optional[str] = None
    best_rank = -1
    for entry in entries:
        rank = DEGREE_RANKS.get(entry.degree, 0)
        if rank > best_rank:
            best, best_rank = entry.degree, rank
    return best or "unknown"


def summarize(
    skills: Tuple[CandidateSkill, ...],
    positions: Tuple[Position, ...],
    projects: Tuple[Project, ...],
    education: Tuple[EducationEntry, ...],
) -> CandidateSummary:
    """Derive the matching summary from the raw profile sections."""
    months = sum(max(0, p.duration_months) for p in positions)
    technologies = set()
    for item in positions + projects:
        technologies.update(normalize_skill(t) for t in item.technologies)

    domains: List[str] = []
    for p in positions:
        if p.domain and p.domain not in domains:
            domains.append(p.domain)

    return CandidateSummary(
        total_experience_months=months,
        total_experience_years=round_half_up(months / 12 * 10) / 10,
        skill_set=frozenset(t for t in (s.token for s in skills) if t),
        technology_set=frozenset(t for t in technologies if t),
        domains=tuple(domains),
        highest_degree=highest_degree(education),
        position_count=len(positions),
        project_count=len(projects),
    )


@dataclass(frozen=True)
class CandidateProfile:
    contact: Contact = field(default_factory=Contact)
    skills: Tuple[CandidateSkill, ...] = ()
    positions: Tuple[Position, ...] = ()
    projects: Tuple[Project, ...] = ()
    education: Tuple[EducationEntry, ...] = ()
    summary: CandidateSummary = field(default_factory=CandidateSummary)

    @property
    def name(self) -> str:
        return self.contact.name

    @classmethod
    def build(
        cls,
        contact: Optional[Contact] = None,
        skills=(),
        positions=(),
        projects=(),
        education=(),
    ) -> "CandidateProfile":
        """Assemble a profile and derive its summary."""
        skills, positions = tuple(skills), tuple(positions)
        projects, education = tuple(projects), tuple(education)
        return cls(
            contact=contact or Contact(),
            skills=skills,
            positions=positions,
            projects=projects,
            education=education,
            summary=summarize(skills, positions, projects, education),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CandidateProfile":
        contact = data.get("contact") or {}
        experience = data.get("experience") or {}
        return cls.build(
            contact=Contact(
                name=contact.get("name") or "Unknown",
                email=contact.get("email"),
                phone=contact.get("phone"),
            ),
            skills=[
                CandidateSkill(
                    name=str(s.get("name") or ""),
                    category=s.get("category"),
                    proficiency=s.get("proficiency"),
                    years_used=s.get("years_used"),
                )
                for s in data.get("skills") or []
            ],
            positions=[
                Position(
                    title=p.get("title"),
                    company=p.get("company"),
                    duration_months=_number(p.get("duration_months")),
                    technologies=_str_list(p.get("technologies")),
                    domain=p.get("domain") or None,
                )
                for p in experience.get("positions") or []
            ],
            projects=[
                Project(
                    name=p.get("name"),
                    technologies=_str_list(p.get("technologies")),
                    impact=p.get("impact"),
                )
                for p in data.get("projects") or []
            ],
            education=[
                EducationEntry(
                    degree=_lower_or(e.get("degree"), "unknown"),
                    field=e.get("field"),
                    institution=e.get("institution"),
                )
                for e in data.get("education") or []
            ],
        )


@dataclass(frozen=True)
class ScoreRecord:
    skills: int
    experience: int
    projects: int
    education: int
    total: int

    def dimensions(self) -> Dict[str, int]:
        return {
            "skills": self.skills,
            "experience": self.experience,
            "projects": self.projects,
            "education": self.education,
        }

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)
