"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict

from fitscore.logger import reset_logger
from fitscore.models import CandidateProfile, RequirementProfile


@pytest.fixture(autouse=True)
def fresh_logger():
    """Each test starts with zeroed metrics."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def requirement_data() -> Dict[str, Any]:
    """Upstream requirement profile for a senior frontend role."""
    return {
        "title": "Senior Frontend Engineer",
        "seniority_level": "senior",
        "required_skills": [
            {"name": "React", "category": "framework", "importance": 5},
            {"name": "TypeScript", "category": "language", "importance": 4},
            {"name": "CSS", "category": "language"},
        ],
        "preferred_skills": [
            {"name": "GraphQL", "category": "tool", "importance": 3},
            {"name": "Docker", "category": "tool"},
        ],
        "experience": {
            "min_years": 5,
            "max_years": 10,
            "required_domains": ["fintech"],
            "preferred_domains": ["e-commerce"],
        },
        "education": {
            "min_degree": "bachelor",
            "preferred_degree": "master",
            "required_fields": ["Computer Science"],
            "preferred_fields": [],
        },
    }


@pytest.fixture
def candidate_data() -> Dict[str, Any]:
    """Upstream candidate profile with six years of experience."""
    return {
        "contact": {"name": "Ada Example", "email": "ada@example.com", "phone": None},
        "skills": [
            {"name": "React.js", "category": "framework", "proficiency": "expert", "years_used": 5},
            {"name": "TypeScript", "category": "language", "proficiency": "advanced", "years_used": 4},
            {"name": "Node.js", "category": "runtime", "proficiency": "intermediate", "years_used": 3},
            {"name": "Figma", "category": "tool"},
        ],
        "experience": {
            "positions": [
                {
                    "title": "Frontend Engineer",
                    "company": "PayCo",
                    "duration_months": 48,
                    "technologies": ["React", "CSS", "Redux"],
                    "domain": "FinTech",
                },
                {
                    "title": "Web Developer",
                    "company": "ShopCo",
                    "duration_months": 24,
                    "technologies": ["JavaScript", "SASS"],
                    "domain": "e-commerce",
                },
            ]
        },
        "projects": [
            {"name": "Design system", "technologies": ["React", "Storybook"], "impact": "Adopted by 5 teams"},
        ],
        "education": [
            {"degree": "Bachelor", "field": "Computer Science", "institution": "State University"},
        ],
    }


@pytest.fixture
def requirement(requirement_data) -> RequirementProfile:
    return RequirementProfile.from_dict(requirement_data)


@pytest.fixture
def candidate(candidate_data) -> CandidateProfile:
    return CandidateProfile.from_dict(candidate_data)


@pytest.fixture
def minimal_candidate_data() -> Dict[str, Any]:
    """Candidate with only the required top-level blocks."""
    return {"contact": {}, "skills": [], "experience": {}}
