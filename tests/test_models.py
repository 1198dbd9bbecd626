"""
Tests for profile value objects and the derived candidate summary.
"""

import dataclasses

import pytest

from fitscore.models import (
    CandidateProfile,
    EducationEntry,
    Position,
    RequirementProfile,
    ScoreRecord,
    highest_degree,
    round_half_up,
)


class TestRoundHalfUp:
    """Integer rounding used for every score."""

    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (72.5, 73), (0, 0)])
    def test_half_rounds_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_float_noise_does_not_flip(self):
        """Sums like 0.15 * 50 land on the intended half."""
        assert round_half_up(50 * 0.15) == 8


class TestRequirementProfile:
    """Test construction from upstream JSON."""

    def test_from_dict(self, requirement):
        assert requirement.title == "Senior Frontend Engineer"
        assert requirement.seniority == "senior"
        assert [s.name for s in requirement.required_skills] == ["React", "TypeScript", "CSS"]
        assert requirement.required_skills[2].importance is None
        assert requirement.min_years == 5
        assert requirement.max_years == 10
        assert requirement.required_domains == ("fintech",)
        assert requirement.min_degree == "bachelor"
        assert requirement.preferred_degree == "master"

    def test_defaults_for_missing_blocks(self):
        req = RequirementProfile.from_dict({"title": "Engineer", "required_skills": []})
        assert req.min_years == 0
        assert req.max_years is None
        assert req.min_degree == "none"
        assert req.preferred_degree is None
        assert req.preferred_skills == ()

    def test_skill_token_prefers_upstream_normalized(self):
        req = RequirementProfile.from_dict({
            "title": "Engineer",
            "required_skills": [{"name": "React Framework", "normalized": "react"}],
        })
        assert req.required_skills[0].token == "react"

    def test_immutable(self, requirement):
        with pytest.raises(dataclasses.FrozenInstanceError):
            requirement.title = "Other"


class TestCandidateSummary:
    """Test the derived summary."""

    def test_experience_totals(self, candidate):
        assert candidate.summary.total_experience_months == 72
        assert candidate.summary.total_experience_years == 6.0

    def test_years_rounded_to_one_decimal(self):
        profile = CandidateProfile.build(positions=[Position(duration_months=19)])
        # 19 / 12 = 1.583...
        assert profile.summary.total_experience_years == 1.6

    def test_token_sets(self, candidate):
        assert candidate.summary.skill_set == {"react", "typescript", "node", "figma"}
        assert {"css", "redux", "javascript", "sass", "storybook"} <= candidate.summary.technology_set
        assert "react" in candidate.summary.tokens

    def test_domains_in_first_seen_order(self, candidate):
        assert candidate.summary.domains == ("FinTech", "e-commerce")

    def test_highest_degree(self, candidate):
        assert candidate.summary.highest_degree == "bachelor"

    def test_highest_degree_picks_top_rank(self):
        entries = (EducationEntry(degree="bachelor"), EducationEntry(degree="phd"), EducationEntry(degree="master"))
        assert highest_degree(entries) == "phd"

    def test_no_education_is_unknown(self, minimal_candidate_data):
        profile = CandidateProfile.from_dict(minimal_candidate_data)
        assert profile.summary.highest_degree == "unknown"

    def test_empty_skill_names_dropped(self):
        profile = CandidateProfile.from_dict({
            "contact": {}, "skills": [{"name": ""}, {"name": "Go"}], "experience": {},
        })
        assert profile.summary.skill_set == {"go"}

    def test_missing_contact_name(self, minimal_candidate_data):
        assert CandidateProfile.from_dict(minimal_candidate_data).name == "Unknown"

    def test_counts(self, candidate):
        assert candidate.summary.position_count == 2
        assert candidate.summary.project_count == 1


class TestScoreRecord:
    def test_as_dict(self):
        record = ScoreRecord(skills=70, experience=100, projects=100, education=90, total=84)
        assert record.as_dict() == {
            "skills": 70, "experience": 100, "projects": 100, "education": 90, "total": 84,
        }
        assert "total" not in record.dimensions()
