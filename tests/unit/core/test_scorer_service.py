"""
Unit tests for the scoring service.

Tests verify:
- overall score is the round-half-up mean of the three sub-scores
- the scoring payload carries every student and job field
- capability errors propagate unchanged
"""
import pytest

from core.llm.interfaces import ScoringCapabilityError
from core.scorer import (
    ScoringService,
    StudentScoreInput,
    JobScoreInput,
    compute_overall_score,
)
from tests.mocks.launchpad_mocks import MockLLMProvider, make_breakdown


class TestComputeOverallScore:

    @pytest.mark.parametrize("scores, expected", [
        ((80, 70, 90), 80),
        ((80, 80, 81), 80),
        ((80, 81, 81), 81),
        ((0, 0, 1), 0),
        ((0, 1, 1), 1),
        ((100, 100, 100), 100),
        ((0, 0, 0), 0),
    ])
    def test_rounded_mean(self, scores, expected):
        breakdown = make_breakdown(*scores)
        assert compute_overall_score(breakdown) == expected

    def test_result_stays_in_range(self):
        for skills in (0, 33, 67, 100):
            score = compute_overall_score(make_breakdown(skills, 100 - skills, 50))
            assert 0 <= score <= 100


class TestScoringService:

    def _inputs(self):
        student = StudentScoreInput(
            name="Ada Lovelace",
            email="ada@example.com",
            university="MIT",
            major="Mathematics",
            graduation_year=2027,
            bio="Likes engines.",
            skills=["Python", "SQL"],
            github_url="https://github.com/ada",
            cover_letter="I would love to help.",
        )
        job = JobScoreInput(
            title="Backend Intern",
            description="Build APIs.",
            company_name="Acme",
            requirements=["SQL"],
            skills_required=["Python"],
        )
        return student, job

    def test_score_uses_breakdown_from_provider(self):
        llm = MockLLMProvider(make_breakdown(80, 70, 90, "Good fit"))
        student, job = self._inputs()

        result = ScoringService(llm).score(student, job)

        assert result.overall_score == 80
        assert result.breakdown.overall_recommendation == "Good fit"
        stored = result.storage_breakdown
        assert set(stored) == {"skillsMatch", "experienceFit", "educationMatch", "overallRecommendation"}
        assert stored["skillsMatch"]["score"] == 80

    def test_payload_contains_student_and_job(self):
        llm = MockLLMProvider()
        student, job = self._inputs()

        ScoringService(llm).score(student, job)

        payload = llm.scoring_payloads[0]
        assert payload["student"]["name"] == "Ada Lovelace"
        assert payload["student"]["graduationYear"] == 2027
        assert payload["student"]["githubUrl"] == "https://github.com/ada"
        assert payload["student"]["coverLetter"] == "I would love to help."
        assert payload["student"]["linkedinUrl"] is None
        assert payload["job"]["skillsRequired"] == ["Python"]
        assert payload["job"]["companyName"] == "Acme"

    def test_capability_error_propagates(self):
        llm = MockLLMProvider(fail_scoring=True)
        student, job = self._inputs()

        with pytest.raises(ScoringCapabilityError):
            ScoringService(llm).score(student, job)
