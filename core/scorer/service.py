#!/usr/bin/env python3
"""
Scoring Service - Stage 2 of the application pipeline.

Turns a (student, job) pair into a validated ScoreBreakdown via the LLM
provider and derives the overall score. Database access lives in the
worker; this service only talks to the scoring capability.
"""

from decimal import Decimal, ROUND_HALF_UP
import logging

from core.llm.interfaces import LLMProvider
from core.llm.schema_models import ScoreBreakdown
from core.scorer.models import StudentScoreInput, JobScoreInput, ScoringResult

logger = logging.getLogger(__name__)


def compute_overall_score(breakdown: ScoreBreakdown) -> int:
    """Round-half-up mean of skills, experience and education sub-scores."""
    total = (
        breakdown.skills_match.score
        + breakdown.experience_fit.score
        + breakdown.education_match.score
    )
    mean = Decimal(total) / Decimal(3)
    return int(mean.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


class ScoringService:
    """Scores one application with the configured LLM provider."""

    def __init__(self, llm: LLMProvider):
        self.llm = llm

    def build_payload(self, student: StudentScoreInput, job: JobScoreInput) -> dict:
        return {
            'student': student.to_payload(),
            'job': job.to_payload(),
        }

    def score(self, student: StudentScoreInput, job: JobScoreInput) -> ScoringResult:
        """
        Score a candidate against a job.

        Raises:
            ScoringCapabilityError: provider failed or returned invalid output
        """
        breakdown = self.llm.score_application(self.build_payload(student, job))
        overall = compute_overall_score(breakdown)
        logger.debug(f"Overall score for '{job.title}': {overall}")
        return ScoringResult(breakdown=breakdown, overall_score=overall)
