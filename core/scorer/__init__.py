#!/usr/bin/env python3
"""
Scoring Module - LLM-backed application scoring.

Public API:
- ScoringService: Builds the scoring request and computes the overall score
- StudentScoreInput / JobScoreInput: Inputs for one candidate/job pair
- ScoringResult: Validated breakdown plus rounded overall score
- compute_overall_score: Round-half-up mean of the three sub-scores
"""

from core.scorer.models import StudentScoreInput, JobScoreInput, ScoringResult
from core.scorer.service import ScoringService, compute_overall_score

__all__ = [
    'ScoringService',
    'StudentScoreInput',
    'JobScoreInput',
    'ScoringResult',
    'compute_overall_score',
]
