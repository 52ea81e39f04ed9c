"""LLM Module - LLM services and interfaces."""
from core.llm.interfaces import (
    LLMProvider,
    CapabilityError,
    ScoringCapabilityError,
    EmbeddingCapabilityError,
)
from core.llm.openai_service import OpenAIService
from core.llm.schema_models import ScoreBreakdown, SubScore, SCORE_BREAKDOWN_SCHEMA

__all__ = [
    'LLMProvider',
    'CapabilityError',
    'ScoringCapabilityError',
    'EmbeddingCapabilityError',
    'OpenAIService',
    'ScoreBreakdown',
    'SubScore',
    'SCORE_BREAKDOWN_SCHEMA',
]
