"""
LLM Provider Interface - Abstract base for AI service providers.

This module defines the capabilities the application needs from an LLM
vendor (OpenAI, Ollama, any OpenAI-compatible endpoint) and the errors
they raise.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Any

from core.llm.schema_models import ScoreBreakdown


class CapabilityError(Exception):
    """An external AI capability failed or returned unusable output."""
    pass


class ScoringCapabilityError(CapabilityError):
    """Scoring call failed or its output did not match the ScoreBreakdown shape."""
    pass


class EmbeddingCapabilityError(CapabilityError):
    """Embedding call failed."""
    pass


class LLMProvider(ABC):
    """
    Abstract Interface for AI Service Providers.
    """

    @abstractmethod
    def score_application(self, payload: Dict[str, Any]) -> ScoreBreakdown:
        """
        Score a candidate/job pair.

        Args:
            payload: {'student': {...}, 'job': {...}} as built by the scorer

        Raises:
            ScoringCapabilityError: on API failure or schema-invalid output
        """
        pass

    @abstractmethod
    def generate_embedding(self, text: str) -> List[float]:
        """
        Generate a vector embedding for the given text.

        Raises:
            EmbeddingCapabilityError: on API failure
        """
        pass
