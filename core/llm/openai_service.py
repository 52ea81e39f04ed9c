"""
OpenAI Service - LLM implementation using the OpenAI API.

Provides structured application scoring and embedding generation against
any OpenAI-compatible endpoint.
"""
from typing import Dict, Any, List, Optional
import json
import logging
import re

import openai
from openai import OpenAI
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity import RetryCallState
from core.llm.interfaces import LLMProvider, ScoringCapabilityError, EmbeddingCapabilityError
from core.llm.schema_models import ScoreBreakdown, SCORE_BREAKDOWN_SCHEMA
from core.llm.system_prompts import SCORING_SYSTEM_PROMPT, SCORING_USER_MESSAGE_TEMPLATE

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Retry helpers
# ---------------------------------------------------------------------------

TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a warning before each retry sleep, including Retry-After info."""
    exc = retry_state.outcome.exception()
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    if isinstance(exc, openai.RateLimitError):
        logger.warning(
            "Rate limit hit (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )
    else:
        logger.warning(
            "Transient API error (attempt %s). Waiting %.1fs before retry. Details: %s",
            retry_state.attempt_number, wait, exc,
        )


def _parse_reset_duration(value: str) -> float:
    """Parse an OpenAI reset-timer header value like '1s', '500ms', '1m30s' into seconds."""
    total = 0.0
    for amount, unit in re.findall(r"([\d.]+)(ms|s|m|h)", value):
        a = float(amount)
        if unit == "ms":
            total += a / 1000
        elif unit == "s":
            total += a
        elif unit == "m":
            total += a * 60
        else:  # h
            total += a * 3600
    return total


def _wait_from_rate_limit_headers(exc: openai.RateLimitError) -> float:
    """Extract the longest declared wait from rate-limit response headers.

    Reads (taking the maximum):
      - ``retry-after``                standard HTTP, plain seconds
      - ``x-ratelimit-reset-requests`` OpenAI request-quota reset duration
      - ``x-ratelimit-reset-tokens``   OpenAI token-quota reset duration

    Returns 0.0 if no usable header is present.
    """
    try:
        headers = exc.response.headers
        candidates: list[float] = []

        retry_after = headers.get("retry-after", "")
        if retry_after:
            try:
                candidates.append(float(retry_after))
            except ValueError:
                pass

        for header in ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens"):
            parsed = _parse_reset_duration(headers.get(header, ""))
            if parsed > 0:
                candidates.append(parsed)

        return max(candidates) if candidates else 0.0
    except (AttributeError, TypeError):
        return 0.0


def _wait_respecting_retry_after(retry_state: RetryCallState) -> float:
    """Return how long tenacity should sleep before the next attempt.

    For ``RateLimitError``: honours server-declared timers via response headers.
    For all other retryable errors: falls back to capped exponential backoff.
    """
    exc = retry_state.outcome.exception()
    if isinstance(exc, openai.RateLimitError):
        wait = _wait_from_rate_limit_headers(exc)
        if wait > 0:
            wait = min(wait, 120)  # safety cap at 2 min
            logger.info("Rate limit headers indicate %.1fs wait.", wait)
            return wait

    # Fallback: exponential backoff 2 → 4 → 8 … capped at 60s
    exp = wait_exponential(multiplier=1, min=2, max=60)
    return exp(retry_state)


def _llm_retry(**kwargs):
    """Return a tenacity @retry decorator for LLM API calls."""
    return retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        wait=_wait_respecting_retry_after,
        stop=stop_after_attempt(6),
        before_sleep=_log_retry,
        reraise=True,
        **kwargs,
    )


class OpenAIService(LLMProvider):
    """
    OpenAI LLM Service.

    Scores applications using JSON Schema structured output and generates
    embeddings. Transient API errors are retried in-process; anything that
    still fails surfaces as a CapabilityError so the job queue can retry
    the whole job.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
        client: Optional[OpenAI] = None
    ):
        if client is None:
            client_kwargs = {}
            if api_key:
                client_kwargs['api_key'] = api_key
            if base_url:
                client_kwargs['base_url'] = base_url
            client = OpenAI(**client_kwargs)

        self.client = client

        self.model_config = model_config or {}
        self.scoring_model = self.model_config.get('scoring_model', 'gpt-5-mini')
        self.embedding_model = self.model_config.get('embedding_model', 'text-embedding-3-small')
        self.embedding_dimensions = self.model_config.get('embedding_dimensions', 1536)
        self.scoring_temperature = self.model_config.get('scoring_temperature')

    @_llm_retry()
    def _complete_structured(self, messages: List[Dict[str, str]]) -> str:
        request = {
            "model": self.scoring_model,
            "messages": messages,
            "response_format": {
                "type": "json_schema",
                "json_schema": SCORE_BREAKDOWN_SCHEMA,
            },
        }
        if self.scoring_temperature is not None:
            request["temperature"] = self.scoring_temperature

        response = self.client.chat.completions.create(**request)
        return response.choices[0].message.content

    def score_application(self, payload: Dict[str, Any]) -> ScoreBreakdown:
        """Score one candidate/job pair and validate the structured result."""
        messages = [
            {"role": "system", "content": SCORING_SYSTEM_PROMPT},
            {"role": "user", "content": SCORING_USER_MESSAGE_TEMPLATE.format(
                payload=json.dumps(payload, ensure_ascii=False, default=str)
            )},
        ]

        try:
            content = self._complete_structured(messages)
        except openai.OpenAIError as e:
            raise ScoringCapabilityError(f"Scoring request failed: {e}") from e
        except (IndexError, AttributeError) as e:
            raise ScoringCapabilityError(f"Scoring response had no content: {e}") from e

        try:
            data = json.loads(content or "")
            breakdown = ScoreBreakdown.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Scoring output failed validation: {e}")
            raise ScoringCapabilityError(f"Invalid scoring output: {e}") from e

        logger.info(
            "Scored with %s: skills=%s experience=%s education=%s",
            self.scoring_model,
            breakdown.skills_match.score,
            breakdown.experience_fit.score,
            breakdown.education_match.score,
        )
        return breakdown

    @_llm_retry()
    def _create_embedding(self, text: str) -> List[float]:
        response = self.client.embeddings.create(
            input=text,
            model=self.embedding_model,
            dimensions=self.embedding_dimensions
        )
        return response.data[0].embedding

    def generate_embedding(self, text: str) -> List[float]:
        """Generate embedding vector for text."""
        try:
            return self._create_embedding(text)
        except openai.OpenAIError as e:
            raise EmbeddingCapabilityError(f"Embedding request failed: {e}") from e
