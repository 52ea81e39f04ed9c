"""
Unit tests for the OpenAI service.

Tests verify:
- score_application sends the JSON schema response format
- schema-invalid or unparseable output raises ScoringCapabilityError
- API errors surface as capability errors
- rate-limit header parsing used by the retry policy
"""
import json
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from core.llm.interfaces import ScoringCapabilityError, EmbeddingCapabilityError
from core.llm.openai_service import (
    OpenAIService,
    _parse_reset_duration,
    _wait_from_rate_limit_headers,
)
from core.llm.schema_models import SCORE_BREAKDOWN_SCHEMA

VALID_OUTPUT = {
    "skillsMatch": {"score": 80, "reasoning": "Python and SQL match."},
    "experienceFit": {"score": 70, "reasoning": "Two relevant projects."},
    "educationMatch": {"score": 90, "reasoning": "CS major."},
    "overallRecommendation": "Good fit",
}


def _completion(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


def _service(client, **model_config):
    return OpenAIService(client=client, model_config=model_config or None)


class TestScoreApplication:

    def test_sends_json_schema_and_returns_breakdown(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(json.dumps(VALID_OUTPUT))
        service = _service(client, scoring_model="gpt-test")

        breakdown = service.score_application({"student": {"name": "Ada"}, "job": {"title": "Intern"}})

        assert breakdown.skills_match.score == 80
        assert breakdown.overall_recommendation == "Good fit"

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["response_format"] == {"type": "json_schema", "json_schema": SCORE_BREAKDOWN_SCHEMA}
        assert "temperature" not in kwargs
        user_message = kwargs["messages"][1]["content"]
        assert '"name": "Ada"' in user_message

    def test_temperature_is_sent_when_configured(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(json.dumps(VALID_OUTPUT))
        service = _service(client, scoring_temperature=0.2)

        service.score_application({"student": {}, "job": {}})

        assert client.chat.completions.create.call_args.kwargs["temperature"] == 0.2

    def test_out_of_range_score_is_rejected(self):
        bad = dict(VALID_OUTPUT, skillsMatch={"score": 140, "reasoning": "too high"})
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(json.dumps(bad))

        with pytest.raises(ScoringCapabilityError):
            _service(client).score_application({"student": {}, "job": {}})

    def test_missing_field_is_rejected(self):
        bad = {k: v for k, v in VALID_OUTPUT.items() if k != "educationMatch"}
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(json.dumps(bad))

        with pytest.raises(ScoringCapabilityError):
            _service(client).score_application({"student": {}, "job": {}})

    def test_unparseable_output_is_rejected(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion("not json at all")

        with pytest.raises(ScoringCapabilityError):
            _service(client).score_application({"student": {}, "job": {}})

    def test_empty_content_is_rejected(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _completion(None)

        with pytest.raises(ScoringCapabilityError):
            _service(client).score_application({"student": {}, "job": {}})

    def test_non_transient_api_error_becomes_capability_error(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        response = httpx.Response(400, request=request)
        client = MagicMock()
        client.chat.completions.create.side_effect = openai.BadRequestError(
            "bad request", response=response, body=None
        )

        with pytest.raises(ScoringCapabilityError):
            _service(client).score_application({"student": {}, "job": {}})
        assert client.chat.completions.create.call_count == 1


class TestGenerateEmbedding:

    def test_returns_vector_with_configured_dimensions(self):
        client = MagicMock()
        client.embeddings.create.return_value.data = [MagicMock(embedding=[0.1, 0.2])]
        service = _service(client, embedding_model="embed-test", embedding_dimensions=2)

        assert service.generate_embedding("hello") == [0.1, 0.2]
        client.embeddings.create.assert_called_once_with(
            input="hello", model="embed-test", dimensions=2
        )

    def test_api_error_becomes_capability_error(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/embeddings")
        response = httpx.Response(401, request=request)
        client = MagicMock()
        client.embeddings.create.side_effect = openai.AuthenticationError(
            "no key", response=response, body=None
        )

        with pytest.raises(EmbeddingCapabilityError):
            _service(client).generate_embedding("hello")


class TestRateLimitHeaders:

    @pytest.mark.parametrize("value, expected", [
        ("1s", 1.0),
        ("500ms", 0.5),
        ("1m30s", 90.0),
        ("", 0.0),
    ])
    def test_parse_reset_duration(self, value, expected):
        assert _parse_reset_duration(value) == pytest.approx(expected)

    def test_longest_declared_wait_wins(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        response = httpx.Response(
            429,
            request=request,
            headers={"retry-after": "2", "x-ratelimit-reset-tokens": "6s"},
        )
        exc = openai.RateLimitError("slow down", response=response, body=None)

        assert _wait_from_rate_limit_headers(exc) == pytest.approx(6.0)
