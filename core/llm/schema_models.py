"""
Structured-output models for application scoring.

The pydantic models validate what the LLM returns; SCORE_BREAKDOWN_SCHEMA is
the JSON Schema sent with the request (strict mode requires every property
to be listed and additionalProperties to be false).
"""
from typing import Dict, Any

from pydantic import BaseModel, ConfigDict, Field


class SubScore(BaseModel):
    model_config = ConfigDict(extra='forbid')

    score: int = Field(ge=0, le=100)
    reasoning: str


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    skills_match: SubScore = Field(alias='skillsMatch')
    experience_fit: SubScore = Field(alias='experienceFit')
    education_match: SubScore = Field(alias='educationMatch')
    overall_recommendation: str = Field(alias='overallRecommendation')

    def to_storage(self) -> Dict[str, Any]:
        """Shape persisted in applications.score_breakdown (camelCase keys)."""
        return self.model_dump(by_alias=True)


def _sub_score_schema() -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "score": {"type": "integer", "minimum": 0, "maximum": 100},
            "reasoning": {"type": "string"},
        },
        "required": ["score", "reasoning"],
        "additionalProperties": False,
    }


SCORE_BREAKDOWN_SCHEMA = {
    "name": "score_breakdown",
    "strict": True,
    "schema": {
        "type": "object",
        "properties": {
            "skillsMatch": _sub_score_schema(),
            "experienceFit": _sub_score_schema(),
            "educationMatch": _sub_score_schema(),
            "overallRecommendation": {"type": "string"},
        },
        "required": ["skillsMatch", "experienceFit", "educationMatch", "overallRecommendation"],
        "additionalProperties": False,
    },
}
