"""
Embedding helpers for jobs and student profiles.

Both sides are rendered to a small labelled text block before embedding so
that job and student vectors live in a comparable space.
"""
import logging
from typing import Any, Iterable, List, Optional

from core.llm.interfaces import LLMProvider, EmbeddingCapabilityError

logger = logging.getLogger(__name__)

NOT_PROVIDED = "Not provided"
NONE_LISTED = "None listed"


def _compact_list(items: Optional[Iterable[str]]) -> str:
    items = list(items or [])
    return ", ".join(items) if items else NONE_LISTED


def _or_default(value: Any) -> str:
    if value is None or value == "":
        return NOT_PROVIDED
    return str(value)


def build_student_embedding_input(
    full_name: Optional[str] = None,
    university: Optional[str] = None,
    major: Optional[str] = None,
    graduation_year: Optional[int] = None,
    bio: Optional[str] = None,
    skills: Optional[List[str]] = None,
) -> str:
    return "\n".join([
        "Student Profile",
        f"Name: {_or_default(full_name)}",
        f"University: {_or_default(university)}",
        f"Major: {_or_default(major)}",
        f"Graduation: {_or_default(graduation_year)}",
        f"Skills: {_compact_list(skills)}",
        f"Bio: {_or_default(bio)}",
    ])


def build_job_embedding_input(
    title: str,
    description: str,
    requirements: Optional[List[str]] = None,
    skills_required: Optional[List[str]] = None,
) -> str:
    return "\n".join([
        "Job Posting",
        f"Title: {title}",
        f"Description: {description}",
        f"Requirements: {_compact_list(requirements)}",
        f"Required Skills: {_compact_list(skills_required)}",
    ])


class EmbeddingService:
    """
    Computes job and student embeddings.

    Embeddings are an enrichment: a failed call is logged and None is
    returned so the caller can store the row without a vector.
    """

    def __init__(self, llm: LLMProvider):
        self.llm = llm

    def _embed(self, text: str, kind: str) -> Optional[List[float]]:
        try:
            return self.llm.generate_embedding(text)
        except EmbeddingCapabilityError as e:
            logger.warning(f"Could not compute {kind} embedding, storing without one: {e}")
            return None

    def embed_job(self, title: str, description: str,
                  requirements: Optional[List[str]] = None,
                  skills_required: Optional[List[str]] = None) -> Optional[List[float]]:
        text = build_job_embedding_input(title, description, requirements, skills_required)
        return self._embed(text, "job")

    def embed_student(self, **fields) -> Optional[List[float]]:
        text = build_student_embedding_input(**fields)
        return self._embed(text, "student")
