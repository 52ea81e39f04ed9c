#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring inputs and results.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from core.llm.schema_models import ScoreBreakdown


@dataclass
class StudentScoreInput:
    """Candidate side of a scoring request."""
    name: Optional[str] = None
    email: Optional[str] = None
    university: Optional[str] = None
    major: Optional[str] = None
    graduation_year: Optional[int] = None
    bio: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    cover_letter: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'email': self.email,
            'university': self.university,
            'major': self.major,
            'graduationYear': self.graduation_year,
            'bio': self.bio,
            'skills': list(self.skills or []),
            'linkedinUrl': self.linkedin_url,
            'githubUrl': self.github_url,
            'portfolioUrl': self.portfolio_url,
            'coverLetter': self.cover_letter,
        }


@dataclass
class JobScoreInput:
    """Job side of a scoring request."""
    title: str
    description: str
    company_name: Optional[str] = None
    requirements: List[str] = field(default_factory=list)
    skills_required: List[str] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'description': self.description,
            'requirements': list(self.requirements or []),
            'skillsRequired': list(self.skills_required or []),
            'companyName': self.company_name,
        }


@dataclass
class ScoringResult:
    """Validated breakdown plus the rounded overall score."""
    breakdown: ScoreBreakdown
    overall_score: int

    @property
    def storage_breakdown(self) -> Dict[str, Any]:
        """Breakdown as persisted on the application (camelCase keys)."""
        return self.breakdown.to_storage()
