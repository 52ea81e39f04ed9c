#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class ProfileResponse(BaseModel):
    """A user profile."""
    id: str
    email: str
    role: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class ProvisionResponse(BaseModel):
    """Result of provisioning a profile."""
    success: bool
    profile: ProfileResponse
    student_profile_id: Optional[str] = None
    company_id: Optional[str] = None


class StudentProfileResponse(BaseModel):
    """A student's own profile."""
    id: str
    user_id: str
    full_name: Optional[str] = None
    university: Optional[str] = None
    major: Optional[str] = None
    graduation_year: Optional[int] = None
    bio: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    has_embedding: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanySummary(BaseModel):
    """Company fields shown next to a job."""
    id: str
    name: str
    logo_url: Optional[str] = None
    industry: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None


class CompanyResponse(BaseModel):
    """
    A company profile.

    user_id and timestamps are only filled for authenticated viewers.
    """
    id: str
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    location: Optional[str] = None
    founded_year: Optional[int] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobSummary(BaseModel):
    """A job in a listing."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                "title": "Frontend Intern",
                "description": "Build our onboarding flow.",
                "skills_required": ["React", "TypeScript"],
                "duration": "6 weeks",
                "compensation": "$2,000",
                "location_type": "remote",
                "location": None,
                "created_at": "2026-02-01T12:00:00",
                "company": {"id": "550e8400-e29b-41d4-a716-446655440000", "name": "Acme"},
                "match_score": 0.82
            }
        }
    )

    id: str
    title: str
    description: str
    skills_required: List[str] = Field(default_factory=list)
    duration: Optional[str] = None
    compensation: Optional[str] = None
    location_type: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    company: Optional[CompanySummary] = None
    match_score: Optional[float] = Field(None, ge=0, le=1)


class JobDetail(JobSummary):
    """Full job posting."""
    company_id: str
    requirements: List[str] = Field(default_factory=list)
    deadline: Optional[datetime] = None
    status: str
    application_count: Optional[int] = None


class JobsResponse(BaseModel):
    """Response containing a list of jobs."""
    success: bool
    count: int
    jobs: List[JobSummary]


class DeleteResponse(BaseModel):
    success: bool
    id: str


class ApplicationJob(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    company: Optional[CompanySummary] = None


class ApplicationStudent(BaseModel):
    id: Optional[str] = None
    user_id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    university: Optional[str] = None


class ApplicationRecord(BaseModel):
    """
    One application.

    score and score_breakdown are null while scoring and always null when
    the viewer is the applicant.
    """
    id: str
    status: str
    cover_letter: Optional[str] = None
    score: Optional[int] = Field(None, ge=0, le=100)
    score_breakdown: Optional[Dict[str, Any]] = None
    applied_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    job: Optional[ApplicationJob] = None
    student: Optional[ApplicationStudent] = None


class ApplicationsResponse(BaseModel):
    """Response containing a list of applications."""
    success: bool
    count: int
    applications: List[ApplicationRecord]


class WorkflowResponse(BaseModel):
    """Company decision-email settings."""
    id: str
    company_id: str
    email_on_decision: bool
    acceptance_email_body: Optional[str] = None
    rejection_email_body: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ScoringStatsResponse(BaseModel):
    """Operator view of the scoring pipeline."""
    success: bool
    counts_by_status: Dict[str, int]
    stuck_scoring: int
    stuck_after_seconds: int
    oldest_scoring_age_seconds: Optional[float] = None
    queues: Dict[str, Dict[str, Any]]
