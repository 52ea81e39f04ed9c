#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class ProfileCreate(BaseModel):
    """Provision the profile for the authenticated identity."""
    email: str = Field(..., min_length=3, description="Contact email (unique)")
    role: Literal["student", "startup"]
    full_name: Optional[str] = None
    company_name: Optional[str] = Field(None, description="Startups only; defaults to 'My Company'")


class StudentProfileUpdate(BaseModel):
    """Partial update of the acting student's profile."""
    full_name: Optional[str] = None
    university: Optional[str] = None
    major: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1900, le=2100)
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    resume_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None


class JobCreate(BaseModel):
    """Create a job posting for the acting startup's company."""
    title: Optional[str] = None
    description: Optional[str] = None
    requirements: List[str] = Field(default_factory=list)
    skills_required: List[str] = Field(default_factory=list)
    duration: Optional[str] = None
    compensation: Optional[str] = None
    location_type: Optional[Literal["remote", "hybrid", "onsite"]] = None
    location: Optional[str] = None
    deadline: Optional[datetime] = None


class ApplicationCreate(BaseModel):
    """Apply to a job."""
    job_id: Optional[str] = None
    cover_letter: Optional[str] = None


class ApplicationStatusUpdate(BaseModel):
    """Move an application to a new status."""
    status: Optional[str] = None


class WorkflowUpdate(BaseModel):
    """Partial update of the company's decision-email settings."""
    email_on_decision: Optional[bool] = None
    acceptance_email_body: Optional[str] = None
    rejection_email_body: Optional[str] = None


class JobUpdate(BaseModel):
    """Partial update of a job posting; only fields present are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    skills_required: Optional[List[str]] = None
    duration: Optional[str] = None
    compensation: Optional[str] = None
    location_type: Optional[Literal["remote", "hybrid", "onsite"]] = None
    location: Optional[str] = None
    deadline: Optional[datetime] = None
    status: Optional[Literal["draft", "open", "closed", "filled"]] = None


class CompanyUpdate(BaseModel):
    """Partial update of the acting startup's company."""
    name: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    location: Optional[str] = None
    founded_year: Optional[int] = Field(None, ge=1800, le=2100)
