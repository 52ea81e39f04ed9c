#!/usr/bin/env python3
"""
ORM row -> response model conversion shared by the services.

Call these inside the unit of work that loaded the rows.
"""

from typing import Optional

from database.models import Application, Company, CompanyWorkflow, Job, Profile, StudentProfile
from ..models.responses import (
    ApplicationJob,
    ApplicationRecord,
    ApplicationStudent,
    CompanyResponse,
    CompanySummary,
    JobDetail,
    JobSummary,
    ProfileResponse,
    StudentProfileResponse,
    WorkflowResponse,
)
from ..utils import safe_str


def _id(value) -> Optional[str]:
    return str(value) if value is not None else None


def profile_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=str(profile.id),
        email=profile.email,
        role=profile.role,
        full_name=profile.full_name,
        avatar_url=profile.avatar_url,
    )


def student_profile_response(student: StudentProfile, full_name: Optional[str]) -> StudentProfileResponse:
    return StudentProfileResponse(
        id=str(student.id),
        user_id=str(student.user_id),
        full_name=full_name,
        university=student.university,
        major=student.major,
        graduation_year=student.graduation_year,
        bio=student.bio,
        skills=list(student.skills or []),
        resume_url=student.resume_url,
        linkedin_url=student.linkedin_url,
        github_url=student.github_url,
        portfolio_url=student.portfolio_url,
        has_embedding=student.embedding is not None,
        created_at=student.created_at,
        updated_at=student.updated_at,
    )


def company_summary(company: Optional[Company], detailed: bool = False) -> Optional[CompanySummary]:
    if company is None:
        return None
    summary = CompanySummary(
        id=str(company.id),
        name=safe_str(company.name),
        logo_url=company.logo_url,
        industry=company.industry,
    )
    if detailed:
        summary.website = company.website
        summary.description = company.description
    return summary


def company_response(company: Company, include_private: bool = True) -> CompanyResponse:
    """Anonymous viewers get the public fields only."""
    response = CompanyResponse(
        id=str(company.id),
        name=safe_str(company.name),
        description=company.description,
        logo_url=company.logo_url,
        website=company.website,
        industry=company.industry,
        company_size=company.company_size,
        location=company.location,
        founded_year=company.founded_year,
    )
    if include_private:
        response.user_id = _id(company.user_id)
        response.created_at = company.created_at
        response.updated_at = company.updated_at
    return response


def job_summary(job: Job, company: Optional[Company], match_score: Optional[float] = None) -> JobSummary:
    return JobSummary(
        id=str(job.id),
        title=job.title,
        description=job.description,
        skills_required=list(job.skills_required or []),
        duration=job.duration,
        compensation=job.compensation,
        location_type=job.location_type,
        location=job.location,
        created_at=job.created_at,
        company=company_summary(company),
        match_score=match_score,
    )


def job_detail(job: Job, company: Optional[Company], application_count: Optional[int] = None) -> JobDetail:
    return JobDetail(
        id=str(job.id),
        company_id=str(job.company_id),
        title=job.title,
        description=job.description,
        requirements=list(job.requirements or []),
        skills_required=list(job.skills_required or []),
        duration=job.duration,
        compensation=job.compensation,
        location_type=job.location_type,
        location=job.location,
        deadline=job.deadline,
        status=job.status,
        created_at=job.created_at,
        company=company_summary(company, detailed=True),
        application_count=application_count,
    )


def application_record(
    application: Application,
    job: Optional[Job] = None,
    company: Optional[Company] = None,
    student: Optional[StudentProfile] = None,
    student_user: Optional[Profile] = None,
    include_score: bool = True,
) -> ApplicationRecord:
    """Applicants never see their own score."""
    job_part = None
    if job is not None:
        job_part = ApplicationJob(id=str(job.id), title=job.title, company=company_summary(company))

    student_part = None
    if student is not None:
        student_part = ApplicationStudent(
            id=str(student.id),
            user_id=_id(student.user_id),
            full_name=student_user.full_name if student_user else None,
            email=student_user.email if student_user else None,
            university=student.university,
        )

    return ApplicationRecord(
        id=str(application.id),
        status=application.status,
        cover_letter=application.cover_letter,
        score=application.score if include_score else None,
        score_breakdown=application.score_breakdown if include_score else None,
        applied_at=application.applied_at,
        updated_at=application.updated_at,
        job=job_part,
        student=student_part,
    )


def workflow_response(workflow: CompanyWorkflow) -> WorkflowResponse:
    return WorkflowResponse(
        id=str(workflow.id),
        company_id=str(workflow.company_id),
        email_on_decision=bool(workflow.email_on_decision),
        acceptance_email_body=workflow.acceptance_email_body,
        rejection_email_body=workflow.rejection_email_body,
        created_at=workflow.created_at,
        updated_at=workflow.updated_at,
    )
