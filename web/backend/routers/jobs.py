#!/usr/bin/env python3
"""
Job endpoints - post, browse and match jobs.
"""

import logging
from fastapi import APIRouter, Depends

from core.app_context import AppContext
from ..dependencies import CurrentUser, get_context, get_current_user
from ..services.job_service import JobService
from ..models.requests import JobCreate, JobUpdate
from ..models.responses import ApplicationsResponse, DeleteResponse, JobDetail, JobsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.post("", response_model=JobDetail, status_code=201)
def create_job(
    body: JobCreate,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """Post a job for the acting startup's company."""
    return JobService(context).create_job(user, body)


@router.get("", response_model=JobsResponse)
def list_jobs(context: AppContext = Depends(get_context)):
    """Open jobs, newest first."""
    jobs = JobService(context).list_open_jobs()
    return JobsResponse(success=True, count=len(jobs), jobs=jobs)


@router.get("/matched", response_model=JobsResponse)
def get_matched_jobs(
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """
    Open jobs ranked by similarity to the acting student's profile.

    Each job carries a match_score in [0, 1] once the student profile has
    an embedding.
    """
    jobs = JobService(context).get_matched_jobs(user)
    return JobsResponse(success=True, count=len(jobs), jobs=jobs)


@router.get("/{job_id}", response_model=JobDetail)
def get_job(job_id: str, context: AppContext = Depends(get_context)):
    return JobService(context).get_job(job_id)


@router.get("/{job_id}/applications", response_model=ApplicationsResponse)
def get_job_applications(
    job_id: str,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """Applications to one of the acting startup's jobs, best score first."""
    applications = JobService(context).get_job_applications(user, job_id)
    return ApplicationsResponse(success=True, count=len(applications), applications=applications)


@router.patch("/{job_id}", response_model=JobDetail)
def update_job(
    job_id: str,
    body: JobUpdate,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """Update one of the acting startup's jobs; text changes refresh its embedding."""
    return JobService(context).update_job(user, job_id, body)


@router.delete("/{job_id}", response_model=DeleteResponse)
def delete_job(
    job_id: str,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    JobService(context).delete_job(user, job_id)
    return DeleteResponse(success=True, id=job_id)
