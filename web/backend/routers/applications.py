#!/usr/bin/env python3
"""
Application endpoints - apply, list, inspect and decide.
"""

import logging
from fastapi import APIRouter, Depends, Request

from core.app_context import AppContext
from ..dependencies import CurrentUser, get_context, get_current_user
from ..services.application_service import ApplicationService
from ..models.requests import ApplicationCreate, ApplicationStatusUpdate
from ..models.responses import ApplicationRecord, ApplicationsResponse
from .rate_limit import limiter, submission_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.post("", response_model=ApplicationRecord, status_code=201)
@limiter.limit(submission_rate_limit)
def submit_application(
    request: Request,
    body: ApplicationCreate,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """
    Apply to a job.

    The application is created in 'scoring' and scored in the background;
    poll GET /api/applications until its status changes.
    """
    return ApplicationService(context).submit(user, body.job_id, body.cover_letter)


@router.get("", response_model=ApplicationsResponse)
def list_applications(
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """
    A student's own applications, or all applications to a startup's jobs.
    """
    applications = ApplicationService(context).list_applications(user)
    return ApplicationsResponse(success=True, count=len(applications), applications=applications)


@router.get("/{application_id}", response_model=ApplicationRecord)
def get_application(
    application_id: str,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """Application detail. Students never see their own score."""
    return ApplicationService(context).get_application(user, application_id)


@router.patch("/{application_id}", response_model=ApplicationRecord)
def update_application_status(
    application_id: str,
    body: ApplicationStatusUpdate,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """
    Move an application to a new status (owning startup only).

    Accepting or rejecting sends the student a decision email when the
    company has decision emails enabled.
    """
    return ApplicationService(context).decide(user, application_id, body.status)
