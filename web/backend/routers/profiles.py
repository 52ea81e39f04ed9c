#!/usr/bin/env python3
"""
Profile endpoints - provisioning and the acting user's profiles.
"""

import uuid
from fastapi import APIRouter, Depends

from core.app_context import AppContext
from ..dependencies import CurrentUser, get_context, get_current_user, get_user_id
from ..services.profile_service import ProfileService
from ..models.requests import ProfileCreate, StudentProfileUpdate
from ..models.responses import ProfileResponse, ProvisionResponse, StudentProfileResponse

router = APIRouter(prefix="/api/profiles", tags=["profiles"])
student_router = APIRouter(prefix="/api/student-profiles", tags=["profiles"])


@router.post("", response_model=ProvisionResponse, status_code=201)
def provision_profile(
    body: ProfileCreate,
    user_id: uuid.UUID = Depends(get_user_id),
    context: AppContext = Depends(get_context)
):
    """
    Provision the profile for the authenticated identity.

    Students get an empty student profile, startups a company. A welcome
    email is queued.
    """
    return ProfileService(context).provision(user_id, body)


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    return ProfileService(context).get_profile(user)


@student_router.get("/me", response_model=StudentProfileResponse)
def get_my_student_profile(
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    return ProfileService(context).get_student_profile(user)


@student_router.patch("/me", response_model=StudentProfileResponse)
def update_my_student_profile(
    body: StudentProfileUpdate,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """Update the acting student's profile and refresh its embedding."""
    return ProfileService(context).update_student_profile(user, body)
