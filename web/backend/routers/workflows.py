#!/usr/bin/env python3
"""
Workflow endpoints - decision-email settings of the acting startup.
"""

from fastapi import APIRouter, Depends

from core.app_context import AppContext
from ..dependencies import CurrentUser, get_context, get_current_user
from ..services.workflow_service import WorkflowService
from ..models.requests import WorkflowUpdate
from ..models.responses import WorkflowResponse

router = APIRouter(prefix="/api/workflows", tags=["workflows"])


@router.get("", response_model=WorkflowResponse)
def get_workflow(
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    """Current settings; created with the default email texts on first access."""
    return WorkflowService(context).get_workflow(user)


@router.patch("", response_model=WorkflowResponse)
def update_workflow(
    body: WorkflowUpdate,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    return WorkflowService(context).update_workflow(user, body)
