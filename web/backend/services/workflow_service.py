#!/usr/bin/env python3
"""
Workflow service - a company's decision-email settings.
"""

import logging

from core.app_context import AppContext
from database.uow import unit_of_work
from notification.templates import DEFAULT_ACCEPTANCE_EMAIL, DEFAULT_REJECTION_EMAIL
from ..dependencies import CurrentUser
from ..exceptions import ForbiddenError, NotFoundError
from ..models.requests import WorkflowUpdate
from ..models.responses import WorkflowResponse
from .serializers import workflow_response

logger = logging.getLogger(__name__)


class WorkflowService:
    """Service for company decision workflows."""

    def __init__(self, context: AppContext):
        self.database = context.database

    def _get_or_create(self, repos, user: CurrentUser):
        if user.role != "startup":
            raise ForbiddenError("Forbidden.")
        company = repos.companies.get_by_user_id(user.id)
        if company is None:
            raise NotFoundError("Company not found.")
        return repos.workflows.get_or_create(
            company.id,
            acceptance_email_body=DEFAULT_ACCEPTANCE_EMAIL,
            rejection_email_body=DEFAULT_REJECTION_EMAIL,
        )

    def get_workflow(self, user: CurrentUser) -> WorkflowResponse:
        """Current settings, created with defaults on first access."""
        with unit_of_work(self.database) as repos:
            return workflow_response(self._get_or_create(repos, user))

    def update_workflow(self, user: CurrentUser, data: WorkflowUpdate) -> WorkflowResponse:
        """Update only the fields present in the request."""
        fields = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        with unit_of_work(self.database) as repos:
            workflow = self._get_or_create(repos, user)
            repos.workflows.update(workflow, fields)
            repos.session.refresh(workflow)
            logger.info(f"Updated workflow for company {workflow.company_id}: {sorted(fields)}")
            return workflow_response(workflow)
