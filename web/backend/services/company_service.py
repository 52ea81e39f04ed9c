#!/usr/bin/env python3
"""
Company service - startup company profiles.
"""

import logging
from typing import Any, Optional

from core.app_context import AppContext
from database.uow import unit_of_work
from ..dependencies import CurrentUser
from ..exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from ..models.requests import CompanyUpdate
from ..models.responses import CompanyResponse
from ..utils import parse_uuid
from .serializers import company_response

logger = logging.getLogger(__name__)

# Path alias for the acting startup's own company
ME = "me"


class CompanyService:
    """Service for company profiles."""

    def __init__(self, context: AppContext):
        self.database = context.database

    def _find(self, repos, user: Optional[CurrentUser], company_id: Any):
        if company_id == ME:
            if user is None:
                raise UnauthorizedError("Not authenticated.")
            company = repos.companies.get_by_user_id(user.id)
        else:
            company = repos.companies.get_by_id(parse_uuid(company_id, "company_id"))
        if company is None:
            raise NotFoundError("Company not found.")
        return company

    def get_company(self, user: Optional[CurrentUser], company_id: Any) -> CompanyResponse:
        """Public fields for anonymous viewers, everything otherwise."""
        with unit_of_work(self.database) as repos:
            company = self._find(repos, user, company_id)
            return company_response(company, include_private=user is not None)

    def update_company(self, user: CurrentUser, company_id: Any, data: CompanyUpdate) -> CompanyResponse:
        """Owner-only partial update."""
        if user.role != "startup":
            raise ForbiddenError("Forbidden.")

        fields = data.model_dump(exclude_unset=True)
        with unit_of_work(self.database) as repos:
            company = self._find(repos, user, company_id)
            if company.user_id != user.id:
                raise ForbiddenError("Forbidden.")
            repos.companies.update(company, fields)
            repos.session.refresh(company)
            logger.info(f"Updated company {company.id}: {sorted(fields)}")
            return company_response(company)
