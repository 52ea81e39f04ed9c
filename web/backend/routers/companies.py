#!/usr/bin/env python3
"""
Company endpoints - public company pages and the startup's own company.

`me` as the company id addresses the acting startup's company.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from core.app_context import AppContext
from ..dependencies import CurrentUser, get_context, get_current_user, get_optional_user
from ..services.company_service import CompanyService
from ..models.requests import CompanyUpdate
from ..models.responses import CompanyResponse

router = APIRouter(prefix="/api/companies", tags=["companies"])


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(
    company_id: str,
    user: Optional[CurrentUser] = Depends(get_optional_user),
    context: AppContext = Depends(get_context)
):
    """Anonymous callers get the public fields only."""
    return CompanyService(context).get_company(user, company_id)


@router.patch("/{company_id}", response_model=CompanyResponse)
def update_company(
    company_id: str,
    body: CompanyUpdate,
    user: CurrentUser = Depends(get_current_user),
    context: AppContext = Depends(get_context)
):
    return CompanyService(context).update_company(user, company_id, body)
