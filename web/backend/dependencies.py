#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.

The acting user is identified by the upstream identity provider, which
forwards the authenticated user id in the X-User-Id header.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from core.app_context import AppContext
from database.uow import unit_of_work
from .exceptions import UnauthorizedError


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated profile making the request."""
    id: uuid.UUID
    email: str
    role: str
    full_name: Optional[str] = None


def get_context(request: Request) -> AppContext:
    """
    FastAPI dependency returning the process-wide AppContext.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(context: AppContext = Depends(get_context)):
            ...
    """
    return request.app.state.context


def get_user_id(x_user_id: Optional[str] = Header(default=None, alias="X-User-Id")) -> uuid.UUID:
    """Authenticated user id from the identity provider header."""
    if not x_user_id:
        raise UnauthorizedError("Not authenticated.")
    try:
        return uuid.UUID(x_user_id)
    except ValueError:
        raise UnauthorizedError("Not authenticated.")


def get_current_user(
    user_id: uuid.UUID = Depends(get_user_id),
    context: AppContext = Depends(get_context)
) -> CurrentUser:
    """Resolve the header user id to a provisioned profile."""
    with unit_of_work(context.database) as repos:
        profile = repos.profiles.get_by_id(user_id)
        if profile is None:
            raise UnauthorizedError("Not authenticated.")
        return CurrentUser(
            id=profile.id,
            email=profile.email,
            role=profile.role,
            full_name=profile.full_name
        )


def get_optional_user(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    context: AppContext = Depends(get_context)
) -> Optional[CurrentUser]:
    """Like get_current_user, but None for anonymous requests."""
    if not x_user_id:
        return None
    return get_current_user(get_user_id(x_user_id), context)
