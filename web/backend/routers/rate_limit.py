#!/usr/bin/env python3
"""
Request rate limiting (slowapi).
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from ..config import get_config

limiter = Limiter(key_func=get_remote_address)


def submission_rate_limit() -> str:
    return get_config().web.submission_rate_limit


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": f"Rate limit exceeded: {exc.detail}",
            "type": "RateLimitExceeded"
        }
    )
