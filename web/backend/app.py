#!/usr/bin/env python3
"""
Launchpad API - FastAPI Application

Marketplace backend for student micro-internships: profiles, job postings,
applications with background AI scoring, and decision emails.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError

from core.app_context import AppContext
from .config import get_config
from .exceptions import (
    ServiceException,
    service_exception_handler,
    request_validation_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .routers import (
    applications_router,
    companies_router,
    jobs_router,
    profiles_router,
    student_profiles_router,
    workflows_router,
    stats_router
)
from .routers.rate_limit import add_rate_limit_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the application context on startup, release it on shutdown."""
    owns_context = getattr(app.state, "context", None) is None
    if owns_context:
        config = get_config()
        app.state.context = AppContext.build(config).connect()
        logger.info("Application context ready")

    yield

    if owns_context:
        app.state.context.close()
        app.state.context = None
        logger.info("Application context closed")


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        context: Pre-built context (tests). When omitted the lifespan
            builds one from configuration and closes it on shutdown.
    """
    app = FastAPI(
        title="Launchpad API",
        description="Micro-internship marketplace: jobs, applications and AI scoring",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.context = context

    # Configure rate limiting
    add_rate_limit_handlers(app)

    # Register exception handlers
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include routers
    app.include_router(profiles_router)
    app.include_router(student_profiles_router)
    app.include_router(companies_router)
    app.include_router(jobs_router)
    app.include_router(applications_router)
    app.include_router(workflows_router)
    app.include_router(stats_router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "launchpad-api"}

    return app


app = create_app()


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    logger.info(f"Starting Launchpad API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level=config.logging.level.lower()
    )


if __name__ == "__main__":
    main()
