"""API route handlers."""

from .applications import router as applications_router
from .jobs import router as jobs_router
from .profiles import router as profiles_router
from .profiles import student_router as student_profiles_router
from .workflows import router as workflows_router
from .stats import router as stats_router
from .companies import router as companies_router
