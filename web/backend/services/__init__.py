"""Business logic services."""

from .application_service import ApplicationService
from .job_service import JobService
from .profile_service import ProfileService
from .workflow_service import WorkflowService
from .stats_service import StatsService
from .company_service import CompanyService
