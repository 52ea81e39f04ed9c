from .base import Base, JsonType, EMBEDDING_DIMENSIONS
from .user import Profile, USER_ROLES
from .student import StudentProfile
from .company import Company, CompanyWorkflow
from .job import Job, JOB_STATUSES
from .application import Application, APPLICATION_STATUSES, DECISION_STATUSES

__all__ = [
    'Base',
    'JsonType',
    'EMBEDDING_DIMENSIONS',
    'Profile',
    'USER_ROLES',
    'StudentProfile',
    'Company',
    'CompanyWorkflow',
    'Job',
    'JOB_STATUSES',
    'Application',
    'APPLICATION_STATUSES',
    'DECISION_STATUSES',
]
