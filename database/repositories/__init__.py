from sqlalchemy.orm import Session

from database.repositories.base import BaseRepository
from database.repositories.profile import ProfileRepository
from database.repositories.student import StudentRepository
from database.repositories.company import CompanyRepository, WorkflowRepository
from database.repositories.job import JobRepository
from database.repositories.application import (
    ApplicationRepository,
    ScoringContext,
    DecisionContext,
    ScoringStats,
)


class Repositories:
    """All repositories bound to one session (one unit of work)."""

    def __init__(self, session: Session):
        self.session = session
        self.profiles = ProfileRepository(session)
        self.students = StudentRepository(session)
        self.companies = CompanyRepository(session)
        self.workflows = WorkflowRepository(session)
        self.jobs = JobRepository(session)
        self.applications = ApplicationRepository(session)

    def flush(self) -> None:
        self.session.flush()


__all__ = [
    'BaseRepository',
    'ProfileRepository',
    'StudentRepository',
    'CompanyRepository',
    'WorkflowRepository',
    'JobRepository',
    'ApplicationRepository',
    'ScoringContext',
    'DecisionContext',
    'ScoringStats',
    'Repositories',
]
