import logging
from typing import Optional, Any, Dict

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from database.models import Company, CompanyWorkflow, Profile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "My Company"


class CompanyRepository(BaseRepository):
    def get_by_id(self, company_id: Any) -> Optional[Company]:
        return self.db.get(Company, company_id)

    def get_by_user_id(self, user_id: Any) -> Optional[Company]:
        stmt = select(Company).where(Company.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, user_id: Any, name: Optional[str] = None) -> Company:
        company = Company(user_id=user_id, name=(name or "").strip() or DEFAULT_COMPANY_NAME)
        self.db.add(company)
        self.db.flush()
        return company

    def update(self, company: Company, fields: Dict[str, Any]) -> Company:
        """Apply the given fields; a blank name keeps the current one."""
        for key in ('description', 'website', 'industry', 'company_size', 'location', 'founded_year'):
            if key in fields:
                setattr(company, key, fields[key])
        name = (fields.get('name') or '').strip()
        if name:
            company.name = name
        self.db.flush()
        return company

    def get_owner_email(self, company_id: Any) -> Optional[str]:
        """Contact email of the startup user owning the company."""
        stmt = (
            select(Profile.email)
            .join(Company, Company.user_id == Profile.id)
            .where(Company.id == company_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()


class WorkflowRepository(BaseRepository):
    def get_by_company_id(self, company_id: Any) -> Optional[CompanyWorkflow]:
        stmt = select(CompanyWorkflow).where(CompanyWorkflow.company_id == company_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_or_create(
        self,
        company_id: Any,
        acceptance_email_body: Optional[str] = None,
        rejection_email_body: Optional[str] = None
    ) -> CompanyWorkflow:
        """
        Return the company's workflow, creating it with the given bodies.

        The insert runs in a savepoint; losing the race on the unique
        company_id re-reads the row the other request created.
        """
        existing = self.get_by_company_id(company_id)
        if existing:
            return existing

        workflow = CompanyWorkflow(
            company_id=company_id,
            email_on_decision=False,
            acceptance_email_body=acceptance_email_body,
            rejection_email_body=rejection_email_body,
        )
        try:
            with self.db.begin_nested():
                self.db.add(workflow)
                self.db.flush()
        except IntegrityError:
            existing = self.get_by_company_id(company_id)
            if existing is None:
                raise
            logger.info(f"Decision workflow for company {company_id} created concurrently, reusing it")
            return existing

        logger.info(f"Created decision workflow for company {company_id}")
        return workflow

    def update(self, workflow: CompanyWorkflow, fields: Dict[str, Any]) -> CompanyWorkflow:
        for key in ('email_on_decision', 'acceptance_email_body', 'rejection_email_body'):
            if key in fields:
                setattr(workflow, key, fields[key])
        self.db.flush()
        return workflow
