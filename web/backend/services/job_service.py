#!/usr/bin/env python3
"""
Job service - business logic for job postings and matching.
"""

import logging
from typing import Any, List

from core.app_context import AppContext
from database.uow import unit_of_work
from ..dependencies import CurrentUser
from ..exceptions import ForbiddenError, NotFoundError, ValidationError
from ..models.requests import JobCreate, JobUpdate
from ..models.responses import ApplicationRecord, JobDetail, JobSummary
from ..utils import parse_uuid
from .serializers import application_record, job_detail, job_summary

logger = logging.getLogger(__name__)

# Fields that feed the job embedding text
EMBEDDING_FIELDS = ("title", "description", "requirements", "skills_required")


class JobService:
    """Service for managing job postings."""

    def __init__(self, context: AppContext):
        self.context = context
        self.database = context.database

    def create_job(self, user: CurrentUser, data: JobCreate) -> JobDetail:
        """
        Create an open job for the acting startup's company.

        The embedding is computed before the transaction; if it fails the
        job is stored without one.
        """
        if user.role != "startup":
            raise ForbiddenError("Only startups can post jobs.")

        title = (data.title or "").strip()
        description = (data.description or "").strip()
        if not title or not description:
            raise ValidationError("Title and description are required.")

        with unit_of_work(self.database) as repos:
            company = repos.companies.get_by_user_id(user.id)
            if company is None:
                raise NotFoundError("Company not found.")
            company_id = company.id

        embedding = self.context.embedding_service.embed_job(
            title=title,
            description=description,
            requirements=data.requirements,
            skills_required=data.skills_required,
        )

        job_data = data.model_dump()
        job_data.update(title=title, description=description)

        with unit_of_work(self.database) as repos:
            job = repos.jobs.create(company_id, job_data, embedding=embedding)
            company = repos.companies.get_by_id(company_id)
            logger.info(f"Created job {job.id} '{title}' for company {company_id}")
            return job_detail(job, company, application_count=0)

    def list_open_jobs(self) -> List[JobSummary]:
        """Open jobs, newest first."""
        with unit_of_work(self.database) as repos:
            return [job_summary(job, company) for job, company in repos.jobs.list_open()]

    def get_job(self, job_id: Any) -> JobDetail:
        job_uuid = parse_uuid(job_id, "job_id")
        with unit_of_work(self.database) as repos:
            row = repos.jobs.get_with_company(job_uuid)
            if row is None:
                raise NotFoundError("Job not found.")
            job, company = row
            return job_detail(job, company)

    def _get_owned_job(self, repos, user: CurrentUser, job_uuid):
        row = repos.jobs.get_with_company(job_uuid)
        if row is None:
            raise NotFoundError("Job not found.")
        job, company = row
        if company.user_id != user.id:
            raise ForbiddenError("Forbidden.")
        return job, company

    def update_job(self, user: CurrentUser, job_id: Any, data: JobUpdate) -> JobDetail:
        """
        Update a job owned by the acting startup.

        When title, description, requirements or skills change, the
        embedding is recomputed from the merged posting. A failed embedding
        call keeps the stored vector.
        """
        if user.role != "startup":
            raise ForbiddenError("Forbidden.")
        job_uuid = parse_uuid(job_id, "job_id")

        fields = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        for key in ("title", "description"):
            if key in fields:
                fields[key] = fields[key].strip()
                if not fields[key]:
                    raise ValidationError("Title and description are required.")

        with unit_of_work(self.database) as repos:
            job, _ = self._get_owned_job(repos, user, job_uuid)
            merged = {
                key: fields.get(key, getattr(job, key))
                for key in EMBEDDING_FIELDS
            }

        embedding = None
        if any(key in fields for key in EMBEDDING_FIELDS):
            embedding = self.context.embedding_service.embed_job(**merged)

        with unit_of_work(self.database) as repos:
            job, company = self._get_owned_job(repos, user, job_uuid)
            repos.jobs.update(job, fields, embedding=embedding)
            logger.info(f"Updated job {job_uuid}: {sorted(fields)}")
            return job_detail(job, company)

    def delete_job(self, user: CurrentUser, job_id: Any) -> None:
        """Delete a job owned by the acting startup, with its applications."""
        if user.role != "startup":
            raise ForbiddenError("Forbidden.")
        job_uuid = parse_uuid(job_id, "job_id")

        with unit_of_work(self.database) as repos:
            self._get_owned_job(repos, user, job_uuid)
            repos.jobs.delete(job_uuid)
        logger.info(f"Deleted job {job_uuid}")

    def get_matched_jobs(self, user: CurrentUser) -> List[JobSummary]:
        """
        Open jobs ranked for the acting student.

        Without a student embedding this is the plain open-jobs listing.
        """
        if user.role != "student":
            raise ForbiddenError("Only students have matched jobs.")

        with unit_of_work(self.database) as repos:
            student = repos.students.get_by_user_id(user.id)
            if student is None:
                return []

            if student.embedding is None:
                return [job_summary(job, company) for job, company in repos.jobs.list_open()]

            embedding = [float(x) for x in student.embedding]
            matched = repos.jobs.find_matched(embedding, list(student.skills or []))
            return [
                job_summary(job, company, match_score=similarity)
                for job, company, similarity in matched
            ]

    def get_job_applications(self, user: CurrentUser, job_id: Any) -> List[ApplicationRecord]:
        """Applications to one job, best score first. Owner only."""
        if user.role != "startup":
            raise ForbiddenError("Forbidden.")
        job_uuid = parse_uuid(job_id, "job_id")

        with unit_of_work(self.database) as repos:
            row = repos.jobs.get_with_company(job_uuid)
            if row is None:
                raise NotFoundError("Job not found.")
            job, company = row
            if company.user_id != user.id:
                raise ForbiddenError("Forbidden.")

            return [
                application_record(application, job=job, company=company, student=student, student_user=profile)
                for application, student, profile in repos.applications.list_for_job(job.id)
            ]
