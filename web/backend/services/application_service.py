#!/usr/bin/env python3
"""
Application service - submission and decision handling.

Both handlers commit first and enqueue second: a queued job must never
reference a row that is not yet visible to the worker. Enqueue failures
after commit are logged and do not fail the request.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.exc import IntegrityError

from core.app_context import AppContext
from database.models import APPLICATION_STATUSES, DECISION_STATUSES
from database.repositories import DecisionContext
from database.uow import unit_of_work
from notification.channels import _mask_email
from ..dependencies import CurrentUser
from ..exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..models.responses import ApplicationRecord
from ..utils import parse_uuid
from .serializers import application_record

logger = logging.getLogger(__name__)


def is_transition_allowed(policy: str, current: str, new: str) -> bool:
    """
    permissive: any status may move to any status.
    strict: accepted and rejected are final.
    """
    if policy == "permissive" or current == new:
        return True
    return current not in DECISION_STATUSES


def should_send_decision_email(previous: str, new: str, context: DecisionContext) -> bool:
    """Exactly one decision email per actual change into accepted/rejected."""
    return (
        new in DECISION_STATUSES
        and new != previous
        and context.email_on_decision
        and bool(context.student_email)
    )


class ApplicationService:
    """Service for the application lifecycle."""

    def __init__(self, context: AppContext):
        self.context = context
        self.database = context.database

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(self, user: CurrentUser, job_id: Optional[str], cover_letter: Optional[str] = None) -> ApplicationRecord:
        """
        Create an application in 'scoring' and enqueue its scoring job.

        Raises:
            ForbiddenError: acting user is not a student
            ValidationError: job_id missing or malformed
            NotFoundError: student profile or job does not exist
            ConflictError: the student already applied to this job
        """
        if user.role != "student":
            raise ForbiddenError("Only students can apply to jobs.")
        if not job_id:
            raise ValidationError("Job ID is required.")
        job_uuid = parse_uuid(job_id, "job_id")

        try:
            with unit_of_work(self.database) as repos:
                student = repos.students.get_by_user_id(user.id)
                if student is None:
                    raise NotFoundError("Student profile not found.")

                job = repos.jobs.get_by_id(job_uuid)
                if job is None:
                    raise NotFoundError("Job not found.")

                if repos.applications.get_by_job_and_student(job.id, student.id) is not None:
                    raise ConflictError("Already applied.")

                application = repos.applications.create(
                    job_id=job.id,
                    student_id=student.id,
                    cover_letter=cover_letter,
                    status="scoring",
                )
                application_id = application.id
                record = application_record(application, job=job, include_score=False)
        except IntegrityError:
            # Lost the race against a concurrent submission for the same (job, student)
            raise ConflictError("Already applied.")

        logger.info(f"Application {application_id} created for job {job_uuid}")

        try:
            self.context.scoring_queue.enqueue_application(application_id)
        except Exception as e:
            logger.error(f"Failed to enqueue scoring for application {application_id}: {e}")

        return record

    # ------------------------------------------------------------------
    # Decision
    # ------------------------------------------------------------------

    def decide(self, user: CurrentUser, application_id: Any, new_status: Optional[str]) -> ApplicationRecord:
        """
        Move an application to a new status on behalf of the owning startup.

        Moving to 'scoring' is a re-score request: the score is cleared in
        the same UPDATE and a scoring job is enqueued after commit.

        Raises:
            ValidationError: status missing or unknown
            ForbiddenError: acting user does not own the job's company
            NotFoundError: application does not exist
            InvalidTransitionError: transition rejected by the configured policy
            ConflictError: a concurrent request moved the application elsewhere

        The UPDATE is conditional on the status that was read; a decision
        email follows only the request whose UPDATE applied.
        """
        if not new_status:
            raise ValidationError("Status is required.")
        if new_status not in APPLICATION_STATUSES:
            raise ValidationError("Invalid status.")
        if user.role != "startup":
            raise ForbiddenError("Only the hiring startup can update an application.")
        app_uuid = parse_uuid(application_id, "application_id")

        policy = self.context.config.applications.transition_policy

        with unit_of_work(self.database) as repos:
            decision = repos.applications.get_decision_context(app_uuid)
            if decision is None:
                raise NotFoundError("Application not found.")
            if decision.company_owner_id != user.id:
                raise ForbiddenError("Forbidden.")

            previous = decision.status
            if not is_transition_allowed(policy, previous, new_status):
                raise InvalidTransitionError(
                    f"Cannot move application from '{previous}' to '{new_status}'."
                )

            rescore = new_status == "scoring"
            changed = repos.applications.update_status(
                app_uuid, new_status, clear_score=rescore, expected_status=previous
            )
            if not changed:
                # Another request moved the row after it was read
                current = repos.applications.get_by_id(app_uuid, refresh=True)
                if current is None:
                    raise NotFoundError("Application not found.")
                if current.status != new_status:
                    raise ConflictError("Application was updated by another request. Please retry.")
                previous = current.status

            context = repos.applications.get_scoring_context(app_uuid)
            context.application = repos.applications.get_by_id(app_uuid, refresh=True)
            record = application_record(
                context.application,
                job=context.job,
                company=context.company,
                student=context.student,
                student_user=context.student_user,
            )

        logger.info(f"Application {app_uuid}: {previous} -> {new_status}")

        if rescore and changed:
            try:
                self.context.scoring_queue.enqueue_application(app_uuid)
            except Exception as e:
                logger.error(f"Failed to enqueue re-scoring for application {app_uuid}: {e}")

        if should_send_decision_email(previous, new_status, decision):
            self._enqueue_decision_email(decision, new_status)
        elif new_status in DECISION_STATUSES and new_status != previous:
            logger.info(
                f"Decision email not sent for {app_uuid}: "
                f"email_on_decision={'enabled' if decision.email_on_decision else 'disabled'}, "
                f"student_email={'found' if decision.student_email else 'missing'}"
            )

        return record

    def _enqueue_decision_email(self, decision: DecisionContext, status: str) -> None:
        body = decision.acceptance_email_body if status == "accepted" else decision.rejection_email_body
        try:
            self.context.notification_service.notify_decision(
                student_email=decision.student_email,
                student_name=decision.student_name or "there",
                job_title=decision.job_title or "the role",
                company_name=decision.company_name or "Company",
                status=status,
                email_body=body,
            )
        except Exception as e:
            logger.error(
                f"Failed to enqueue decision email to {_mask_email(decision.student_email)}: {e}"
            )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_applications(self, user: CurrentUser) -> List[ApplicationRecord]:
        """A student's own applications, or every application to a startup's jobs."""
        with unit_of_work(self.database) as repos:
            if user.role == "student":
                student = repos.students.get_by_user_id(user.id)
                if student is None:
                    return []
                return [
                    application_record(application, job=job, company=company, include_score=False)
                    for application, job, company in repos.applications.list_for_student(student.id)
                ]

            company = repos.companies.get_by_user_id(user.id)
            if company is None:
                return []
            return [
                application_record(application, job=job, student=student, student_user=profile)
                for application, job, student, profile in repos.applications.list_for_company(company.id)
            ]

    def get_application(self, user: CurrentUser, application_id: Any) -> ApplicationRecord:
        app_uuid = parse_uuid(application_id, "application_id")

        with unit_of_work(self.database) as repos:
            context = repos.applications.get_scoring_context(app_uuid)
            if context is None:
                raise NotFoundError("Application not found.")

            if user.role == "student":
                if context.student is None or context.student.user_id != user.id:
                    raise ForbiddenError("Forbidden.")
            elif context.company is None or context.company.user_id != user.id:
                raise ForbiddenError("Forbidden.")

            return application_record(
                context.application,
                job=context.job,
                company=context.company,
                student=context.student,
                student_user=context.student_user,
                include_score=user.role != "student",
            )
