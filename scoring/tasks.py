#!/usr/bin/env python3
"""
Scoring tasks - the worker side of the application-scoring queue.

One job scores one application:

    load application -> skip if gone or already decided
    load job + student -> skip if either is gone
    score via LLM -> single guarded UPDATE (status='reviewing')
    best-effort new-application alert to the startup

Capability errors propagate so RQ retries the job. After the retries are
exhausted the application simply stays in 'scoring'.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from database.database import Database
from database.repositories.application import SCOREABLE_STATUSES
from database.uow import unit_of_work
from core.scorer import ScoringService, StudentScoreInput, JobScoreInput
from notification.service import NotificationService

logger = logging.getLogger(__name__)


class ScoringStatus(str, Enum):
    SCORED = "scored"
    SKIPPED = "skipped"


@dataclass
class ScoringOutcome:
    application_id: str
    status: ScoringStatus
    reason: Optional[str] = None
    score: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'application_id': self.application_id,
            'status': self.status.value,
            'reason': self.reason,
            'score': self.score,
        }


def _as_uuid(value: Any) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


class ScoringWorker:
    """Processes scoring jobs against the database."""

    def __init__(
        self,
        database: Database,
        scoring_service: ScoringService,
        notification_service: Optional[NotificationService] = None,
    ):
        self.database = database
        self.scoring_service = scoring_service
        self.notification_service = notification_service

    def _skip(self, application_id: str, reason: str) -> ScoringOutcome:
        logger.warning(f"Skipping scoring for application {application_id}: {reason}")
        return ScoringOutcome(application_id, ScoringStatus.SKIPPED, reason=reason)

    def process(self, application_id: Any) -> ScoringOutcome:
        app_key = str(application_id)
        app_uuid = _as_uuid(application_id)
        if app_uuid is None:
            return self._skip(app_key, "application_missing")

        # Read phase: gather everything the prompt needs, then release the session
        with unit_of_work(self.database) as repos:
            context = repos.applications.get_scoring_context(app_uuid)
            if context is None:
                return self._skip(app_key, "application_missing")

            application = context.application
            if application.status not in SCOREABLE_STATUSES:
                return self._skip(app_key, "already_decided")
            if context.job is None:
                return self._skip(app_key, "job_missing")
            if context.student is None:
                return self._skip(app_key, "student_missing")

            user = context.student_user
            student_input = StudentScoreInput(
                name=user.full_name if user else None,
                email=user.email if user else None,
                university=context.student.university,
                major=context.student.major,
                graduation_year=context.student.graduation_year,
                bio=context.student.bio,
                skills=list(context.student.skills or []),
                linkedin_url=context.student.linkedin_url,
                github_url=context.student.github_url,
                portfolio_url=context.student.portfolio_url,
                cover_letter=application.cover_letter,
            )
            job_input = JobScoreInput(
                title=context.job.title,
                description=context.job.description,
                company_name=context.company.name if context.company else None,
                requirements=list(context.job.requirements or []),
                skills_required=list(context.job.skills_required or []),
            )
            company_id = context.job.company_id
            company_name = context.company.name if context.company else None

        # No session is held open across the LLM call
        result = self.scoring_service.score(student_input, job_input)

        with unit_of_work(self.database) as repos:
            updated = repos.applications.apply_score(
                app_uuid, result.overall_score, result.storage_breakdown
            )
            company_email = repos.companies.get_owner_email(company_id) if updated else None

        if not updated:
            # A decision landed while the LLM call was in flight
            return self._skip(app_key, "already_decided")

        logger.info(f"Scored application {app_key}: {result.overall_score}")

        self._notify_company(
            app_key,
            company_email=company_email,
            company_name=company_name,
            applicant_name=student_input.name or student_input.email or "A candidate",
            job_title=job_input.title,
            score=result.overall_score,
        )

        return ScoringOutcome(app_key, ScoringStatus.SCORED, score=result.overall_score)

    def _notify_company(self, application_id: str, company_email: Optional[str],
                        company_name: Optional[str], applicant_name: str,
                        job_title: str, score: int) -> None:
        if self.notification_service is None or not company_email:
            return
        try:
            self.notification_service.notify_new_application(
                application_id=application_id,
                company_email=company_email,
                company_name=company_name or "there",
                applicant_name=applicant_name,
                job_title=job_title,
                score=score,
            )
        except Exception as e:
            logger.error(f"Failed to enqueue new-application email for {application_id}: {e}")


# Worker task - must be at module level for RQ
def process_scoring_task(application_id: str) -> Dict[str, Any]:
    """Score one application (called by RQ worker)."""
    from core.app_context import get_process_context

    outcome = get_process_context().scoring_worker.process(application_id)
    return outcome.to_dict()
