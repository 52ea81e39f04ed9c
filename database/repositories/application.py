import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Dict, Any, Tuple

from sqlalchemy import select, update, func

from database.models import (
    Application, Job, Company, CompanyWorkflow, StudentProfile, Profile,
    APPLICATION_STATUSES,
)
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

# Statuses in which the scoring worker may (re)write a score
SCOREABLE_STATUSES = ('scoring', 'reviewing')


@dataclass
class ScoringContext:
    """Everything the scoring worker needs about one application."""
    application: Application
    job: Optional[Job]
    company: Optional[Company]
    student: Optional[StudentProfile]
    student_user: Optional[Profile]


@dataclass
class DecisionContext:
    """Flattened view used by the decision handler (left joins: any part may be missing)."""
    application_id: Any
    status: str
    job_id: Optional[Any]
    job_title: Optional[str]
    company_id: Optional[Any]
    company_name: Optional[str]
    company_owner_id: Optional[Any]
    student_email: Optional[str]
    student_name: Optional[str]
    email_on_decision: bool
    acceptance_email_body: Optional[str]
    rejection_email_body: Optional[str]


@dataclass
class ScoringStats:
    counts_by_status: Dict[str, int]
    stuck_scoring: int
    oldest_scoring_updated_at: Optional[datetime]


class ApplicationRepository(BaseRepository):
    def get_by_id(self, application_id: Any, refresh: bool = False) -> Optional[Application]:
        """refresh=True re-reads the row after a bulk UPDATE in this session."""
        return self.db.get(Application, application_id, populate_existing=refresh)

    def get_by_job_and_student(self, job_id: Any, student_id: Any) -> Optional[Application]:
        stmt = select(Application).where(
            Application.job_id == job_id,
            Application.student_id == student_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create(
        self,
        job_id: Any,
        student_id: Any,
        cover_letter: Optional[str] = None,
        status: str = 'scoring'
    ) -> Application:
        """Insert a new application. IntegrityError propagates on a duplicate (job, student)."""
        application = Application(
            job_id=job_id,
            student_id=student_id,
            cover_letter=cover_letter,
            status=status,
            score=None,
            score_breakdown=None,
        )
        self.db.add(application)
        self.db.flush()
        return application

    def apply_score(self, application_id: Any, score: int, breakdown: Dict[str, Any]) -> bool:
        """
        Write score, breakdown and status='reviewing' in one UPDATE.

        Guarded by status so a decision made while the job was running is
        never overwritten. Returns False when no row was updated.
        """
        stmt = (
            update(Application)
            .where(
                Application.id == application_id,
                Application.status.in_(SCOREABLE_STATUSES)
            )
            .values(
                score=score,
                score_breakdown=breakdown,
                status='reviewing',
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def update_status(
        self,
        application_id: Any,
        status: str,
        clear_score: bool = False,
        expected_status: Optional[str] = None
    ) -> bool:
        """
        Set status (and optionally clear the score) in one UPDATE.

        With expected_status the UPDATE only applies while the row still has
        that status. Returns False when no row was updated.
        """
        if status not in APPLICATION_STATUSES:
            raise ValueError(f"Unknown application status: {status}")

        values: Dict[str, Any] = {'status': status, 'updated_at': func.now()}
        if clear_score:
            values['score'] = None
            values['score_breakdown'] = None

        stmt = update(Application).where(Application.id == application_id)
        if expected_status is not None:
            stmt = stmt.where(Application.status == expected_status)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def get_scoring_context(self, application_id: Any) -> Optional[ScoringContext]:
        application = self.get_by_id(application_id)
        if application is None:
            return None

        job_row = self.db.execute(
            select(Job, Company)
            .outerjoin(Company, Job.company_id == Company.id)
            .where(Job.id == application.job_id)
        ).first()

        student_row = self.db.execute(
            select(StudentProfile, Profile)
            .outerjoin(Profile, StudentProfile.user_id == Profile.id)
            .where(StudentProfile.id == application.student_id)
        ).first()

        return ScoringContext(
            application=application,
            job=job_row[0] if job_row else None,
            company=job_row[1] if job_row else None,
            student=student_row[0] if student_row else None,
            student_user=student_row[1] if student_row else None,
        )

    def get_decision_context(self, application_id: Any) -> Optional[DecisionContext]:
        stmt = (
            select(
                Application.id,
                Application.status,
                Job.id,
                Job.title,
                Company.id,
                Company.name,
                Company.user_id,
                Profile.email,
                Profile.full_name,
                CompanyWorkflow.email_on_decision,
                CompanyWorkflow.acceptance_email_body,
                CompanyWorkflow.rejection_email_body,
            )
            .select_from(Application)
            .outerjoin(Job, Application.job_id == Job.id)
            .outerjoin(Company, Job.company_id == Company.id)
            .outerjoin(StudentProfile, Application.student_id == StudentProfile.id)
            .outerjoin(Profile, StudentProfile.user_id == Profile.id)
            .outerjoin(CompanyWorkflow, CompanyWorkflow.company_id == Company.id)
            .where(Application.id == application_id)
        )
        row = self.db.execute(stmt).first()
        if row is None:
            return None

        return DecisionContext(
            application_id=row[0],
            status=row[1],
            job_id=row[2],
            job_title=row[3],
            company_id=row[4],
            company_name=row[5],
            company_owner_id=row[6],
            student_email=row[7],
            student_name=row[8],
            email_on_decision=bool(row[9]),
            acceptance_email_body=row[10],
            rejection_email_body=row[11],
        )

    def list_for_student(self, student_id: Any) -> List[Tuple[Application, Job, Company]]:
        stmt = (
            select(Application, Job, Company)
            .join(Job, Application.job_id == Job.id)
            .join(Company, Job.company_id == Company.id)
            .where(Application.student_id == student_id)
            .order_by(Application.applied_at.desc())
        )
        return [(r[0], r[1], r[2]) for r in self.db.execute(stmt).all()]

    def list_for_company(self, company_id: Any) -> List[Tuple[Application, Job, StudentProfile, Profile]]:
        stmt = (
            select(Application, Job, StudentProfile, Profile)
            .join(Job, Application.job_id == Job.id)
            .join(StudentProfile, Application.student_id == StudentProfile.id)
            .join(Profile, StudentProfile.user_id == Profile.id)
            .where(Job.company_id == company_id)
            .order_by(Application.applied_at.desc())
        )
        return [(r[0], r[1], r[2], r[3]) for r in self.db.execute(stmt).all()]

    def list_for_job(self, job_id: Any) -> List[Tuple[Application, StudentProfile, Profile]]:
        """Applications of one job, best score first (unscored last)."""
        stmt = (
            select(Application, StudentProfile, Profile)
            .join(StudentProfile, Application.student_id == StudentProfile.id)
            .join(Profile, StudentProfile.user_id == Profile.id)
            .where(Application.job_id == job_id)
            .order_by(Application.score.desc().nulls_last(), Application.applied_at.asc())
        )
        return [(r[0], r[1], r[2]) for r in self.db.execute(stmt).all()]

    def get_scoring_stats(self, stuck_before: datetime) -> ScoringStats:
        """Counts per status plus age information for applications stuck in 'scoring'."""
        counts = {status: 0 for status in APPLICATION_STATUSES}
        rows = self.db.execute(
            select(Application.status, func.count(Application.id)).group_by(Application.status)
        ).all()
        for status, count in rows:
            counts[status] = int(count)

        stuck = self.db.execute(
            select(func.count(Application.id)).where(
                Application.status == 'scoring',
                Application.updated_at < stuck_before
            )
        ).scalar_one()

        oldest = self.db.execute(
            select(func.min(Application.updated_at)).where(Application.status == 'scoring')
        ).scalar_one_or_none()

        return ScoringStats(
            counts_by_status=counts,
            stuck_scoring=int(stuck or 0),
            oldest_scoring_updated_at=oldest,
        )
