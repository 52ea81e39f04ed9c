import uuid

from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Enum, UniqueConstraint, CheckConstraint, Index, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from .base import Base, JsonType

APPLICATION_STATUSES = ('pending', 'scoring', 'reviewing', 'accepted', 'rejected')

# Statuses only a human (the owning startup) can put an application into
DECISION_STATUSES = ('accepted', 'rejected')


class Application(Base):
    """
    One student's candidacy for one job.

    score and score_breakdown stay null until the scoring worker has run;
    status is 'scoring' exactly while a scoring job is outstanding. All
    writes that touch score and status together must be a single UPDATE.
    """
    __tablename__ = 'applications'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(UUID(as_uuid=True), ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    student_id = Column(UUID(as_uuid=True), ForeignKey('student_profiles.id', ondelete='CASCADE'), nullable=False)

    cover_letter = Column(Text)
    status = Column(Enum(*APPLICATION_STATUSES, name='application_status'), nullable=False, default='pending')

    score = Column(Integer)  # 0-100, rounded mean of the breakdown sub-scores
    score_breakdown = Column(JsonType)

    applied_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    job = relationship("Job", back_populates="applications")
    student = relationship("StudentProfile", back_populates="applications")

    __table_args__ = (
        UniqueConstraint('job_id', 'student_id', name='uq_applications_job_student'),
        CheckConstraint('score IS NULL OR (score >= 0 AND score <= 100)', name='ck_applications_score_range'),
        Index('idx_applications_student', 'student_id', 'applied_at'),
        Index('idx_applications_status_updated', 'status', 'updated_at'),
    )
