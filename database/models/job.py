import uuid

from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Enum, Index, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from pgvector.sqlalchemy import Vector

from .base import Base, JsonType, EMBEDDING_DIMENSIONS

JOB_STATUSES = ('draft', 'open', 'closed', 'filled')


class Job(Base):
    __tablename__ = 'jobs'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id', ondelete='CASCADE'), nullable=False)

    # Core posting
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(JsonType, default=list)
    skills_required = Column(JsonType, default=list)

    # Logistics
    duration = Column(Text)
    compensation = Column(Text)
    location_type = Column(Text, default='remote')  # remote|hybrid|onsite
    location = Column(Text)
    deadline = Column(TIMESTAMP(timezone=True))

    status = Column(Enum(*JOB_STATUSES, name='job_status'), nullable=False, default='open')

    # Coarse embedding for the whole posting
    embedding = Column(Vector(EMBEDDING_DIMENSIONS))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    company = relationship("Company", back_populates="jobs")
    applications = relationship("Application", back_populates="job")

    __table_args__ = (
        Index('idx_jobs_company', 'company_id'),
        Index('idx_jobs_status_created', 'status', 'created_at'),
        # HNSW index for vector similarity search
        Index(
            'idx_jobs_embedding_hnsw', 'embedding',
            postgresql_using='hnsw',
            postgresql_with={'m': 16, 'ef_construction': 64},
            postgresql_ops={'embedding': 'vector_cosine_ops'},
        ),
    )
