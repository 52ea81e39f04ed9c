import uuid

from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from pgvector.sqlalchemy import Vector

from .base import Base, JsonType, EMBEDDING_DIMENSIONS


class StudentProfile(Base):
    """Student-side profile, one per student user."""
    __tablename__ = 'student_profiles'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False, unique=True)

    university = Column(Text)
    major = Column(Text)
    graduation_year = Column(Integer)
    bio = Column(Text)
    skills = Column(JsonType, default=list)  # list of skill names

    resume_url = Column(Text)
    linkedin_url = Column(Text)
    github_url = Column(Text)
    portfolio_url = Column(Text)

    # Semantic matching against job embeddings
    embedding = Column(Vector(EMBEDDING_DIMENSIONS))

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("Profile", back_populates="student_profile")
    applications = relationship("Application", back_populates="student")
