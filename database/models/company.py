import uuid

from sqlalchemy import Column, Integer, Text, Boolean, TIMESTAMP, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from .base import Base


class Company(Base):
    """Startup company, owned by exactly one startup user."""
    __tablename__ = 'companies'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False, unique=True)

    name = Column(Text, nullable=False)
    description = Column(Text)
    logo_url = Column(Text)
    website = Column(Text)
    industry = Column(Text)
    company_size = Column(Text)
    location = Column(Text)
    founded_year = Column(Integer)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    owner = relationship("Profile", back_populates="company")
    jobs = relationship("Job", back_populates="company")
    workflow = relationship("CompanyWorkflow", back_populates="company", uselist=False)


class CompanyWorkflow(Base):
    """
    Per-company settings for decision emails.

    Bodies are plain text; a null or blank body falls back to the built-in
    template for that decision.
    """
    __tablename__ = 'company_workflows'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(UUID(as_uuid=True), ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, unique=True)

    email_on_decision = Column(Boolean, nullable=False, default=False)
    acceptance_email_body = Column(Text)
    rejection_email_body = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    company = relationship("Company", back_populates="workflow")
