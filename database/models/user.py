from sqlalchemy import Column, Text, TIMESTAMP, Enum, Index, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from .base import Base

USER_ROLES = ('student', 'startup')


class Profile(Base):
    """
    User identity mirrored from the identity provider.

    The id is supplied by the provider, not generated here.
    """
    __tablename__ = 'profiles'

    id = Column(UUID(as_uuid=True), primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    role = Column(Enum(*USER_ROLES, name='user_role'), nullable=False)
    full_name = Column(Text)
    avatar_url = Column(Text)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    student_profile = relationship("StudentProfile", back_populates="user", uselist=False)
    company = relationship("Company", back_populates="owner", uselist=False)

    __table_args__ = (
        Index('idx_profiles_role', 'role'),
    )
