import logging
from typing import Optional, Any

from sqlalchemy import select

from database.models import Profile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ProfileRepository(BaseRepository):
    def get_by_id(self, user_id: Any) -> Optional[Profile]:
        return self.db.get(Profile, user_id)

    def get_by_email(self, email: str) -> Optional[Profile]:
        stmt = select(Profile).where(Profile.email == email)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, user_id: Any, email: str, role: str, full_name: Optional[str] = None) -> Profile:
        profile = Profile(id=user_id, email=email, role=role, full_name=full_name)
        self.db.add(profile)
        self.db.flush()
        return profile
