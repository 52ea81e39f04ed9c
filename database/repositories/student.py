import logging
from typing import Optional, Any, Dict, List

from sqlalchemy import select, update

from database.models import StudentProfile
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'university', 'major', 'graduation_year', 'bio', 'skills',
    'resume_url', 'linkedin_url', 'github_url', 'portfolio_url',
)


class StudentRepository(BaseRepository):
    def get_by_id(self, student_id: Any) -> Optional[StudentProfile]:
        return self.db.get(StudentProfile, student_id)

    def get_by_user_id(self, user_id: Any) -> Optional[StudentProfile]:
        stmt = select(StudentProfile).where(StudentProfile.user_id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def create_empty(self, user_id: Any) -> StudentProfile:
        student = StudentProfile(user_id=user_id, skills=[])
        self.db.add(student)
        self.db.flush()
        return student

    def update_fields(self, student: StudentProfile, fields: Dict[str, Any]) -> StudentProfile:
        for key, value in fields.items():
            if key not in EDITABLE_FIELDS:
                raise ValueError(f"Field not editable: {key}")
            setattr(student, key, value)
        self.db.flush()
        return student

    def set_embedding(self, student_id: Any, embedding: Optional[List[float]]) -> None:
        stmt = (
            update(StudentProfile)
            .where(StudentProfile.id == student_id)
            .values(embedding=embedding)
        )
        self.db.execute(stmt)
