import logging
from typing import List, Optional, Dict, Any, Tuple

from sqlalchemy import select, update, delete, func

from database.models import Job, Company, Application
from database.repositories.base import BaseRepository
from core.utils import cosine_similarity_from_distance

logger = logging.getLogger(__name__)

CREATE_FIELDS = (
    'title', 'description', 'requirements', 'skills_required', 'duration',
    'compensation', 'location_type', 'location', 'deadline',
)

UPDATE_FIELDS = CREATE_FIELDS + ('status',)


class JobRepository(BaseRepository):
    def get_by_id(self, job_id: Any) -> Optional[Job]:
        return self.db.get(Job, job_id)

    def get_with_company(self, job_id: Any) -> Optional[Tuple[Job, Company]]:
        stmt = (
            select(Job, Company)
            .join(Company, Job.company_id == Company.id)
            .where(Job.id == job_id)
        )
        row = self.db.execute(stmt).first()
        return (row[0], row[1]) if row else None

    def create(self, company_id: Any, job_data: Dict[str, Any], embedding: Optional[List[float]] = None) -> Job:
        values = {key: job_data.get(key) for key in CREATE_FIELDS if job_data.get(key) is not None}
        values.setdefault('location_type', 'remote')

        job = Job(company_id=company_id, status='open', embedding=embedding, **values)
        self.db.add(job)
        self.db.flush()
        return job

    def update(self, job: Job, fields: Dict[str, Any], embedding: Optional[List[float]] = None) -> Job:
        """Apply the given fields; a None embedding leaves the stored one in place."""
        for key in UPDATE_FIELDS:
            if key in fields:
                setattr(job, key, fields[key])
        if embedding is not None:
            job.embedding = embedding
        self.db.flush()
        return job

    def delete(self, job_id: Any) -> bool:
        """Delete a job together with its applications."""
        self.db.execute(
            delete(Application)
            .where(Application.job_id == job_id)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(
            delete(Job)
            .where(Job.id == job_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def set_embedding(self, job_id: Any, embedding: Optional[List[float]]) -> None:
        self.db.execute(update(Job).where(Job.id == job_id).values(embedding=embedding))

    def list_open(self) -> List[Tuple[Job, Company]]:
        stmt = (
            select(Job, Company)
            .join(Company, Job.company_id == Company.id)
            .where(Job.status == 'open')
            .order_by(Job.created_at.desc())
        )
        return [(row[0], row[1]) for row in self.db.execute(stmt).all()]

    def list_for_company(self, company_id: Any) -> List[Tuple[Job, int]]:
        """Jobs of a company with their application counts, newest first."""
        stmt = (
            select(Job, func.count(Application.id).label('application_count'))
            .outerjoin(Application, Application.job_id == Job.id)
            .where(Job.company_id == company_id)
            .group_by(Job.id)
            .order_by(Job.created_at.desc())
        )
        return [(row[0], int(row[1] or 0)) for row in self.db.execute(stmt).all()]

    def find_matched(
        self,
        student_embedding: List[float],
        student_skills: Optional[List[str]] = None
    ) -> List[Tuple[Job, Company, Optional[float]]]:
        """
        Open jobs ranked by cosine similarity to the student embedding,
        ties broken by the number of overlapping skills.

        Jobs without an embedding sort last with a None similarity.
        Requires pgvector.
        """
        distance = Job.embedding.cosine_distance(student_embedding).label('distance')
        stmt = (
            select(Job, Company, distance)
            .join(Company, Job.company_id == Company.id)
            .where(Job.status == 'open')
            .order_by(distance.asc().nulls_last())
        )
        rows = self.db.execute(stmt).all()

        skills = {s.lower() for s in (student_skills or [])}
        results = []
        for job, company, dist in rows:
            similarity = cosine_similarity_from_distance(dist) if dist is not None else None
            overlap = len(skills & {s.lower() for s in (job.skills_required or [])})
            results.append((job, company, similarity, overlap))

        results.sort(key=lambda r: (
            r[2] is None,
            -(r[2] or 0.0),
            -r[3],
        ))
        return [(job, company, similarity) for job, company, similarity, _ in results]
