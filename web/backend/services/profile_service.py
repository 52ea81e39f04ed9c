#!/usr/bin/env python3
"""
Profile service - provisioning and student profile updates.
"""

import logging
import uuid

from sqlalchemy.exc import IntegrityError

from core.app_context import AppContext
from database.uow import unit_of_work
from notification.channels import _mask_email
from ..dependencies import CurrentUser
from ..exceptions import ConflictError, ForbiddenError, NotFoundError
from ..models.requests import ProfileCreate, StudentProfileUpdate
from ..models.responses import ProfileResponse, ProvisionResponse, StudentProfileResponse
from .serializers import profile_response, student_profile_response

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for user profiles."""

    def __init__(self, context: AppContext):
        self.context = context
        self.database = context.database

    def provision(self, user_id: uuid.UUID, data: ProfileCreate) -> ProvisionResponse:
        """
        Create the profile for an identity, plus its student profile or company.

        Both rows are written in one transaction. The welcome email is
        enqueued after commit and its failure is only logged.
        """
        email = data.email.strip()
        try:
            with unit_of_work(self.database) as repos:
                if repos.profiles.get_by_id(user_id) or repos.profiles.get_by_email(email):
                    raise ConflictError("User already registered.")

                profile = repos.profiles.create(user_id, email, data.role, data.full_name)
                student_profile_id = None
                company_id = None
                if data.role == "student":
                    student_profile_id = str(repos.students.create_empty(user_id).id)
                else:
                    company_id = str(repos.companies.create(user_id, data.company_name).id)

                response = ProvisionResponse(
                    success=True,
                    profile=profile_response(profile),
                    student_profile_id=student_profile_id,
                    company_id=company_id,
                )
        except IntegrityError:
            raise ConflictError("User already registered.")

        logger.info(f"Provisioned {data.role} profile {user_id} ({_mask_email(email)})")

        try:
            self.context.notification_service.notify_welcome(email, data.full_name, data.role)
        except Exception as e:
            logger.error(f"Failed to enqueue welcome email for {_mask_email(email)}: {e}")

        return response

    def get_profile(self, user: CurrentUser) -> ProfileResponse:
        with unit_of_work(self.database) as repos:
            profile = repos.profiles.get_by_id(user.id)
            if profile is None:
                raise NotFoundError("Profile not found.")
            return profile_response(profile)

    def get_student_profile(self, user: CurrentUser) -> StudentProfileResponse:
        with unit_of_work(self.database) as repos:
            student = repos.students.get_by_user_id(user.id)
            if student is None:
                raise NotFoundError("Student profile not found.")
            profile = repos.profiles.get_by_id(user.id)
            return student_profile_response(student, profile.full_name if profile else None)

    def update_student_profile(self, user: CurrentUser, data: StudentProfileUpdate) -> StudentProfileResponse:
        """
        Apply a partial update, then refresh the student embedding.

        A failed embedding call keeps the previous embedding.
        """
        if user.role != "student":
            raise ForbiddenError("Only students have a student profile.")

        fields = data.model_dump(exclude_unset=True)
        full_name = fields.pop("full_name", None)

        with unit_of_work(self.database) as repos:
            student = repos.students.get_by_user_id(user.id)
            if student is None:
                raise NotFoundError("Student profile not found.")

            profile = repos.profiles.get_by_id(user.id)
            if full_name is not None and profile is not None:
                profile.full_name = full_name

            repos.students.update_fields(student, fields)
            student_id = student.id
            embedding_input = dict(
                full_name=profile.full_name if profile else None,
                university=student.university,
                major=student.major,
                graduation_year=student.graduation_year,
                bio=student.bio,
                skills=list(student.skills or []),
            )

        embedding = self.context.embedding_service.embed_student(**embedding_input)

        with unit_of_work(self.database) as repos:
            if embedding is not None:
                repos.students.set_embedding(student_id, embedding)
            student = repos.students.get_by_id(student_id)
            return student_profile_response(student, embedding_input["full_name"])
