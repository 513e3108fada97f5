"""
Profile Service
Account profiles and caretaker notification settings
"""

import logging
from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Session

from database import get_db_context
import models
from models import UserRole
from services.exceptions import ProfileNotFoundError, ProfileAlreadyExistsError


logger = logging.getLogger(__name__)


class ProfileService:
    """
    Service for profile operations
    """

    async def create_profile(
        self,
        profile_id: str,
        email: str,
        role: UserRole = UserRole.PATIENT,
        db: Optional[Session] = None
    ) -> models.Profile:
        """
        Register the profile row for a newly authenticated account

        Args:
            profile_id: Identity issued by the auth provider
            email: Account email
            role: patient or caretaker
            db: Database session

        Returns:
            Created Profile object
        """
        def _create(session: Session) -> models.Profile:
            existing = session.query(models.Profile).filter(
                (models.Profile.id == profile_id) | (models.Profile.email == email)
            ).first()
            if existing:
                raise ProfileAlreadyExistsError(f"Profile for {email} already exists")

            profile = models.Profile(id=profile_id, email=email, role=role)
            session.add(profile)
            session.commit()
            session.refresh(profile)

            logger.info(f"Created {role.value} profile {profile_id}")
            return profile

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def get_profile(
        self,
        profile_id: str,
        db: Optional[Session] = None
    ) -> Optional[models.Profile]:
        """Get profile by ID"""
        def _get(session: Session) -> Optional[models.Profile]:
            return session.query(models.Profile).filter(
                models.Profile.id == profile_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def update_caretaker_settings(
        self,
        profile_id: str,
        caretaker_email: Optional[str],
        notification_window_minutes: int,
        db: Optional[Session] = None
    ) -> models.Profile:
        """
        Set where alerts go and how long to wait before a dose counts as missed.
        An empty caretaker email turns alerts off.
        """
        def _update(session: Session) -> models.Profile:
            profile = session.query(models.Profile).filter(
                models.Profile.id == profile_id
            ).first()
            if not profile:
                raise ProfileNotFoundError(f"Profile {profile_id} not found")

            profile.caretaker_email = (caretaker_email or "").strip() or None
            profile.notification_window_minutes = notification_window_minutes
            profile.updated_at = datetime.utcnow()

            session.commit()
            session.refresh(profile)

            logger.info(
                f"Updated caretaker settings for {profile_id}: "
                f"alerts {'on' if profile.caretaker_email else 'off'}, "
                f"window {notification_window_minutes}m"
            )
            return profile

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def find_patient_for_caretaker(
        self,
        caretaker_email: str,
        db: Optional[Session] = None
    ) -> models.Profile:
        """
        The patient whose alerts are forwarded to this caretaker.

        When several patients list the same caretaker email, the earliest
        created one is returned, so the caretaker dashboard shows only that
        patient. Missed-dose emails still go out for every linked patient.

        Raises:
            ProfileNotFoundError: No patient forwards to this email
        """
        def _find(session: Session) -> models.Profile:
            patient = session.query(models.Profile).filter(
                models.Profile.caretaker_email == caretaker_email,
                models.Profile.role == UserRole.PATIENT
            ).order_by(models.Profile.created_at).first()

            if not patient:
                raise ProfileNotFoundError(f"No patient linked to {caretaker_email}")
            return patient

        if db:
            return _find(db)

        with get_db_context() as session:
            return _find(session)


# Singleton instance
profile_service = ProfileService()
