"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

import hmac
from typing import Optional
from fastapi import Depends, HTTPException, status, Header
from sqlalchemy.orm import Session

from database import get_db
from config import settings
from models import Profile, UserRole


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id")
) -> str:
    """
    Authenticated account id.
    Session handling lives in the upstream auth layer, which forwards the
    verified identity in this header.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return x_user_id.strip()


async def get_current_profile(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
) -> Profile:
    """Profile row of the authenticated account"""
    profile = db.query(Profile).filter(Profile.id == user_id).first()
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )
    return profile


async def require_patient(
    profile: Profile = Depends(get_current_profile)
) -> Profile:
    if profile.role != UserRole.PATIENT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Patient account required"
        )
    return profile


async def require_caretaker(
    profile: Profile = Depends(get_current_profile)
) -> Profile:
    if profile.role != UserRole.CARETAKER:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Caretaker account required"
        )
    return profile


async def verify_cron_secret(
    authorization: Optional[str] = Header(None)
) -> None:
    """
    Shared-secret check for the scheduled job trigger.
    Rejects every call while CRON_SECRET is unset.
    """
    expected = f"Bearer {settings.CRON_SECRET}" if settings.CRON_SECRET else None

    if not expected or not authorization or not hmac.compare_digest(
        authorization.encode(), expected.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_profile_service():
        from services.profile_service import profile_service
        return profile_service

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_adherence_service():
        from services.adherence_service import adherence_service
        return adherence_service

    @staticmethod
    def get_missed_dose_service():
        from services.missed_dose_service import missed_dose_service
        return missed_dose_service


# Service dependency instances
services = ServiceDependency()
