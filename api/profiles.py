"""
Profile API Router
Endpoints for the signed-in account's profile and alert settings
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, get_current_profile, require_patient, services
from api.schemas.profile import ProfileCreate, ProfileResponse, CaretakerSettingsUpdate
from models import Profile
from services.exceptions import ProfileAlreadyExistsError


router = APIRouter(prefix="/profile", tags=["profile"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    profile_data: ProfileCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Register the profile for a newly signed-up account
    """
    profile_service = services.get_profile_service()

    try:
        return await profile_service.create_profile(
            profile_id=user_id,
            email=str(profile_data.email),
            role=profile_data.role,
            db=db
        )
    except ProfileAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )


@router.get("", response_model=ProfileResponse)
async def get_profile(profile: Profile = Depends(get_current_profile)):
    """
    Profile of the signed-in account
    """
    return profile


@router.put("/caretaker-settings", response_model=ProfileResponse)
async def update_caretaker_settings(
    settings_data: CaretakerSettingsUpdate,
    patient: Profile = Depends(require_patient),
    db: Session = Depends(get_db)
):
    """
    Set the caretaker email for missed-dose alerts and the notification window

    - **caretaker_email**: Email address, or "" to stop alerts
    - **notification_window_minutes**: 15 to 480
    """
    profile_service = services.get_profile_service()

    return await profile_service.update_caretaker_settings(
        profile_id=patient.id,
        caretaker_email=settings_data.caretaker_email or None,
        notification_window_minutes=settings_data.notification_window_minutes,
        db=db
    )
