"""
Profile Schemas
Pydantic models for profile and caretaker settings
"""

from typing import Optional, Union, Literal
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, EmailStr

from config import adherence_config
from models import UserRole


class ProfileCreate(BaseModel):
    """Schema for registering the profile of an authenticated account"""
    email: EmailStr
    role: UserRole = UserRole.PATIENT


class CaretakerSettingsUpdate(BaseModel):
    """Schema for caretaker alert settings; an empty email turns alerts off"""
    caretaker_email: Union[EmailStr, Literal[""]] = ""
    notification_window_minutes: int = Field(
        ...,
        ge=adherence_config.NOTIFICATION_WINDOW_MIN,
        le=adherence_config.NOTIFICATION_WINDOW_MAX,
        description="Minutes after the scheduled time before a dose counts as missed"
    )


class ProfileResponse(BaseModel):
    """Schema for profile response"""
    id: str
    email: str
    role: UserRole
    caretaker_email: Optional[str] = None
    notification_window_minutes: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
