"""
Medication Schemas
Pydantic models for medication-related API requests and responses
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator, computed_field

from config import adherence_config
from models import MedicationFrequency
from tools.formatting import format_frequency, format_time, normalize_time, sanitize


# ==================== REQUEST SCHEMAS ====================

class MedicationCreate(BaseModel):
    """Schema for adding a medication"""
    name: str = Field(..., min_length=1, max_length=adherence_config.MEDICATION_NAME_MAX_LENGTH)
    dosage: str = Field(..., min_length=1, max_length=adherence_config.MEDICATION_DOSAGE_MAX_LENGTH)
    frequency: MedicationFrequency
    scheduled_time: str = Field(
        ...,
        min_length=1,
        pattern=adherence_config.SCHEDULED_TIME_PATTERN,
        description="24-hour HH:MM"
    )
    notes: Optional[str] = Field(None, max_length=adherence_config.MEDICATION_NOTES_MAX_LENGTH)

    @field_validator("name", "dosage")
    @classmethod
    def clean_required_text(cls, value: str) -> str:
        cleaned = sanitize(value)
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return sanitize(value) or None

    @field_validator("scheduled_time")
    @classmethod
    def pad_time(cls, value: str) -> str:
        return normalize_time(value)


# ==================== RESPONSE SCHEMAS ====================

class MedicationResponse(BaseModel):
    """Schema for medication response"""
    id: int
    patient_id: str
    name: str
    dosage: str
    frequency: MedicationFrequency
    scheduled_time: str
    notes: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def frequency_label(self) -> str:
        return format_frequency(self.frequency)

    @computed_field
    @property
    def display_time(self) -> str:
        try:
            return format_time(self.scheduled_time)
        except ValueError:
            return self.scheduled_time


class MedicationList(BaseModel):
    """List of medications"""
    medications: List[MedicationResponse]
    total: int
