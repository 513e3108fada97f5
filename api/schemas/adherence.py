"""
Adherence Schemas
Pydantic models for dose logging and daily dashboard responses
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict

from api.schemas.medication import MedicationResponse
from models import DoseStatus


# ==================== REQUEST SCHEMAS ====================

class MarkTakenRequest(BaseModel):
    """Schema for marking today's dose as taken"""
    medication_id: int = Field(..., ge=1)
    notes: Optional[str] = Field(None, max_length=500)


# ==================== RESPONSE SCHEMAS ====================

class MedicationLogResponse(BaseModel):
    """Schema for a medication log"""
    id: int
    medication_id: int
    patient_id: str
    date: date
    taken_at: datetime
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MedicationStatusResponse(BaseModel):
    """A medication with today's dose state"""
    medication: MedicationResponse
    taken_today: bool
    status: DoseStatus
    log_id: Optional[int] = None
    deadline: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AdherenceSummaryResponse(BaseModel):
    """Counts for the day"""
    total: int
    taken: int
    remaining: int
    pending: int
    missed: int
    completion_percentage: int = Field(..., ge=0, le=100)
    all_done: bool

    model_config = ConfigDict(from_attributes=True)


class DailyOverview(BaseModel):
    """Patient or caretaker dashboard payload"""
    date: date
    patient_id: str
    patient_email: str
    notification_window_minutes: int
    medications: List[MedicationStatusResponse]
    summary: AdherenceSummaryResponse
