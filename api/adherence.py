"""
Adherence API Router
Endpoints for marking doses and the patient/caretaker dashboards
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, require_patient, require_caretaker, services
from api.schemas.adherence import (
    MarkTakenRequest,
    MedicationLogResponse,
    MedicationStatusResponse,
    AdherenceSummaryResponse,
    DailyOverview,
)
from api.schemas.medication import MedicationResponse
from models import Profile
from services.exceptions import DoseAlreadyLoggedError, MedicationNotFoundError, ProfileNotFoundError


router = APIRouter(prefix="/adherence", tags=["adherence"])


def _to_overview(overview: Dict[str, Any]) -> DailyOverview:
    patient = overview["patient"]
    return DailyOverview(
        date=overview["date"],
        patient_id=patient.id,
        patient_email=patient.email,
        notification_window_minutes=patient.notification_window_minutes,
        medications=[
            MedicationStatusResponse(
                medication=MedicationResponse.model_validate(s.medication),
                taken_today=s.taken_today,
                status=s.status,
                log_id=s.log_id,
                deadline=s.deadline
            ) for s in overview["medications"]
        ],
        summary=AdherenceSummaryResponse(**overview["summary"].to_dict())
    )


@router.post("/mark-taken", response_model=MedicationLogResponse, status_code=status.HTTP_201_CREATED)
async def mark_taken(
    payload: MarkTakenRequest,
    patient: Profile = Depends(require_patient),
    db: Session = Depends(get_db)
):
    """
    Mark today's dose of a medication as taken
    """
    adherence_service = services.get_adherence_service()

    try:
        return await adherence_service.mark_taken(
            patient_id=patient.id,
            medication_id=payload.medication_id,
            notes=payload.notes,
            db=db
        )
    except MedicationNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Medication not found"
        )
    except DoseAlreadyLoggedError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already marked today"
        )


@router.get("/today", response_model=DailyOverview)
async def get_today(
    patient: Profile = Depends(require_patient),
    db: Session = Depends(get_db)
):
    """
    Patient dashboard: today's medications with taken/pending/missed status
    """
    adherence_service = services.get_adherence_service()

    overview = await adherence_service.get_daily_overview(patient, db=db)
    return _to_overview(overview)


@router.get("/caretaker", response_model=DailyOverview)
async def get_caretaker_view(
    caretaker: Profile = Depends(require_caretaker),
    db: Session = Depends(get_db)
):
    """
    Caretaker dashboard: today's status of the patient who forwards alerts to
    this caretaker's email
    """
    adherence_service = services.get_adherence_service()

    try:
        overview = await adherence_service.get_caretaker_overview(caretaker.email, db=db)
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No patient linked to this caretaker"
        )
    return _to_overview(overview)
