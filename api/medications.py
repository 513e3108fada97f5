"""
Medications API Router
Endpoints for a patient's medication list
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, require_patient, services
from api.schemas.medication import MedicationCreate, MedicationResponse, MedicationList
from models import Profile
from services.exceptions import MedicationNotFoundError


router = APIRouter(prefix="/medications", tags=["medications"])


@router.get("/", response_model=MedicationList)
async def list_medications(
    patient: Profile = Depends(require_patient),
    db: Session = Depends(get_db)
):
    """
    Active medications of the signed-in patient, ordered by scheduled time
    """
    medication_service = services.get_medication_service()

    medications = await medication_service.get_active_medications(patient.id, db=db)

    return MedicationList(
        medications=[MedicationResponse.model_validate(m) for m in medications],
        total=len(medications)
    )


@router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_data: MedicationCreate,
    patient: Profile = Depends(require_patient),
    db: Session = Depends(get_db)
):
    """
    Add a medication

    - **name**: Medication name (max 100)
    - **dosage**: Dosage, e.g. "500mg" (max 50)
    - **frequency**: once_daily, twice_daily, three_times_daily or as_needed
    - **scheduled_time**: HH:MM, 24-hour
    """
    medication_service = services.get_medication_service()

    return await medication_service.add_medication(
        patient_id=patient.id,
        name=medication_data.name,
        dosage=medication_data.dosage,
        frequency=medication_data.frequency,
        scheduled_time=medication_data.scheduled_time,
        notes=medication_data.notes,
        db=db
    )


@router.delete("/{medication_id}", response_model=MedicationResponse)
async def delete_medication(
    medication_id: int,
    patient: Profile = Depends(require_patient),
    db: Session = Depends(get_db)
):
    """
    Remove a medication from the list. Existing logs are kept.
    """
    medication_service = services.get_medication_service()

    try:
        return await medication_service.deactivate_medication(patient.id, medication_id, db=db)
    except MedicationNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
