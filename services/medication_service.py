"""
Medication Service
Business logic for a patient's medication list
"""

import logging
from typing import List, Optional
from datetime import datetime
from sqlalchemy.orm import Session

from database import get_db_context
import models
from models import MedicationFrequency
from services.exceptions import MedicationNotFoundError


logger = logging.getLogger(__name__)


class MedicationService:
    """
    Service for medication-related operations
    """

    async def add_medication(
        self,
        patient_id: str,
        name: str,
        dosage: str,
        frequency: MedicationFrequency,
        scheduled_time: str,
        notes: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Medication:
        """
        Add a new medication for a patient

        Args:
            patient_id: Owning profile ID
            name: Medication name
            dosage: Dosage (e.g., "500mg")
            frequency: Frequency category
            scheduled_time: Zero-padded "HH:MM"
            notes: Optional free text
            db: Database session

        Returns:
            Created Medication object
        """
        def _add(session: Session) -> models.Medication:
            medication = models.Medication(
                patient_id=patient_id,
                name=name,
                dosage=dosage,
                frequency=frequency,
                scheduled_time=scheduled_time,
                notes=notes,
                is_active=True
            )

            session.add(medication)
            session.commit()
            session.refresh(medication)

            logger.info(f"Added medication {name} for patient {patient_id}")
            return medication

        if db:
            return _add(db)

        with get_db_context() as session:
            return _add(session)

    async def get_active_medications(
        self,
        patient_id: str,
        db: Optional[Session] = None
    ) -> List[models.Medication]:
        """Active medications ordered by scheduled time"""
        def _get(session: Session) -> List[models.Medication]:
            return session.query(models.Medication).filter(
                models.Medication.patient_id == patient_id,
                models.Medication.is_active == True
            ).order_by(models.Medication.scheduled_time, models.Medication.id).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_owned_medication(
        self,
        patient_id: str,
        medication_id: int,
        db: Optional[Session] = None
    ) -> models.Medication:
        """Active medication belonging to the patient, or MedicationNotFoundError"""
        def _get(session: Session) -> models.Medication:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id,
                models.Medication.patient_id == patient_id,
                models.Medication.is_active == True
            ).first()

            if not medication:
                raise MedicationNotFoundError(f"Medication {medication_id} not found")
            return medication

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def deactivate_medication(
        self,
        patient_id: str,
        medication_id: int,
        db: Optional[Session] = None
    ) -> models.Medication:
        """Soft delete; logs keep pointing at the row"""
        def _deactivate(session: Session) -> models.Medication:
            medication = session.query(models.Medication).filter(
                models.Medication.id == medication_id,
                models.Medication.patient_id == patient_id,
                models.Medication.is_active == True
            ).first()

            if not medication:
                raise MedicationNotFoundError(f"Medication {medication_id} not found")

            medication.is_active = False
            medication.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(medication)

            logger.info(f"Deactivated medication {medication_id} for patient {patient_id}")
            return medication

        if db:
            return _deactivate(db)

        with get_db_context() as session:
            return _deactivate(session)


# Singleton instance
medication_service = MedicationService()
