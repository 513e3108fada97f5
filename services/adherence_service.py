"""
Adherence Service
Marking doses taken and building today's dashboard for patients and caretakers
"""

import logging
from typing import Dict, List, Optional, Any
from datetime import datetime, date
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from database import get_db_context
import models
from services.exceptions import DoseAlreadyLoggedError
from services.medication_service import medication_service
from services.profile_service import profile_service
from tools.adherence_aggregator import build_medication_statuses, summarize
from tools.time_window import local_now


logger = logging.getLogger(__name__)


class AdherenceService:
    """
    Service for daily adherence tracking
    """

    async def mark_taken(
        self,
        patient_id: str,
        medication_id: int,
        now: Optional[datetime] = None,
        notes: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.MedicationLog:
        """
        Record that today's dose was taken

        Args:
            patient_id: Owning profile ID
            medication_id: Medication ID
            now: Instant the dose was taken (defaults to the local clock)
            notes: Optional note
            db: Database session

        Returns:
            Created MedicationLog

        Raises:
            MedicationNotFoundError: Unknown, inactive or not owned
            DoseAlreadyLoggedError: Already marked for today
        """
        now = now or local_now()

        async def _mark(session: Session) -> models.MedicationLog:
            await medication_service.get_owned_medication(patient_id, medication_id, db=session)

            existing = session.query(models.MedicationLog).filter(
                models.MedicationLog.medication_id == medication_id,
                models.MedicationLog.date == now.date()
            ).first()
            if existing:
                raise DoseAlreadyLoggedError(f"Medication {medication_id} already marked today")

            log = models.MedicationLog(
                medication_id=medication_id,
                patient_id=patient_id,
                date=now.date(),
                taken_at=now,
                notes=notes
            )
            session.add(log)
            try:
                session.commit()
            except IntegrityError:
                # Lost a race with a concurrent request for the same dose
                session.rollback()
                raise DoseAlreadyLoggedError(f"Medication {medication_id} already marked today")
            session.refresh(log)

            logger.info(f"Marked medication {medication_id} taken for patient {patient_id} on {now.date()}")
            return log

        if db:
            return await _mark(db)

        with get_db_context() as session:
            return await _mark(session)

    async def get_logs_for_day(
        self,
        patient_id: str,
        day: date,
        db: Optional[Session] = None
    ) -> List[models.MedicationLog]:
        """Log rows for one patient and calendar day"""
        def _get(session: Session) -> List[models.MedicationLog]:
            return session.query(models.MedicationLog).filter(
                models.MedicationLog.patient_id == patient_id,
                models.MedicationLog.date == day
            ).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_daily_overview(
        self,
        patient: models.Profile,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """
        Today's medications with taken/pending/missed status and summary counts

        Returns:
            {"date", "patient", "medications": [MedicationStatus], "summary": AdherenceSummary}
        """
        now = now or local_now()

        async def _get(session: Session) -> Dict[str, Any]:
            medications = await medication_service.get_active_medications(patient.id, db=session)
            logs = await self.get_logs_for_day(patient.id, now.date(), db=session)

            statuses = build_medication_statuses(
                medications,
                logs,
                patient.notification_window_minutes,
                now=now
            )
            return {
                "date": now.date(),
                "patient": patient,
                "medications": statuses,
                "summary": summarize(statuses),
            }

        if db:
            return await _get(db)

        with get_db_context() as session:
            return await _get(session)

    async def get_caretaker_overview(
        self,
        caretaker_email: str,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> Dict[str, Any]:
        """Daily overview of the patient linked to this caretaker"""
        async def _get(session: Session) -> Dict[str, Any]:
            patient = await profile_service.find_patient_for_caretaker(caretaker_email, db=session)
            return await self.get_daily_overview(patient, now=now, db=session)

        if db:
            return await _get(db)

        with get_db_context() as session:
            return await _get(session)


# Singleton instance
adherence_service = AdherenceService()
