"""
Missed Dose Service
Hourly pass that finds overdue doses and emails each patient's caretaker
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set, Tuple
from dataclasses import dataclass, field
from datetime import datetime, date
from sqlalchemy.orm import Session

from database import get_db_context
import models
from tools.digest_renderer import CaretakerDigest, MissedDoseItem, render_missed_dose_alert
from tools.notification_service import EmailMessageRequest, NotificationService, notification_service
from tools.time_window import is_missed, local_now


logger = logging.getLogger(__name__)


@dataclass
class ScheduledDose:
    """An active medication joined with its owner's alert settings"""
    medication_id: int
    name: str
    dosage: str
    scheduled_time: str
    patient_id: str
    patient_email: str
    caretaker_email: Optional[str]
    window_minutes: int


@dataclass
class MissedDoseReport:
    """Outcome of one pass"""
    report_date: date
    checked: int = 0
    missed: int = 0
    notified: int = 0
    failed: int = 0
    digests: List[CaretakerDigest] = field(default_factory=list)

    @property
    def nothing_to_check(self) -> bool:
        return self.checked == 0

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "checked": self.checked,
            "missed": self.missed,
            "notified": self.notified,
        }
        if self.nothing_to_check:
            result["message"] = "Nothing to check"
        return result


class MissedDoseService:
    """
    Detects missed doses for every patient with a caretaker and sends one
    alert per patient.

    Reads medications and logs once per pass, so every decision in a pass
    sees the same snapshot. Nothing is written to the database. Overlapping
    passes are not coordinated and may send duplicate alerts.
    """

    def __init__(self, notifier: Optional[NotificationService] = None):
        self.notifier = notifier or notification_service

    async def check_missed_doses(
        self,
        db: Optional[Session] = None,
        now: Optional[datetime] = None
    ) -> MissedDoseReport:
        """
        Run one detection and notification pass

        Args:
            db: Database session
            now: Evaluation instant (defaults to the local clock)

        Returns:
            MissedDoseReport with checked/missed/notified counts

        Raises:
            SQLAlchemyError: Reading medications or logs failed; nothing is sent
        """
        now = now or local_now()

        if db:
            doses, taken_ids = self.load_snapshot(db, now.date())
        else:
            with get_db_context() as session:
                doses, taken_ids = self.load_snapshot(session, now.date())

        report = MissedDoseReport(report_date=now.date(), checked=len(doses))
        if not doses:
            logger.info("Missed dose check: nothing to check")
            return report

        missed = self.find_missed(doses, taken_ids, now)
        report.missed = len(missed)
        report.digests = self.group_by_patient(missed)

        results = await asyncio.gather(
            *(self._dispatch(digest, report.report_date) for digest in report.digests)
        )
        report.notified = sum(1 for ok in results if ok)
        report.failed = len(results) - report.notified

        logger.info(
            f"Missed dose check {report.report_date}: checked={report.checked} "
            f"missed={report.missed} notified={report.notified} failed={report.failed}"
        )
        return report

    def load_snapshot(
        self,
        session: Session,
        day: date
    ) -> Tuple[List[ScheduledDose], Set[int]]:
        """Active medications of patients with a caretaker, plus the ids logged for the day"""
        rows = session.query(models.Medication, models.Profile).join(
            models.Profile, models.Medication.patient_id == models.Profile.id
        ).filter(
            models.Medication.is_active == True,
            models.Profile.caretaker_email.isnot(None),
            models.Profile.caretaker_email != ""
        ).order_by(models.Medication.scheduled_time, models.Medication.id).all()

        doses = [
            ScheduledDose(
                medication_id=med.id,
                name=med.name,
                dosage=med.dosage,
                scheduled_time=med.scheduled_time,
                patient_id=profile.id,
                patient_email=profile.email,
                caretaker_email=profile.caretaker_email,
                window_minutes=profile.notification_window_minutes
            )
            for med, profile in rows
        ]
        if not doses:
            return [], set()

        logs = session.query(models.MedicationLog.medication_id).filter(
            models.MedicationLog.medication_id.in_([d.medication_id for d in doses]),
            models.MedicationLog.date == day
        ).all()

        return doses, {medication_id for (medication_id,) in logs}

    @staticmethod
    def find_missed(
        doses: List[ScheduledDose],
        taken_ids: Set[int],
        now: datetime
    ) -> List[ScheduledDose]:
        """
        Not logged today and past the owner's window. A dose whose time
        cannot be evaluated is logged and skipped; the rest of the pass
        carries on.
        """
        missed = []
        for dose in doses:
            if dose.medication_id in taken_ids:
                continue
            try:
                overdue = is_missed(dose.scheduled_time, dose.window_minutes, now=now)
            except (ValueError, TypeError) as e:
                logger.error(f"Skipping medication {dose.medication_id} of patient {dose.patient_id}: {e}")
                continue
            if overdue:
                missed.append(dose)
        return missed

    @staticmethod
    def group_by_patient(missed: List[ScheduledDose]) -> List[CaretakerDigest]:
        """
        One digest per patient, in first-seen order. Patients who share a
        caretaker still get separate digests.
        """
        digests: Dict[str, CaretakerDigest] = {}
        for dose in missed:
            caretaker_email = (dose.caretaker_email or "").strip()
            if not caretaker_email:
                continue
            if dose.patient_id not in digests:
                digests[dose.patient_id] = CaretakerDigest(
                    caretaker_email=caretaker_email,
                    patient_email=dose.patient_email
                )
            digests[dose.patient_id].items.append(MissedDoseItem(
                name=dose.name,
                dosage=dose.dosage,
                scheduled_time=dose.scheduled_time
            ))
        return list(digests.values())

    async def _dispatch(self, digest: CaretakerDigest, report_date: date) -> bool:
        """Send one digest; failures are logged and reported as False"""
        rendered = render_missed_dose_alert(digest, report_date)
        logger.info(
            f"[ALERT] To: {digest.caretaker_email} | Patient: {digest.patient_email} | "
            f"Date: {report_date} | Missed: {len(digest.items)}"
        )

        try:
            result = await self.notifier.send_email(EmailMessageRequest(
                to=digest.caretaker_email,
                subject=rendered.subject,
                text=rendered.text,
                html=rendered.html
            ))
        except Exception as e:
            logger.error(f"Failed to send email to {digest.caretaker_email}: {e}", exc_info=True)
            return False

        if not result.success:
            logger.error(f"Failed to send email to {digest.caretaker_email}: {result.error}")
            return False
        return True


# Singleton instance
missed_dose_service = MissedDoseService()
