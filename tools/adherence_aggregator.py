"""
Adherence Aggregator
Joins a patient's active medications with today's logs into per-dose status
and summary counts. Pure functions; callers pass in a snapshot of rows.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional
from dataclasses import dataclass
from datetime import datetime

from models import DoseStatus
from tools.time_window import dose_deadline, local_now


logger = logging.getLogger(__name__)


@dataclass
class MedicationStatus:
    """A medication annotated with today's dose state"""
    medication: Any
    taken_today: bool
    status: DoseStatus
    log_id: Optional[int] = None
    deadline: Optional[datetime] = None


@dataclass
class AdherenceSummary:
    """Counts for one patient's day"""
    total: int
    taken: int
    remaining: int
    pending: int
    missed: int
    completion_percentage: int
    all_done: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "taken": self.taken,
            "remaining": self.remaining,
            "pending": self.pending,
            "missed": self.missed,
            "completion_percentage": self.completion_percentage,
            "all_done": self.all_done,
        }


def taken_log_ids(logs: Iterable[Any]) -> Dict[int, int]:
    """medication_id -> log id for today's logs"""
    return {log.medication_id: log.id for log in logs}


def build_medication_statuses(
    medications: Iterable[Any],
    logs: Iterable[Any],
    window_minutes: int,
    now: Optional[datetime] = None
) -> List[MedicationStatus]:
    """
    Classify each medication as taken, pending or missed.

    Args:
        medications: Active medications, already ordered by scheduled time
        logs: Today's log rows for the same patient
        window_minutes: The patient's notification window
        now: Evaluation instant (defaults to the local clock)

    Returns:
        One MedicationStatus per medication, in input order
    """
    now = now or local_now()
    logged = taken_log_ids(logs)

    statuses = []
    for med in medications:
        try:
            deadline = dose_deadline(med.scheduled_time, window_minutes, now=now)
        except (ValueError, TypeError) as e:
            # Unreadable time: shown as pending, never missed
            logger.warning(f"No deadline for medication {med.id}: {e}")
            deadline = None

        if med.id in logged:
            # A log always wins, however late it was created
            statuses.append(MedicationStatus(
                medication=med,
                taken_today=True,
                status=DoseStatus.TAKEN,
                log_id=logged[med.id],
                deadline=deadline
            ))
            continue

        statuses.append(MedicationStatus(
            medication=med,
            taken_today=False,
            status=DoseStatus.MISSED if deadline and now > deadline else DoseStatus.PENDING,
            deadline=deadline
        ))

    return statuses


def completion_percentage(taken: int, total: int) -> int:
    """Percent taken, rounded half up; 0 for an empty day"""
    if total <= 0:
        return 0
    return int(100 * taken / total + 0.5)


def summarize(statuses: List[MedicationStatus]) -> AdherenceSummary:
    total = len(statuses)
    taken = sum(1 for s in statuses if s.status == DoseStatus.TAKEN)
    pending = sum(1 for s in statuses if s.status == DoseStatus.PENDING)
    missed = sum(1 for s in statuses if s.status == DoseStatus.MISSED)
    remaining = total - taken

    return AdherenceSummary(
        total=total,
        taken=taken,
        remaining=remaining,
        pending=pending,
        missed=missed,
        completion_percentage=completion_percentage(taken, total),
        all_done=total > 0 and remaining == 0
    )
