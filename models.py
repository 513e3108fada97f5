"""
Database Models
SQLAlchemy ORM models for MedsBuddy
"""

import uuid
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Date, Enum, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum

from config import adherence_config
from database import Base


# ==================== ENUMS ====================

class UserRole(str, PyEnum):
    """Account role chosen at signup"""
    PATIENT = "patient"
    CARETAKER = "caretaker"


class MedicationFrequency(str, PyEnum):
    """How often a medication is taken"""
    ONCE_DAILY = "once_daily"
    TWICE_DAILY = "twice_daily"
    THREE_TIMES_DAILY = "three_times_daily"
    AS_NEEDED = "as_needed"


class DoseStatus(str, PyEnum):
    """Derived state of today's dose; never persisted"""
    TAKEN = "taken"
    PENDING = "pending"
    MISSED = "missed"


def _new_profile_id() -> str:
    return str(uuid.uuid4())


# ==================== MODELS ====================

class Profile(Base):
    """Account profile; the id is shared with the authentication account"""
    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True, default=_new_profile_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.PATIENT)

    # Patient-only: where missed-dose alerts are forwarded
    caretaker_email = Column(String(255), index=True)
    notification_window_minutes = Column(
        Integer,
        nullable=False,
        default=adherence_config.NOTIFICATION_WINDOW_DEFAULT
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    medications = relationship("Medication", back_populates="patient")
    medication_logs = relationship("MedicationLog", back_populates="patient")

    @property
    def has_caretaker(self) -> bool:
        return bool(self.caretaker_email and self.caretaker_email.strip())


class Medication(Base):
    """A patient's medication with its daily scheduled time"""
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(String(64), ForeignKey("profiles.id"), nullable=False)

    name = Column(String(100), nullable=False)
    dosage = Column(String(50), nullable=False)  # e.g., "500mg"
    frequency = Column(Enum(MedicationFrequency), nullable=False)
    scheduled_time = Column(String(5), nullable=False)  # "08:00", server local
    notes = Column(Text)

    # Soft delete; rows referenced by logs are never removed
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    patient = relationship("Profile", back_populates="medications")
    logs = relationship("MedicationLog", back_populates="medication")

    __table_args__ = (
        Index("ix_medications_patient_active", "patient_id", "is_active"),
    )


class MedicationLog(Base):
    """One row per medication per day once the dose is marked taken"""
    __tablename__ = "medication_logs"

    id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("medications.id"), nullable=False)
    patient_id = Column(String(64), ForeignKey("profiles.id"), nullable=False)

    date = Column(Date, nullable=False)
    taken_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    medication = relationship("Medication", back_populates="logs")
    patient = relationship("Profile", back_populates="medication_logs")

    __table_args__ = (
        UniqueConstraint("medication_id", "date", name="uq_medication_logs_medication_date"),
        Index("ix_medication_logs_patient_date", "patient_id", "date"),
    )
