#!/usr/bin/env python
"""
Seed Data
Script to seed the database with a demo patient, caretaker and medications
"""

import sys
import os
import argparse
import logging
from datetime import datetime, time, timedelta
from typing import List

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import SessionLocal, engine, Base
from models import Profile, Medication, MedicationLog, UserRole, MedicationFrequency
from tools.time_window import local_now


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


DEMO_PATIENT_ID = "demo-patient"
DEMO_CARETAKER_ID = "demo-caretaker"
DEMO_PATIENT_EMAIL = "patient@medsbuddy.example"
DEMO_CARETAKER_EMAIL = "caretaker@medsbuddy.example"

DEMO_MEDICATIONS = [
    {"name": "Metformin", "dosage": "500mg", "frequency": MedicationFrequency.TWICE_DAILY, "scheduled_time": "08:00"},
    {"name": "Lisinopril", "dosage": "10mg", "frequency": MedicationFrequency.ONCE_DAILY, "scheduled_time": "09:00"},
    {"name": "Atorvastatin", "dosage": "20mg", "frequency": MedicationFrequency.ONCE_DAILY, "scheduled_time": "21:00"},
    {"name": "Ibuprofen", "dosage": "200mg", "frequency": MedicationFrequency.AS_NEEDED, "scheduled_time": "13:30",
     "notes": "Only with food"},
]


def create_tables():
    """Create all database tables"""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")


def clear_data(db):
    logger.info("Clearing existing data...")
    db.query(MedicationLog).delete()
    db.query(Medication).delete()
    db.query(Profile).delete()
    db.commit()


def seed_profiles(db) -> Profile:
    """Create the demo patient (forwarding alerts) and the demo caretaker"""
    existing = db.query(Profile).filter(Profile.id == DEMO_PATIENT_ID).first()
    if existing:
        logger.info("Demo patient already exists")
        return existing

    patient = Profile(
        id=DEMO_PATIENT_ID,
        email=DEMO_PATIENT_EMAIL,
        role=UserRole.PATIENT,
        caretaker_email=DEMO_CARETAKER_EMAIL,
        notification_window_minutes=60
    )
    caretaker = Profile(
        id=DEMO_CARETAKER_ID,
        email=DEMO_CARETAKER_EMAIL,
        role=UserRole.CARETAKER
    )
    db.add_all([patient, caretaker])
    db.commit()
    db.refresh(patient)

    logger.info(f"Created demo patient {patient.email} and caretaker {caretaker.email}")
    return patient


def seed_medications(db, patient_id: str) -> List[Medication]:
    medications = [Medication(patient_id=patient_id, **data) for data in DEMO_MEDICATIONS]
    db.add_all(medications)
    db.commit()
    for med in medications:
        db.refresh(med)

    logger.info(f"Created {len(medications)} medications")
    return medications


def seed_logs(db, patient_id: str, medications: List[Medication], days: int):
    """Mark every dose taken for the previous days, and the first dose today"""
    now = local_now()
    count = 0

    for offset in range(days, 0, -1):
        day = (now - timedelta(days=offset)).date()
        for med in medications:
            hour, minute = (int(part) for part in med.scheduled_time.split(":"))
            db.add(MedicationLog(
                medication_id=med.id,
                patient_id=patient_id,
                date=day,
                taken_at=datetime.combine(day, time(hour, minute))
            ))
            count += 1

    if medications:
        db.add(MedicationLog(
            medication_id=medications[0].id,
            patient_id=patient_id,
            date=now.date(),
            taken_at=now
        ))
        count += 1

    db.commit()
    logger.info(f"Created {count} medication logs")


def seed_all(clear_existing: bool = False, days: int = 7):
    create_tables()

    db = SessionLocal()
    try:
        if clear_existing:
            clear_data(db)

        patient = seed_profiles(db)
        if db.query(Medication).filter(Medication.patient_id == patient.id).count():
            logger.info("Demo medications already exist")
            return

        medications = seed_medications(db, patient.id)
        seed_logs(db, patient.id, medications, days)

        print(f"\nDemo patient: X-User-Id: {DEMO_PATIENT_ID} ({DEMO_PATIENT_EMAIL})")
        print(f"Demo caretaker: X-User-Id: {DEMO_CARETAKER_ID} ({DEMO_CARETAKER_EMAIL})")

    except Exception as e:
        db.rollback()
        logger.error(f"Error during seeding: {e}")
        raise
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(
        description="Seed the database with demo data"
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear existing data before seeding"
    )
    parser.add_argument(
        "--days",
        type=int,
        default=7,
        help="Days of past logs to create"
    )

    args = parser.parse_args()

    seed_all(clear_existing=args.clear, days=args.days)


if __name__ == "__main__":
    main()
