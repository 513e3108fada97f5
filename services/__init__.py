"""
Services Module
Business logic layer for the MedsBuddy application
"""

from services.profile_service import ProfileService, profile_service
from services.medication_service import MedicationService, medication_service
from services.adherence_service import AdherenceService, adherence_service
from services.missed_dose_service import MissedDoseService, MissedDoseReport, missed_dose_service


__all__ = [
    # Service classes
    "ProfileService",
    "MedicationService",
    "AdherenceService",
    "MissedDoseService",
    "MissedDoseReport",
    # Singleton instances
    "profile_service",
    "medication_service",
    "adherence_service",
    "missed_dose_service",
]
