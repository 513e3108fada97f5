"""
API Module
FastAPI routers for the MedsBuddy application
"""

from api.profiles import router as profiles_router
from api.medications import router as medications_router
from api.adherence import router as adherence_router
from api.jobs import router as jobs_router

from api.deps import (
    get_db,
    get_current_user_id,
    get_current_profile,
    require_patient,
    require_caretaker,
    verify_cron_secret,
    services,
)


__all__ = [
    # Routers
    "profiles_router",
    "medications_router",
    "adherence_router",
    "jobs_router",
    # Dependencies
    "get_db",
    "get_current_user_id",
    "get_current_profile",
    "require_patient",
    "require_caretaker",
    "verify_cron_secret",
    "services",
]


def include_routers(app, prefix: str = "/api/v1"):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(profiles_router, prefix=prefix)
    app.include_router(medications_router, prefix=prefix)
    app.include_router(adherence_router, prefix=prefix)
    app.include_router(jobs_router, prefix=prefix)
