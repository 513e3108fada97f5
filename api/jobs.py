"""
Jobs API Router
Entry point for the external scheduler
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from api.deps import get_db, verify_cron_secret, services
from api.schemas.jobs import MissedDoseCheckResponse


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.post(
    "/check-missed",
    response_model=MissedDoseCheckResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_cron_secret)]
)
async def check_missed(db: Session = Depends(get_db)):
    """
    Find doses past their notification window and email each caretaker.
    Meant to be called hourly with `Authorization: Bearer <CRON_SECRET>`.
    """
    missed_dose_service = services.get_missed_dose_service()

    try:
        report = await missed_dose_service.check_missed_doses(db=db)
    except SQLAlchemyError as e:
        logger.error(f"Missed dose check aborted: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    return MissedDoseCheckResponse(**report.to_dict())
