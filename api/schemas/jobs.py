"""
Job Schemas
Response of the scheduled missed-dose check
"""

from typing import Optional
from pydantic import BaseModel


class MissedDoseCheckResponse(BaseModel):
    """Aggregate counts for the scheduler; message is set when nothing qualified"""
    checked: int
    missed: int
    notified: int
    message: Optional[str] = None
