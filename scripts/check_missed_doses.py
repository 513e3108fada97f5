#!/usr/bin/env python
"""
Check Missed Doses
Run one missed-dose detection pass without going through HTTP, e.g. from a
system crontab:

    0 * * * * cd /srv/medsbuddy && python scripts/check_missed_doses.py
"""

import sys
import os
import argparse
import asyncio
import json
import logging
from datetime import datetime

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import settings
from database import get_db_context, init_db
from services.missed_dose_service import missed_dose_service


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


def run_check(now=None) -> dict:
    with get_db_context() as db:
        report = asyncio.run(missed_dose_service.check_missed_doses(db=db, now=now))
    return report.to_dict()


def main():
    parser = argparse.ArgumentParser(
        description="Email caretakers about doses missed today"
    )
    parser.add_argument(
        "--at",
        type=datetime.fromisoformat,
        default=None,
        help="Evaluate as if it were this local time (ISO format), for backfills and testing"
    )

    args = parser.parse_args()

    init_db()
    try:
        result = run_check(now=args.at)
    except Exception as e:
        logger.error(f"Missed dose check failed: {e}")
        sys.exit(1)

    print(json.dumps(result))


if __name__ == "__main__":
    main()
