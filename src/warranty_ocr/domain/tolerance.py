"""Tolerance policy: does an invoice date corroborate the installation date?"""

import logging
from collections.abc import Sequence
from datetime import date, datetime

from ..config import DEFAULT_TOLERANCE_DAYS
from .models import ToleranceDecision, WarrantyStatus

logger = logging.getLogger(__name__)


def as_calendar_date(value: date | datetime) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def check_tolerance(
    installation_date: date | datetime,
    candidates: Sequence[date | datetime],
    tolerance_days: int = DEFAULT_TOLERANCE_DAYS,
) -> ToleranceDecision:
    """Approve on the first candidate within tolerance, in input order.

    No candidates defers to manual review. Candidates that all fall outside
    the window reject the claim.
    """
    if not candidates:
        logger.info("No candidate dates, deferring to manual review")
        return ToleranceDecision(status=WarrantyStatus.IN_PROGRESS)

    installed = as_calendar_date(installation_date)
    for candidate in candidates:
        candidate_date = as_calendar_date(candidate)
        days = abs((candidate_date - installed).days)
        if days <= tolerance_days:
            logger.info(f"Approved: {candidate_date} is {days} days from {installed}")
            return ToleranceDecision(
                status=WarrantyStatus.APPROVED,
                matching_date=candidate_date,
                days_difference=days,
            )

    logger.info(f"Rejected: no date within {tolerance_days} days of {installed}")
    return ToleranceDecision(status=WarrantyStatus.REJECTED)
