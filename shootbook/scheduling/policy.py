"""Working-hours and blackout policy: is a calendar day bookable at all."""

import logging

from shootbook.schemas.availability_schema import EligibilityResult, UnavailabilityReason
from shootbook.schemas.provider_schema import AvailabilityPolicy
from shootbook.scheduling.temporal import TimeInterval, day_of_week
from shootbook.utils import DateLike, normalize_date

logger = logging.getLogger(__name__)


def is_day_eligible(policy: AvailabilityPolicy, value: DateLike) -> EligibilityResult:
    """
    Decide whether a provider works on the given day.

    The blackout check runs before the weekday check, so a blackout date
    that also falls on a closed weekday reports ``blackout_date``.
    """
    day = normalize_date(value)

    if day in policy.blackout_dates:
        logger.debug("%s is a blackout date", day)
        return EligibilityResult(eligible=False, reason=UnavailabilityReason.BLACKOUT_DATE)

    weekday = day_of_week(day)
    hours = policy.working_hours.get(weekday)
    if hours is None or not hours.available:
        logger.debug("%s (%s) is outside working days", day, weekday.value)
        return EligibilityResult(eligible=False, reason=UnavailabilityReason.DAY_UNAVAILABLE)

    window = TimeInterval.from_strings(hours.start, hours.end)
    return EligibilityResult(eligible=True, hours=window.to_slot())
