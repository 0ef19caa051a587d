"""Daily free-trial quota for AI operations.

Free-trial users may run each AI tool once per UTC calendar day. The decision
itself is a pure function; fetching the user's status and today's operation
count is the dispatcher's job, and so is failing open when those lookups break.
"""

from datetime import datetime, time, timedelta, timezone
from typing import Optional, Tuple

from application.models.operations import FREE_TRIAL_STATUS, QuotaDecision

# Operations of one kind a free-trial user may run per UTC day
FREE_TRIAL_DAILY_LIMIT = 1


def usage_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Return the [start, end) UTC day containing `now`.

    Naive datetimes are taken to be UTC already.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)

    start = datetime.combine(now.date(), time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def evaluate(
    subscription_status: Optional[str], matching_operations_today: int
) -> QuotaDecision:
    """Decide whether a user may run an operation of a given kind right now.

    Args:
        subscription_status: The user's subscription_status column.
        matching_operations_today: Operations of the same kind already recorded
            for this user inside today's usage window.
    """
    if subscription_status != FREE_TRIAL_STATUS:
        return QuotaDecision.allow()
    if matching_operations_today >= FREE_TRIAL_DAILY_LIMIT:
        return QuotaDecision.deny()
    return QuotaDecision.allow()
