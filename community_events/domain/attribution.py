"""Attribute a purchase to the event instance it was bought for.

Tickets bought up to the end of an event day belong to that event;
anything bought after it belongs to the next one.
"""

from datetime import date, datetime, time, timezone, tzinfo
from typing import Sequence

from community_events.domain.errors import InvalidArgumentError
from community_events.domain.models import PurchaseRecord


def as_utc(moment: datetime) -> datetime:
    # Storage hands back naive timestamps on some backends; they are UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def end_of_day(day: date, tz: tzinfo = timezone.utc) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def classify(purchase: PurchaseRecord, instances: Sequence[date], tz: tzinfo = timezone.utc) -> date:
    """
    Return the instance date `purchase` is attributed to.

    The first instance (ascending) whose end of day in `tz` is at or after the
    purchase wins. A purchase later than every instance clamps to the last one.
    """
    if not instances:
        raise InvalidArgumentError("Cannot classify a purchase against an empty instance list")
    created_at = as_utc(purchase.created_at)
    for instance in instances:
        if end_of_day(instance, tz) >= created_at:
            return instance
    return instances[-1]
