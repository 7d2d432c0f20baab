"""Weekly event calendar: which dates the recurring event falls on."""

from datetime import date, datetime, timedelta
from typing import List

from community_events.domain.errors import InvalidArgumentError
from community_events.domain.models import EventInstance, InstanceStatus, Weekday

WEEK = timedelta(days=7)

_STATUS_SUFFIX = {
    InstanceStatus.PAST: "Past",
    InstanceStatus.CURRENT: "Today",
    InstanceStatus.FUTURE: "Future",
}


def parse_reference_date(value) -> date:
    """Coerce a date, datetime or ISO 'YYYY-MM-DD' string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidArgumentError(f"Malformed date: {value!r}") from None
    raise InvalidArgumentError(f"Malformed date: {value!r}")


def _check_count(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer")
    if value < 0:
        raise InvalidArgumentError(f"{name} cannot be negative")


def anchor_instance(reference_date: date, weekday: Weekday) -> date:
    """The latest `weekday` on or before `reference_date`."""
    back = (reference_date.isoweekday() - weekday.value) % 7
    return reference_date - timedelta(days=back)


def generate_instances(reference_date, past_count: int, future_count: int, weekday) -> List[date]:
    """
    Return the ascending event dates around `reference_date`.

    The window holds `past_count` dates before the anchor, the anchor itself
    (the latest `weekday` on or before `reference_date`), and `future_count`
    dates after it, all 7 days apart.
    """
    _check_count("past_count", past_count)
    _check_count("future_count", future_count)
    reference = parse_reference_date(reference_date)
    day = Weekday.parse(weekday)
    try:
        anchor = anchor_instance(reference, day)
    except OverflowError:
        anchor = None
    if (
        anchor is None
        or anchor.toordinal() - 7 * past_count < date.min.toordinal()
        or anchor.toordinal() + 7 * future_count > date.max.toordinal()
    ):
        raise InvalidArgumentError("Event window falls outside the supported date range")
    return [anchor + WEEK * offset for offset in range(-past_count, future_count + 1)]


def describe_instance(instance_date: date, today: date) -> EventInstance:
    if instance_date < today:
        status = InstanceStatus.PAST
    elif instance_date > today:
        status = InstanceStatus.FUTURE
    else:
        status = InstanceStatus.CURRENT
    label = f"{instance_date:%b} {instance_date.day} ({_STATUS_SUFFIX[status]})"
    return EventInstance(date=instance_date, label=label, status=status)
