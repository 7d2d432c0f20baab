"""Display-ready shapes built from aggregated stats.

Money crosses from integer minor units to major units here and nowhere else.
"""

from dataclasses import dataclass
from datetime import date, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from community_events.domain.attribution import as_utc
from community_events.domain.errors import InvalidArgumentError
from community_events.domain.event_calendar import describe_instance
from community_events.domain.models import EventStats, InstanceStatus, PurchaseRecord

_CENT = Decimal("0.01")
MINOR_UNITS_PER_MAJOR = 100

INSTANCE_BUCKETINGS = ("instance", "month", "year")
PERIOD_BUCKETINGS = ("day", "month", "year")


def to_major_units(minor) -> Decimal:
    return (Decimal(minor) / MINOR_UNITS_PER_MAJOR).quantize(_CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class InstanceRow:
    date: date
    label: str
    status: InstanceStatus
    tickets_sold: int
    total_revenue: Decimal
    unique_purchasers: int
    average_price: Decimal
    tickets_used: int


@dataclass(frozen=True)
class SeriesPoint:
    bucket_label: str
    tickets_sold: int
    total_revenue: Decimal


def _bucket_label(day: date, bucketing: str) -> str:
    if bucketing in ("instance", "day"):
        return day.strftime("%Y-%m-%d")
    elif bucketing == "month":
        return day.strftime("%Y-%m")
    return day.strftime("%Y")


def to_per_instance_view(stats: Dict[date, EventStats], today: date) -> List[InstanceRow]:
    rows = []
    for day in sorted(stats):
        s = stats[day]
        instance = describe_instance(day, today)
        rows.append(
            InstanceRow(
                date=day,
                label=instance.label,
                status=instance.status,
                tickets_sold=s.tickets_sold,
                total_revenue=to_major_units(s.total_revenue),
                unique_purchasers=s.unique_purchasers,
                average_price=to_major_units(s.average_price),
                tickets_used=s.tickets_used,
            )
        )
    return rows


def _series(buckets: Dict[str, List[int]]) -> List[SeriesPoint]:
    return [
        SeriesPoint(
            bucket_label=label,
            tickets_sold=tickets,
            total_revenue=to_major_units(revenue),
        )
        for label, (tickets, revenue) in sorted(buckets.items())
    ]


def to_time_series(stats: Dict[date, EventStats], bucketing: str = "instance") -> List[SeriesPoint]:
    """Chart series over instance dates, grouped by instance, month or year."""
    if bucketing not in INSTANCE_BUCKETINGS:
        raise InvalidArgumentError(f"Unknown bucketing: {bucketing!r}")
    buckets: Dict[str, List[int]] = {}
    for day, s in stats.items():
        acc = buckets.setdefault(_bucket_label(day, bucketing), [0, 0])
        acc[0] += s.tickets_sold
        acc[1] += s.total_revenue
    return _series(buckets)


def to_period_series(
    purchases: Iterable[PurchaseRecord],
    bucketing: str = "month",
    tz: tzinfo = timezone.utc,
) -> List[SeriesPoint]:
    """Chart series over the purchase dates themselves. Only paid purchases count."""
    if bucketing not in PERIOD_BUCKETINGS:
        raise InvalidArgumentError(f"Unknown bucketing: {bucketing!r}")
    buckets: Dict[str, List[int]] = {}
    for p in purchases:
        if not p.is_paid:
            continue
        day = as_utc(p.created_at).astimezone(tz).date()
        acc = buckets.setdefault(_bucket_label(day, bucketing), [0, 0])
        acc[0] += 1
        acc[1] += p.amount_minor_units
    return _series(buckets)
