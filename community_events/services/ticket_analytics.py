"""Ticket analytics service.

Loads a complete ticket snapshot from the database, then hands it to the
pure domain functions. Both the admin view and the rebuild job go through
here, so they share one calendar, one classifier and one clock.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy import func
from sqlalchemy.orm import Session

from community_events.core.clock import Clock
from community_events.core.config import settings
from community_events.domain import (
    EventStats,
    InstanceRow,
    InvalidArgumentError,
    PaymentStatus,
    PurchaseRecord,
    SeriesPoint,
    Weekday,
    aggregate,
    generate_instances,
    parse_reference_date,
    summarize,
    to_per_instance_view,
    to_period_series,
    to_time_series,
)
from community_events.domain.attribution import end_of_day
from community_events.domain.models import PAID_RAW_STATUSES
from community_events.domain.presentation import to_major_units
from community_events.models.profile import Profile
from community_events.models.ticket import Ticket

logger = logging.getLogger(__name__)

OVERVIEW_RANGES = {"7d": 7, "30d": 30, "90d": 90}

UNKNOWN_USER = "Unknown User"


def event_timezone(name: Optional[str] = None) -> tzinfo:
    name = name or settings.EVENT_TIMEZONE
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


@dataclass(frozen=True)
class EventWindow:
    """The instance dates an analytics request covers, and the day they are labelled against."""

    today: date
    weekday: Weekday
    past_count: int
    future_count: int
    instances: List[date]


@dataclass(frozen=True)
class Sale:
    """One attributed purchase with its purchaser's display name."""

    purchase: PurchaseRecord
    user_name: str


@dataclass(frozen=True)
class EventAnalytics:
    window: EventWindow
    stats: Dict[date, EventStats]
    rows: List[InstanceRow]
    sales: Dict[date, List[Sale]]


@dataclass(frozen=True)
class Overview:
    range: str
    total_revenue: int
    total_tickets: int
    unique_purchasers: int
    average_price: Decimal
    new_members: int
    conversion_rate: float
    excluded_tickets: int
    monthly: List[SeriesPoint]


# ---------------------------------------------------------------------------
# Snapshot loading
# ---------------------------------------------------------------------------


def to_purchase_record(ticket: Ticket) -> PurchaseRecord:
    return PurchaseRecord(
        id=str(ticket.id),
        purchaser_id=str(ticket.user_id),
        amount_minor_units=int(ticket.amount or 0),
        created_at=ticket.created_at,
        payment_status=PaymentStatus.from_raw(ticket.status),
        payment_reference=ticket.stripe_session_id or ticket.stripe_payment_intent_id,
        used_at=ticket.used_at,
    )


def load_purchases(
    db: Session,
    since: Optional[datetime] = None,
    paid_only: bool = True,
) -> List[PurchaseRecord]:
    """Fetch the ticket snapshot in one query, oldest first."""
    query = db.query(Ticket)
    if paid_only:
        query = query.filter(func.lower(func.trim(Ticket.status)).in_(PAID_RAW_STATUSES))
    if since is not None:
        query = query.filter(Ticket.created_at > since.astimezone(timezone.utc))
    tickets = query.order_by(Ticket.created_at, Ticket.id).all()
    logger.info("Loaded %d ticket(s) (paid_only=%s, since=%s)", len(tickets), paid_only, since)
    return [to_purchase_record(t) for t in tickets]


def load_purchaser_names(db: Session, purchaser_ids: Iterable[str]) -> Dict[str, str]:
    """Resolve display names for every purchaser in one batched lookup."""
    ids = sorted(set(purchaser_ids))
    if not ids:
        return {}
    profiles = (
        db.query(Profile)
        .filter(Profile.user_id.in_([UUID(i) for i in ids]))
        .all()
    )
    return {str(p.user_id): p.display_name for p in profiles}


def count_new_members(db: Session, since: datetime) -> int:
    return (
        db.query(func.count(Profile.user_id))
        .filter(Profile.created_at >= since)
        .scalar()
    ) or 0


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


def resolve_window(
    clock: Clock,
    reference_date=None,
    past_count: Optional[int] = None,
    future_count: Optional[int] = None,
    weekday=None,
    tz: Optional[tzinfo] = None,
) -> EventWindow:
    """Fill unset window options from configuration, with "today" from `clock`."""
    tz = tz or event_timezone()
    today = (
        parse_reference_date(reference_date)
        if reference_date is not None
        else clock.today(tz)
    )
    past = settings.EVENT_PAST_COUNT if past_count is None else past_count
    future = settings.EVENT_FUTURE_COUNT if future_count is None else future_count
    day = Weekday.parse(weekday if weekday is not None else settings.EVENT_WEEKDAY)
    return EventWindow(
        today=today,
        weekday=day,
        past_count=past,
        future_count=future,
        instances=generate_instances(today, past, future, day),
    )


def window_start(window: EventWindow, tz: tzinfo) -> Optional[datetime]:
    """Purchases at or before this instant belong to an occurrence before the window."""
    first = window.instances[0]
    if first.toordinal() - 7 < date.min.toordinal():
        return None
    return end_of_day(first - timedelta(days=7), tz)


def build_event_analytics(db: Session, window: EventWindow, tz: Optional[tzinfo] = None) -> EventAnalytics:
    tz = tz or event_timezone()
    purchases = load_purchases(db, since=window_start(window, tz))
    names = load_purchaser_names(db, (p.purchaser_id for p in purchases))

    stats = aggregate(purchases, window.instances, tz)

    by_id = {p.id: p for p in purchases}
    sales = {
        day: [
            Sale(purchase=by_id[pid], user_name=names.get(by_id[pid].purchaser_id, UNKNOWN_USER))
            for pid in s.purchase_ids
        ]
        for day, s in stats.items()
    }
    return EventAnalytics(
        window=window,
        stats=stats,
        rows=to_per_instance_view(stats, window.today),
        sales=sales,
    )


def build_time_series(db: Session, window: EventWindow, group_by: str, tz: Optional[tzinfo] = None) -> List[SeriesPoint]:
    tz = tz or event_timezone()
    purchases = load_purchases(db, since=window_start(window, tz))
    return to_time_series(aggregate(purchases, window.instances, tz), group_by)


def rebuild_event_stats(db: Session, window: EventWindow, tz: Optional[tzinfo] = None) -> dict:
    """
    Recompute every instance's stats from scratch.

    Returns a plain dict shaped like the stored analytics payload, with
    revenue left in minor units.
    """
    logger.info("Starting admin analytics rebuild for %d event date(s)", len(window.instances))
    analytics = build_event_analytics(db, window, tz)
    event_stats = {}
    for day, s in analytics.stats.items():
        event_stats[day.isoformat()] = {
            "date": day,
            "name": f"{day:%B} {day.day} Event",
            "tickets_sold": s.tickets_sold,
            "total_revenue": s.total_revenue,
            "unique_attendees": s.unique_purchasers,
            "tickets_used": s.tickets_used,
            "sales": [sale_payload(sale) for sale in analytics.sales[day]],
        }
    total_tickets = sum(s.tickets_sold for s in analytics.stats.values())
    total_revenue = sum(s.total_revenue for s in analytics.stats.values())
    total_used = sum(s.tickets_used for s in analytics.stats.values())
    logger.info(
        "Analytics rebuild complete: %s",
        ", ".join(f"{d}={e['tickets_sold']}/{e['total_revenue']}" for d, e in event_stats.items()),
    )
    return {
        "success": True,
        "message": "Admin analytics rebuilt successfully",
        "event_stats": event_stats,
        "total_tickets": total_tickets,
        "total_revenue": total_revenue,
        "total_used": total_used,
    }


def sale_payload(sale: Sale) -> dict:
    p = sale.purchase
    return {
        "id": p.id,
        "user_name": sale.user_name,
        "amount": to_major_units(p.amount_minor_units),
        "created_at": p.created_at,
        "status": p.payment_status.value,
        "stripe_session_id": p.payment_reference,
    }


def is_verified(purchase: PurchaseRecord, min_amount: int) -> bool:
    """Paid through the payment processor, for a realistic amount."""
    return (
        purchase.is_paid
        and bool(purchase.payment_reference)
        and purchase.amount_minor_units >= min_amount
    )


def sales_overview(
    db: Session,
    clock: Clock,
    range_key: str = "30d",
    min_amount: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> Overview:
    if range_key not in OVERVIEW_RANGES:
        raise InvalidArgumentError(f"Unknown range: {range_key!r}")
    tz = tz or event_timezone()
    min_amount = settings.MIN_VERIFIED_AMOUNT if min_amount is None else min_amount
    since = clock.now() - timedelta(days=OVERVIEW_RANGES[range_key])

    everything = load_purchases(db, since=since, paid_only=False)
    verified = [p for p in everything if is_verified(p, min_amount)]
    summary = summarize(verified)
    new_members = count_new_members(db, since)
    conversion = round(summary.tickets_sold / new_members * 100, 2) if new_members else 0.0

    logger.info(
        "Overview %s: %d verified ticket(s), %d excluded",
        range_key, len(verified), len(everything) - len(verified),
    )
    return Overview(
        range=range_key,
        total_revenue=summary.total_revenue,
        total_tickets=summary.tickets_sold,
        unique_purchasers=summary.unique_purchasers,
        average_price=summary.average_price,
        new_members=new_members,
        conversion_rate=conversion,
        excluded_tickets=len(everything) - len(verified),
        monthly=to_period_series(verified, "month", tz),
    )
