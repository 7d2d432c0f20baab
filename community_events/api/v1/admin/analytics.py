import logging
from typing import Optional
from datetime import date

from fastapi import APIRouter, Depends, Query, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community_events.db.session import get_db
from community_events.api.deps import get_clock, get_current_admin_user
from community_events.core.clock import Clock
from community_events.domain import InstanceRow
from community_events.domain.presentation import to_major_units
from community_events.models.profile import Profile
from community_events.services import ticket_analytics as analytics
from community_events.schemas.analytics import (
    EventAnalyticsResponse,
    EventInstanceStats,
    EventSalesResponse,
    EventWindow,
    RebuildResponse,
    SalesOverview,
    SeriesPoint,
    TicketSale,
    TimeSeriesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/analytics", tags=["Admin - Analytics"])

# Ten years of weekly events either side of today
MAX_WINDOW_COUNT = 520


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _window_options(
    reference_date: Optional[date] = Query(None, description="Treat this day as today (YYYY-MM-DD)"),
    past_count: Optional[int] = Query(None, le=MAX_WINDOW_COUNT, description="Event dates before the current one"),
    future_count: Optional[int] = Query(None, le=MAX_WINDOW_COUNT, description="Event dates after the current one"),
    weekday: Optional[str] = Query(None, description="Event weekday, e.g. tuesday or tue"),
) -> dict:
    """Window options shared by every endpoint (unset values fall back to settings)."""
    return {
        "reference_date": reference_date,
        "past_count": past_count,
        "future_count": future_count,
        "weekday": weekday,
    }


def _window_schema(window: analytics.EventWindow) -> EventWindow:
    return EventWindow(
        today=window.today,
        weekday=window.weekday.name.lower(),
        past_count=window.past_count,
        future_count=window.future_count,
        instances=window.instances,
    )


def _row_schema(row: InstanceRow) -> EventInstanceStats:
    return EventInstanceStats(
        date=row.date,
        label=row.label,
        status=row.status.value,
        tickets_sold=row.tickets_sold,
        total_revenue=row.total_revenue,
        unique_purchasers=row.unique_purchasers,
        average_price=row.average_price,
        tickets_used=row.tickets_used,
    )


def _series_schema(points) -> list[SeriesPoint]:
    return [
        SeriesPoint(
            period=p.bucket_label,
            tickets_sold=p.tickets_sold,
            revenue=p.total_revenue,
        )
        for p in points
    ]


# ---------------------------------------------------------------------------
# Per-event breakdown
# ---------------------------------------------------------------------------


@router.get("/events", response_model=EventAnalyticsResponse)
def get_event_analytics(
    options: dict = Depends(_window_options),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: Profile = Depends(get_current_admin_user),
):
    """
    Ticket sales per occurrence of the weekly event.

    Each paid ticket is attributed to the first event date whose day had not
    yet ended when it was bought. Tickets bought after the last date in the
    window count towards that last date.

    **Response includes:**
    - `window`: the event dates covered and the day they are labelled against
    - `events`: one row per event date, oldest first
    - `total_tickets` / `total_revenue`: sums over the window
    - `total_used`: paid tickets already checked in at the door
    """
    window = analytics.resolve_window(clock, **options)
    result = analytics.build_event_analytics(db, window)

    return EventAnalyticsResponse(
        window=_window_schema(window),
        events=[_row_schema(r) for r in result.rows],
        total_tickets=sum(s.tickets_sold for s in result.stats.values()),
        total_revenue=to_major_units(sum(s.total_revenue for s in result.stats.values())),
        total_used=sum(s.tickets_used for s in result.stats.values()),
    )


@router.get("/events/{event_date}/sales", response_model=EventSalesResponse)
def get_event_sales(
    event_date: date,
    options: dict = Depends(_window_options),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: Profile = Depends(get_current_admin_user),
):
    """Individual sales attributed to one event date, oldest first."""
    window = analytics.resolve_window(clock, **options)
    if event_date not in window.instances:
        raise HTTPException(status_code=404, detail="Event date not in the analytics window")

    result = analytics.build_event_analytics(db, window)
    row = next(r for r in result.rows if r.date == event_date)

    return EventSalesResponse(
        event=_row_schema(row),
        sales=[TicketSale(**analytics.sale_payload(s)) for s in result.sales[event_date]],
    )


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------


@router.get("/time-series", response_model=TimeSeriesResponse)
def get_time_series(
    group_by: str = Query("instance", pattern="^(instance|month|year)$", description="Series granularity"),
    options: dict = Depends(_window_options),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: Profile = Depends(get_current_admin_user),
):
    """Tickets and revenue over the event window, grouped per event date, month or year."""
    window = analytics.resolve_window(clock, **options)
    points = analytics.build_time_series(db, window, group_by)

    return TimeSeriesResponse(
        window=_window_schema(window),
        group_by=group_by,
        series=_series_schema(points),
    )


@router.get("/overview", response_model=SalesOverview)
def get_overview(
    range_key: str = Query("30d", alias="range", pattern="^(7d|30d|90d)$", description="Trailing window"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: Profile = Depends(get_current_admin_user),
):
    """
    Sales overview for the trailing window.

    Only verified tickets count: paid, carrying a payment reference, and at
    least `MIN_VERIFIED_AMOUNT` minor units. The rest are reported in
    `excluded_tickets`.
    """
    o = analytics.sales_overview(db, clock, range_key)

    return SalesOverview(
        range=o.range,
        total_revenue=to_major_units(o.total_revenue),
        total_tickets=o.total_tickets,
        unique_purchasers=o.unique_purchasers,
        average_price=to_major_units(o.average_price),
        new_members=o.new_members,
        conversion_rate=o.conversion_rate,
        excluded_tickets=o.excluded_tickets,
        monthly=_series_schema(o.monthly),
    )


# ---------------------------------------------------------------------------
# Rebuild job
# ---------------------------------------------------------------------------


@router.post("/rebuild", response_model=RebuildResponse)
def rebuild_analytics(
    options: dict = Depends(_window_options),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    current_user: Profile = Depends(get_current_admin_user),
):
    """Recompute every event date's stats from the full ticket snapshot."""
    window = analytics.resolve_window(clock, **options)
    try:
        return analytics.rebuild_event_stats(db, window)
    except SQLAlchemyError as e:
        logger.exception("Error rebuilding admin analytics")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})
