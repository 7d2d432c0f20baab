from typing import Dict, List, Optional
from pydantic import BaseModel
from decimal import Decimal
from datetime import date, datetime


class EventWindow(BaseModel):
    today: date
    weekday: str
    past_count: int
    future_count: int
    instances: List[date]


# One tab of the per-event breakdown
class EventInstanceStats(BaseModel):
    date: date
    label: str
    status: str          # "past" | "current" | "future"
    tickets_sold: int
    total_revenue: Decimal
    unique_purchasers: int
    average_price: Decimal
    tickets_used: int


class EventAnalyticsResponse(BaseModel):
    window: EventWindow
    events: List[EventInstanceStats]
    total_tickets: int
    total_revenue: Decimal
    total_used: int


class TicketSale(BaseModel):
    id: str
    user_name: str
    amount: Decimal
    created_at: datetime
    status: str
    stripe_session_id: Optional[str] = None


class EventSalesResponse(BaseModel):
    event: EventInstanceStats
    sales: List[TicketSale]


class SeriesPoint(BaseModel):
    period: str          # "2025-09-09" | "2025-09" | "2025"
    tickets_sold: int
    revenue: Decimal


class TimeSeriesResponse(BaseModel):
    window: EventWindow
    group_by: str
    series: List[SeriesPoint]


# Rebuild job output, one entry per event date
class RebuildEventStats(BaseModel):
    date: date
    name: str
    tickets_sold: int
    total_revenue: int   # minor units, as stored
    unique_attendees: int
    tickets_used: int
    sales: List[TicketSale]


class RebuildResponse(BaseModel):
    success: bool
    message: str
    event_stats: Dict[str, RebuildEventStats]
    total_tickets: int
    total_revenue: int
    total_used: int


class SalesOverview(BaseModel):
    range: str
    total_revenue: Decimal
    total_tickets: int
    unique_purchasers: int
    average_price: Decimal
    new_members: int
    conversion_rate: float
    excluded_tickets: int
    monthly: List[SeriesPoint]
