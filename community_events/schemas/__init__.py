from community_events.schemas.common import ErrorResponse
from community_events.schemas.analytics import (
    EventWindow, EventInstanceStats, EventAnalyticsResponse,
    TicketSale, EventSalesResponse,
    SeriesPoint, TimeSeriesResponse,
    RebuildEventStats, RebuildResponse,
    SalesOverview,
)
