from community_events.domain.aggregation import aggregate, summarize
from community_events.domain.attribution import classify
from community_events.domain.errors import DomainError, ErrorCode, InvalidArgumentError
from community_events.domain.event_calendar import (
    describe_instance,
    generate_instances,
    parse_reference_date,
)
from community_events.domain.models import (
    EventInstance,
    EventStats,
    InstanceStatus,
    PaymentStatus,
    PurchaseRecord,
    SalesSummary,
    Weekday,
)
from community_events.domain.presentation import (
    InstanceRow,
    SeriesPoint,
    to_per_instance_view,
    to_period_series,
    to_time_series,
)

__all__ = [
    "aggregate",
    "summarize",
    "classify",
    "generate_instances",
    "describe_instance",
    "parse_reference_date",
    "to_per_instance_view",
    "to_time_series",
    "to_period_series",
    "DomainError",
    "ErrorCode",
    "InvalidArgumentError",
    "EventInstance",
    "EventStats",
    "InstanceStatus",
    "PaymentStatus",
    "PurchaseRecord",
    "SalesSummary",
    "Weekday",
    "InstanceRow",
    "SeriesPoint",
]
