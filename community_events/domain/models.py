"""Domain models for recurring-event ticket analytics.

These are pure value objects. Persistence models live in
community_events/models/ and are converted at the service boundary.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Self

from community_events.domain.errors import InvalidArgumentError

# Lower-cased raw ticket statuses that count as collected money
PAID_RAW_STATUSES = ("paid", "completed")


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    OTHER = "other"

    @classmethod
    def from_raw(cls, raw: str | None) -> Self:
        """Map a raw ticket status string onto the four payment states."""
        value = (raw or "").strip().lower()
        if value in PAID_RAW_STATUSES:
            return cls.PAID
        if value == "pending":
            return cls.PENDING
        if value in ("failed", "cancelled", "canceled", "refunded"):
            return cls.FAILED
        return cls.OTHER


class Weekday(int, Enum):
    """ISO weekday numbers, Monday = 1."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def parse(cls, value: "Weekday | str | int") -> Self:
        """Accept a member, an English name or 3-letter abbreviation, or 1..7."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidArgumentError(f"Unknown weekday: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidArgumentError(f"Unknown weekday: {value!r}") from None
        if isinstance(value, str):
            key = value.strip().upper()
            for member in cls:
                if key == member.name or (len(key) == 3 and member.name.startswith(key)):
                    return member
        raise InvalidArgumentError(f"Unknown weekday: {value!r}")


class InstanceStatus(str, Enum):
    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"


@dataclass(frozen=True)
class PurchaseRecord:
    """A snapshot of one ticket purchase, as read from storage."""

    id: str
    purchaser_id: str
    amount_minor_units: int
    created_at: datetime
    payment_status: PaymentStatus
    payment_reference: str | None = None
    used_at: datetime | None = None

    def __post_init__(self) -> None:
        if isinstance(self.amount_minor_units, bool) or not isinstance(self.amount_minor_units, int):
            raise InvalidArgumentError("Purchase amount must be an integer number of minor units")
        if self.amount_minor_units < 0:
            raise InvalidArgumentError("Purchase amount cannot be negative")
        if not isinstance(self.created_at, datetime):
            raise InvalidArgumentError("Purchase created_at must be a datetime")
        if self.used_at is not None and not isinstance(self.used_at, datetime):
            raise InvalidArgumentError("Purchase used_at must be a datetime")

    @property
    def is_paid(self) -> bool:
        return self.payment_status is PaymentStatus.PAID

    @property
    def is_used(self) -> bool:
        """Checked in at the door."""
        return self.used_at is not None


@dataclass(frozen=True)
class EventInstance:
    """One occurrence of the weekly event, labelled relative to today."""

    date: date
    label: str
    status: InstanceStatus


@dataclass(frozen=True)
class EventStats:
    """Per-instance totals. Money stays in integer minor units."""

    tickets_sold: int = 0
    total_revenue: int = 0
    unique_purchasers: int = 0
    average_price: Decimal = Decimal("0")
    tickets_used: int = 0
    purchase_ids: tuple[str, ...] = field(default=())


@dataclass(frozen=True)
class SalesSummary:
    """Totals over a set of paid purchases, regardless of event instance."""

    tickets_sold: int
    total_revenue: int
    unique_purchasers: int
    average_price: Decimal
