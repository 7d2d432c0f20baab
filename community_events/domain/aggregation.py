"""Fold purchase snapshots into per-instance statistics."""

from dataclasses import dataclass, field
from datetime import date, timezone, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Sequence, Set

from community_events.domain.attribution import as_utc, classify
from community_events.domain.models import EventStats, PurchaseRecord, SalesSummary

# Averages keep two decimals of a minor unit
_AVERAGE_QUANTUM = Decimal("0.01")


def average_minor_units(total: int, count: int) -> Decimal:
    if count == 0:
        return Decimal("0")
    return (Decimal(total) / Decimal(count)).quantize(_AVERAGE_QUANTUM, rounding=ROUND_HALF_UP)


def _purchase_order(purchase: PurchaseRecord):
    return as_utc(purchase.created_at), purchase.id


@dataclass
class _Accumulator:
    tickets_sold: int = 0
    total_revenue: int = 0
    tickets_used: int = 0
    purchasers: Set[str] = field(default_factory=set)
    purchases: List[PurchaseRecord] = field(default_factory=list)

    def add(self, purchase: PurchaseRecord) -> None:
        self.tickets_sold += 1
        self.total_revenue += purchase.amount_minor_units
        if purchase.is_used:
            self.tickets_used += 1
        self.purchasers.add(purchase.purchaser_id)
        self.purchases.append(purchase)

    def freeze(self) -> EventStats:
        ordered = sorted(self.purchases, key=_purchase_order)
        return EventStats(
            tickets_sold=self.tickets_sold,
            total_revenue=self.total_revenue,
            unique_purchasers=len(self.purchasers),
            average_price=average_minor_units(self.total_revenue, self.tickets_sold),
            tickets_used=self.tickets_used,
            purchase_ids=tuple(p.id for p in ordered),
        )


def aggregate(
    purchases: Iterable[PurchaseRecord],
    instances: Sequence[date],
    tz: tzinfo = timezone.utc,
) -> Dict[date, EventStats]:
    """
    Build one EventStats per instance date from a complete purchase snapshot.

    Only paid purchases count. Every instance appears in the result, in
    ascending order, even when nothing was sold for it.
    """
    if not instances:
        return {}
    ordered = sorted(set(instances))
    buckets: Dict[date, _Accumulator] = {day: _Accumulator() for day in ordered}
    for purchase in purchases:
        if not purchase.is_paid:
            continue
        buckets[classify(purchase, ordered, tz)].add(purchase)
    return {day: acc.freeze() for day, acc in buckets.items()}


def summarize(purchases: Iterable[PurchaseRecord]) -> SalesSummary:
    """Totals over the paid purchases in `purchases`."""
    paid = [p for p in purchases if p.is_paid]
    revenue = sum(p.amount_minor_units for p in paid)
    return SalesSummary(
        tickets_sold=len(paid),
        total_revenue=revenue,
        unique_purchasers=len({p.purchaser_id for p in paid}),
        average_price=average_minor_units(revenue, len(paid)),
    )
