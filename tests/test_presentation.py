"""Unit tests for the display adapters."""

from datetime import date
from decimal import Decimal

import pytest

from community_events.domain import (
    EventStats,
    InstanceStatus,
    InvalidArgumentError,
    PaymentStatus,
    to_per_instance_view,
    to_period_series,
    to_time_series,
)
from community_events.domain.presentation import to_major_units

from factories import TODAY, purchase, utc

STATS = {
    date(2025, 9, 16): EventStats(tickets_sold=1, total_revenue=1999, unique_purchasers=1, average_price=Decimal("1999")),
    date(2025, 9, 2): EventStats(),
    date(2025, 9, 9): EventStats(
        tickets_sold=2, total_revenue=5000, unique_purchasers=2, average_price=Decimal("2500"), tickets_used=1
    ),
    date(2025, 10, 7): EventStats(tickets_sold=3, total_revenue=6000, unique_purchasers=3, average_price=Decimal("2000")),
}


class TestPerInstanceView:
    """Tests for to_per_instance_view."""

    def test_rows_sorted_and_labelled(self):
        rows = to_per_instance_view(STATS, TODAY)

        assert [r.date for r in rows] == sorted(STATS)
        assert [r.label for r in rows] == [
            "Sep 2 (Past)",
            "Sep 9 (Today)",
            "Sep 16 (Future)",
            "Oct 7 (Future)",
        ]
        assert rows[1].status is InstanceStatus.CURRENT

    def test_money_in_major_units(self):
        row = to_per_instance_view(STATS, TODAY)[1]

        assert row.total_revenue == Decimal("50.00")
        assert row.average_price == Decimal("25.00")
        assert row.tickets_sold == 2
        assert row.unique_purchasers == 2

    def test_used_tickets_carried_through(self):
        assert [r.tickets_used for r in to_per_instance_view(STATS, TODAY)] == [0, 1, 0, 0]

    def test_empty_stats(self):
        assert to_per_instance_view({}, TODAY) == []


class TestTimeSeries:
    """Tests for to_time_series."""

    def test_per_instance(self):
        series = to_time_series(STATS, "instance")

        assert [p.bucket_label for p in series] == ["2025-09-02", "2025-09-09", "2025-09-16", "2025-10-07"]
        assert series[2].total_revenue == Decimal("19.99")

    def test_per_month(self):
        series = to_time_series(STATS, "month")

        assert [(p.bucket_label, p.tickets_sold, p.total_revenue) for p in series] == [
            ("2025-09", 3, Decimal("69.99")),
            ("2025-10", 3, Decimal("60.00")),
        ]

    def test_per_year(self):
        series = to_time_series(STATS, "year")
        assert [(p.bucket_label, p.tickets_sold) for p in series] == [("2025", 6)]

    def test_unknown_bucketing_rejected(self):
        with pytest.raises(InvalidArgumentError):
            to_time_series(STATS, "week")


class TestPeriodSeries:
    """Tests for to_period_series over purchase dates."""

    def test_groups_paid_purchases_by_month(self):
        series = to_period_series(
            [
                purchase(utc(2025, 8, 30), amount=1000),
                purchase(utc(2025, 9, 1), amount=2000),
                purchase(utc(2025, 9, 2), amount=3000),
                purchase(utc(2025, 9, 2), amount=5000, status=PaymentStatus.PENDING),
            ],
            "month",
        )

        assert [(p.bucket_label, p.tickets_sold, p.total_revenue) for p in series] == [
            ("2025-08", 1, Decimal("10.00")),
            ("2025-09", 2, Decimal("50.00")),
        ]

    def test_per_day(self):
        series = to_period_series([purchase(utc(2025, 9, 1, 23))], "day")
        assert [p.bucket_label for p in series] == ["2025-09-01"]

    def test_unknown_bucketing_rejected(self):
        with pytest.raises(InvalidArgumentError):
            to_period_series([], "instance")


class TestMajorUnits:
    def test_cents_to_currency(self):
        assert to_major_units(1999) == Decimal("19.99")
        assert to_major_units(0) == Decimal("0.00")
        assert to_major_units(Decimal("1000.33")) == Decimal("10.00")
