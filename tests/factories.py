"""Builders shared by the test modules."""

import uuid
from datetime import date, datetime, timedelta, timezone

from jose import jwt

from community_events.core.config import settings
from community_events.core.security import ALGORITHM
from community_events.domain import PaymentStatus, PurchaseRecord

# A Tuesday
TODAY = date(2025, 9, 9)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def purchase(
    created_at,
    amount=2000,
    purchaser="u1",
    status=PaymentStatus.PAID,
    id=None,
    reference="cs_test",
    used_at=None,
):
    return PurchaseRecord(
        id=id or uuid.uuid4().hex,
        purchaser_id=purchaser,
        amount_minor_units=amount,
        created_at=created_at,
        payment_status=status,
        payment_reference=reference,
        used_at=used_at,
    )


def create_access_token(subject: str, expires_delta: timedelta = timedelta(minutes=60)) -> str:
    """Sign a token the way the hosted auth platform does."""
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject), "role": "authenticated"}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
