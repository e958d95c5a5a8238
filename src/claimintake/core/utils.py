"""Utility functions for the claims pipeline."""

from __future__ import annotations

import secrets
import string
import uuid
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation


CENTS = Decimal("0.01")
TRACKING_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_NUMBER_LENGTH = 12


def to_money(value: object) -> Decimal:
    """Coerce a currency value to a two-decimal-place ``Decimal``.

    Floats are converted through ``str`` so that ``150.1`` becomes
    ``Decimal("150.10")`` rather than its binary approximation. The value is
    never rounded: amounts with non-zero digits below one cent are rejected.

    Raises:
        ValueError: If the value is not a number or has sub-cent precision.
    """
    if isinstance(value, bool):
        msg = f"Invalid currency amount: {value!r}"
        raise ValueError(msg)
    if isinstance(value, float):
        value = str(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as e:
        msg = f"Invalid currency amount: {value!r}"
        raise ValueError(msg) from e
    if not amount.is_finite():
        msg = f"Invalid currency amount: {value!r}"
        raise ValueError(msg)
    try:
        cents = amount.quantize(CENTS)
    except InvalidOperation as e:
        msg = f"Invalid currency amount: {value!r}"
        raise ValueError(msg) from e
    if cents != amount:
        msg = f"Currency amount has more than two decimal places: {value!r}"
        raise ValueError(msg)
    return cents


def utcnow() -> datetime:
    return datetime.now(UTC)


def generate_claim_id() -> str:
    return f"CLM-{uuid.uuid4().hex.upper()}"


def generate_tracking_number() -> str:
    """Return a 12-character uppercase alphanumeric tracking token."""
    return "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_NUMBER_LENGTH))
