"""Shared types, enums, and base models used across the production core."""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_uuid7() -> UUID:
    """Generate a new time-sortable UUID v7."""
    return uuid7()


# --- Reusable annotated types ---

UUIDv7 = Annotated[UUID, Field(description="Time-sortable UUID v7.")]
UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]


# --- Shared enums ---


class DivisionPolicy(StrEnum):
    """How elementwise division treats zero divisors.

    PROPAGATE keeps IEEE semantics (x/0 -> inf, 0/0 -> nan).
    RAISE fails with InvalidEfficiencyError.
    CLAMP_ZERO writes 0 wherever the divisor is 0.
    """

    PROPAGATE = "PROPAGATE"
    RAISE = "RAISE"
    CLAMP_ZERO = "CLAMP_ZERO"


class BindingSource(StrEnum):
    """Which constraint block set the production of a sector-region."""

    STOCK = "STOCK"
    INFLOW = "INFLOW"
    ORDER = "ORDER"


# --- Base model ---


class ProductionBase(BaseModel):
    """Base model with common configuration for all production-core Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "ser_json_timedelta": "iso8601",
        "protected_namespaces": (),
    }
