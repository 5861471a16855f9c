"""
Subscription domain entity and query value objects
"""
import uuid
from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Subscription:
    """
    Subscription snapshot (read-only for aggregation)

    start_date / end_date всегда нормализованы к 1-му числу месяца.
    end_date = None означает, что подписка активна до сих пор.
    """
    id: uuid.UUID
    service_name: str
    price: int  # monthly cost, whole units
    user_id: uuid.UUID
    start_date: date
    end_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, model) -> "Subscription":
        """Build a snapshot from a SubscriptionModel row."""
        return cls(
            id=model.id,
            service_name=model.service_name,
            price=model.price,
            user_id=model.user_id,
            start_date=model.start_date,
            end_date=model.end_date,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


@dataclass(frozen=True)
class SubscriptionFilter:
    """Optional equality filters, ANDed when both are set."""
    user_id: uuid.UUID | None = None
    service_name: str | None = None


@dataclass(frozen=True)
class AggregationWindow:
    """Inclusive [period_start, period_end] range of calendar months."""
    period_start: date
    period_end: date
