"""
Subscription use cases: CRUD подписок.

Валидация входных данных выполняется здесь, до записи в БД:
end_date >= start_date гарантируется только на этом уровне.
"""
import logging
import uuid
from datetime import date
from sqlalchemy.orm import Session

from app.domain.subscription import Subscription, SubscriptionFilter
from app.infrastructure.db.subscription_repository import (
    SubscriptionRepository, SubscriptionNotFoundError,
)
from app.utils.month_year import month_start

logger = logging.getLogger(__name__)


class SubscriptionValidationError(ValueError):
    pass


def build_subscription(
    sub_id: uuid.UUID,
    service_name: str,
    price: int,
    user_id: uuid.UUID,
    start_date: date,
    end_date: date | None = None,
) -> Subscription:
    """Validate raw fields and build a month-normalized Subscription."""
    service_name = (service_name or "").strip()
    if not service_name:
        raise SubscriptionValidationError("service_name is required")
    if price < 0:
        raise SubscriptionValidationError("price must be >= 0")

    start = month_start(start_date)
    end = month_start(end_date) if end_date is not None else None
    if end is not None and end < start:
        raise SubscriptionValidationError("end_date before start_date")

    return Subscription(
        id=sub_id,
        service_name=service_name,
        price=price,
        user_id=user_id,
        start_date=start,
        end_date=end,
    )


class CreateSubscriptionUseCase:
    def __init__(self, db: Session):
        self.repo = SubscriptionRepository(db)

    def execute(
        self,
        service_name: str,
        price: int,
        user_id: uuid.UUID,
        start_date: date,
        end_date: date | None = None,
    ) -> Subscription:
        sub = build_subscription(uuid.uuid4(), service_name, price, user_id, start_date, end_date)
        created = self.repo.create(sub)
        logger.info(
            "Subscription created: id=%s user_id=%s service=%s",
            created.id, created.user_id, created.service_name,
        )
        return created


class GetSubscriptionUseCase:
    def __init__(self, db: Session):
        self.repo = SubscriptionRepository(db)

    def execute(self, sub_id: uuid.UUID) -> Subscription:
        return self.repo.get_by_id(sub_id)


class UpdateSubscriptionUseCase:
    def __init__(self, db: Session):
        self.repo = SubscriptionRepository(db)

    def execute(
        self,
        sub_id: uuid.UUID,
        service_name: str,
        price: int,
        user_id: uuid.UUID,
        start_date: date,
        end_date: date | None = None,
    ) -> Subscription:
        sub = build_subscription(sub_id, service_name, price, user_id, start_date, end_date)
        updated = self.repo.update(sub)
        logger.info("Subscription updated: id=%s", updated.id)
        return updated


class DeleteSubscriptionUseCase:
    def __init__(self, db: Session):
        self.repo = SubscriptionRepository(db)

    def execute(self, sub_id: uuid.UUID) -> None:
        self.repo.delete(sub_id)
        logger.info("Subscription deleted: id=%s", sub_id)


class ListSubscriptionsUseCase:
    def __init__(self, db: Session):
        self.repo = SubscriptionRepository(db)

    def execute(
        self,
        user_id: uuid.UUID | None = None,
        service_name: str | None = None,
    ) -> list[Subscription]:
        return self.repo.find_all(SubscriptionFilter(user_id=user_id, service_name=service_name))
