"""
Subscription Repository - persistence of subscriptions (SQLAlchemy ORM)
"""
import uuid
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.domain.subscription import Subscription, SubscriptionFilter, AggregationWindow
from app.infrastructure.db.models import SubscriptionModel


class SubscriptionNotFoundError(LookupError):
    pass


class SubscriptionRepository:
    """
    Repository для таблицы subscriptions

    Возвращает доменные снапшоты (Subscription), а не ORM-объекты.
    Реализует OverlapSelector для движка агрегации.
    """

    def __init__(self, db: Session):
        self.db = db

    def _get_model(self, sub_id: uuid.UUID) -> SubscriptionModel:
        model = self.db.query(SubscriptionModel).filter(
            SubscriptionModel.id == sub_id,
        ).first()
        if not model:
            raise SubscriptionNotFoundError(f"subscription {sub_id} not found")
        return model

    def _apply_filter(self, query, flt: SubscriptionFilter):
        if flt.user_id is not None:
            query = query.filter(SubscriptionModel.user_id == flt.user_id)
        if flt.service_name is not None:
            query = query.filter(SubscriptionModel.service_name == flt.service_name)
        return query

    def create(self, sub: Subscription) -> Subscription:
        model = SubscriptionModel(
            id=sub.id,
            service_name=sub.service_name,
            price=sub.price,
            user_id=sub.user_id,
            start_date=sub.start_date,
            end_date=sub.end_date,
        )
        self.db.add(model)
        self.db.flush()
        self.db.commit()
        self.db.refresh(model)
        return Subscription.from_model(model)

    def get_by_id(self, sub_id: uuid.UUID) -> Subscription:
        return Subscription.from_model(self._get_model(sub_id))

    def update(self, sub: Subscription) -> Subscription:
        """Full replace of the mutable fields; bumps updated_at."""
        model = self._get_model(sub.id)
        model.service_name = sub.service_name
        model.price = sub.price
        model.user_id = sub.user_id
        model.start_date = sub.start_date
        model.end_date = sub.end_date
        model.updated_at = func.now()
        self.db.commit()
        self.db.refresh(model)
        return Subscription.from_model(model)

    def delete(self, sub_id: uuid.UUID) -> None:
        model = self._get_model(sub_id)
        self.db.delete(model)
        self.db.commit()

    def find_all(self, flt: SubscriptionFilter | None = None) -> list[Subscription]:
        query = self._apply_filter(self.db.query(SubscriptionModel), flt or SubscriptionFilter())
        rows = query.order_by(SubscriptionModel.created_at.desc()).all()
        return [Subscription.from_model(m) for m in rows]

    def fetch_overlapping(
        self, flt: SubscriptionFilter, window: AggregationWindow,
    ) -> list[Subscription]:
        """
        Подписки, чей срок жизни пересекается с окном:
        start_date <= period_end AND (end_date IS NULL OR end_date >= period_start)
        """
        query = self._apply_filter(self.db.query(SubscriptionModel), flt).filter(
            SubscriptionModel.start_date <= window.period_end,
            or_(
                SubscriptionModel.end_date.is_(None),
                SubscriptionModel.end_date >= window.period_start,
            ),
        )
        rows = query.order_by(SubscriptionModel.start_date.asc()).all()
        return [Subscription.from_model(m) for m in rows]
