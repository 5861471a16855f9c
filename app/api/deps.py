"""
FastAPI dependencies (DB session, repositories)
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from app.infrastructure.db.session import get_db as _get_db
from app.infrastructure.db.subscription_repository import SubscriptionRepository


# Re-export get_db для удобства
get_db = _get_db


def get_overlap_selector(db: Session = Depends(get_db)) -> SubscriptionRepository:
    """
    Источник кандидатов для агрегации

    Подменяется в тестах через app.dependency_overrides.
    """
    return SubscriptionRepository(db)
