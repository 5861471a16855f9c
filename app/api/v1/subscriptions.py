"""
Subscription API endpoints (CRUDL + cost aggregation)
"""
import logging
import uuid
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_overlap_selector
from app.application.aggregation import SubscriptionTotalService
from app.application.subscriptions import (
    CreateSubscriptionUseCase, GetSubscriptionUseCase, UpdateSubscriptionUseCase,
    DeleteSubscriptionUseCase, ListSubscriptionsUseCase,
    SubscriptionValidationError, SubscriptionNotFoundError,
)
from app.domain.subscription import Subscription
from app.utils.month_year import parse_month_year, format_month_year, MonthYearError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


# === Request/Response models ===

class SubscriptionRequest(BaseModel):
    service_name: str
    price: int
    user_id: str
    start_date: str  # MM-YYYY
    end_date: str | None = None  # MM-YYYY, пусто = активна


class SubscriptionResponse(BaseModel):
    id: str
    service_name: str
    price: int
    user_id: str
    start_date: str
    end_date: str  # "" если подписка бессрочная
    created_at: str
    updated_at: str


class TotalResponse(BaseModel):
    total: int
    period_start: str
    period_end: str


# === Helper functions ===

def _to_response(s: Subscription) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=str(s.id),
        service_name=s.service_name,
        price=s.price,
        user_id=str(s.user_id),
        start_date=format_month_year(s.start_date),
        end_date=format_month_year(s.end_date) if s.end_date else "",
        created_at=s.created_at.isoformat() if s.created_at else "",
        updated_at=s.updated_at.isoformat() if s.updated_at else "",
    )


def _parse_uuid(value: str, field: str) -> uuid.UUID:
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        logger.warning("invalid %s: %r", field, value)
        raise HTTPException(status_code=400, detail=f"invalid {field}")


def _parse_month(value: str, field: str) -> date:
    try:
        return parse_month_year(value)
    except MonthYearError as e:
        logger.warning("invalid %s %r: %s", field, value, e)
        raise HTTPException(status_code=400, detail=f"invalid {field}")


def _parse_request(req: SubscriptionRequest) -> dict:
    """Разобрать payload в аргументы use case (user_id, даты MM-YYYY)"""
    try:
        user_id = uuid.UUID(req.user_id.strip())
    except ValueError:
        raise SubscriptionValidationError("invalid user_id")

    start = parse_month_year(req.start_date)
    end = None
    if req.end_date and req.end_date.strip():
        end = parse_month_year(req.end_date)

    return dict(
        service_name=req.service_name,
        price=req.price,
        user_id=user_id,
        start_date=start,
        end_date=end,
    )


def _db_error(action: str) -> HTTPException:
    logger.exception("%s: db error", action)
    return HTTPException(status_code=500, detail="db error")


# === Endpoints ===

@router.post("/", response_model=SubscriptionResponse, status_code=201)
def create_subscription(req: SubscriptionRequest, db: Session = Depends(get_db)):
    """Создать подписку"""
    try:
        fields = _parse_request(req)
        sub = CreateSubscriptionUseCase(db).execute(**fields)
    except (SubscriptionValidationError, MonthYearError) as e:
        logger.warning("Create: validation error: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        raise _db_error("Create")

    return _to_response(sub)


@router.get("/", response_model=list[SubscriptionResponse])
def list_subscriptions(
    db: Session = Depends(get_db),
    user_id: str = "",
    service_name: str = "",
):
    """Список подписок с необязательными фильтрами"""
    uid = _parse_uuid(user_id, "user_id") if user_id.strip() else None
    name = service_name.strip() or None

    try:
        items = ListSubscriptionsUseCase(db).execute(user_id=uid, service_name=name)
    except SQLAlchemyError:
        raise _db_error("List")

    return [_to_response(s) for s in items]


# Declared before /{subscription_id} so "total" is not taken for an id
@router.get("/total", response_model=TotalResponse)
def total_cost(
    selector=Depends(get_overlap_selector),
    start_date: str = "",
    end_date: str = "",
    user_id: str = "",
    service_name: str = "",
):
    """
    Суммарная стоимость подписок за период (MM-YYYY .. MM-YYYY)

    Учитываются только месяцы, в которые подписка была активна.
    """
    start_str = start_date.strip()
    end_str = end_date.strip()
    if not start_str or not end_str:
        logger.warning("Aggregation: missing start_date or end_date")
        raise HTTPException(status_code=400, detail="start_date and end_date required")

    period_start = _parse_month(start_str, "start_date")
    period_end = _parse_month(end_str, "end_date")
    uid = _parse_uuid(user_id, "user_id") if user_id.strip() else None
    name = service_name.strip() or None

    try:
        total = SubscriptionTotalService(selector).total(
            period_start, period_end, user_id=uid, service_name=name,
        )
    except SQLAlchemyError:
        raise _db_error("Aggregation")

    return TotalResponse(total=total, period_start=start_str, period_end=end_str)


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription(subscription_id: str, db: Session = Depends(get_db)):
    """Получить подписку по ID"""
    sub_id = _parse_uuid(subscription_id, "id")
    try:
        sub = GetSubscriptionUseCase(db).execute(sub_id)
    except SubscriptionNotFoundError:
        logger.info("Get: not found: id=%s", sub_id)
        raise HTTPException(status_code=404, detail="not found")
    except SQLAlchemyError:
        raise _db_error("Get")

    return _to_response(sub)


@router.put("/{subscription_id}", response_model=SubscriptionResponse)
def update_subscription(
    subscription_id: str,
    req: SubscriptionRequest,
    db: Session = Depends(get_db),
):
    """Обновить подписку (полная замена полей)"""
    sub_id = _parse_uuid(subscription_id, "id")
    try:
        fields = _parse_request(req)
        sub = UpdateSubscriptionUseCase(db).execute(sub_id, **fields)
    except (SubscriptionValidationError, MonthYearError) as e:
        logger.warning("Update: validation error: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except SubscriptionNotFoundError:
        raise HTTPException(status_code=404, detail="not found")
    except SQLAlchemyError:
        raise _db_error("Update")

    return _to_response(sub)


@router.delete("/{subscription_id}", status_code=204)
def delete_subscription(subscription_id: str, db: Session = Depends(get_db)):
    """Удалить подписку"""
    sub_id = _parse_uuid(subscription_id, "id")
    try:
        DeleteSubscriptionUseCase(db).execute(sub_id)
    except SubscriptionNotFoundError:
        logger.info("Delete: not found: id=%s", sub_id)
        raise HTTPException(status_code=404, detail="not found")
    except SQLAlchemyError:
        raise _db_error("Delete")

    return Response(status_code=204)
