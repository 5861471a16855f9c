"""Tests for Subscriptions use cases: validation and CRUD."""
import uuid
from datetime import date

import pytest

from app.application.subscriptions import (
    CreateSubscriptionUseCase, GetSubscriptionUseCase, UpdateSubscriptionUseCase,
    DeleteSubscriptionUseCase, ListSubscriptionsUseCase,
    SubscriptionValidationError, SubscriptionNotFoundError, build_subscription,
)
from app.infrastructure.db.models import SubscriptionModel


@pytest.fixture
def subscription(db_session, user_id):
    return CreateSubscriptionUseCase(db_session).execute(
        service_name="Yandex Plus",
        price=400,
        user_id=user_id,
        start_date=date(2025, 7, 1),
    )


# ======================================================================
# 0. build_subscription validation
# ======================================================================

class TestBuildSubscription:
    def test_trims_service_name(self, user_id):
        sub = build_subscription(uuid.uuid4(), "  Netflix ", 100, user_id, date(2025, 1, 1))
        assert sub.service_name == "Netflix"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_service_name(self, user_id, name):
        with pytest.raises(SubscriptionValidationError, match="service_name is required"):
            build_subscription(uuid.uuid4(), name, 100, user_id, date(2025, 1, 1))

    def test_negative_price(self, user_id):
        with pytest.raises(SubscriptionValidationError, match="price must be >= 0"):
            build_subscription(uuid.uuid4(), "Netflix", -1, user_id, date(2025, 1, 1))

    def test_zero_price_allowed(self, user_id):
        sub = build_subscription(uuid.uuid4(), "Free tier", 0, user_id, date(2025, 1, 1))
        assert sub.price == 0

    def test_end_before_start(self, user_id):
        with pytest.raises(SubscriptionValidationError, match="end_date before start_date"):
            build_subscription(
                uuid.uuid4(), "Netflix", 100, user_id, date(2025, 3, 1), date(2025, 2, 1),
            )

    def test_end_equal_start_allowed(self, user_id):
        sub = build_subscription(
            uuid.uuid4(), "Netflix", 100, user_id, date(2025, 3, 1), date(2025, 3, 1),
        )
        assert sub.end_date == sub.start_date

    def test_dates_normalized(self, user_id):
        sub = build_subscription(
            uuid.uuid4(), "Netflix", 100, user_id, date(2025, 3, 15), date(2025, 4, 30),
        )
        assert sub.start_date == date(2025, 3, 1)
        assert sub.end_date == date(2025, 4, 1)

    def test_same_month_with_later_day_start_is_valid(self, user_id):
        # 20.03 -> 05.03: same month after normalization
        sub = build_subscription(
            uuid.uuid4(), "Netflix", 100, user_id, date(2025, 3, 20), date(2025, 3, 5),
        )
        assert sub.start_date == sub.end_date == date(2025, 3, 1)


# ======================================================================
# 1. CRUD use cases
# ======================================================================

class TestCreateSubscription:
    def test_create(self, db_session, subscription, user_id):
        row = db_session.query(SubscriptionModel).filter(
            SubscriptionModel.id == subscription.id,
        ).first()
        assert row is not None
        assert row.service_name == "Yandex Plus"
        assert row.price == 400
        assert row.user_id == user_id
        assert row.end_date is None

    def test_create_generates_unique_ids(self, db_session, user_id):
        uc = CreateSubscriptionUseCase(db_session)
        a = uc.execute("A", 1, user_id, date(2025, 1, 1))
        b = uc.execute("B", 1, user_id, date(2025, 1, 1))
        assert a.id != b.id

    def test_create_invalid_does_not_persist(self, db_session, user_id):
        with pytest.raises(SubscriptionValidationError):
            CreateSubscriptionUseCase(db_session).execute("", 100, user_id, date(2025, 1, 1))
        assert db_session.query(SubscriptionModel).count() == 0


class TestGetSubscription:
    def test_get(self, db_session, subscription):
        got = GetSubscriptionUseCase(db_session).execute(subscription.id)
        assert got.id == subscription.id

    def test_get_missing(self, db_session):
        with pytest.raises(SubscriptionNotFoundError):
            GetSubscriptionUseCase(db_session).execute(uuid.uuid4())


class TestUpdateSubscription:
    def test_update(self, db_session, subscription, user_id):
        updated = UpdateSubscriptionUseCase(db_session).execute(
            subscription.id,
            service_name="Yandex Plus Multi",
            price=600,
            user_id=user_id,
            start_date=date(2025, 7, 1),
            end_date=date(2025, 12, 1),
        )
        assert updated.price == 600
        assert updated.end_date == date(2025, 12, 1)

    def test_update_validation(self, db_session, subscription, user_id):
        with pytest.raises(SubscriptionValidationError):
            UpdateSubscriptionUseCase(db_session).execute(
                subscription.id, "Yandex Plus", 600, user_id,
                date(2025, 7, 1), date(2025, 6, 1),
            )

    def test_update_missing(self, db_session, user_id):
        with pytest.raises(SubscriptionNotFoundError):
            UpdateSubscriptionUseCase(db_session).execute(
                uuid.uuid4(), "Netflix", 100, user_id, date(2025, 1, 1),
            )


class TestDeleteSubscription:
    def test_delete(self, db_session, subscription):
        DeleteSubscriptionUseCase(db_session).execute(subscription.id)
        assert db_session.query(SubscriptionModel).count() == 0

    def test_delete_missing(self, db_session):
        with pytest.raises(SubscriptionNotFoundError):
            DeleteSubscriptionUseCase(db_session).execute(uuid.uuid4())


class TestListSubscriptions:
    def test_list_with_filters(self, db_session, subscription, user_id):
        other = uuid.uuid4()
        CreateSubscriptionUseCase(db_session).execute("Netflix", 700, other, date(2025, 1, 1))

        uc = ListSubscriptionsUseCase(db_session)
        assert len(uc.execute()) == 2
        assert [s.id for s in uc.execute(user_id=user_id)] == [subscription.id]
        assert [s.service_name for s in uc.execute(service_name="Netflix")] == ["Netflix"]
        assert uc.execute(user_id=user_id, service_name="Netflix") == []
