"""
SQLAlchemy ORM models
"""
import uuid
from datetime import date as date_type, datetime
from sqlalchemy import Text, Integer, Date, TIMESTAMP, Uuid, CheckConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.db.session import Base


class SubscriptionModel(Base):
    """User subscription: monthly price over a range of calendar months"""
    __tablename__ = "subscriptions"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_subscriptions_price_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    service_name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    # Always the 1st of the month
    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)
    end_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)  # NULL = still active

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
