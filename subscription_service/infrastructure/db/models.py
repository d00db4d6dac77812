"""
SQLAlchemy ORM models
"""
import uuid
from datetime import date as date_type

from sqlalchemy import String, BigInteger, Date, TIMESTAMP, DateTime, Uuid, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from subscription_service.infrastructure.db.session import Base


class SubscriptionModel(Base):
    """
    User subscription to a named service

    start_date всегда первое число месяца (см. domain/month.py).
    Одна и та же тройка (user_id, service_name, start_date) не может
    встречаться дважды - дубликат отклоняется, а не сливается.
    """
    __tablename__ = "subscription"
    __table_args__ = (
        UniqueConstraint("user_id", "service_name", "start_date", name="uq_subscription_user_service_start"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    service_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)  # minor currency units
    start_date: Mapped[date_type] = mapped_column(Date, nullable=False)

    created_at: Mapped[DateTime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
