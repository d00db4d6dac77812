"""
Period cost - сумма цен подписок пользователя за период [start, end].

Both bounds are inclusive month values ("MM-YYYY"). An optional set of
service names narrows the sum to exact (case-sensitive) matches; an empty
set means no service filter at all.
"""
import logging
import uuid
from datetime import date
from typing import Iterable

from sqlalchemy import select, func, Select
from sqlalchemy.orm import Session

from subscription_service.application.subscriptions import as_user_id
from subscription_service.domain.month import parse_month
from subscription_service.infrastructure.db.errors import translate_db_errors, apply_statement_timeout
from subscription_service.infrastructure.db.models import SubscriptionModel

logger = logging.getLogger(__name__)


def build_period_cost_query(
    user_id: uuid.UUID,
    start: date,
    end: date,
    service_names: Iterable[str] = (),
) -> Select:
    """
    SELECT sum(price) FROM subscription
     WHERE user_id = :user_id AND start_date BETWEEN :start AND :end
     [AND service_name IN (:names)]

    The service clause is appended only for a non-empty filter; names are
    bound as an expanding parameter.
    """
    # Одно имя строкой - это фильтр по одному сервису, а не по символам
    if isinstance(service_names, str):
        service_names = [service_names]
    names = sorted(set(service_names))

    query = (
        select(func.sum(SubscriptionModel.price))
        .where(SubscriptionModel.user_id == user_id)
        .where(SubscriptionModel.start_date.between(start, end))
    )
    if names:
        query = query.where(SubscriptionModel.service_name.in_(names))
    return query


class PeriodCostUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id,
        start_date: str,
        end_date: str,
        service_names: Iterable[str] = (),
        timeout_ms: int | None = None,
    ) -> int:
        """
        Returns:
            Сумма цен (>= 0 для неотрицательных цен). Нет подходящих строк -> 0.

        Raises:
            InvalidInput: некорректная граница периода
            StorageFailure: ошибка БД (никогда не подменяется нулём)
        """
        user_id = as_user_id(user_id)
        start = parse_month(start_date)
        end = parse_month(end_date)
        query = build_period_cost_query(user_id, start, end, service_names or ())
        logger.debug("Period cost for user %s, %s..%s", user_id, start, end)

        with translate_db_errors(self.db, "period cost"):
            apply_statement_timeout(self.db, timeout_ms)
            total = self.db.execute(query).scalar_one()

        # SUM по пустому множеству даёт NULL - это законный ноль
        if total is None:
            return 0
        return int(total)
