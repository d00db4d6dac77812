"""
Subscription use cases - CRUD подписок пользователя.

Each write is a single statement in its own transaction. "Zero rows
affected" is reported as NotFound, so no separate existence check is made
before UPDATE/DELETE.
"""
import logging
import uuid

from sqlalchemy import update, delete
from sqlalchemy.orm import Session

from subscription_service.domain.errors import InvalidInput, NotFound
from subscription_service.domain.month import parse_month
from subscription_service.infrastructure.db.errors import translate_db_errors, apply_statement_timeout
from subscription_service.infrastructure.db.models import SubscriptionModel

logger = logging.getLogger(__name__)


def as_user_id(value) -> uuid.UUID:
    """Accept UUID or its string form"""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        raise InvalidInput(f"Некорректный идентификатор пользователя {value!r}") from None


def as_subscription_id(value) -> int:
    if isinstance(value, bool):
        raise InvalidInput("Некорректный id подписки")
    # 1.9 не должно молча стать 1
    if isinstance(value, float) and not value.is_integer():
        raise InvalidInput(f"Некорректный id подписки {value!r}")
    try:
        return int(value)
    except (ValueError, TypeError):
        raise InvalidInput(f"Некорректный id подписки {value!r}") from None


# ============================================================================
# Subscriptions CRUD
# ============================================================================


class ListSubscriptionsUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user_id, timeout_ms: int | None = None) -> list[SubscriptionModel]:
        """
        Все подписки пользователя в порядке id

        Raises:
            NotFound: у пользователя нет ни одной подписки
            StorageFailure: ошибка БД
        """
        user_id = as_user_id(user_id)
        logger.debug("List subscriptions for user %s", user_id)

        with translate_db_errors(self.db, "list subscriptions"):
            apply_statement_timeout(self.db, timeout_ms)
            subs = (
                self.db.query(SubscriptionModel)
                .filter(SubscriptionModel.user_id == user_id)
                .order_by(SubscriptionModel.id)
                .all()
            )

        # Пустой список - это NotFound, а не пустой успех
        if not subs:
            raise NotFound("У пользователя нет подписок")
        return subs


class CreateSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        user_id,
        service_name: str,
        price: int,
        start_date: str,
        timeout_ms: int | None = None,
    ) -> int:
        user_id = as_user_id(user_id)
        start = parse_month(start_date)
        logger.debug("Create subscription %r for user %s from %s", service_name, user_id, start)

        sub = SubscriptionModel(
            user_id=user_id,
            service_name=service_name,
            price=price,
            start_date=start,
        )
        with translate_db_errors(self.db, "create subscription"):
            apply_statement_timeout(self.db, timeout_ms)
            self.db.add(sub)
            self.db.flush()
            self.db.commit()
        return sub.id


class UpdateSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        sub_id: int,
        user_id,
        service_name: str,
        price: int,
        start_date: str,
        timeout_ms: int | None = None,
    ) -> None:
        """
        Полная замена всех полей кроме id

        Raises:
            InvalidInput: некорректная дата / id
            NotFound: нет строки с таким id (БД не изменена)
            DuplicateEntry: новые значения нарушают уникальность
        """
        sub_id = as_subscription_id(sub_id)
        user_id = as_user_id(user_id)
        start = parse_month(start_date)
        logger.debug("Update subscription id=%d", sub_id)

        stmt = (
            update(SubscriptionModel)
            .where(SubscriptionModel.id == sub_id)
            .values(
                user_id=user_id,
                service_name=service_name,
                price=price,
                start_date=start,
            )
            .execution_options(synchronize_session=False)
        )
        with translate_db_errors(self.db, "update subscription"):
            apply_statement_timeout(self.db, timeout_ms)
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFound()
            self.db.commit()


class DeleteSubscriptionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, sub_id: int, timeout_ms: int | None = None) -> None:
        sub_id = as_subscription_id(sub_id)
        logger.debug("Delete subscription id=%d", sub_id)

        stmt = (
            delete(SubscriptionModel)
            .where(SubscriptionModel.id == sub_id)
            .execution_options(synchronize_session=False)
        )
        with translate_db_errors(self.db, "delete subscription"):
            apply_statement_timeout(self.db, timeout_ms)
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
                raise NotFound()
            self.db.commit()
