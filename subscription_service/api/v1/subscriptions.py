"""
Subscription API endpoints
"""
import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from subscription_service.api.deps import get_db, get_cookie_user_id
from subscription_service.application.period_cost import PeriodCostUseCase
from subscription_service.application.subscriptions import (
    ListSubscriptionsUseCase, CreateSubscriptionUseCase,
    UpdateSubscriptionUseCase, DeleteSubscriptionUseCase,
)
from subscription_service.domain.errors import (
    SubscriptionError, InvalidInput, NotFound, DuplicateEntry, OperationCancelled,
)
from subscription_service.domain.month import format_month


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscription", tags=["subscriptions"])

PRICE_MIN = -(2 ** 63)
PRICE_MAX = 2 ** 63 - 1


# === Request/Response models ===

class SubscriptionRequest(BaseModel):
    user_id: uuid.UUID
    service_name: str
    price: int = Field(ge=PRICE_MIN, le=PRICE_MAX)  # BIGINT column
    start_date: str  # "MM-YYYY"


class SubscriptionResponse(BaseModel):
    id: int
    user_id: uuid.UUID
    service_name: str
    price: int
    start_date: str  # "MM-YYYY"


# === Helper function ===

def _error_response(exc: SubscriptionError, not_found_status: int = status.HTTP_404_NOT_FOUND) -> JSONResponse:
    """Map a subscription error to an HTTP response"""
    if isinstance(exc, (InvalidInput, DuplicateEntry)):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFound):
        code = not_found_status
    elif isinstance(exc, OperationCancelled):
        code = status.HTTP_504_GATEWAY_TIMEOUT
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=code, content={"result": exc.message})


# === Endpoints ===

@router.post("")
def create_subscription(req: SubscriptionRequest, db: Session = Depends(get_db)):
    """Создать новую подписку"""
    try:
        sub_id = CreateSubscriptionUseCase(db).execute(
            user_id=req.user_id,
            service_name=req.service_name,
            price=req.price,
            start_date=req.start_date,
        )
    except SubscriptionError as exc:
        return _error_response(exc)

    return {"result": "Подписка успешно создана", "id": sub_id}


@router.get("/users", response_model=list[SubscriptionResponse])
def list_subscriptions(
    user_id: uuid.UUID = Depends(get_cookie_user_id),
    db: Session = Depends(get_db),
):
    """Список подписок пользователя из cookie userId"""
    try:
        subs = ListSubscriptionsUseCase(db).execute(user_id)
    except SubscriptionError as exc:
        return _error_response(exc)

    return [
        SubscriptionResponse(
            id=s.id,
            user_id=s.user_id,
            service_name=s.service_name,
            price=s.price,
            start_date=format_month(s.start_date),
        )
        for s in subs
    ]


@router.put("")
def update_subscription(
    req: SubscriptionRequest,
    id: int = Query(...),
    db: Session = Depends(get_db),
):
    """Обновить подписку по id из query-параметров"""
    try:
        UpdateSubscriptionUseCase(db).execute(
            sub_id=id,
            user_id=req.user_id,
            service_name=req.service_name,
            price=req.price,
            start_date=req.start_date,
        )
    except SubscriptionError as exc:
        return _error_response(exc, not_found_status=status.HTTP_400_BAD_REQUEST)

    return {"result": "Подписка успешно обновлена"}


@router.delete("")
def delete_subscription(id: int = Query(...), db: Session = Depends(get_db)):
    """Удалить подписку по id из query-параметров"""
    try:
        DeleteSubscriptionUseCase(db).execute(sub_id=id)
    except SubscriptionError as exc:
        return _error_response(exc, not_found_status=status.HTTP_400_BAD_REQUEST)

    return {"result": "Подписка успешно удалена"}


@router.get("/total-price")
def total_price(
    user_id: uuid.UUID = Query(...),
    start_date: str = Query(...),
    end_date: str = Query(...),
    service_name: list[str] = Query(default=[]),
    db: Session = Depends(get_db),
):
    """Общая стоимость подписок за период, опционально по списку сервисов"""
    try:
        total = PeriodCostUseCase(db).execute(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            service_names=service_name,
        )
    except SubscriptionError as exc:
        return _error_response(exc)

    return {"result": total}
