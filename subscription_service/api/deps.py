"""
FastAPI dependencies (DB session, user identification)
"""
import uuid

from fastapi import Cookie, HTTPException, status

from subscription_service.infrastructure.db.session import get_db as _get_db


# Re-export get_db для удобства
get_db = _get_db

USER_COOKIE = "userId"


def get_cookie_user_id(user_id: str | None = Cookie(default=None, alias=USER_COOKIE)) -> uuid.UUID:
    """
    Идентификатор пользователя из cookie userId

    Владение идентификатором не проверяется - это непрозрачный UUID.

    Raises:
        HTTPException(400): cookie нет или это не UUID
    """
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing userId cookie",
        )
    try:
        return uuid.UUID(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid userId cookie",
        ) from None
