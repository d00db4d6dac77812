"""
FastAPI application factory
"""
import logging
import time
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from subscription_service.config import Settings, get_settings
from subscription_service.infrastructure.db.session import (
    create_db_engine, create_session_factory, check_db_connection,
)
from subscription_service.logger import setup_logging
from subscription_service.api.v1 import subscriptions

logger = logging.getLogger(__name__)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Catches ALL exceptions including sync routes"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error(f"\n{'='*60}\nERROR on {request.method} {request.url.path}\n{tb_str}{'='*60}")
            return Response(content="Internal Server Error", status_code=500)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Application factory - создаёт и настраивает FastAPI приложение

    Engine и фабрика сессий создаются здесь и живут в app.state;
    пул соединений закрывается при остановке приложения.

    Returns:
        Настроенный FastAPI app
    """
    settings = settings or get_settings()
    setup_logging(settings.ENV)

    engine = create_db_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Subscription Service")
        yield
        logger.info("Stopping DB connection pool")
        engine.dispose()
        logger.info("Subscription Service stopped")

    app = FastAPI(
        title="Subscription Service",
        description="API для сервиса подписок",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # Middleware (последний добавленный - внешний)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ErrorLoggingMiddleware)

    # Некорректный запрос - 400, а не 422
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.debug("Bad request on %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={"result": "Неправильный запрос или невалидные данные"},
        )

    # Ошибки из зависимостей (cookie userId) - в том же формате {"result": ...}
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"result": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    app.include_router(subscriptions.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (проверяет доступность БД)"""
        check_db_connection(settings)
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "subscription_service.main:app",
        host=_settings.SERVER_HOST,
        port=_settings.SERVER_PORT,
    )
