"""
Database session management (SQLAlchemy)

Engine and session factory are built explicitly from Settings inside
create_app() and kept on app.state - no module-level singletons.
"""
import psycopg
from fastapi import Request
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from subscription_service.config import Settings


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM models
    """
    pass


def create_db_engine(settings: Settings) -> Engine:
    """
    Create engine with a bounded connection pool

    Pool size / overflow / acquisition timeout come from settings; when the
    pool is exhausted for longer than DB_POOL_TIMEOUT the caller gets
    sqlalchemy.exc.TimeoutError (-> OperationCancelled).
    """
    url = settings.get_sqlalchemy_url()
    kwargs = {"pool_pre_ping": True}

    if url.startswith("postgresql"):
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            connect_args={
                "connect_timeout": settings.DB_CONNECT_TIMEOUT,
                "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
            },
        )

    return create_engine(url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def get_db(request: Request) -> Session:
    """
    Dependency для FastAPI - создает session и автоматически закрывает

    Usage:
        @router.get("/subscription/users")
        def list_subscriptions(db: Session = Depends(get_db)):
            ...
    """
    SessionLocal = request.app.state.session_factory
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection(settings: Settings) -> None:
    """
    Health check - проверка доступности PostgreSQL (raw psycopg)

    Raises:
        psycopg.OperationalError: если БД недоступна
    """
    with psycopg.connect(settings.get_psycopg_dsn(), connect_timeout=3) as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1;")
            cur.fetchone()
