"""
Logging setup - уровень и формат зависят от окружения (local / dev / prod)
"""
import logging

ENV_LOCAL = "local"
ENV_DEV = "dev"
ENV_PROD = "prod"

_VERBOSE_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def setup_logging(env: str) -> None:
    """
    Configure root logger for the given environment.

    local/dev - DEBUG с указанием модуля и строки
    prod      - INFO
    unknown   - DEBUG
    """
    env = (env or "").lower()

    if env in (ENV_LOCAL, ENV_DEV):
        level, fmt = logging.DEBUG, _VERBOSE_FORMAT
    elif env == ENV_PROD:
        level, fmt = logging.INFO, _PLAIN_FORMAT
    else:
        level, fmt = logging.DEBUG, _PLAIN_FORMAT

    logging.basicConfig(level=level, format=fmt, force=True)

    # SQL echo only when explicitly debugging the engine
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
