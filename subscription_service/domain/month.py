"""
Month/year values - wire format "MM-YYYY" <-> date anchored at day 1.

Day-of-month has no meaning for a subscription start: every stored date is
the first day of its month, so range comparison on dates is the same as
comparison on (year, month).

    >>> parse_month("09-2025")
    datetime.date(2025, 9, 1)
    >>> format_month(date(2025, 9, 17))
    '09-2025'
"""
import re
from datetime import date

from subscription_service.domain.errors import InvalidInput

MONTH_FORMAT = "MM-YYYY"

# Месяц строго двумя цифрами, год строго четырьмя
_MONTH_RE = re.compile(r"([0-9]{2})-([0-9]{4})")


def parse_month(value: str) -> date:
    """
    Разобрать "MM-YYYY" в дату первого числа месяца

    Raises:
        InvalidInput: на любой другой форме ("9-2025", "2025-09", "13-2025", "")
    """
    if not isinstance(value, str):
        raise InvalidInput(f"Дата должна быть строкой формата {MONTH_FORMAT}")

    m = _MONTH_RE.fullmatch(value)
    if not m:
        raise InvalidInput(f"Некорректная дата {value!r}, ожидается {MONTH_FORMAT}")

    month, year = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise InvalidInput(f"Некорректный месяц в дате {value!r}")
    if year < 1:
        raise InvalidInput(f"Некорректный год в дате {value!r}")

    return date(year, month, 1)


def format_month(value: date) -> str:
    """Date -> "MM-YYYY" (day is ignored)"""
    return f"{value.month:02d}-{value.year:04d}"
