"""
Month-year utilities: parsing/formatting of "MM-YYYY" and month normalization.

Usage:
    from app.utils.month_year import parse_month_year, format_month_year

    parse_month_year("07-2025")          -> date(2025, 7, 1)
    format_month_year(date(2025, 7, 19)) -> "07-2025"
"""
import re
from datetime import date, datetime

# Допустимый диапазон годов (границы не включаются)
MIN_YEAR = 1900
MAX_YEAR = 2500

_DIGITS = re.compile(r"[0-9]+")


class MonthYearError(ValueError):
    pass


def month_start(d: date | datetime) -> date:
    """Truncate a date (or datetime) to the first day of its month."""
    if isinstance(d, datetime):
        d = d.date()
    return date(d.year, d.month, 1)


def parse_month_year(value: str) -> date:
    """
    Разобрать строку "MM-YYYY" в дату первого числа месяца

    Raises:
        MonthYearError: неверный формат, месяц вне 1..12 или год вне диапазона
    """
    parts = value.strip().split("-")
    if len(parts) != 2:
        raise MonthYearError("invalid date format, expected MM-YYYY")

    # Только ASCII-цифры: int() принимает пробелы, "_" и юникодные цифры
    if not _DIGITS.fullmatch(parts[0]):
        raise MonthYearError("invalid month")
    if not _DIGITS.fullmatch(parts[1]):
        raise MonthYearError("invalid year")

    month = int(parts[0])
    year = int(parts[1])

    if month < 1 or month > 12:
        raise MonthYearError("month must be between 01 and 12")
    if year <= MIN_YEAR or year >= MAX_YEAR:
        raise MonthYearError("year out of range")

    return date(year, month, 1)


def format_month_year(d: date | datetime) -> str:
    d = month_start(d)
    return f"{d.month:02d}-{d.year:04d}"
