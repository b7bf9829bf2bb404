"""
Derived-field calculator: age, service duration and service category.

All functions are pure. They accept a `date`, an ISO date string or None,
and take an optional `today` so results are reproducible for a fixed pair
of calendar dates. Absent or malformed input yields the zero result rather
than an exception; callers are expected to pass validated dates.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from airmen_registry.domain.enums import ServiceCategory
from airmen_registry.utils.logging import get_logger

log = get_logger(__name__)

DateInput = Union[date, str, None]

SERVICE_CATEGORY_THRESHOLD_YEARS = 15


def parse_date(value: DateInput) -> Optional[date]:
    """Coerce `value` to a date, returning None when absent or unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip()[:10])
    except (AttributeError, ValueError):
        log.debug("Ignoring malformed date", extra={"value": repr(value)})
        return None


def _difference(value: DateInput, today: Optional[date]) -> Optional[relativedelta]:
    start = parse_date(value)
    if start is None:
        return None
    return relativedelta(today or date.today(), start)


def age(dob: DateInput, today: Optional[date] = None) -> int:
    """Whole years between `dob` and `today`."""
    delta = _difference(dob, today)
    return delta.years if delta else 0


def tenure_years(value: DateInput, today: Optional[date] = None) -> int:
    """Whole years elapsed since `value`."""
    delta = _difference(value, today)
    return delta.years if delta else 0


def tenure(value: DateInput, today: Optional[date] = None) -> str:
    """
    Elapsed time since `value` formatted as ``"<years>y <months>m"``.

    Months is the whole-month difference modulo 12, so 15 years and 3 months
    renders as ``"15y 3m"``.
    """
    delta = _difference(value, today)
    if delta is None:
        return "0y 0m"
    return f"{delta.years}y {delta.months}m"


def service_category(doe: DateInput, today: Optional[date] = None) -> ServiceCategory:
    """Classify tenure from the date of enrollment."""
    if tenure_years(doe, today) >= SERVICE_CATEGORY_THRESHOLD_YEARS:
        return ServiceCategory.ABOVE_15
    return ServiceCategory.BELOW_15


__all__ = [
    "SERVICE_CATEGORY_THRESHOLD_YEARS",
    "parse_date",
    "age",
    "tenure",
    "tenure_years",
    "service_category",
]
