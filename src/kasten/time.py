# SPDX-License-Identifier: MIT

import datetime
from typing import Any, Optional, cast

import pendulum


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def add_days(datetime: pendulum.DateTime, days: int) -> pendulum.DateTime:
    """Calendar-day arithmetic; keeps the wall-clock time across month and year ends."""
    return datetime.add(days=days)


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.isoformat()


def datetime_to_iso_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_iso_str(datetime)


def datetime_from_str(datetime: str) -> pendulum.DateTime:
    parsed = pendulum.parse(datetime)
    if not isinstance(parsed, pendulum.DateTime):
        raise ValueError(f"not a datetime: {datetime}")
    return parsed


def datetime_from_str_optional(datetime: Optional[str]) -> Optional[pendulum.DateTime]:
    if datetime is None:
        return None
    return datetime_from_str(datetime)


def datetime_from_value(value: Any) -> pendulum.DateTime:
    """
    Coerce a timestamp read from YAML into a pendulum.DateTime.

    YAML loaders turn unquoted ISO timestamps into datetime/date objects,
    quoted ones stay strings.
    """
    if isinstance(value, pendulum.DateTime):
        return value
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return pendulum.instance(value, tz="UTC")
        return pendulum.instance(value)
    if isinstance(value, datetime.date):
        return pendulum.datetime(value.year, value.month, value.day, tz="UTC")
    if isinstance(value, str):
        return datetime_from_str(value.strip())
    raise ValueError(f"not a date or datetime: {value!r}")


def is_datetime_value(value: Any) -> bool:
    try:
        datetime_from_value(value)
    except (ValueError, TypeError):
        return False
    return True


def datetime_to_display_local_date_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("YYYY-MM-DD ddd")


def datetime_to_display_local_datetime_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("MMM-DD ddd HH:mm")


def datetime_to_display_local_datetime_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_display_local_datetime_str(datetime)


def datetime_from_str_utc(datetime: str) -> pendulum.DateTime:
    pendulum_date_time = cast(pendulum.DateTime, pendulum.parse(datetime, tz="local"))
    return pendulum_date_time.in_tz("UTC")
