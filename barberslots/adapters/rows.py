"""
Parsing of backend rows into domain models.

Both data stores receive rows in the same shape as the hosted backend's
tables, so the conversion lives here.
"""

from datetime import time
from typing import Any, Dict

import pendulum
from pendulum import DateTime

from ..domain.models import BarberAbsence, BarberShift, BlockedInterval, BookedInterval

CANCELLED_STATUS = "cancelled"


def parse_time_of_day(value: str) -> time:
    """
    Parse a backend time column ("HH:mm" or "HH:mm:ss") to a time-of-day.

    Raises:
        ValueError: If the value is not a time
    """
    parsed = pendulum.parse(f"{value[:5]}:00", exact=True)
    if not isinstance(parsed, time):
        raise ValueError(f"Could not parse time of day: {value}")
    return time(hour=parsed.hour, minute=parsed.minute)


def parse_datetime(value: str, timezone: str) -> DateTime:
    """Parse an ISO 8601 timestamp and convert it to the shop's timezone."""
    parsed = pendulum.parse(value, tz=timezone)
    if not isinstance(parsed, DateTime):
        raise ValueError(f"Could not parse datetime: {value}")
    return parsed.in_timezone(timezone)


def is_cancelled(row: Dict[str, Any]) -> bool:
    return (row.get("status") or "").lower() == CANCELLED_STATUS


def parse_booking_row(row: Dict[str, Any]) -> BookedInterval:
    """
    Convert an appointments row with its embedded service to a BookedInterval.

    A missing service leaves the duration unset.
    """
    service = row.get("services") or {}
    duration = service.get("duration_minutes")
    return BookedInterval(
        start_time=parse_time_of_day(row["appointment_time"]),
        duration_minutes=int(duration) if duration is not None else None,
    )


def parse_blocked_row(row: Dict[str, Any], timezone: str) -> BlockedInterval:
    return BlockedInterval(
        start=parse_datetime(row["start_datetime"], timezone),
        end=parse_datetime(row["end_datetime"], timezone),
        reason=row.get("reason"),
    )


def parse_shift_row(row: Dict[str, Any]) -> BarberShift:
    """
    Convert a barber_shifts row to a BarberShift.

    The backend stores day_of_week with 0=Sunday; the domain uses 0=Monday.
    """
    day_of_week = row.get("day_of_week")
    specific_date = row.get("specific_date")
    break_start = row.get("break_start")
    break_end = row.get("break_end")

    return BarberShift(
        barber_id=row["barber_id"],
        start_time=parse_time_of_day(row["start_time"]),
        end_time=parse_time_of_day(row["end_time"]),
        day_of_week=(int(day_of_week) - 1) % 7 if day_of_week is not None else None,
        specific_date=pendulum.parse(specific_date).date() if specific_date else None,
        is_recurring=row.get("is_recurring", True),
        break_start=parse_time_of_day(break_start) if break_start else None,
        break_end=parse_time_of_day(break_end) if break_end else None,
        active=(row.get("status") or "active") == "active",
    )


def parse_absence_row(row: Dict[str, Any]) -> BarberAbsence:
    """Convert a barber_absences row; both dates are inclusive."""
    return BarberAbsence(
        barber_id=row["barber_id"],
        start_date=pendulum.parse(row["start_date"]).date(),
        end_date=pendulum.parse(row["end_date"]).date(),
        type=row.get("type") or "vacation",
        notes=row.get("notes"),
    )


def parse_buffer_minutes(value: Any) -> int:
    """
    Parse the shop's buffer setting; unset means 0.

    Raises:
        ValueError: If the value is not a whole number
    """
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"buffer_minutes must be a whole number, got {value!r}")

    return int(value)
