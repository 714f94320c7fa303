"""
Domain models for bookings, blocks and slot availability.
"""

from dataclasses import dataclass, field
from datetime import time
from typing import Iterable, List, Tuple

from pendulum import Date, DateTime

DEFAULT_SERVICE_DURATION = 30


class ConflictReason:
    """Reasons reported on an unavailable slot."""
    BLOCKED = "blocked"
    OCCUPIED = "occupied"


def minutes_of_day(value: time) -> int:
    """Return the minutes elapsed since midnight for a time-of-day."""
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class TimeSlot:
    """
    A candidate appointment start time within a business day.

    Invariant: conflict_reason is set if and only if the slot is unavailable.
    """
    time: time
    available: bool
    barber_id: str
    conflict_reason: str | None = None

    def label(self) -> str:
        """Return the slot start as HH:mm."""
        return self.time.strftime("%H:%M")


@dataclass(frozen=True)
class BookedInterval:
    """
    An existing, non-cancelled appointment for a barber on a date.

    duration_minutes is None when the appointment lost its service reference.
    """
    start_time: time
    duration_minutes: int | None = None

    def effective_duration(self) -> int:
        """Return the duration, falling back to the default service length."""
        if not self.duration_minutes:
            return DEFAULT_SERVICE_DURATION
        return self.duration_minutes

    def start_minute(self) -> int:
        return minutes_of_day(self.start_time)

    def end_minute(self, buffer_minutes: int = 0) -> int:
        """Return the minute of day at which the barber is free again."""
        return self.start_minute() + self.effective_duration() + buffer_minutes


@dataclass(frozen=True)
class BlockedInterval:
    """
    A manually blocked window for a barber (vacation, lunch, ...).

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime
    reason: str | None = None

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def contains(self, moment: DateTime) -> bool:
        """Check if a moment falls inside the half-open block window."""
        return self.start <= moment < self.end

    def overlaps_day(self, day: DateTime) -> bool:
        """Check if any part of the block falls on the given day."""
        day_start = day.start_of("day")
        day_end = day_start.add(days=1)
        return self.start < day_end and self.end > day_start


@dataclass(frozen=True)
class BusinessHours:
    """
    Opening hours and the slot grid for a business day.
    """
    start_hour: int = 9
    end_hour: int = 19
    slot_step_minutes: int = 30

    def __post_init__(self):
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise ValueError(
                f"Business hours must satisfy 0 <= start < end <= 24, "
                f"got {self.start_hour}-{self.end_hour}"
            )
        if self.slot_step_minutes <= 0 or 60 % self.slot_step_minutes:
            raise ValueError(
                f"slot_step_minutes must be a positive divisor of 60, got {self.slot_step_minutes}"
            )

    def slot_count(self) -> int:
        return (self.end_hour - self.start_hour) * 60 // self.slot_step_minutes

    def slot_times(self) -> List[time]:
        """Return every grid start time in [start_hour:00, end_hour:00)."""
        return [
            time(hour=hour, minute=minute)
            for hour in range(self.start_hour, self.end_hour)
            for minute in range(0, 60, self.slot_step_minutes)
        ]


@dataclass(frozen=True)
class Service:
    """A bookable service from the shop's catalog."""
    id: str
    name: str
    duration_minutes: int
    price: float = 0.0


@dataclass(frozen=True)
class ServiceSelection:
    """
    The ordered set of service ids a customer has picked.
    """
    service_ids: Tuple[str, ...] = ()

    def _selected(self, catalog: Iterable[Service]) -> List[Service]:
        return [service for service in catalog if service.id in self.service_ids]

    def total_duration(self, catalog: Iterable[Service]) -> int:
        """Sum the durations of the selected catalog services."""
        return sum(service.duration_minutes for service in self._selected(catalog))

    def total_price(self, catalog: Iterable[Service]) -> float:
        """Sum the prices of the selected catalog services."""
        return sum(service.price for service in self._selected(catalog))


@dataclass(frozen=True)
class BarberShift:
    """
    A working shift for a barber.

    Recurring shifts apply to day_of_week (0=Monday, 6=Sunday); one-off shifts
    apply to specific_date only.
    """
    barber_id: str
    start_time: time
    end_time: time
    day_of_week: int | None = None
    specific_date: Date | None = None
    is_recurring: bool = True
    break_start: time | None = None
    break_end: time | None = None
    active: bool = True

    def has_break(self) -> bool:
        return self.break_start is not None and self.break_end is not None


@dataclass(frozen=True)
class BarberAbsence:
    """
    A whole-day absence of a barber (vacation, sick leave, personal).

    Both start_date and end_date are inclusive.
    """
    barber_id: str
    start_date: Date
    end_date: Date
    type: str = "vacation"
    notes: str | None = None

    def __post_init__(self):
        if self.start_date > self.end_date:
            raise ValueError(f"Start date {self.start_date} must not be after end date {self.end_date}")

    def covers(self, day: Date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class ShiftCheck:
    """Result of checking a prospective appointment against a shift."""
    available: bool
    reason: str | None = None
    shift: BarberShift | None = field(default=None, compare=False)
