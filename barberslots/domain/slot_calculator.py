"""
Core business logic for calculating bookable appointment slots.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). Callers fetch bookings and blocks and pass them in.
"""

from datetime import time
from typing import Iterable, List, Sequence

from pendulum import DateTime

from .models import (
    BlockedInterval,
    BookedInterval,
    BusinessHours,
    ConflictReason,
    TimeSlot,
    minutes_of_day,
)


class SlotAvailabilityCalculator:
    """
    Classifies every grid slot of a business day for one barber.

    Algorithm (per slot, in ascending order):
    1. Build the slot's absolute start on the requested date
    2. Blocked if any blocked interval contains the slot start
    3. Otherwise occupied if the prospective appointment overlaps any
       booking extended by the buffer
    4. Otherwise available
    """

    def __init__(self, business_hours: BusinessHours | None = None):
        self.business_hours = business_hours or BusinessHours()

    def compute_slots(
        self,
        date: DateTime,
        barber_id: str | None,
        total_duration: int,
        booked_intervals: Sequence[BookedInterval],
        blocked_intervals: Sequence[BlockedInterval],
        buffer_minutes: int | None = None
    ) -> List[TimeSlot]:
        """
        Compute the ordered slot list for a barber on a day.

        Args:
            date: Day to compute; its time-of-day is ignored
            barber_id: Barber the slots are for; no barber yields no slots
            total_duration: Summed duration of the selected services in minutes
            booked_intervals: Non-cancelled bookings for this barber on this date
            blocked_intervals: The barber's blocked windows, any date
            buffer_minutes: Idle time after each booking; None means 0

        Returns:
            One TimeSlot per grid step, ascending by time
        """
        if not barber_id:
            return []

        buffer = max(buffer_minutes or 0, 0)
        day = date.start_of("day")

        # Only blocks touching this day can match a slot start
        day_blocks = [block for block in blocked_intervals if block.overlaps_day(day)]

        slots: List[TimeSlot] = []

        for slot_time in self.business_hours.slot_times():
            slot_start = day.set(hour=slot_time.hour, minute=slot_time.minute)

            if self._is_blocked(slot_start, day_blocks):
                slots.append(TimeSlot(
                    time=slot_time,
                    available=False,
                    barber_id=barber_id,
                    conflict_reason=ConflictReason.BLOCKED
                ))
                continue

            if self._is_occupied(slot_time, total_duration, booked_intervals, buffer):
                slots.append(TimeSlot(
                    time=slot_time,
                    available=False,
                    barber_id=barber_id,
                    conflict_reason=ConflictReason.OCCUPIED
                ))
                continue

            slots.append(TimeSlot(time=slot_time, available=True, barber_id=barber_id))

        return slots

    def _is_blocked(
        self,
        slot_start: DateTime,
        blocked_intervals: Iterable[BlockedInterval]
    ) -> bool:
        return any(block.contains(slot_start) for block in blocked_intervals)

    def _is_occupied(
        self,
        slot_time: time,
        total_duration: int,
        booked_intervals: Iterable[BookedInterval],
        buffer_minutes: int
    ) -> bool:
        """
        Check the prospective appointment against every booking.

        A zero-length appointment never overlaps anything.
        """
        if total_duration <= 0:
            return False

        slot_start = minutes_of_day(slot_time)
        slot_end = slot_start + total_duration

        for booking in booked_intervals:
            apt_start = booking.start_minute()
            apt_end = booking.end_minute(buffer_minutes)

            # Half-open overlap: abutting the buffered end is free
            if slot_start < apt_end and slot_end > apt_start:
                return True

        return False


def end_time_with_buffer(
    start_time: time,
    duration_minutes: int,
    buffer_minutes: int = 0
) -> time:
    """
    Return the time-of-day a barber is free again after an appointment.

    Wraps past midnight like a wall clock.
    """
    total = minutes_of_day(start_time) + duration_minutes + buffer_minutes
    total %= 24 * 60
    return time(hour=total // 60, minute=total % 60)


def available_times(slots: Iterable[TimeSlot]) -> List[str]:
    """Return the HH:mm labels of the available slots."""
    return [slot.label() for slot in slots if slot.available]
