"""
Barber shift lookups: which shift applies on a day, whether the barber is
away, and whether a prospective appointment fits inside the shift.
"""

from datetime import time
from typing import List, Sequence

from pendulum import DateTime

from .models import BarberAbsence, BarberShift, ShiftCheck, minutes_of_day


class ShiftReason:
    """Reasons a slot falls outside a barber's shift."""
    ABSENT = "absent"
    NO_SHIFT = "no_shift"
    BEFORE_SHIFT = "before_shift"
    AFTER_SHIFT = "after_shift"
    DURING_BREAK = "during_break"


class ShiftSchedule:
    """
    Resolves shifts and absences for barbers.

    A one-off shift on a specific date takes precedence over the recurring
    shift for that weekday. An absence covering the date overrides both.
    """

    def __init__(
        self,
        shifts: Sequence[BarberShift],
        absences: Sequence[BarberAbsence] = ()
    ):
        self.shifts = list(shifts)
        self.absences = list(absences)

    def shifts_for_barber(self, barber_id: str) -> List[BarberShift]:
        """Return the barber's active shifts."""
        return [s for s in self.shifts if s.barber_id == barber_id and s.active]

    def absences_for_barber(self, barber_id: str) -> List[BarberAbsence]:
        return [a for a in self.absences if a.barber_id == barber_id]

    def is_barber_absent(self, barber_id: str, date: DateTime) -> bool:
        """Check if any absence of the barber covers the date."""
        day = date.date()
        return any(absence.covers(day) for absence in self.absences_for_barber(barber_id))

    def shift_for_date(self, barber_id: str, date: DateTime) -> BarberShift | None:
        barber_shifts = self.shifts_for_barber(barber_id)
        day = date.date()

        for shift in barber_shifts:
            if not shift.is_recurring and shift.specific_date == day:
                return shift

        for shift in barber_shifts:
            if shift.is_recurring and shift.day_of_week == date.day_of_week:
                return shift

        return None

    def is_barber_working(self, barber_id: str, date: DateTime, at: time) -> bool:
        """Check if the barber is present, on shift and not on break at a time of day."""
        if self.is_barber_absent(barber_id, date):
            return False

        shift = self.shift_for_date(barber_id, date)
        if shift is None:
            return False

        moment = minutes_of_day(at)
        if not minutes_of_day(shift.start_time) <= moment < minutes_of_day(shift.end_time):
            return False

        if shift.has_break():
            if minutes_of_day(shift.break_start) <= moment < minutes_of_day(shift.break_end):
                return False

        return True

    def check_slot(
        self,
        barber_id: str,
        date: DateTime,
        at: time,
        duration_minutes: int
    ) -> ShiftCheck:
        """
        Check whether an appointment starting at `at` fits the barber's shift.

        Args:
            barber_id: Barber to check
            date: Day of the appointment
            at: Start time of the appointment
            duration_minutes: Length of the appointment

        Returns:
            ShiftCheck with the first failing reason, or available
        """
        if self.is_barber_absent(barber_id, date):
            return ShiftCheck(available=False, reason=ShiftReason.ABSENT)

        shift = self.shift_for_date(barber_id, date)
        if shift is None:
            return ShiftCheck(available=False, reason=ShiftReason.NO_SHIFT)

        slot_start = minutes_of_day(at)
        slot_end = slot_start + duration_minutes

        if slot_start < minutes_of_day(shift.start_time):
            return ShiftCheck(available=False, reason=ShiftReason.BEFORE_SHIFT, shift=shift)

        if slot_end > minutes_of_day(shift.end_time):
            return ShiftCheck(available=False, reason=ShiftReason.AFTER_SHIFT, shift=shift)

        if shift.has_break():
            break_start = minutes_of_day(shift.break_start)
            break_end = minutes_of_day(shift.break_end)
            if slot_start < break_end and slot_end > break_start:
                return ShiftCheck(available=False, reason=ShiftReason.DURING_BREAK, shift=shift)

        return ShiftCheck(available=True, shift=shift)
