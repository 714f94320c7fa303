"""
Application services for computing a barber's bookable slots.

The service coordinates fetching bookings, blocks and the tenant's buffer via
a data store adapter and delegates the availability calculation to the
domain-level ``SlotAvailabilityCalculator``. This keeps the CLI thin and lets
tests plug in a stub store through a simple protocol.
"""

from __future__ import annotations

import logging
from datetime import time
from typing import List, Protocol

from pendulum import DateTime

from ..domain.models import (
    BarberAbsence,
    BarberShift,
    BlockedInterval,
    BookedInterval,
    ShiftCheck,
    TimeSlot,
)
from ..domain.shifts import ShiftSchedule
from ..domain.slot_calculator import SlotAvailabilityCalculator

logger = logging.getLogger(__name__)


class DataStoreProtocol(Protocol):
    """Protocol describing the read-only data store used by the service."""

    def fetch_booked_intervals(self, barber_id: str, date: DateTime) -> List[BookedInterval]:
        """Return non-cancelled bookings for the barber on the date."""

    def fetch_blocked_intervals(self, barber_id: str) -> List[BlockedInterval]:
        """Return all blocked windows for the barber."""

    def fetch_buffer_minutes(self, tenant_id: str) -> int:
        """Return the tenant's buffer after each appointment (0 if unset)."""

    def fetch_shifts(self, barber_id: str) -> List[BarberShift]:
        """Return the barber's shifts."""

    def fetch_absences(self, barber_id: str) -> List[BarberAbsence]:
        """Return the barber's whole-day absences."""


class AvailabilityService:
    """
    Orchestrates data retrieval and slot calculation.
    """

    def __init__(
        self,
        data_store: DataStoreProtocol,
        calculator: SlotAvailabilityCalculator,
        tenant_id: str,
    ) -> None:
        self._data_store = data_store
        self._calculator = calculator
        self._tenant_id = tenant_id

    def find_slots(
        self,
        *,
        barber_id: str | None,
        date: DateTime,
        total_duration: int,
    ) -> List[TimeSlot]:
        """
        Fetch the barber's bookings and blocks, then compute the day's slots.

        No barber means no slots; the store is not queried.
        """
        if not barber_id:
            return []

        booked = self._data_store.fetch_booked_intervals(barber_id, date)
        blocked = self._data_store.fetch_blocked_intervals(barber_id)
        buffer_minutes = self._data_store.fetch_buffer_minutes(self._tenant_id)

        logger.debug(
            "Computing slots for barber %s on %s: %d bookings, %d blocks, buffer %s min",
            barber_id,
            date.to_date_string(),
            len(booked),
            len(blocked),
            buffer_minutes,
        )

        return self._calculator.compute_slots(
            date=date,
            barber_id=barber_id,
            total_duration=total_duration,
            booked_intervals=booked,
            blocked_intervals=blocked,
            buffer_minutes=buffer_minutes,
        )

    def check_shift(
        self,
        *,
        barber_id: str,
        date: DateTime,
        at: time,
        duration_minutes: int,
    ) -> ShiftCheck:
        """Check an appointment against the barber's absences and shift for the day."""
        schedule = ShiftSchedule(
            self._data_store.fetch_shifts(barber_id),
            self._data_store.fetch_absences(barber_id),
        )
        return schedule.check_slot(barber_id, date, at, duration_minutes)
