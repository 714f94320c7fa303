"""
Tests for the AvailabilityService orchestration layer.
"""

from datetime import time
from typing import Dict, List

import pendulum
import pytest

from barberslots.domain.exceptions import DataStoreError
from barberslots.domain.models import (
    BarberAbsence,
    BarberShift,
    BlockedInterval,
    BookedInterval,
    ConflictReason,
)
from barberslots.domain.shifts import ShiftReason
from barberslots.domain.slot_calculator import SlotAvailabilityCalculator
from barberslots.services.availability import AvailabilityService

TZ = "America/Sao_Paulo"
DAY = pendulum.datetime(2026, 10, 19, tz=TZ)


class StubDataStore:
    """Minimal stub matching DataStoreProtocol."""

    def __init__(
        self,
        booked: List[BookedInterval] | None = None,
        blocked: List[BlockedInterval] | None = None,
        buffers: Dict[str, int] | None = None,
        shifts: List[BarberShift] | None = None,
        absences: List[BarberAbsence] | None = None,
    ):
        self._booked = booked or []
        self._blocked = blocked or []
        self._buffers = buffers or {}
        self._shifts = shifts or []
        self._absences = absences or []
        self.calls: List[tuple] = []

    def fetch_booked_intervals(self, barber_id, date):
        self.calls.append(("booked", barber_id, date.to_date_string()))
        return self._booked

    def fetch_blocked_intervals(self, barber_id):
        self.calls.append(("blocked", barber_id))
        return self._blocked

    def fetch_buffer_minutes(self, tenant_id):
        self.calls.append(("buffer", tenant_id))
        return self._buffers.get(tenant_id, 0)

    def fetch_shifts(self, barber_id):
        self.calls.append(("shifts", barber_id))
        return self._shifts

    def fetch_absences(self, barber_id):
        self.calls.append(("absences", barber_id))
        return self._absences


class FailingDataStore(StubDataStore):
    def fetch_booked_intervals(self, barber_id, date):
        raise DataStoreError("backend unavailable")


def _build_service(store) -> AvailabilityService:
    return AvailabilityService(
        data_store=store,
        calculator=SlotAvailabilityCalculator(),
        tenant_id="shop-1",
    )


def test_find_slots_uses_store_data_and_tenant_buffer():
    """Bookings, blocks and the tenant buffer all feed the calculation."""
    store = StubDataStore(
        booked=[BookedInterval(start_time=time(10, 0), duration_minutes=30)],
        blocked=[
            BlockedInterval(
                start=pendulum.parse("2026-10-19 12:00", tz=TZ),
                end=pendulum.parse("2026-10-19 13:00", tz=TZ),
            )
        ],
        buffers={"shop-1": 15},
    )
    service = _build_service(store)

    slots = {s.label(): s for s in service.find_slots(barber_id="b1", date=DAY, total_duration=30)}

    assert len(slots) == 20
    assert slots["10:30"].conflict_reason == ConflictReason.OCCUPIED
    assert slots["11:00"].available
    assert slots["12:30"].conflict_reason == ConflictReason.BLOCKED
    assert ("booked", "b1", "2026-10-19") in store.calls
    assert ("buffer", "shop-1") in store.calls


def test_find_slots_without_barber_skips_store():
    """No barber selected returns no slots and performs no fetches."""
    store = StubDataStore()
    service = _build_service(store)

    assert service.find_slots(barber_id=None, date=DAY, total_duration=30) == []
    assert store.calls == []


def test_store_errors_propagate():
    """Backend failures surface to the caller."""
    service = _build_service(FailingDataStore())

    with pytest.raises(DataStoreError):
        service.find_slots(barber_id="b1", date=DAY, total_duration=30)


def test_check_shift_uses_barber_shifts():
    """Shift checks read the barber's shifts from the store."""
    store = StubDataStore(shifts=[
        BarberShift(barber_id="b1", start_time=time(9, 0), end_time=time(18, 0), day_of_week=0)
    ])
    service = _build_service(store)

    fits = service.check_shift(barber_id="b1", date=DAY, at=time(17, 0), duration_minutes=60)
    too_late = service.check_shift(barber_id="b1", date=DAY, at=time(17, 30), duration_minutes=60)

    assert fits.available
    assert too_late.reason == ShiftReason.AFTER_SHIFT
    assert ("shifts", "b1") in store.calls


def test_check_shift_reports_absence():
    """An absence on the day wins over a matching shift."""
    store = StubDataStore(
        shifts=[BarberShift(barber_id="b1", start_time=time(9, 0), end_time=time(18, 0), day_of_week=0)],
        absences=[
            BarberAbsence(
                barber_id="b1",
                start_date=pendulum.date(2026, 10, 19),
                end_date=pendulum.date(2026, 10, 23),
            )
        ],
    )
    service = _build_service(store)

    check = service.check_shift(barber_id="b1", date=DAY, at=time(10, 0), duration_minutes=30)

    assert not check.available
    assert check.reason == ShiftReason.ABSENT
    assert ("absences", "b1") in store.calls
