"""
Tests for domain models.
"""

from datetime import time

import pendulum
import pytest

from barberslots.domain.models import (
    BarberAbsence,
    BlockedInterval,
    BookedInterval,
    BusinessHours,
    ConflictReason,
    Service,
    ServiceSelection,
    TimeSlot,
)

TZ = "America/Sao_Paulo"


class TestBookedInterval:
    """Tests for BookedInterval model."""

    def test_end_minute_includes_buffer(self):
        """The barber is free again after duration plus buffer."""
        booking = BookedInterval(start_time=time(10, 0), duration_minutes=45)

        assert booking.start_minute() == 600
        assert booking.end_minute() == 645
        assert booking.end_minute(buffer_minutes=15) == 660

    def test_missing_duration_defaults_to_thirty(self):
        """A booking without a service falls back to 30 minutes."""
        assert BookedInterval(start_time=time(10, 0)).effective_duration() == 30
        assert BookedInterval(start_time=time(10, 0), duration_minutes=0).effective_duration() == 30


class TestBlockedInterval:
    """Tests for BlockedInterval model."""

    def test_invalid_interval_raises_error(self):
        """Test that an inverted block raises ValueError."""
        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            BlockedInterval(
                start=pendulum.parse("2026-10-19 12:00", tz=TZ),
                end=pendulum.parse("2026-10-19 11:00", tz=TZ)
            )

    def test_contains_is_half_open(self):
        """The start is inside the block, the end is not."""
        block = BlockedInterval(
            start=pendulum.parse("2026-10-19 12:00", tz=TZ),
            end=pendulum.parse("2026-10-19 13:00", tz=TZ)
        )

        assert block.contains(pendulum.parse("2026-10-19 12:00", tz=TZ))
        assert block.contains(pendulum.parse("2026-10-19 12:59", tz=TZ))
        assert not block.contains(pendulum.parse("2026-10-19 13:00", tz=TZ))
        assert not block.contains(pendulum.parse("2026-10-19 11:59", tz=TZ))

    def test_overlaps_day(self):
        """Multi-day blocks touch every day they span."""
        block = BlockedInterval(
            start=pendulum.parse("2026-10-19 22:00", tz=TZ),
            end=pendulum.parse("2026-10-21 00:00", tz=TZ)
        )

        assert block.overlaps_day(pendulum.datetime(2026, 10, 19, tz=TZ))
        assert block.overlaps_day(pendulum.datetime(2026, 10, 20, 15, 0, tz=TZ))
        assert not block.overlaps_day(pendulum.datetime(2026, 10, 21, tz=TZ))
        assert not block.overlaps_day(pendulum.datetime(2026, 10, 18, tz=TZ))


class TestBusinessHours:
    """Tests for BusinessHours model."""

    def test_default_grid(self):
        """Default hours are 09:00-19:00 on a 30 minute grid."""
        hours = BusinessHours()

        assert hours.slot_count() == 20
        times = hours.slot_times()
        assert len(times) == 20
        assert times[0] == time(9, 0)
        assert times[1] == time(9, 30)
        assert times[-1] == time(18, 30)

    def test_rejects_inverted_hours(self):
        with pytest.raises(ValueError):
            BusinessHours(start_hour=19, end_hour=9)

    def test_rejects_step_not_dividing_hour(self):
        with pytest.raises(ValueError):
            BusinessHours(slot_step_minutes=25)


class TestServiceSelection:
    """Tests for ServiceSelection totals."""

    CATALOG = [
        Service(id="corte", name="Corte", duration_minutes=30, price=50.0),
        Service(id="barba", name="Barba", duration_minutes=30, price=40.0),
        Service(id="combo", name="Combo", duration_minutes=60, price=85.0),
    ]

    def test_totals(self):
        """Durations and prices of selected services are summed."""
        selection = ServiceSelection(("corte", "combo"))

        assert selection.total_duration(self.CATALOG) == 90
        assert selection.total_price(self.CATALOG) == pytest.approx(135.0)

    def test_empty_and_unknown_selection(self):
        """Nothing selected (or unknown ids) sums to zero."""
        assert ServiceSelection().total_duration(self.CATALOG) == 0
        assert ServiceSelection(("missing",)).total_price(self.CATALOG) == 0


class TestTimeSlot:
    """Tests for TimeSlot display helpers."""

    def test_label(self):
        free = TimeSlot(time=time(9, 30), available=True, barber_id="b1")
        taken = TimeSlot(
            time=time(10, 0),
            available=False,
            barber_id="b1",
            conflict_reason=ConflictReason.OCCUPIED
        )

        assert free.label() == "09:30"
        assert taken.label() == "10:00"
        assert taken.conflict_reason.value == "occupied"


class TestBarberAbsence:
    """Tests for BarberAbsence model."""

    def test_covers_is_inclusive(self):
        absence = BarberAbsence(
            barber_id="b1",
            start_date=pendulum.date(2026, 11, 2),
            end_date=pendulum.date(2026, 11, 3),
            type="sick"
        )

        assert absence.covers(pendulum.date(2026, 11, 2))
        assert absence.covers(pendulum.date(2026, 11, 3))
        assert not absence.covers(pendulum.date(2026, 11, 1))
        assert not absence.covers(pendulum.date(2026, 11, 4))

    def test_single_day_absence(self):
        absence = BarberAbsence(
            barber_id="b1",
            start_date=pendulum.date(2026, 11, 2),
            end_date=pendulum.date(2026, 11, 2)
        )

        assert absence.type == "vacation"
        assert absence.covers(pendulum.date(2026, 11, 2))

    def test_inverted_dates_raise_error(self):
        with pytest.raises(ValueError, match="must not be after end date"):
            BarberAbsence(
                barber_id="b1",
                start_date=pendulum.date(2026, 11, 3),
                end_date=pendulum.date(2026, 11, 2)
            )
