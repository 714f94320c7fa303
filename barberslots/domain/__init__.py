"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import (
    BarberAbsence,
    BarberShift,
    BlockedInterval,
    BookedInterval,
    BusinessHours,
    ConflictReason,
    Service,
    ServiceSelection,
    ShiftCheck,
    TimeSlot,
)
from .shifts import ShiftReason, ShiftSchedule
from .slot_calculator import SlotAvailabilityCalculator

__all__ = [
    "BarberAbsence",
    "BarberShift",
    "BlockedInterval",
    "BookedInterval",
    "BusinessHours",
    "ConflictReason",
    "Service",
    "ServiceSelection",
    "ShiftCheck",
    "ShiftReason",
    "ShiftSchedule",
    "SlotAvailabilityCalculator",
    "TimeSlot",
]
