"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, DataStoreProtocol

__all__ = ["AvailabilityService", "DataStoreProtocol"]
