"""
Adapters layer - Read-only access to bookings, blocks and settings.
"""

from .json_store import JsonDataStore
from .rest_store import RestDataStore

__all__ = ["JsonDataStore", "RestDataStore"]
