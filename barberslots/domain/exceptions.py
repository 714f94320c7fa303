"""
Domain-specific exception hierarchy for the barberslots application.
"""


class BarberSlotsError(Exception):
    """Base class for all application-level errors."""


class DataStoreError(BarberSlotsError):
    """Raised when bookings, blocks or settings cannot be fetched or parsed."""


class ConfigurationError(BarberSlotsError, ValueError):
    """Raised when the configuration file cannot be loaded."""
