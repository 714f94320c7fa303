"""
barberslots - Appointment slot availability for barbershops.
"""

__version__ = "0.1.0"
