"""
Read-only client for the hosted barbershop backend (PostgREST API).
"""

import logging
from typing import Any, Dict, List

import requests
from pendulum import DateTime

from ..domain.exceptions import DataStoreError
from ..domain.models import BarberAbsence, BarberShift, BlockedInterval, BookedInterval
from .rows import (
    is_cancelled,
    parse_absence_row,
    parse_blocked_row,
    parse_booking_row,
    parse_buffer_minutes,
    parse_shift_row,
)

logger = logging.getLogger(__name__)


class RestDataStore:
    """
    Fetches bookings, blocked slots, shifts and shop settings.

    Uses the backend's REST endpoint ``/rest/v1/<table>`` with PostgREST
    filter syntax (``column=eq.value``).
    """

    REST_PATH = "/rest/v1"
    TIMEOUT_SECONDS = 30

    def __init__(self, base_url: str, api_key: str, timezone: str = "America/Sao_Paulo"):
        """
        Initialize the REST client.

        Args:
            base_url: Project URL of the backend
            api_key: API key sent as apikey and bearer token
            timezone: IANA timezone the shop operates in
        """
        self.base_url = base_url.rstrip("/")
        self.timezone = timezone
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json"
        }

    def fetch_booked_intervals(self, barber_id: str, date: DateTime) -> List[BookedInterval]:
        """
        Get the barber's non-cancelled appointments on a date.

        Args:
            barber_id: Barber whose bookings to load
            date: Day of the bookings

        Returns:
            List of BookedInterval objects

        Raises:
            DataStoreError: If the API call fails
        """
        # Cancelled rows are dropped here: rows without a status are live bookings
        rows = self._get("appointments", {
            "select": "appointment_time,status,services(duration_minutes)",
            "barbeiro_id": f"eq.{barber_id}",
            "appointment_date": f"eq.{date.to_date_string()}",
            "order": "appointment_time.asc",
        })

        booked: List[BookedInterval] = []
        for row in rows:
            if is_cancelled(row):
                continue
            try:
                booked.append(parse_booking_row(row))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unparseable appointment row: %s", exc)

        return booked

    def fetch_blocked_intervals(self, barber_id: str) -> List[BlockedInterval]:
        """Get all blocked windows of a barber, ordered by start."""
        rows = self._get("blocked_slots", {
            "select": "start_datetime,end_datetime,reason",
            "barber_id": f"eq.{barber_id}",
            "order": "start_datetime.asc",
        })

        blocked: List[BlockedInterval] = []
        for row in rows:
            try:
                blocked.append(parse_blocked_row(row, self.timezone))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unparseable blocked slot row: %s", exc)

        return blocked

    def fetch_buffer_minutes(self, tenant_id: str) -> int:
        """Get the shop's buffer between appointments, 0 if unset."""
        rows = self._get("barbershop_settings", {
            "select": "buffer_minutes",
            "user_id": f"eq.{tenant_id}",
            "limit": "1",
        })

        if not rows:
            return 0

        try:
            return parse_buffer_minutes(rows[0].get("buffer_minutes"))
        except ValueError as e:
            raise DataStoreError(f"Invalid buffer setting for {tenant_id}: {e}") from e

    def fetch_shifts(self, barber_id: str) -> List[BarberShift]:
        """Get the barber's active shifts."""
        rows = self._get("barber_shifts", {
            "select": "*",
            "barber_id": f"eq.{barber_id}",
            "status": "eq.active",
        })

        shifts: List[BarberShift] = []
        for row in rows:
            try:
                shifts.append(parse_shift_row(row))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unparseable shift row: %s", exc)

        return shifts

    def fetch_absences(self, barber_id: str) -> List[BarberAbsence]:
        """Get the barber's absences (vacation, sick leave, personal)."""
        rows = self._get("barber_absences", {
            "select": "barber_id,start_date,end_date,type,notes",
            "barber_id": f"eq.{barber_id}",
            "order": "start_date.asc",
        })

        absences: List[BarberAbsence] = []
        for row in rows:
            try:
                absences.append(parse_absence_row(row))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unparseable absence row: %s", exc)

        return absences

    def _get(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        url = f"{self.base_url}{self.REST_PATH}/{table}"

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.TIMEOUT_SECONDS
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise DataStoreError(f"Failed to fetch {table}: {e}") from e
        except ValueError as e:
            raise DataStoreError(f"Invalid JSON from {table}: {e}") from e

        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise DataStoreError(f"Unexpected response from {table}: expected a list of rows")

        return data
