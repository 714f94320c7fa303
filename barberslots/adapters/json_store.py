"""
Offline data store backed by a JSON fixture file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

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

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_store_data.json"


class JsonDataStore:
    """
    Data store that serves rows from a JSON document.

    The document mirrors the backend tables: ``appointments``,
    ``blocked_slots``, ``barber_shifts``, ``barber_absences`` and
    ``settings``. This lets the application run without backend credentials.
    """

    def __init__(self, data_file: Path | None = None, timezone: str = "America/Sao_Paulo"):
        """
        Initialize the JSON store.

        Args:
            data_file: Fixture path; defaults to the bundled sample data
            timezone: IANA timezone the shop operates in

        Raises:
            DataStoreError: If the fixture is not valid JSON or a table is
                not a list of objects
        """
        self.data_file = data_file or DEFAULT_DATA_FILE
        self.timezone = timezone
        self.tables = self._load_tables()

    def _load_tables(self) -> Dict[str, List[Dict[str, Any]]]:
        """Load the fixture, treating a missing file as an empty store."""
        if not self.data_file.exists():
            logger.warning("Data file %s not found, using an empty store", self.data_file)
            return {}

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as exc:
            raise DataStoreError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataStoreError(f"Data file {self.data_file} must contain an object at the root level.")

        for table, rows in data.items():
            if rows is None:
                continue
            if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
                raise DataStoreError(
                    f"Table '{table}' in {self.data_file} must be a list of objects."
                )

        return data

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.get(table) or []

    def fetch_booked_intervals(self, barber_id: str, date: DateTime) -> List[BookedInterval]:
        """Load the barber's non-cancelled appointments on a date."""
        day = date.to_date_string()
        booked: List[BookedInterval] = []

        for row in self._rows("appointments"):
            if row.get("barbeiro_id") != barber_id or row.get("appointment_date") != day:
                continue
            if is_cancelled(row):
                continue

            try:
                booked.append(parse_booking_row(row))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid appointment in %s: %s", self.data_file, exc)

        return booked

    def fetch_blocked_intervals(self, barber_id: str) -> List[BlockedInterval]:
        blocked: List[BlockedInterval] = []

        for row in self._rows("blocked_slots"):
            if row.get("barber_id") != barber_id:
                continue

            try:
                blocked.append(parse_blocked_row(row, self.timezone))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid blocked slot in %s: %s", self.data_file, exc)

        return sorted(blocked, key=lambda b: b.start)

    def fetch_buffer_minutes(self, tenant_id: str) -> int:
        for row in self._rows("settings"):
            if row.get("user_id") != tenant_id:
                continue

            try:
                return parse_buffer_minutes(row.get("buffer_minutes"))
            except ValueError as exc:
                raise DataStoreError(f"Invalid buffer setting for {tenant_id} in {self.data_file}: {exc}") from exc

        return 0

    def fetch_shifts(self, barber_id: str) -> List[BarberShift]:
        shifts: List[BarberShift] = []

        for row in self._rows("barber_shifts"):
            if row.get("barber_id") != barber_id:
                continue

            try:
                shift = parse_shift_row(row)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid shift in %s: %s", self.data_file, exc)
                continue

            if shift.active:
                shifts.append(shift)

        return shifts

    def fetch_absences(self, barber_id: str) -> List[BarberAbsence]:
        absences: List[BarberAbsence] = []

        for row in self._rows("barber_absences"):
            if row.get("barber_id") != barber_id:
                continue

            try:
                absences.append(parse_absence_row(row))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid absence in %s: %s", self.data_file, exc)

        return absences
