# verified_km/Services/session_store.py
"""
SQLAlchemy-backed collaborators of the verification handler.

- SqlGpsFixStore: reads gps_logs through the repository and converts rows
  into GpsFix value objects
- SqlSessionRecordSink: writes attendance.verified_km

Driver errors are translated into DataFetchError / PersistenceError with
the original exception chained as __cause__.
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from verified_km.Models.gps_log import GPS_log
from verified_km.Repositories.attendance import update_verified_km
from verified_km.Repositories.gps_log import get_gps_logs_by_attendance
from verified_km.Services.trajectory import GpsFix, as_utc
from verified_km.Services.verification import DataFetchError, PersistenceError


def gps_log_to_fix(row: GPS_log) -> GpsFix:
    """
    Convert a gps_logs row into a GpsFix.

    Raises:
        DataFetchError: when the row lacks a timestamp or coordinates
    """
    if row.timestamp is None or row.latitude is None or row.longitude is None:
        raise DataFetchError(f"Malformed GPS log {row.id}: missing timestamp or coordinates")

    return GpsFix(
        timestamp=as_utc(row.timestamp),
        latitude=float(row.latitude),
        longitude=float(row.longitude),
    )


class SqlGpsFixStore:
    def __init__(self, db: Session):
        self.db = db

    def fetch_fixes(self, attendance_id: int) -> list[GpsFix]:
        try:
            rows = get_gps_logs_by_attendance(self.db, attendance_id)
        except SQLAlchemyError as e:
            raise DataFetchError(f"Failed to fetch GPS logs: {e}") from e

        return [gps_log_to_fix(row) for row in rows]


class SqlSessionRecordSink:
    def __init__(self, db: Session):
        self.db = db

    def update_verified_distance(self, attendance_id: int, verified_km: float) -> None:
        try:
            updated = update_verified_km(self.db, attendance_id, verified_km)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to update verified_km: {e}") from e

        if not updated:
            raise PersistenceError(f"Attendance record {attendance_id} not found")
