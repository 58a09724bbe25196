# verified_km/Repositories/gps_log.py

from sqlalchemy.orm import Session
from verified_km.Models.gps_log import GPS_log
from verified_km.Schemas.gps_log import GpsLog_create


"""
create_gps_log to append a new fix to a session
"""
def create_gps_log(DB: Session, gps_log: GpsLog_create) -> GPS_log:
    new_gps_log = GPS_log(
        attendance_id=gps_log.attendance_id,
        timestamp=gps_log.timestamp,
        latitude=gps_log.coordinates.latitude,
        longitude=gps_log.coordinates.longitude,
    )
    DB.add(new_gps_log)
    DB.commit()
    DB.refresh(new_gps_log)
    return new_gps_log


# ==========================================================
# Query GPS logs by attendance_id
# ==========================================================

def get_gps_logs_by_attendance(DB: Session, attendance_id: int) -> list[GPS_log]:
    """
    Retrieve all GPS fixes belonging to a session.

    Args:
        DB: SQLAlchemy session
        attendance_id: Attendance record identifier

    Returns:
        list[GPS_log]: Fixes ordered by timestamp ascending

    Notes:
        - Ties on timestamp are broken by insertion order (id) so that
          repeated reads of the same fix set return the same sequence
        - Distance verification relies on this ordering and never re-sorts
    """
    return (
        DB.query(GPS_log)
        .filter(GPS_log.attendance_id == attendance_id)
        .order_by(GPS_log.timestamp.asc(), GPS_log.id.asc())
        .all()
    )


def count_gps_logs_by_attendance(DB: Session, attendance_id: int) -> int:
    return (
        DB.query(GPS_log)
        .filter(GPS_log.attendance_id == attendance_id)
        .count()
    )
