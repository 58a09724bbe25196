# verified_km/Repositories/attendance.py
"""
Attendance Repository - Database operations for session records.

Responsibilities:
- Create and read attendance records
- Persist the verified distance computed from a session's GPS logs

Usage:
    from verified_km.Repositories.attendance import get_attendance_by_id, update_verified_km

    record = get_attendance_by_id(db, 42)
    updated = update_verified_km(db, 42, 12.34)
"""

from sqlalchemy.orm import Session
from typing import Optional

from verified_km.Models.attendance import Attendance
from verified_km.Schemas.attendance import Attendance_create


# ==========================================================
# CREATE OPERATIONS
# ==========================================================

def create_attendance(DB: Session, attendance_data: Attendance_create) -> Attendance:
    """
    Create a new attendance record.

    Args:
        DB: SQLAlchemy session
        attendance_data: Attendance_create schema with validated data

    Returns:
        Attendance: Created ORM object with auto-generated fields
    """
    new_attendance = Attendance(**attendance_data.model_dump(exclude_none=True))
    DB.add(new_attendance)
    DB.commit()
    DB.refresh(new_attendance)

    print(f"[REPO] Attendance created: {new_attendance.id} (user: {new_attendance.user_id})")

    return new_attendance


# ==========================================================
# READ OPERATIONS
# ==========================================================

def get_attendance_by_id(DB: Session, attendance_id: int) -> Optional[Attendance]:
    return DB.query(Attendance).filter(Attendance.id == attendance_id).first()


# ==========================================================
# UPDATE OPERATIONS
# ==========================================================

def update_verified_km(DB: Session, attendance_id: int, verified_km: float) -> bool:
    """
    Overwrite the verified distance of an attendance record.

    Args:
        DB: SQLAlchemy session
        attendance_id: Attendance record identifier
        verified_km: Distance in km (already rounded by the estimator)

    Returns:
        bool: True if a row was updated, False if the record does not exist

    Notes:
        - Single atomic UPDATE, so concurrent recomputations of the same
          fix set simply write the same value twice
        - Exceptions from the driver propagate to the caller, which is
          responsible for rollback
    """
    result = (
        DB.query(Attendance)
        .filter(Attendance.id == attendance_id)
        .update(
            {Attendance.verified_km: verified_km},
            synchronize_session=False
        )
    )

    DB.commit()

    if result > 0:
        print(f"[REPO] Attendance {attendance_id}: verified_km set to {verified_km:.2f}")
        return True

    print(f"[REPO] Cannot update verified_km - attendance not found: {attendance_id}")
    return False
