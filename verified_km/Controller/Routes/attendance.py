# verified_km/Controller/Routes/attendance.py
from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session
from verified_km.Controller.deps import get_DB
from verified_km.Repositories import attendance as attendance_repo
from verified_km.Schemas import attendance as attendance_schema

router = APIRouter()


@router.get("/{attendance_id}", response_model=attendance_schema.Attendance_get)
def get_attendance(
    attendance_id: int = Path(..., gt=0, le=2 ** 31 - 1),
    DB: Session = Depends(get_DB)
):
    """
    Get a session record, including its persisted verified_km.

    Example:
        GET /attendance/42
    """
    record = attendance_repo.get_attendance_by_id(DB, attendance_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Attendance '{attendance_id}' not found")
    return record
