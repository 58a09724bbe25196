# verified_km/Controller/Routes/gps_logs.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from verified_km.Controller.deps import get_DB
from verified_km.Repositories import attendance as attendance_repo
from verified_km.Repositories import gps_log as gps_log_repo
from verified_km.Schemas import gps_log as gps_log_schema

router = APIRouter()


@router.get("/", response_model=gps_log_schema.GpsLog_list_response)
def list_gps_logs(
    attendance_id: int = Query(..., gt=0, le=2 ** 31 - 1, description="Attendance record (required)"),
    DB: Session = Depends(get_DB)
):
    """
    List the GPS fixes of a session in the order distance verification
    reads them (timestamp ascending).

    Example:
        GET /gps_logs/?attendance_id=42
    """
    rows = gps_log_repo.get_gps_logs_by_attendance(DB, attendance_id)

    return {
        "attendance_id": attendance_id,
        "gps_logs": rows,
        "count": gps_log_repo.count_gps_logs_by_attendance(DB, attendance_id)
    }


@router.post("/", response_model=gps_log_schema.GpsLog_get, status_code=201)
def create_gps_log(
    gps_log: gps_log_schema.GpsLog_create,
    DB: Session = Depends(get_DB)
):
    """
    Record one GPS fix for an existing session.

    Body:
        {
            "attendance_id": 42,
            "timestamp": "2025-01-02T12:00:00Z",
            "coordinates": {"latitude": 12.9716, "longitude": 77.5946}
        }

    Raises:
        404: attendance record does not exist
        422: coordinates out of range or missing fields
    """
    if attendance_repo.get_attendance_by_id(DB, gps_log.attendance_id) is None:
        raise HTTPException(status_code=404, detail="Attendance record not found")

    return gps_log_repo.create_gps_log(DB, gps_log)
