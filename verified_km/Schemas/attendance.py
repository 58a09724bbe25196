# verified_km/Schemas/attendance.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional


# ============================================
# CREATE SCHEMA
# ============================================
class Attendance_create(BaseModel):
    """
    Schema for creating attendance records.

    Used by:
    - Repository create_attendance() (seeding, tests)
    """
    user_id: str = Field(..., min_length=1, max_length=100)

    start_time: Optional[datetime] = Field(
        None,
        description="UTC timestamp of shift start (database default when omitted)"
    )

    start_lat: float = Field(..., ge=-90, le=90)
    start_lon: float = Field(..., ge=-180, le=180)

    status: str = Field(
        default='active',
        pattern='^(active|completed)$'
    )


# ============================================
# GET SCHEMA
# ============================================
class Attendance_get(BaseModel):
    """
    Schema for reading an attendance record, including the persisted
    verified distance consumed by reporting views.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    status: str
    start_time: datetime
    end_time: Optional[datetime] = None
    start_lat: float
    start_lon: float
    end_lat: Optional[float] = None
    end_lon: Optional[float] = None

    verified_km: float = Field(
        default=0.0,
        ge=0,
        description="Verified distance travelled during the session (km)"
    )

    created_at: datetime
    updated_at: Optional[datetime] = None
