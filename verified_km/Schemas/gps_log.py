# verified_km/Schemas/gps_log.py

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


"""
Coordinates of a single fix, decimal degrees (WGS84, no altitude).
"""
class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")


"""
Schema for recording a new GPS fix against an attendance record.
"""
class GpsLog_create(BaseModel):
    attendance_id: int = Field(..., gt=0, le=2 ** 31 - 1, description="Attendance record the fix belongs to")
    timestamp: datetime = Field(..., description="UTC timestamp of the fix")
    coordinates: Coordinates


"""
Schema for retrieving GPS fixes from the database.
"""
class GpsLog_get(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Internal database record identifier")
    attendance_id: int
    timestamp: datetime
    latitude: float
    longitude: float


"""
Response of the listing endpoint.
"""
class GpsLog_list_response(BaseModel):
    attendance_id: int
    gps_logs: list[GpsLog_get]
    count: int
