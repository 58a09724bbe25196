# verified_km/Schemas/verification.py
"""
Response bodies of POST /calculate-verified-km.

The request body is parsed by the route itself so that a missing or
malformed attendance_id produces the documented 400 payload instead of a
generic 422 validation error.
"""
from pydantic import BaseModel, Field


class VerifiedKm_success(BaseModel):
    """Distance computed from two or more fixes and persisted."""
    success: bool = True
    verified_km: float = Field(..., ge=0, description="Verified distance (km, 2 decimals)")
    gps_points: int = Field(..., ge=2, description="Number of fixes used")


class VerifiedKm_insufficient(BaseModel):
    """Fewer than two fixes were recorded for the session."""
    verified_km: float = 0
    message: str = "Insufficient GPS data points"


class VerifiedKm_error(BaseModel):
    """Error payload with a stable machine-readable code."""
    error: str
    code: str
