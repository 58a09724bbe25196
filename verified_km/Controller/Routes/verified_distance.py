# verified_km/Controller/Routes/verified_distance.py

"""
Verified Distance REST API

Endpoints:
- OPTIONS /calculate-verified-km   CORS preflight (empty 200)
- POST    /calculate-verified-km   Verify and persist a session's distance

Request:
    { "attendance_id": 42 }

Responses:
    200 { "success": true, "verified_km": 12.34, "gps_points": 187 }
    200 { "verified_km": 0, "message": "Insufficient GPS data points" }
    400 { "error": "attendance_id is required", "code": "input_error" }
    500 { "error": "...", "code": "data_fetch_error" | "persistence_error" }

Every response of this router carries the permissive CORS headers expected
by the mobile client, whether or not the request went through the CORS
middleware.

Usage:
    # In main.py
    from verified_km.Controller.Routes import verified_distance
    app.include_router(verified_distance.router, tags=["verified_km"])
"""

import json
from typing import Any, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from verified_km.Controller.deps import get_DB
from verified_km.Core.config import settings
from verified_km.Schemas.verification import VerifiedKm_error, VerifiedKm_insufficient, VerifiedKm_success
from verified_km.Services.session_store import SqlGpsFixStore, SqlSessionRecordSink
from verified_km.Services.trajectory import EstimatorConfig
from verified_km.Services.verification import VerificationError, verify_attendance_distance

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}


async def read_json_body(request: Request) -> dict[str, Any]:
    """
    Parse the request body leniently: an empty, non-JSON or non-object body
    is treated as a request without attendance_id.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return body if isinstance(body, dict) else {}


def get_estimator_config() -> EstimatorConfig:
    return EstimatorConfig.from_settings(settings)


@router.options("/calculate-verified-km")
def calculate_verified_km_preflight():
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post(
    "/calculate-verified-km",
    responses={
        200: {"model": Union[VerifiedKm_success, VerifiedKm_insufficient]},
        400: {"model": VerifiedKm_error},
        500: {"model": VerifiedKm_error},
    }
)
def calculate_verified_km(
    body: dict = Depends(read_json_body),
    config: EstimatorConfig = Depends(get_estimator_config),
    DB: Session = Depends(get_DB)
):
    """
    Recompute the verified distance of an attendance record from its GPS
    logs and store it on the record.

    Called once per end-of-shift action; calling it again for the same fix
    set is safe and rewrites the same value.

    Example:
        POST /calculate-verified-km
        {"attendance_id": 42}
    """
    try:
        outcome = verify_attendance_distance(
            body.get("attendance_id"),
            store=SqlGpsFixStore(DB),
            sink=SqlSessionRecordSink(DB),
            config=config
        )
    except VerificationError as e:
        print(f"[VERIFIED_KM] {e.code}: {e.message}")
        return JSONResponse(
            status_code=e.status_code,
            content={"error": e.message, "code": e.code},
            headers=CORS_HEADERS
        )

    return JSONResponse(
        status_code=200,
        content=outcome.to_payload(),
        headers=CORS_HEADERS
    )
