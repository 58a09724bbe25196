# verified_km/Services/verification.py
"""
Verification Request Handler
============================
Orchestrates one distance verification for an attendance record:

    validate id → fetch fixes (Store) → estimate → persist (Sink) → outcome

Transport-agnostic: the HTTP route maps VerificationOutcome and
VerificationError onto responses. Store and Sink are injected so the flow
can be exercised without a database.

Re-running the handler for the same fix set recomputes and overwrites the
same value, so at-least-once delivery of the end-of-shift trigger needs no
deduplication. A fix appended between two concurrent runs' fetches can make
the last write reflect the older fix set; the next run corrects it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from verified_km.Core import log_ws
from verified_km.Services.trajectory import (
    DistanceEstimate,
    EstimatorConfig,
    GpsFix,
    estimate_verified_distance,
)


INSUFFICIENT_DATA_MESSAGE = "Insufficient GPS data points"

# attendance.id is a 32-bit Integer column
MAX_ATTENDANCE_ID = 2 ** 31 - 1


# ==========================================================
# ERRORS
# ==========================================================

class VerificationError(Exception):
    """Base error carrying a stable machine-readable code."""
    code = "verification_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputError(VerificationError):
    """Missing or invalid attendance identifier. Never retried."""
    code = "input_error"
    status_code = 400


class DataFetchError(VerificationError):
    """GPS Sample Store unreachable or returned malformed data."""
    code = "data_fetch_error"


class PersistenceError(VerificationError):
    """Session Record Sink rejected the computed distance."""
    code = "persistence_error"


# ==========================================================
# COLLABORATORS
# ==========================================================

class GpsFixStore(Protocol):
    def fetch_fixes(self, attendance_id: int) -> Sequence[GpsFix]:
        """Return the session's fixes ascending by timestamp or raise DataFetchError."""
        ...


class SessionRecordSink(Protocol):
    def update_verified_distance(self, attendance_id: int, verified_km: float) -> None:
        """Persist the distance or raise PersistenceError."""
        ...


# ==========================================================
# OUTCOME
# ==========================================================

@dataclass(frozen=True)
class VerificationOutcome:
    attendance_id: int
    estimate: DistanceEstimate
    persisted: bool

    @property
    def verified_km(self) -> float:
        return self.estimate.verified_km

    @property
    def gps_points(self) -> int:
        return self.estimate.points

    @property
    def insufficient(self) -> bool:
        return self.estimate.insufficient

    def to_payload(self) -> dict[str, Any]:
        if self.insufficient:
            return {"verified_km": 0, "message": INSUFFICIENT_DATA_MESSAGE}
        return {
            "success": True,
            "verified_km": self.verified_km,
            "gps_points": self.gps_points,
        }


# ==========================================================
# VALIDATION
# ==========================================================

def parse_attendance_id(raw: Any) -> int:
    """
    Normalize the attendance_id of a request.

    Accepts positive integers and strings of digits ("42") up to
    MAX_ATTENDANCE_ID.

    Raises:
        InputError: when missing (None, "", 0, False) or not a positive integer
    """
    if raw is None or raw == "" or raw == 0 or raw is False:
        raise InputError("attendance_id is required")

    if isinstance(raw, bool):
        raise InputError("attendance_id must be a positive integer")

    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        raise InputError("attendance_id must be a positive integer")

    if value <= 0 or value > MAX_ATTENDANCE_ID:
        raise InputError("attendance_id must be a positive integer")

    return value


# ==========================================================
# HANDLER
# ==========================================================

def verify_attendance_distance(
    raw_attendance_id: Any,
    store: GpsFixStore,
    sink: SessionRecordSink,
    config: Optional[EstimatorConfig] = None
) -> VerificationOutcome:
    """
    Verify and persist the travelled distance of one attendance record.

    Args:
        raw_attendance_id: Identifier as received from the caller
        store: Source of the session's fixes
        sink: Destination of the computed distance
        config: Estimator constants (defaults when None)

    Returns:
        VerificationOutcome: persisted=False when fewer than 2 fixes exist

    Raises:
        InputError: invalid identifier (no Store/Sink call made)
        DataFetchError: Store failure (nothing persisted)
        PersistenceError: Sink failure after a successful computation
    """
    attendance_id = parse_attendance_id(raw_attendance_id)

    try:
        fixes = store.fetch_fixes(attendance_id)
    except DataFetchError as e:
        print(f"[VERIFY] Fetch failed for attendance {attendance_id}: {e}")
        log_ws.log_from_thread(
            f"[VERIFY] Could not load GPS logs for attendance {attendance_id}: {e}",
            msg_type="error"
        )
        raise

    estimate = estimate_verified_distance(fixes, config)

    if estimate.insufficient:
        print(f"[VERIFY] Attendance {attendance_id}: {estimate.points} GPS point(s), insufficient data")
        log_ws.log_from_thread(
            f"[VERIFY] Attendance {attendance_id} has insufficient GPS data ({estimate.points} point(s))",
            msg_type="warning"
        )
        return VerificationOutcome(attendance_id=attendance_id, estimate=estimate, persisted=False)

    try:
        sink.update_verified_distance(attendance_id, estimate.verified_km)
    except PersistenceError as e:
        print(f"[VERIFY] Persist failed for attendance {attendance_id}: {e}")
        log_ws.log_from_thread(
            f"[VERIFY] Could not save verified_km={estimate.verified_km:.2f} for attendance {attendance_id}: {e}",
            msg_type="error"
        )
        raise

    print(
        f"[VERIFY] Attendance {attendance_id}: {estimate.verified_km:.2f} km "
        f"from {estimate.points} points ({estimate.accepted_segments} accepted, "
        f"{estimate.rejected_segments} rejected segments)"
    )
    log_ws.log_from_thread(
        f"[VERIFY] Attendance {attendance_id} verified at {estimate.verified_km:.2f} km",
        msg_type="log"
    )

    return VerificationOutcome(attendance_id=attendance_id, estimate=estimate, persisted=True)
