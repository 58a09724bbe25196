"""
verified_km/main.py
============================================
FastAPI Application for Verified Travel Distance
============================================

Entry point of the service that turns the GPS logs recorded during a field
agent's work session into a verified travelled distance used to validate
travel-expense claims.

Architecture Overview:
---------------------
- REST API: distance verification, GPS log ingestion, session lookup
- WebSocket: real-time service logs streamed via /logs
- Database: PostgreSQL through SQLAlchemy (attendance, gps_logs)

Run:
    uvicorn verified_km.main:app --host 0.0.0.0 --port 8000
"""

# Environment Configuration
from dotenv import load_dotenv
load_dotenv()

# FastAPI Core
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
import asyncio

from verified_km.Core.config import settings
from verified_km.Core import log_ws
from verified_km.DB.database import test_db_connection
from verified_km.Controller.Routes import attendance, gps_logs, verified_distance


# ============================================================
# ROOT PATH HANDLING
# ============================================================
def _normalize_root_path(value: str) -> str:
    value = value.strip()
    if not value:
        return ""
    if not value.startswith("/"):
        value = "/" + value
    return value.rstrip("/")


ROOT_PATH = _normalize_root_path(settings.ROOT_PATH)


class StripPrefixMiddleware(BaseHTTPMiddleware):
    """
    Removes ROOT_PATH from incoming request paths so routes can be declared
    without the deployment prefix.

    Example:
        ROOT_PATH = "/api/v1"
        Incoming request: /api/v1/calculate-verified-km
        FastAPI receives: /calculate-verified-km
    """

    def __init__(self, app, prefix: str):
        super().__init__(app)
        self.prefix = prefix

    async def dispatch(self, request, call_next):
        path = request.url.path

        if path == self.prefix:
            return RedirectResponse(url=self.prefix + "/", status_code=307)

        if path.startswith(self.prefix + "/"):
            request.scope["path"] = path[len(self.prefix):] or "/"

        return await call_next(request)


class PreflightMiddleware(BaseHTTPMiddleware):
    """
    Answers OPTIONS on the given paths with an empty 200 and fixed CORS
    headers, before CORSMiddleware can reply with its own body or a 400.
    """

    def __init__(self, app, paths, headers):
        super().__init__(app)
        self.paths = set(paths)
        self.headers = dict(headers)

    async def dispatch(self, request, call_next):
        if request.method == "OPTIONS" and request.url.path in self.paths:
            return Response(status_code=200, headers=self.headers)

        return await call_next(request)


# ============================================================
# CORS CONFIGURATION
# ============================================================
def _parse_origins(csv_value: str):
    """
    Parse comma-separated origin values.

    Returns:
        Tuple of (is_wildcard: bool, origins: list)

    Examples:
        "*" → (True, ["*"])
        "https://app.com,https://admin.app.com" → (False, ["https://app.com", "https://admin.app.com"])
        "" → (False, [])
    """
    if not csv_value:
        return (False, [])

    csv_value = csv_value.strip()

    if csv_value == "*":
        return (True, ["*"])

    origins = [origin.strip() for origin in csv_value.split(",") if origin.strip()]
    return (False, origins)


_http_allow_all, _http_origins = _parse_origins(settings.HTTP_ALLOWED_ORIGINS)


# ============================================================
# APPLICATION LIFESPAN MANAGEMENT
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: hand the running event loop to the log broadcaster so sync
    request handlers (threadpool) can stream log lines to /logs clients.
    """
    log_ws.log_ws_manager.set_main_loop(asyncio.get_running_loop())
    if not test_db_connection():
        print("[STARTUP] ⚠️ Database unreachable, verification requests will fail until it recovers")
    print(
        f"[STARTUP] ✅ {settings.PROJECT_NAME} {settings.PROJECT_VERSION} ready "
        f"(max speed {settings.MAX_SPEED_KMH} km/h, jump threshold {settings.JUMP_THRESHOLD_KM} km)"
    )

    yield

    print("[SHUTDOWN] 🛑 Application shutdown initiated")


# ============================================================
# APPLICATION INSTANCE CREATION
# ============================================================
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    lifespan=lifespan
)


# ============================================================
# MIDDLEWARE REGISTRATION
# ============================================================
# Middlewares are executed in REVERSE order of registration

if ROOT_PATH:
    app.add_middleware(StripPrefixMiddleware, prefix=ROOT_PATH)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_http_origins,
    allow_credentials=not _http_allow_all,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
)

# Registered after CORS so it runs first: the verification endpoint answers
# every preflight itself, whatever HTTP_ALLOWED_ORIGINS says
app.add_middleware(
    PreflightMiddleware,
    paths={"/calculate-verified-km", ROOT_PATH + "/calculate-verified-km"},
    headers=verified_distance.CORS_HEADERS
)


# ============================================================
# HEALTH CHECK ENDPOINT
# ============================================================
@app.get("/health")
def health():
    return {"status": "ok"}


# ============================================================
# REST API ROUTE REGISTRATION
# ============================================================
app.include_router(verified_distance.router, tags=["verified_km"])
app.include_router(gps_logs.router, prefix="/gps_logs", tags=["gps_logs"])
app.include_router(attendance.router, prefix="/attendance", tags=["attendance"])


# ============================================================
# WEBSOCKET ENDPOINTS
# ============================================================
@app.websocket("/logs")
async def websocket_logs(ws: WebSocket):
    """
    Streams service log lines to monitoring clients.

    Message Format:
        {"msg_type": "log" | "error" | "warning", "message": "...", "timestamp": "..."}
    """
    origin = ws.headers.get("origin")

    if (not _http_allow_all) and origin is not None and origin not in _http_origins:
        print(f"[WS] ❌ Connection rejected - unauthorized origin: {origin}")
        await ws.close(code=1008)
        return

    await log_ws.log_ws_manager.register(ws)

    try:
        while True:
            message = await ws.receive_text()
            await log_ws.log_ws_manager.handle_message(ws, message)
    except WebSocketDisconnect as e:
        print(f"[WS] Connection closed: {e.code}")
    finally:
        log_ws.log_ws_manager.unregister(ws)


# ============================================================
# API INFORMATION ENDPOINT
# ============================================================
@app.get("/api")
def api_info():
    """
    Service status and configuration summary.
    """
    return {
        "status": "online",
        "version": settings.PROJECT_VERSION,
        "verification": {
            "earth_radius_km": settings.EARTH_RADIUS_KM,
            "max_speed_kmh": settings.MAX_SPEED_KMH,
            "jump_threshold_km": settings.JUMP_THRESHOLD_KM
        },
        "endpoints": {
            "calculate_verified_km": "/calculate-verified-km",
            "gps_logs": "/gps_logs/*",
            "attendance": "/attendance/{attendance_id}",
            "logs": "/logs (WebSocket)",
            "health": "/health"
        }
    }
