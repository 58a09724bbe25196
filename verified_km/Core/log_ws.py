"""
Log WebSocket Management Module
================================

Real-time streaming of service log lines to monitoring clients connected on
the /logs WebSocket endpoint.

Architecture:
------------
- Thread-Safe Broadcasting: sync request handlers run in FastAPI's
  threadpool, so log lines are scheduled onto the main event loop
- Multiple Clients: every connected client receives every line
- Console Fallback: with no client connected the line goes to stdout

Message Format:
--------------
    {
        "msg_type": "log" | "error" | "warning",
        "message": "[VERIFY] Attendance 42 verified at 12.34 km",
        "timestamp": "2025-12-01T10:30:00Z"
    }

Usage Example:
-------------
    from verified_km.Core import log_ws

    log_ws.log_from_thread("Verification completed", "log")
    log_ws.log_from_thread("GPS store unreachable", "error")
"""

from datetime import datetime, timezone
from typing import Dict, Any, List, Optional
from fastapi import WebSocket
import asyncio
import json
import threading


class LogWebSocketManager:
    """
    Registry of connected log clients plus thread-safe broadcasting.

    Attributes:
        clients: Currently active WebSocket connections
        main_loop: FastAPI's event loop, set during application startup
    """

    def __init__(self):
        self.clients: List[WebSocket] = []
        self.main_loop: Optional[asyncio.AbstractEventLoop] = None
        self._lock = threading.Lock()

    def set_main_loop(self, loop: asyncio.AbstractEventLoop):
        self.main_loop = loop

    @property
    def has_clients(self) -> bool:
        with self._lock:
            return len(self.clients) > 0

    async def register(self, ws: WebSocket):
        """
        Accept the handshake and start streaming to the client.
        A failed handshake leaves the registry unchanged.
        """
        await ws.accept()
        with self._lock:
            if ws not in self.clients:
                self.clients.append(ws)
            total = len(self.clients)
        print(f"[LOG-WS] Client registered. Total clients: {total}")

    def unregister(self, ws: WebSocket):
        """Idempotent removal from the registry (does not close the socket)."""
        with self._lock:
            if ws in self.clients:
                self.clients.remove(ws)
                print(f"[LOG-WS] Client unregistered. Total clients: {len(self.clients)}")

    async def broadcast(self, message: Dict[str, Any]):
        """
        Send a message to every client; clients whose send fails are dropped.
        """
        with self._lock:
            current_clients = list(self.clients)

        dead = []
        payload = json.dumps(message)
        for ws in current_clients:
            try:
                await ws.send_text(payload)
            except Exception:
                dead.append(ws)

        for ws in dead:
            self.unregister(ws)

    def send_from_thread(self, message: Dict[str, Any]):
        """
        Schedule a broadcast on the main loop from any thread (fire and forget).
        """
        if self.main_loop is None or self.main_loop.is_closed():
            return
        asyncio.run_coroutine_threadsafe(self.broadcast(message), self.main_loop)

    async def handle_message(self, ws: WebSocket, message: str):
        """
        Messages sent by clients are informational only.
        """
        print(f"[LOG-WS] Received message from client: {message}")


def log_from_thread(message: str, msg_type: str = "log"):
    """
    Thread-safe entry point for broadcasting log messages.

    Args:
        message: The log message content
        msg_type: "log", "warning" or "error"

    Behavior:
        - Clients connected: message is queued for broadcast
        - No clients: message is printed to the console only
    """
    if log_ws_manager.has_clients:
        payload: Dict[str, Any] = {
            "msg_type": msg_type,
            "message": str(message),
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }
        log_ws_manager.send_from_thread(payload)
    else:
        print(f"[LOG-BROADCAST] ({msg_type}) {message}")


# ============================================================
# GLOBAL LOG WEBSOCKET MANAGER INSTANCE
# ============================================================
log_ws_manager = LogWebSocketManager()
