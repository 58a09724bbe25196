# verified_km/DB/database.py

"""
Database Utilities Module

Health-check and schema helpers built on top of the engine configured in
session.py. Request handlers obtain their sessions through
verified_km.Controller.deps.get_DB.

Usage Examples:
    # Health check endpoint
    from verified_km.DB.database import test_db_connection

    @app.get("/health")
    def health():
        return {"database": "connected" if test_db_connection() else "disconnected"}

    # Local development / test setup
    from verified_km.DB.database import create_all_tables
    create_all_tables()
"""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from verified_km.DB.session import SessionLocal, engine


# ============================================================
# Database Health Check Utilities
# ============================================================

def test_db_connection() -> bool:
    """
    Test database connectivity with a simple query.

    Returns:
        bool: True if database is reachable and responsive, False otherwise

    Notes:
        - Does not raise (returns False on error)
        - Logs error details to console for debugging
    """
    try:
        with SessionLocal() as db:
            return db.execute(text("SELECT 1")).scalar() == 1
    except SQLAlchemyError as e:
        print(f"[DB] ❌ Connection test failed: {e}")
        return False


# ============================================================
# Development and Testing Utilities
# ============================================================

def create_all_tables(bind=None):
    """
    Create all database tables defined in models.

    WARNING: Only use in development/testing environments.
    In production, use Alembic migrations instead.

    Args:
        bind: Engine to create the tables on (defaults to the application engine)
    """
    from verified_km.DB.base import Base
    print("[DB] 🔨 Creating all tables...")
    Base.metadata.create_all(bind=bind or engine)
    print("[DB] ✅ Tables created successfully")


def drop_all_tables(bind=None):
    """
    Drop all database tables defined in models.

    WARNING: DESTRUCTIVE OPERATION. Never use in production.
    """
    from verified_km.DB.base import Base
    print("[DB] 🗑️  Dropping all tables...")
    Base.metadata.drop_all(bind=bind or engine)
    print("[DB] ✅ Tables dropped successfully")


__all__ = [
    "test_db_connection",
    "create_all_tables",
    "drop_all_tables"
]
