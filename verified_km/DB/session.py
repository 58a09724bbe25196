"""
verified_km/DB/session.py
======================================
Database Session Configuration Module
======================================

Establishes the SQLAlchemy engine and the session factory used by every
request handler.

Usage Example:
-------------
    from verified_km.DB.session import SessionLocal

    with SessionLocal() as db:
        rows = db.query(GPS_log).all()

Session Configuration:
---------------------
- autocommit=False: Transactions must be explicitly committed
- autoflush=False: Changes are not flushed before queries
- pool_pre_ping=True: Stale pooled connections are replaced transparently
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from verified_km.Core.config import settings


# ============================================================
# DATABASE ENGINE CONFIGURATION
# ============================================================
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)


# ============================================================
# SESSION FACTORY CONFIGURATION
# ============================================================
SessionLocal = sessionmaker(
    autocommit=False,  # Require explicit commit() for transaction control
    autoflush=False,
    bind=engine
)
