"""
verified_km/DB/base.py
==========================
SQLAlchemy Model Registry
==========================

Imports every model so that Base.metadata is complete before Alembic
autogeneration or create_all() run.

Important:
----------
Any new model class MUST be imported here.
"""

from verified_km.DB.base_class import Base

# ============================================================
# MODEL IMPORTS - DO NOT REMOVE
# ============================================================
from verified_km.Models.attendance import Attendance
from verified_km.Models.gps_log import GPS_log

__all__ = ["Base", "Attendance", "GPS_log"]
