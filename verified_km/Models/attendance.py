# verified_km/Models/attendance.py
from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import declared_attr
from verified_km.DB.base_class import Base


class Attendance(Base):
    """
    SQLAlchemy model for agent work sessions (attendance records).

    Responsibilities:
    - Bounds a work period with start/end time and coordinates
    - Holds the verified distance derived from the session's GPS logs

    Related models:
    - GPS_log (1:N) - one session contains many GPS fixes
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "attendance"

    # ========================================
    # PRIMARY KEY
    # ========================================
    id = Column(Integer, primary_key=True, autoincrement=True)

    user_id = Column(
        String(100),
        nullable=False,
        index=True,
        doc="Field agent that owns this session"
    )

    status = Column(
        String(20),
        nullable=False,
        server_default='active',
        doc="Session status: 'active' (ongoing) or 'completed'"
    )

    # ========================================
    # TEMPORAL BOUNDS
    # ========================================
    start_time = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        doc="UTC timestamp when the shift started"
    )

    end_time = Column(
        DateTime(timezone=True),
        nullable=True,
        doc="UTC timestamp when the shift ended (NULL while active)"
    )

    # ========================================
    # SPATIAL BOUNDS
    # ========================================
    start_lat = Column(Float, nullable=False)
    start_lon = Column(Float, nullable=False)
    end_lat = Column(Float, nullable=True)
    end_lon = Column(Float, nullable=True)

    # ========================================
    # DERIVED METRICS
    # ========================================
    verified_km = Column(
        Float,
        nullable=False,
        default=0.0,
        server_default='0',
        doc="Distance travelled in km, recomputed from gps_logs (never hand-edited)"
    )

    # ========================================
    # AUDIT FIELDS
    # ========================================
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    updated_at = Column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True
    )

    __table_args__ = (
        Index('idx_attendance_user_start_time', 'user_id', 'start_time'),
        CheckConstraint(
            "status IN ('active', 'completed')",
            name='check_attendance_status'
        ),
        CheckConstraint(
            "verified_km >= 0",
            name='check_verified_km_non_negative'
        ),
        CheckConstraint(
            "end_time IS NULL OR end_time >= start_time",
            name='check_attendance_time_order'
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Attendance(id={self.id!r}, user_id={self.user_id!r}, "
            f"status={self.status!r}, verified_km={self.verified_km!r})>"
        )
