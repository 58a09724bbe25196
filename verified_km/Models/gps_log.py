# verified_km/Models/gps_log.py
from sqlalchemy.orm import declared_attr
from sqlalchemy import (
    Column, BigInteger, Integer, Float, DateTime,
    CheckConstraint, ForeignKey, Index, func
)
from verified_km.DB.base_class import Base


class GPS_log(Base):
    """
    SQLAlchemy model for the timestamped GPS fixes recorded during a session.
    Rows are append-only: once written a fix is never updated.
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return "gps_logs"

    # SQLite only auto-increments INTEGER primary keys
    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True
    )

    attendance_id = Column(
        Integer,
        ForeignKey('attendance.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
        doc="Session this fix belongs to"
    )

    # Timestamp stored as timezone-aware DateTime (UTC)
    timestamp = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now()
    )

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        # Verification reads a whole session in timestamp order
        Index('idx_gps_logs_attendance_timestamp', 'attendance_id', 'timestamp'),
        CheckConstraint(
            "latitude >= -90 AND latitude <= 90",
            name='check_gps_logs_lat_range'
        ),
        CheckConstraint(
            "longitude >= -180 AND longitude <= 180",
            name='check_gps_logs_lon_range'
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<GPS_log(id={self.id}, attendance_id={self.attendance_id!r}, "
            f"Lat={self.latitude:.4f}, Lon={self.longitude:.4f})>"
        )
