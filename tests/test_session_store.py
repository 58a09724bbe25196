"""
Tests for the SQLAlchemy-backed GPS store and attendance sink.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from verified_km.Models.gps_log import GPS_log
from verified_km.Repositories.attendance import get_attendance_by_id
from verified_km.Repositories.gps_log import count_gps_logs_by_attendance, create_gps_log
from verified_km.Schemas.gps_log import Coordinates, GpsLog_create
from verified_km.Services.session_store import (
    SqlGpsFixStore,
    SqlSessionRecordSink,
    gps_log_to_fix,
)
from verified_km.Services.verification import DataFetchError, PersistenceError

T0 = datetime(2025, 1, 2, 12, 0, 0, tzinfo=timezone.utc)


def add_fix(db, attendance_id, seconds, lat, lon):
    return create_gps_log(db, GpsLog_create(
        attendance_id=attendance_id,
        timestamp=T0 + timedelta(seconds=seconds),
        coordinates=Coordinates(latitude=lat, longitude=lon),
    ))


def db_down():
    return OperationalError("SELECT 1", {}, Exception("could not connect to server"))


class TestSqlGpsFixStore:

    def test_fetches_fixes_in_timestamp_order(self, db, attendance):
        add_fix(db, attendance.id, 120, 12.9730, 77.5960)
        add_fix(db, attendance.id, 0, 12.9716, 77.5946)
        add_fix(db, attendance.id, 60, 12.9720, 77.5950)

        fixes = SqlGpsFixStore(db).fetch_fixes(attendance.id)

        assert [f.timestamp for f in fixes] == [
            T0, T0 + timedelta(seconds=60), T0 + timedelta(seconds=120)
        ]
        assert fixes[0].latitude == 12.9716
        assert all(f.timestamp.tzinfo is not None for f in fixes)

    def test_only_returns_fixes_of_the_requested_session(self, db, attendance):
        add_fix(db, attendance.id, 0, 12.9716, 77.5946)

        assert SqlGpsFixStore(db).fetch_fixes(attendance.id + 1) == []
        assert count_gps_logs_by_attendance(db, attendance.id) == 1

    def test_database_error_becomes_data_fetch_error(self):
        session = MagicMock()
        session.query.side_effect = db_down()

        with pytest.raises(DataFetchError) as exc_info:
            SqlGpsFixStore(session).fetch_fixes(1)

        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_malformed_row_becomes_data_fetch_error(self):
        row = GPS_log(id=5, attendance_id=1, timestamp=T0, latitude=None, longitude=77.59)

        with pytest.raises(DataFetchError, match="Malformed GPS log 5"):
            gps_log_to_fix(row)

    def test_naive_timestamps_are_read_as_utc(self):
        row = GPS_log(id=1, attendance_id=1, timestamp=datetime(2025, 1, 2, 12, 0), latitude=1.0, longitude=2.0)
        assert gps_log_to_fix(row).timestamp == T0


class TestSqlSessionRecordSink:

    def test_updates_verified_km(self, db, attendance):
        SqlSessionRecordSink(db).update_verified_distance(attendance.id, 12.34)

        db.expire_all()
        assert get_attendance_by_id(db, attendance.id).verified_km == 12.34

    def test_unknown_attendance_is_a_persistence_error(self, db):
        with pytest.raises(PersistenceError, match="not found"):
            SqlSessionRecordSink(db).update_verified_distance(999, 1.0)

    def test_database_error_rolls_back(self):
        session = MagicMock()
        session.query.side_effect = db_down()

        with pytest.raises(PersistenceError) as exc_info:
            SqlSessionRecordSink(session).update_verified_distance(1, 1.0)

        session.rollback.assert_called_once()
        assert isinstance(exc_info.value.__cause__, OperationalError)
