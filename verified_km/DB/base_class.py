"""
verified_km/DB/base_class.py
=================================
SQLAlchemy Base Model Definition
=================================

Declarative base class for all database models of the service.

Convention:
----------
Table names default to the lowercase class name. Models that need a
different table name (e.g. GPS_log → gps_logs) override __tablename__.
"""

from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models in the application.

    All models inheriting from it are registered in Base.metadata, which is
    what Alembic and create_all() read.
    """

    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()
