#verified_km/Controller/deps.py

from typing import Generator
from verified_km.DB.session import SessionLocal

def get_DB() -> Generator:
    DB = SessionLocal()
    try:
        yield DB
    finally:
        DB.close()
