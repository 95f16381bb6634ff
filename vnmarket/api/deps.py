"""API dependencies"""

from typing import Generator

from sqlalchemy.orm import Session

from vnmarket.core.db import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Database session per request, closed when the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
