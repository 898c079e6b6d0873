from collections.abc import Generator

from sqlalchemy.orm import Session

from classbook.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; routers only read, so nothing is committed here."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
