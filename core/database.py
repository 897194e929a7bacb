from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from core.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    # Fixed-size pool; requests beyond the limit wait for a free connection
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": 0,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


@contextmanager
def scoped_transaction(db: Session) -> Iterator[Session]:
    """
    Run several statements as one unit of work.

    Commits when the block finishes, rolls back everything on any error and
    re-raises it. The session itself is released by the request dependency.

    Usage:
        with scoped_transaction(db):
            db.query(VerificationCode).filter(...).delete()
            db.query(User).filter(...).delete()
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
