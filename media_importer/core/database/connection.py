# File: media_importer/core/database/connection.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from media_importer.core.config.settings import settings
from media_importer.core.database.base import Base

# check_same_thread=False is needed only for SQLite
connect_args = {"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {}

engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
    connect_args=connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency for obtaining a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Creates all registered tables. Safe to call repeatedly."""
    # Models must be imported so they register on Base.metadata
    import media_importer.features.storage.data.sql_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
