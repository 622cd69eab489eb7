import logging
from pathlib import Path

from sqlmodel import SQLModel, create_engine, Session

from .core.config import settings

logger = logging.getLogger(__name__)

DB_URL = settings.database_url

# Shared by FastAPI's threadpool workers
engine = create_engine(
    DB_URL,
    connect_args={"check_same_thread": False},
)


def create_db_and_tables():
    Path(settings.DATABASE_PATH).parent.mkdir(parents=True, exist_ok=True)
    # Import models so every table is registered on the metadata
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(engine)
    logger.info("Connected to SQLite database at: %s", settings.DATABASE_PATH)


def get_session():
    with Session(engine) as session:
        yield session
