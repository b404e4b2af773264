from sqlalchemy import create_engine, pool, event
from sqlalchemy.orm import declarative_base, sessionmaker
import os
import logging

from cineshelf.config import DATABASE_URL

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    """Pool settings for the configured database backend."""
    options = {
        "pool_pre_ping": True,  # Test connections before using them
        "echo": os.getenv("DB_ECHO", "false").lower() == "true",  # Set to true for SQL debugging
    }
    if url.startswith("sqlite"):
        # Handlers run in FastAPI's threadpool; waits on a locked file are capped
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": float(os.getenv("DB_SQLITE_TIMEOUT", 10)),
        }
        return options

    options.update(
        poolclass=pool.QueuePool,
        pool_size=int(os.getenv("DB_POOL_SIZE", 5)),  # Number of connections to keep open
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", 10)),  # Max connections beyond pool_size
        pool_timeout=int(os.getenv("DB_POOL_TIMEOUT", 30)),  # Seconds to wait for connection
        pool_recycle=int(os.getenv("DB_POOL_RECYCLE", 3600)),  # Recycle connections after 1 hour
    )
    if url.startswith("postgresql"):
        options["connect_args"] = {
            "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", 5)),  # Seconds to establish a connection
            "options": f"-c statement_timeout={int(os.getenv('DB_STATEMENT_TIMEOUT_MS', 5000))}",  # Per-statement cap
        }
    return options


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))


@event.listens_for(engine, "connect")
def receive_connect(dbapi_conn, connection_record):
    """Log when a new connection is created"""
    logger.debug("Database connection established")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# Dependency for FastAPI routes
def get_db():
    """
    Database session dependency for FastAPI.
    Automatically handles session creation and cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
