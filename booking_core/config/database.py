"""Database configuration and connection setup"""
import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool

from booking_core.config.settings import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _install_sqlite_locking(engine: Engine) -> None:
    """
    Make every SQLite transaction start with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first write, so a read-then-insert
    sequence would run its read outside any lock. BEGIN IMMEDIATE takes the
    database write lock up front, serializing booking commits.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # hand transaction control to SQLAlchemy
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine for the given URL with the locking discipline the booking core needs"""
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", settings.SQLITE_BUSY_TIMEOUT_SECONDS)
        engine = create_engine(
            database_url,
            connect_args=connect_args,
            echo=settings.DB_ECHO,
            **kwargs,
        )
        _install_sqlite_locking(engine)
        return engine

    # Create database engine with connection pooling
    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        echo=settings.DB_ECHO,
        **kwargs,
    )


engine = build_engine(settings.DATABASE_URL)

# Committed bookings are returned to the caller after the session ends
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine = engine):
    """Create all booking core tables (and required extensions on PostgreSQL)"""
    from booking_core.models import Base

    if bind.dialect.name == "postgresql":
        logger.info("Creating required extensions...")
        with bind.connect() as conn:
            # exclusion constraint on bookings needs gist support for uuid equality
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS btree_gist;"))
            conn.commit()

    logger.info("Creating all tables...")
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables created successfully")


if __name__ == "__main__":
    from booking_core.utils.my_logging import setup_logging

    setup_logging()
    create_tables()
