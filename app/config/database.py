# app/config/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from .settings import settings


def configure_sqlite_locking(engine: Engine, busy_timeout_ms: int = 30000) -> Engine:
    """
    Cada transacción SQLite abre con BEGIN IMMEDIATE.

    pysqlite difiere el BEGIN hasta el primer INSERT/UPDATE/DELETE y SQLite
    ignora FOR UPDATE, así que sin esto las lecturas previas quedan fuera
    del bloqueo de escritura. Con BEGIN IMMEDIATE el bloqueo se toma al
    inicio y los escritores esperan hasta busy_timeout.
    """
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA busy_timeout = {busy_timeout_ms}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine_kwargs = {
    "pool_pre_ping": True,
    "echo": settings.debug
}

if settings.is_sqlite:
    # Sesiones usadas desde el threadpool de FastAPI
    engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    engine_kwargs["pool_recycle"] = 300

# Create engine
engine = create_engine(
    settings.database_url_with_ssl,
    **engine_kwargs
)

if settings.is_sqlite:
    configure_sqlite_locking(engine, settings.sqlite_busy_timeout_ms)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
