from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from config.settings import DATABASE_URL, SQL_ECHO

_is_sqlite = DATABASE_URL.startswith('sqlite')

engine = create_engine(
    DATABASE_URL,
    connect_args={'check_same_thread': False} if _is_sqlite else {},
    echo=SQL_ECHO,
    pool_pre_ping=True,  # Verify connections are alive before using
)


def set_sqlite_pragma(dbapi_conn, connection_record):
    # SQLAlchemy emits BEGIN itself (see begin_sqlite_transaction) so SAVEPOINTs nest correctly
    dbapi_conn.isolation_level = None
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=5000")  # Wait up to 5s for locks instead of failing immediately
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def begin_sqlite_transaction(conn):
    conn.exec_driver_sql("BEGIN")


def configure_sqlite_engine(sqlite_engine):
    """Attach the pragma and transaction hooks to a SQLite engine."""
    event.listen(sqlite_engine, "connect", set_sqlite_pragma)
    event.listen(sqlite_engine, "begin", begin_sqlite_transaction)


if _is_sqlite:
    configure_sqlite_engine(engine)

SessionLocal = sessionmaker(bind=engine)
Base = declarative_base()

def get_db():
    """Dependency for FastAPI routes"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
