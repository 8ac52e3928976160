from database import engine, Base
from sqlalchemy import inspect, text
import models  # noqa: F401  (registers tables on Base.metadata)
import logging

logger = logging.getLogger(__name__)


def _check_column_exists(inspector, table: str, column: str) -> bool:
    """Check if a column exists in a table"""
    columns = [col['name'] for col in inspector.get_columns(table)]
    return column in columns


def _add_column_if_missing(inspector, table: str, column: str, column_def: str) -> bool:
    """Add a column to a table if it doesn't exist"""
    if not _check_column_exists(inspector, table, column):
        logger.info(f"Running migration: Adding '{column}' column to {table} table...")
        with engine.connect() as conn:
            conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {column_def}"))
            conn.commit()
        logger.info(f"Migration complete: '{column}' column added to {table}")
        return True
    return False


def _run_essential_migrations() -> int:
    """
    Bring databases created by older versions up to the current schema.

    Returns:
        Number of migrations applied
    """
    inspector = inspect(engine)
    tables = inspector.get_table_names()
    migrations_run = 0

    if 'documents' in tables:
        # Documents gained a lifecycle status after the first release
        if _add_column_if_missing(inspector, 'documents', 'status', "VARCHAR NOT NULL DEFAULT 'uploaded'"):
            migrations_run += 1

    if migrations_run:
        logger.info(f"Applied {migrations_run} schema migration(s)")
    return migrations_run


def init_database():
    """Create all tables and apply pending column migrations"""
    Base.metadata.create_all(bind=engine)

    try:
        _run_essential_migrations()
    except Exception as e:
        logger.warning(f"Migration warning (non-fatal): {e}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
