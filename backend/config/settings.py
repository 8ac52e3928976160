"""
Runtime Configuration

Reads deployment settings from environment variables.

Includes:
- Database location (DOCTRACK_DATABASE_URL / DOCTRACK_DATA_DIR)
- Log directory and level
- SQL echo toggle for debugging queries
"""
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


DATA_DIR = Path(os.environ.get('DOCTRACK_DATA_DIR', Path.home() / ".doctrack"))

LOG_DIR = Path(os.environ.get('DOCTRACK_LOG_DIR', DATA_DIR / "logs"))
LOG_LEVEL = os.environ.get('DOCTRACK_LOG_LEVEL', 'INFO').upper()

SQL_ECHO = _env_flag('DOCTRACK_SQL_ECHO')


def get_database_url() -> str:
    """
    Resolve the database URL.

    Returns:
        DOCTRACK_DATABASE_URL if set, otherwise a SQLite file inside DATA_DIR
    """
    url = os.environ.get('DOCTRACK_DATABASE_URL')
    if url:
        return url

    DATA_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{DATA_DIR / 'doctrack.db'}"


DATABASE_URL = get_database_url()
