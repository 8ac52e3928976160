import os
import tempfile
import sys
from pathlib import Path

# Add backend directory to Python path FIRST
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Keep the application database in memory and its logs in a scratch directory
os.environ.setdefault('DOCTRACK_DATABASE_URL', 'sqlite://')
os.environ.setdefault('DOCTRACK_LOG_DIR', tempfile.mkdtemp(prefix='doctrack-logs-'))

# Now import after path is set
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from constants import UserRole
from database import Base, configure_sqlite_engine
import models  # noqa: F401
from documents.public_api import AccountPublicApi, DocumentPublicApi
from user_management.public_api import UserPublicApi


@pytest.fixture
def db_session():
    """Create in-memory database for testing"""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool
    )
    configure_sqlite_engine(engine)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def user_api(db_session):
    return UserPublicApi(db_session)


@pytest.fixture
def document_api(db_session):
    return DocumentPublicApi(db_session)


@pytest.fixture
def account_api(db_session):
    return AccountPublicApi(db_session)


@pytest.fixture
def make_user(user_api):
    """Create a valid user; keyword arguments override the defaults."""
    counter = {"n": 0}

    def _make_user(**overrides):
        counter["n"] += 1
        attributes = {
            "email": f"person{counter['n']}@example.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "role": UserRole.MEMBER,
        }
        attributes.update(overrides)
        return user_api.create_or_raise(**attributes)

    return _make_user
