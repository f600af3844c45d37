import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEED_DEFAULTS"] = "false"

from appraisal_api.database import Base, get_db
from appraisal_api.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    import appraisal_api.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    # Use sessionmaker with the active connection
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(scope="function")
def roster(db_session):
    """Seed the default directory roster."""
    from appraisal_api.services.directory import DirectoryService
    from appraisal_api.services.repositories import SqlUserRepository

    service = DirectoryService(SqlUserRepository(db_session))
    service.ensure_roster()
    return service.list_users()

@pytest.fixture(scope="function")
def as_user():
    """Helper fixture building the acting-user headers."""
    def _as_user(user_id, role):
        return {"X-User-Id": user_id, "X-User-Role": role}
    return _as_user

@pytest.fixture(scope="function")
def self_appraisal():
    """A complete self appraisal form payload."""
    return {
        "employee_name": "John Smith",
        "position": "Software Engineer",
        "department": "Engineering",
        "review_period": "Q4 2024",
        "supervisor": "Sarah Johnson",
        "productivity": 4,
        "quality": 4,
        "communication": 5,
        "teamwork": 4,
        "initiative": 3,
        "reliability": 4,
        "goals_achieved": 4,
        "total_goals": 5,
        "strengths": "Delivery",
        "improvements": "Estimation",
        "comments": "",
    }

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
