import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from taskmanager.core.config import Settings
from taskmanager.core.database import Base
from taskmanager.main import create_app

# Engine SQLite pour tests, injecté dans create_app()
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"
test_engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def test_settings():
    """Settings de test: mode development, limite large"""
    s = Settings()
    s.ENVIRONMENT = "development"
    s.RATE_LIMIT_MAX = 1000
    s.RATE_LIMIT_WINDOW_MIN = 15
    s.CORS_ORIGINS = ["http://localhost:3000"]
    s.LOG_LEVEL = "WARNING"
    return s


@pytest.fixture
def app(test_settings):
    return create_app(engine=test_engine, settings=test_settings)


@pytest.fixture
def client(app):
    """Client de test FastAPI"""
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture
def create_task(client):
    """Helper: crée une tâche via l'API et retourne data"""
    def _create(**fields):
        payload = {"title": "Tâche"}
        payload.update(fields)
        response = client.post("/api/tasks", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create
