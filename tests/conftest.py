"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Mock Celery tasks, report storage and the Resend SDK
"""

import pytest
from celery.result import EagerResult
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401 - registers every table on Base.metadata
from app.core.database import Base, get_db
from app.core.storage import LocalStorage
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session, monkeypatch):
    """
    FastAPI test client with overridden database dependency.

    Startup table creation is skipped; db_session already created the tables.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    monkeypatch.setattr("main.init_db", lambda: None)
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def report_storage(tmp_path, monkeypatch):
    """Local storage in a temp dir for the worker and the download/delete routes"""
    local = LocalStorage(str(tmp_path / "reports"))
    monkeypatch.setattr("app.tasks.report_tasks.storage", local)
    monkeypatch.setattr("app.api.endpoints.reports.storage", local)
    return local


@pytest.fixture
def mock_celery(monkeypatch, report_storage):
    """
    Mock Celery task execution for testing without Redis.
    Executes tasks synchronously in tests, with the worker using the test database.
    """
    def mock_delay(self, *args, **kwargs):
        """Execute task synchronously instead of queuing"""
        result = self(*args, **kwargs)
        return EagerResult("test-task-id", result, "SUCCESS")

    monkeypatch.setattr("celery.Task.delay", mock_delay)
    monkeypatch.setattr("app.tasks.report_tasks.SessionLocal", TestingSessionLocal)
    return mock_delay


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture resend.Emails.send calls; each send gets an id like email_1"""
    sent = []

    def fake_send(params):
        sent.append(params)
        return {"id": f"email_{len(sent)}"}

    monkeypatch.setattr("resend.Emails.send", fake_send)
    return sent


@pytest.fixture
def sample_grading_request():
    """Body for POST /api/grade-interview"""
    return {
        "problemDescription": "Design a URL shortener that handles 10k writes per second.",
        "rubric": "Reliability, scalability, availability, communication, trade-offs.",
        "transcript": "I'd put a load balancer in front of stateless API servers and shard the key-value store...",
        "diagramJson": {
            "nodes": [
                {"id": "lb", "label": "Load Balancer", "type": "network"},
                {"id": "api", "label": "API Servers"},
                {"id": "kv", "label": "Sharded KV Store", "type": "database"},
            ],
            "edges": [
                {"source": "lb", "target": "api"},
                {"source": "api", "target": "kv", "label": "reads/writes"},
            ],
        },
        "assessment_id": "assessment-123",
    }


@pytest.fixture
def sample_notification():
    """Body for POST /api/send-completion-notification"""
    return {
        "candidateEmail": "jane@example.com",
        "candidateName": "Jane Doe",
        "assessmentId": "assessment-123",
        "assessmentType": "System Design",
        "score": 8.5,
        "completedAt": "2024-01-15T10:30:00Z",
        "companyName": "Acme",
        "adminEmail": "hiring@example.com",
    }
