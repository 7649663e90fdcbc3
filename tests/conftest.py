import os

# Must be set before eventhub is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest
from fastapi.testclient import TestClient

from eventhub.database import Base, SessionLocal, engine
from eventhub.main import app

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_client():
    """Factory for TestClients, each with its own cookie jar (= its own session)"""
    clients = []

    def _make(username=None, user_type="client", full_name="Test User", **extra):
        client = TestClient(app)
        clients.append(client)
        if username:
            payload = {
                "username": username,
                "password": DEFAULT_PASSWORD,
                "userType": user_type,
                "fullName": full_name,
                **extra,
            }
            response = client.post("/api/register", json=payload)
            assert response.status_code == 201, response.text
            client.user = response.json()
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def anon(make_client):
    return make_client()


@pytest.fixture
def client_session(make_client):
    return make_client("carla", "client", "Carla Client")


@pytest.fixture
def other_client_session(make_client):
    return make_client("oscar", "client", "Oscar Other")


@pytest.fixture
def vendor_session(make_client):
    return make_client("victor", "vendor", "Victor Vendor", skills=["Catering", "Bartending"])


@pytest.fixture
def other_vendor_session(make_client):
    return make_client("wanda", "vendor", "Wanda Waiter")


@pytest.fixture
def job(client_session):
    response = client_session.post(
        "/api/jobs",
        json={
            "title": "Wedding bartenders",
            "description": "Two bartenders for a 150 guest reception",
            "budget": 500,
            "category": "Wedding",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def milestone(client_session, job):
    response = client_session.post(
        f"/api/jobs/{job['id']}/milestones",
        json={
            "title": "Deposit",
            "description": "Staff booked and briefed",
            "amount": 200,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()
