"""Pytest fixtures for dealership dashboard tests."""

import os
import tempfile
from pathlib import Path

import pytest

# The engine is built from DB_URL at import time, so point it at a scratch
# database before anything under app/ is imported.
_TEST_DIR = Path(tempfile.mkdtemp(prefix="dealership-tests-"))
TEST_DB_PATH = _TEST_DIR / "test.db"
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["WHATSAPP_COUNTRY_CODE"] = "213"
os.environ["COMPANY_NAME"] = "Test Motors"


class FakeBlobStore:
    """Records uploads and deletes instead of talking to S3."""

    def __init__(self):
        self.files = {}
        self.deleted = []
        self.fail_deletes = False

    def upload_file(self, file_content, file_key, content_type="application/pdf", metadata=None):
        from app.core.s3 import S3Service

        self.files[file_key] = (file_content, content_type)
        return S3Service.get_file_url(file_key), "md5"

    def delete_file(self, file_key):
        from app.core.exceptions import ExternalServiceError

        if self.fail_deletes:
            raise ExternalServiceError("Storage", "delete failed")
        self.deleted.append(file_key)
        self.files.pop(file_key, None)


@pytest.fixture
def database():
    """Fresh tables for every test."""
    from sqlalchemy import create_engine
    from app.core.db.models import Base

    engine = create_engine(f"sqlite:///{TEST_DB_PATH}")
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def blob_store(monkeypatch):
    from app.core.s3 import S3Service

    store = FakeBlobStore()
    monkeypatch.setattr(S3Service, "upload_file", store.upload_file)
    monkeypatch.setattr(S3Service, "delete_file", store.delete_file)
    return store


@pytest.fixture
def fail_next_commit(monkeypatch):
    """Arm a single failing session commit, as when SQLite reports a lock."""
    from sqlalchemy.ext.asyncio import AsyncSession

    original_commit = AsyncSession.commit
    armed = {"fail": False}

    async def commit(self):
        if armed["fail"]:
            armed["fail"] = False
            raise RuntimeError("database is locked")
        await original_commit(self)

    monkeypatch.setattr(AsyncSession, "commit", commit)

    def _arm():
        armed["fail"] = True

    return _arm


@pytest.fixture
def lenient_client(client):
    """Same app and login, but server errors come back as 500 responses."""
    from fastapi.testclient import TestClient

    return TestClient(client.app, raise_server_exceptions=False)


@pytest.fixture
def login_as():
    """Switch the authenticated user for the following requests."""
    from app.main import app
    from app.modules.users.auth import TokenData, get_current_user

    def _login_as(role="ADMIN", user_id=1, username="admin"):
        app.dependency_overrides[get_current_user] = lambda: TokenData(
            user_id=user_id, username=username, role=role
        )

    yield _login_as
    app.dependency_overrides.clear()


@pytest.fixture
def client(database, blob_store, login_as):
    """Test client logged in as an admin."""
    from fastapi.testclient import TestClient
    from app.main import app

    login_as("ADMIN")
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def anonymous_client(database, blob_store):
    from fastapi.testclient import TestClient
    from app.main import app

    app.dependency_overrides.clear()
    with TestClient(app) as test_client:
        yield test_client


def data(response):
    """Payload inside the success envelope."""
    body = response.json()
    assert body["success"] is True, body
    return body["data"]


@pytest.fixture
def make_order(client):
    def _make_order(**overrides):
        payload = {
            "customer_name": "Karim Benali",
            "customer_phone": "0555 12 34 56",
            "customer_wilaya": "Alger",
            "customer_id_card": "ID-778",
            "car_brand": "Hyundai",
            "car_model": "Tucson",
            "car_budget": "4000000",
        }
        payload.update(overrides)
        response = client.post("/api/orders", json=payload)
        assert response.status_code == 201, response.text
        return data(response)

    return _make_order


@pytest.fixture
def make_car(client):
    def _make_car(**overrides):
        payload = {
            "brand": "Kia",
            "model": "Sportage",
            "year": 2022,
            "color": "White",
            "mileage": 35000,
            "vin": "KNAPM81ABCD123456",
            "location": "Busan",
            "selling_price": 4200000,
            "currency": "DZD",
        }
        payload.update(overrides)
        response = client.post("/api/inventory", json=payload)
        assert response.status_code == 201, response.text
        return data(response)

    return _make_car
