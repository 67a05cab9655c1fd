import pytest
from fastapi.testclient import TestClient

from clinic_api.in_memory_db import ClinicStore, get_store
from clinic_api.main import app


@pytest.fixture
def store():
    return ClinicStore()


@pytest.fixture
def client(store):
    """API client wired to a fresh, empty store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def patient_payload():
    return {"firstName": "Priya", "lastName": "Sharma", "age": 34, "gender": "female", "phone": "9876543210"}
