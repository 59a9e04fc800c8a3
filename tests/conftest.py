"""Shared fixtures: in-memory store, ASGI test client, account helpers."""

import os
import tempfile

# Set before the app modules read them.
os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="adoption-uploads-"))
os.environ.setdefault("PUBLIC_BASE_URL", "http://test")

import pytest
from httpx import ASGITransport, AsyncClient

from fakes import InMemoryStore
from main import app

PASSWORD = "s3cret-passw0rd"


@pytest.fixture
def store(monkeypatch):
    fake = InMemoryStore()
    fake.install(monkeypatch)
    return fake


@pytest.fixture
async def client(store):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


def institution_payload(**overrides) -> dict:
    payload = {
        "name": "Happy Paws",
        "email": "a@x.com",
        "taxId": "111",
        "password": PASSWORD,
        "responsibleName": "Ana Souza",
        "kind": "NGO",
        "city": "Recife",
        "state": "PE",
        "zipCode": "50000-000",
        "address": "Rua das Flores, 10",
        "latitude": -8.05,
        "longitude": -34.9,
    }
    payload.update(overrides)
    return payload


def user_payload(**overrides) -> dict:
    payload = {
        "name": "Bruno Lima",
        "email": "bruno@example.com",
        "nationalId": "123.456.789-00",
        "password": PASSWORD,
        "city": "Olinda",
        "state": "PE",
    }
    payload.update(overrides)
    return payload


def pet_payload(**overrides) -> dict:
    payload = {
        "name": "Rex",
        "species": "DOG",
        "breed": "Labrador",
        "age": 2,
        "size": "MEDIUM",
        "gender": "MALE",
        "description": "Friendly dog",
        "isVaccinated": True,
        "isNeutered": True,
        "photos": ["http://test/media/rex.jpg"],
    }
    payload.update(overrides)
    return payload


async def _register_and_login(client, register_path, login_path, payload, key) -> dict:
    res = await client.post(register_path, json=payload)
    assert res.status_code == 201, res.text
    res = await client.post(login_path, json={"email": payload["email"], "password": payload["password"]})
    assert res.status_code == 200, res.text
    body = res.json()
    return {
        "id": body[key]["id"],
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def make_institution(client):
    async def _make(**overrides) -> dict:
        return await _register_and_login(
            client, "/institutions", "/sessions/institutions", institution_payload(**overrides), "institution",
        )
    return _make


@pytest.fixture
async def institution(make_institution):
    return await make_institution()


@pytest.fixture
async def other_institution(make_institution):
    return await make_institution(name="Prefeitura", email="b@x.com", taxId="222", kind="MUNICIPALITY")


@pytest.fixture
async def user(client):
    return await _register_and_login(client, "/users", "/sessions/users", user_payload(), "user")


@pytest.fixture
def create_pet(client):
    async def _create(owner: dict, **overrides) -> dict:
        res = await client.post("/pets", json=pet_payload(**overrides), headers=owner["headers"])
        assert res.status_code == 201, res.text
        return res.json()
    return _create
