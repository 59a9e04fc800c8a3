"""Bearer token handling on protected routes."""

import uuid

import jwt

from auth import security
from conftest import pet_payload


async def test_missing_header_is_401(client):
    res = await client.post("/pets", json=pet_payload())
    assert res.status_code == 401
    assert res.json() == {"error": "Missing Authorization header."}


async def test_wrong_scheme_is_401(client, institution):
    res = await client.post(
        "/pets", json=pet_payload(), headers={"Authorization": f"Token {institution['token']}"},
    )
    assert res.status_code == 401


async def test_garbage_token_is_401(client):
    res = await client.post("/pets", json=pet_payload(), headers={"Authorization": "Bearer nope"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid access token."}


async def test_expired_token_is_401(client, institution):
    now = security.now_epoch_s()
    token = jwt.encode(
        {"sub": institution["id"], "kind": "institution", "type": "access", "iat": now - 20, "exp": now - 10},
        security.jwt_secret(),
        algorithm=security.jwt_algorithm(),
    )
    res = await client.post("/pets", json=pet_payload(), headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


async def test_token_for_vanished_institution_is_401(client, store, institution):
    store.institutions.clear()

    res = await client.post("/pets", json=pet_payload(), headers=institution["headers"])

    assert res.status_code == 401
    assert res.json() == {"error": "Institution not found."}
    assert store.pets == {}


async def test_token_for_unknown_institution_id_is_401(client, store):
    token = security.build_access_token(subject_id=str(uuid.uuid4()), kind="institution")
    res = await client.post("/pets", json=pet_payload(), headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401


async def test_non_uuid_subject_is_401(client, store):
    token = security.build_access_token(subject_id="42", kind="institution")
    res = await client.post("/pets", json=pet_payload(), headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid access token subject."}


async def test_user_token_cannot_create_pets(client, store, user):
    res = await client.post("/pets", json=pet_payload(), headers=user["headers"])

    assert res.status_code == 403
    assert store.pets == {}


async def test_user_tokens_are_not_rechecked_against_store(client, store, institution, user, create_pet):
    pet = await create_pet(institution)
    store.users.clear()

    # Still a valid principal; just not allowed to mutate pets.
    res = await client.put(f"/pets/{pet['id']}", json={"name": "Max"}, headers=user["headers"])

    assert res.status_code == 403
    assert res.json()["error"] == "Only institutions can perform this action."
