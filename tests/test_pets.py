"""Pet registry: creation, listing, ownership-guarded mutation."""

import math
import uuid

from conftest import pet_payload


async def test_create_pet_starts_available_with_initial_event(client, store, institution, create_pet):
    pet = await create_pet(institution)

    assert pet["isAvailable"] is True
    assert pet["institutionId"] == institution["id"]
    assert pet["institution"]["name"] == "Happy Paws"
    assert pet["institution"]["address"] == "Rua das Flores, 10"

    current = (await client.get(f"/pets/{pet['id']}/current")).json()
    assert current["status"] == "AVAILABLE"
    assert current["institutionId"] == institution["id"]
    assert current["note"] == "Pet registered and available for adoption."
    assert len(store.events) == 1
    assert store.transactions == 1


async def test_create_pet_ignores_client_availability(client, institution):
    res = await client.post(
        "/pets", json=pet_payload(isAvailable=False, institutionId=str(uuid.uuid4())), headers=institution["headers"],
    )

    assert res.status_code == 201
    assert res.json()["isAvailable"] is True
    assert res.json()["institutionId"] == institution["id"]


async def test_create_pet_validates_enums(client, institution):
    res = await client.post("/pets", json=pet_payload(species="HAMSTER"), headers=institution["headers"])
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid request data."


async def test_create_pet_limits_photos(client, institution):
    photos = [f"http://test/media/{i}.jpg" for i in range(6)]
    res = await client.post("/pets", json=pet_payload(photos=photos), headers=institution["headers"])
    assert res.status_code == 400


async def test_get_pet(client, institution, create_pet):
    pet = await create_pet(institution)

    res = await client.get(f"/pets/{pet['id']}")

    assert res.status_code == 200
    assert res.json()["name"] == "Rex"
    assert res.json()["photos"] == ["http://test/media/rex.jpg"]


async def test_get_unknown_pet_is_404(client):
    res = await client.get(f"/pets/{uuid.uuid4()}")
    assert res.status_code == 404
    assert res.json() == {"error": "Pet not found."}


async def test_get_pet_with_malformed_id_is_400(client):
    res = await client.get("/pets/not-a-uuid")
    assert res.status_code == 400


async def test_list_paginates(client, institution, create_pet):
    for i in range(7):
        await create_pet(institution, name=f"Pet {i}")

    first = (await client.get("/pets", params={"page": 1, "limit": 3})).json()
    last = (await client.get("/pets", params={"page": 3, "limit": 3})).json()

    assert first["total"] == 7
    assert first["page"] == 1
    assert first["totalPages"] == math.ceil(7 / 3)
    assert len(first["items"]) == 3
    assert len(last["items"]) == 1
    assert first["items"][0]["institution"]["address"] is None


async def test_list_empty(client, store):
    body = (await client.get("/pets")).json()
    assert body == {"items": [], "total": 0, "page": 1, "totalPages": 0}


async def test_list_filters_are_conjunctive(client, institution, create_pet):
    await create_pet(institution, name="A", species="DOG", size="SMALL", gender="MALE")
    await create_pet(institution, name="B", species="DOG", size="LARGE", gender="FEMALE")
    await create_pet(institution, name="C", species="CAT", size="SMALL", gender="FEMALE")

    dogs = (await client.get("/pets", params={"species": "DOG"})).json()
    small_females = (await client.get("/pets", params={"size": "SMALL", "gender": "FEMALE"})).json()
    everything = (await client.get("/pets")).json()

    assert {p["name"] for p in dogs["items"]} == {"A", "B"}
    assert [p["name"] for p in small_females["items"]] == ["C"]
    assert everything["total"] == 3


async def test_list_availability_filter_only_when_given(client, institution, create_pet):
    adopted = await create_pet(institution, name="Adopted")
    await create_pet(institution, name="Waiting")
    await client.post(f"/pet-status/{adopted['id']}", json={"status": "ADOPTED"}, headers=institution["headers"])

    available = (await client.get("/pets", params={"isAvailable": "true"})).json()
    unavailable = (await client.get("/pets", params={"isAvailable": "false"})).json()
    unfiltered = (await client.get("/pets")).json()

    assert [p["name"] for p in available["items"]] == ["Waiting"]
    assert [p["name"] for p in unavailable["items"]] == ["Adopted"]
    assert unfiltered["total"] == 2


async def test_list_rejects_bad_query(client):
    assert (await client.get("/pets", params={"page": 0})).status_code == 400
    assert (await client.get("/pets", params={"limit": 1000})).status_code == 400
    assert (await client.get("/pets", params={"size": "HUGE"})).status_code == 400


async def test_update_by_owner(client, institution, create_pet):
    pet = await create_pet(institution)

    res = await client.put(
        f"/pets/{pet['id']}", json={"name": "Max", "age": 3, "breed": None}, headers=institution["headers"],
    )

    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "Max"
    assert body["age"] == 3
    assert body["breed"] is None
    assert body["species"] == "DOG"
    assert body["isAvailable"] is True


async def test_update_by_other_institution_is_forbidden(client, store, institution, other_institution, create_pet):
    pet = await create_pet(institution)
    before = dict(store.pets[pet["id"]])

    res = await client.put(f"/pets/{pet['id']}", json={"name": "Stolen"}, headers=other_institution["headers"])

    assert res.status_code == 403
    assert store.pets[pet["id"]] == before
    assert (await client.get(f"/pets/{pet['id']}")).json()["name"] == "Rex"


async def test_update_cannot_touch_availability_or_owner(client, store, institution, other_institution, create_pet):
    pet = await create_pet(institution)

    flag = await client.put(f"/pets/{pet['id']}", json={"isAvailable": False}, headers=institution["headers"])
    owner = await client.put(
        f"/pets/{pet['id']}", json={"institutionId": other_institution["id"]}, headers=institution["headers"],
    )

    assert flag.status_code == 400
    assert owner.status_code == 400
    stored = store.pets[pet["id"]]
    assert stored["is_available"] is True
    assert stored["institution_id"] == institution["id"]


async def test_update_unknown_pet_is_404(client, institution):
    res = await client.put(f"/pets/{uuid.uuid4()}", json={"name": "Ghost"}, headers=institution["headers"])
    assert res.status_code == 404


async def test_update_with_empty_body_returns_pet(client, institution, create_pet):
    pet = await create_pet(institution)
    res = await client.put(f"/pets/{pet['id']}", json={}, headers=institution["headers"])
    assert res.status_code == 200
    assert res.json()["name"] == "Rex"


async def test_delete_by_owner_removes_pet_and_history(client, store, institution, create_pet):
    pet = await create_pet(institution)

    res = await client.delete(f"/pets/{pet['id']}", headers=institution["headers"])

    assert res.status_code == 204
    assert res.content == b""
    assert (await client.get(f"/pets/{pet['id']}")).status_code == 404
    assert (await client.get(f"/pets/{pet['id']}/history")).json() == []
    assert store.events == []


async def test_delete_by_other_institution_is_forbidden(client, store, institution, other_institution, create_pet):
    pet = await create_pet(institution)

    res = await client.delete(f"/pets/{pet['id']}", headers=other_institution["headers"])

    assert res.status_code == 403
    assert pet["id"] in store.pets
    assert len(store.events) == 1


async def test_delete_unknown_pet_is_404(client, institution):
    res = await client.delete(f"/pets/{uuid.uuid4()}", headers=institution["headers"])
    assert res.status_code == 404


async def test_reads_are_idempotent(client, institution, create_pet):
    pet = await create_pet(institution)

    for path in ("/pets", f"/pets/{pet['id']}", f"/pets/{pet['id']}/history", f"/pets/{pet['id']}/current"):
        first = await client.get(path)
        second = await client.get(path)
        assert first.status_code == 200
        assert first.json() == second.json()
