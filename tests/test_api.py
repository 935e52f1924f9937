"""JSON API tests."""

from __future__ import annotations

import json


def _create(client, name: str = "Cleaners") -> dict:
    response = client.post("/v1/lists", json={"name": name})
    assert response.status_code == 201
    return response.json()


def test_health(client) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_week_endpoint_uses_injected_clock(client) -> None:
    response = client.get("/v1/week")
    assert response.status_code == 200
    assert response.json() == {
        "week_number": 24,
        "week_start": "2024-06-10",
        "week_end": "2024-06-16",
        "formatted_start": "10.06.2024",
        "formatted_end": "16.06.2024",
    }


def test_create_and_fetch_list(client) -> None:
    created = _create(client, "  Standup ")
    assert created["name"] == "Standup"
    assert created["last_rotation"] == "2024-06-10"
    assert created["next_rotation"] == "2024-06-17"
    assert created["people"] == []
    assert created["current_person"] is None

    fetched = client.get(f"/v1/lists/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == created

    summaries = client.get("/v1/lists").json()
    assert summaries == [{"id": created["id"], "name": "Standup"}]


def test_blank_names_are_rejected(client) -> None:
    assert client.post("/v1/lists", json={"name": "   "}).status_code == 422
    created = _create(client)
    assert client.post(f"/v1/lists/{created['id']}/people", json={"name": ""}).status_code == 422


def test_people_editing_flow(client) -> None:
    list_id = _create(client)["id"]

    for name in ("Alice", "Bob", "Charlie", "Alice"):
        response = client.post(f"/v1/lists/{list_id}/people", json={"name": name})
        assert response.status_code == 200
    assert response.json()["people"] == ["Alice", "Bob", "Charlie"]

    moved = client.post(f"/v1/lists/{list_id}/people/2/move", json={"direction": "up"})
    assert moved.json()["people"] == ["Alice", "Charlie", "Bob"]

    bad_direction = client.post(f"/v1/lists/{list_id}/people/0/move", json={"direction": "left"})
    assert bad_direction.status_code == 422

    removed = client.delete(f"/v1/lists/{list_id}/people/0")
    assert removed.json()["people"] == ["Charlie", "Bob"]
    assert removed.json()["current_person"] == "Charlie"


def test_rename_list(client) -> None:
    list_id = _create(client)["id"]
    response = client.patch(f"/v1/lists/{list_id}", json={"name": "Dishes"})
    assert response.status_code == 200
    assert response.json()["name"] == "Dishes"


def test_fetch_reconciles_elapsed_weeks(client, clock) -> None:
    list_id = _create(client)["id"]
    for name in ("Alice", "Bob", "Charlie"):
        client.post(f"/v1/lists/{list_id}/people", json={"name": name})

    clock.advance(weeks=5)
    payload = client.get(f"/v1/lists/{list_id}").json()

    assert payload["people"] == ["Charlie", "Alice", "Bob"]
    assert payload["current_person"] == "Charlie"
    assert payload["last_rotation"] == "2024-07-15"
    assert payload["next_rotation"] == "2024-07-22"


def test_missing_list_returns_404(client) -> None:
    assert client.get("/v1/lists/missing").status_code == 404
    assert client.patch("/v1/lists/missing", json={"name": "X"}).status_code == 404
    assert client.post("/v1/lists/missing/people", json={"name": "X"}).status_code == 404
    assert client.delete("/v1/lists/missing/people/0").status_code == 404
    assert client.post("/v1/lists/missing/people/0/move", json={"direction": "up"}).status_code == 404
    detail = client.get("/v1/lists/missing").json()["detail"]
    assert "missing" in detail


def test_delete_list(client) -> None:
    list_id = _create(client)["id"]
    response = client.delete(f"/v1/lists/{list_id}")
    assert response.json() == {"ok": True, "id": list_id}
    assert client.get(f"/v1/lists/{list_id}").status_code == 404


def test_corrupt_record_is_reported(client, tmp_path) -> None:
    data_dir = tmp_path / "data"
    (data_dir / "broken.json").write_text(
        json.dumps({"id": "broken", "name": "Broken", "lastRotation": "next week", "people": []}),
        encoding="utf-8",
    )

    response = client.get("/v1/lists/broken")
    assert response.status_code == 500
    assert "next week" in response.json()["detail"]


def test_legacy_file_is_migrated_on_first_rotation(client, tmp_path) -> None:
    data_dir = tmp_path / "data"
    path = data_dir / "legacy.json"
    # 2024-06-03T00:00:00Z, one week before the fixed clock's Monday.
    path.write_text(
        json.dumps({"id": "legacy", "name": "Old", "lastRotation": 1717372800000, "people": ["A", "B"]}),
        encoding="utf-8",
    )

    payload = client.get("/v1/lists/legacy").json()

    assert payload["people"] == ["B", "A"]
    assert payload["last_rotation"] == "2024-06-10"
    assert json.loads(path.read_text(encoding="utf-8"))["lastRotation"] == "2024-06-10"


def test_api_works_with_sqlite_backend(sqlite_client) -> None:
    created = _create(sqlite_client, "SQL")
    sqlite_client.post(f"/v1/lists/{created['id']}/people", json={"name": "Alice"})
    payload = sqlite_client.get(f"/v1/lists/{created['id']}").json()
    assert payload["people"] == ["Alice"]
