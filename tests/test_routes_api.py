import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from conftest import route_payload
from rumbo.shared.services.validation import STOPS_REQUIRED_MESSAGE


def _create(api_client: TestClient, payload: dict) -> dict:
    response = api_client.post("/api/v1/routes", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["route"]


def test_create_route_assigns_visit_order_from_position(api_client: TestClient, catalog: dict) -> None:
    route = _create(api_client, route_payload(catalog))

    assert route["version"] == 1
    assert [s["visit_order"] for s in route["stops"]] == [0, 1]
    assert [s["dropoff_point_id"] for s in route["stops"]] == [catalog["caballito_id"], catalog["flores_id"]]
    assert [s["amount"] for s in route["stops"]] == [60.0, 40.0]
    assert all(s["status"] == "pending" for s in route["stops"])


def test_create_route_with_client_requires_stops(api_client: TestClient, catalog: dict) -> None:
    response = api_client.post("/api/v1/routes", json=route_payload(catalog, stops=[]))

    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "validation"
    assert body["violations"] == [{"field": "stops", "message": STOPS_REQUIRED_MESSAGE}]
    assert api_client.get("/api/v1/routes").json()["count"] == 0


def test_create_route_without_client_may_have_no_stops(api_client: TestClient, catalog: dict) -> None:
    route = _create(api_client, route_payload(catalog, stops=[], client_id=""))

    assert route["client_id"] is None
    assert route["stops"] == []


def test_create_route_rejects_unknown_references(api_client: TestClient, catalog: dict) -> None:
    payload = route_payload(
        catalog,
        driver_id="missing",
        zone_id=999,
        stops=[{"dropoff_point_id": catalog["caballito_id"]}, {"dropoff_point_id": 999}],
    )

    response = api_client.post("/api/v1/routes", json=payload)

    assert response.status_code == 422
    fields = [v["field"] for v in response.json()["violations"]]
    assert fields == ["driver_id", "zone_id", "stops.1.dropoff_point_id"]


def test_create_route_rejects_dropoff_point_of_another_client(api_client: TestClient, catalog: dict) -> None:
    payload = route_payload(catalog, stops=[{"dropoff_point_id": catalog["almagro_id"]}])

    response = api_client.post("/api/v1/routes", json=payload)

    assert response.status_code == 422
    violation = response.json()["violations"][0]
    assert violation["field"] == "stops.0.dropoff_point_id"
    assert violation["message"] == "El cliente de reparto no pertenece al cliente principal."


def test_create_route_is_idempotent_with_submission_key(api_client: TestClient, catalog: dict) -> None:
    payload = route_payload(catalog, submission_key="form-123")

    first = api_client.post("/api/v1/routes", json=payload)
    second = api_client.post("/api/v1/routes", json=payload)

    assert first.json()["created"] is True
    assert second.json()["created"] is False
    assert second.json()["route"]["id"] == first.json()["route"]["id"]
    assert api_client.get("/api/v1/routes").json()["count"] == 1


def test_update_replaces_all_stops(api_client: TestClient, catalog: dict) -> None:
    route = _create(api_client, route_payload(catalog))
    old_ids = {s["id"] for s in route["stops"]}

    payload = route_payload(
        catalog,
        stops=[{"dropoff_point_id": catalog["flores_id"], "amount": 10, "notes": "Timbre 2B"}],
        batch=2,
    )
    response = api_client.put(f"/api/v1/routes/{route['id']}", json=payload)

    assert response.status_code == 200, response.text
    updated = response.json()["route"]
    assert updated["batch"] == 2
    assert updated["version"] == 2
    assert len(updated["stops"]) == 1
    assert updated["stops"][0]["visit_order"] == 0
    assert updated["stops"][0]["notes"] == "Timbre 2B"
    assert updated["stops"][0]["id"] not in old_ids

    for stop_id in old_ids:
        missing = api_client.patch(f"/api/v1/deliveries/stops/{stop_id}/status", json={"status": "en_route"})
        assert missing.status_code == 404


def test_update_with_stale_version_is_a_conflict(api_client: TestClient, catalog: dict) -> None:
    route = _create(api_client, route_payload(catalog))
    api_client.put(f"/api/v1/routes/{route['id']}", json=route_payload(catalog, version=1))

    stale = route_payload(catalog, stops=[{"dropoff_point_id": catalog["flores_id"]}], version=1)
    response = api_client.put(f"/api/v1/routes/{route['id']}", json=stale)

    assert response.status_code == 409
    assert response.json()["error_code"] == "conflict"
    current = api_client.get(f"/api/v1/routes/{route['id']}").json()["route"]
    assert current["version"] == 2
    assert len(current["stops"]) == 2


def test_failed_update_leaves_stops_unchanged(api_client: TestClient, catalog: dict) -> None:
    route = _create(api_client, route_payload(catalog))

    response = api_client.put(f"/api/v1/routes/{route['id']}", json=route_payload(catalog, stops=[]))

    assert response.status_code == 422
    current = api_client.get(f"/api/v1/routes/{route['id']}").json()["route"]
    assert [s["id"] for s in current["stops"]] == [s["id"] for s in route["stops"]]


def test_update_unknown_route_is_not_found(api_client: TestClient, catalog: dict) -> None:
    response = api_client.put("/api/v1/routes/999", json=route_payload(catalog))

    assert response.status_code == 404
    assert response.json()["error_code"] == "not_found"


def test_delete_route_removes_stops(api_client: TestClient, catalog: dict) -> None:
    route = _create(api_client, route_payload(catalog))

    response = api_client.delete(f"/api/v1/routes/{route['id']}")

    assert response.status_code == 200
    assert response.json()["route_id"] == route["id"]
    assert api_client.get(f"/api/v1/routes/{route['id']}").status_code == 404
    assert api_client.delete(f"/api/v1/routes/{route['id']}").status_code == 404
    stop_id = route["stops"][0]["id"]
    assert api_client.patch(f"/api/v1/deliveries/stops/{stop_id}/status", json={"status": "en_route"}).status_code == 404


def test_list_routes_filters_and_counts(api_client: TestClient, catalog: dict) -> None:
    _create(api_client, route_payload(catalog))
    _create(api_client, route_payload(catalog, driver_id=catalog["other_driver_id"], date="2024-01-02"))

    everything = api_client.get("/api/v1/routes").json()
    assert everything["count"] == 2

    listing = api_client.get("/api/v1/routes", params={"driver_id": catalog["driver_id"]}).json()
    assert listing["count"] == 1
    summary = listing["routes"][0]
    assert summary["driver_name"] == "Luis Gómez"
    assert summary["client_name"] == "La Espiga"
    assert summary["zone_name"] == "Centro"
    assert summary["item_count"] == 2

    by_date = api_client.get("/api/v1/routes", params={"date": "2024-01-02"}).json()
    assert [r["driver_id"] for r in by_date["routes"]] == [catalog["other_driver_id"]]


def test_route_list_is_refreshed_after_writes(api_client: TestClient, catalog: dict) -> None:
    assert api_client.get("/api/v1/routes").json()["count"] == 0

    route = _create(api_client, route_payload(catalog))
    assert api_client.get("/api/v1/routes").json()["count"] == 1

    api_client.delete(f"/api/v1/routes/{route['id']}")
    assert api_client.get("/api/v1/routes").json()["count"] == 0


def _failing_commit(session: Session) -> None:
    session.flush()
    raise SQLAlchemyError("disk I/O error")


def test_non_object_body_is_a_root_violation(api_client: TestClient, catalog: dict) -> None:
    response = api_client.post("/api/v1/routes", json=[1, 2])

    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "validation"
    assert [v["field"] for v in body["violations"]] == [""]


def test_failed_create_leaves_no_route(
    api_client: TestClient, catalog: dict, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(Session, "commit", _failing_commit)
    response = api_client.post("/api/v1/routes", json=route_payload(catalog))
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["error_code"] == "persistence"
    assert api_client.get("/api/v1/routes").json()["count"] == 0


def test_failed_update_keeps_previous_stops(
    api_client: TestClient, catalog: dict, monkeypatch: pytest.MonkeyPatch
) -> None:
    route = _create(api_client, route_payload(catalog))
    payload = route_payload(catalog, stops=[{"dropoff_point_id": catalog["flores_id"]}])

    monkeypatch.setattr(Session, "commit", _failing_commit)
    response = api_client.put(f"/api/v1/routes/{route['id']}", json=payload)
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json()["error_code"] == "persistence"
    current = api_client.get(f"/api/v1/routes/{route['id']}").json()["route"]
    assert current["version"] == 1
    assert [s["id"] for s in current["stops"]] == [s["id"] for s in route["stops"]]
