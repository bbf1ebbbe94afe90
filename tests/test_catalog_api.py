from fastapi.testclient import TestClient

from rumbo.shared.services.validation import WINDOW_ORDER_MESSAGE


def test_lookups_are_sorted_by_name(api_client: TestClient, catalog: dict) -> None:
    clients = api_client.get("/api/v1/catalog/clients").json()
    drivers = api_client.get("/api/v1/catalog/drivers").json()
    zones = api_client.get("/api/v1/catalog/zones").json()

    assert [c["name"] for c in clients["clients"]] == ["El Molino", "La Espiga"]
    assert [d["name"] for d in drivers["drivers"]] == ["Luis Gómez", "Marta Ruiz"]
    assert zones["count"] == 1


def test_dropoff_points_for_client(api_client: TestClient, catalog: dict) -> None:
    response = api_client.get(f"/api/v1/catalog/clients/{catalog['client_id']}/dropoff-points")

    assert response.status_code == 200
    points = response.json()["dropoff_points"]
    assert [p["name"] for p in points] == ["Caballito", "Flores"]
    assert points[0]["time_window"] == "08:00 - 11:00"
    assert points[0]["tariff"] == 1500.0
    assert points[1]["address"] == "Av. Rivadavia 1234"


def test_dropoff_points_for_unknown_client(api_client: TestClient, catalog: dict) -> None:
    response = api_client.get("/api/v1/catalog/clients/missing/dropoff-points")

    assert response.status_code == 404


def test_register_dropoff_point(api_client: TestClient, catalog: dict) -> None:
    payload = {
        "client_id": catalog["other_client_id"],
        "name": "Boedo",
        "window_from": "07:30",
        "window_to": "07:30",
        "tariff": "900",
        "phone": "",
    }

    response = api_client.post("/api/v1/catalog/dropoff-points", json=payload)

    assert response.status_code == 201, response.text
    point = response.json()["dropoff_point"]
    assert point["time_window"] == "07:30 - 07:30"
    assert point["tariff"] == 900.0
    assert point["phone"] is None


def test_register_dropoff_point_with_inverted_window(api_client: TestClient, catalog: dict) -> None:
    payload = {"client_id": catalog["client_id"], "name": "Boedo", "window_from": "18:00", "window_to": "08:00"}

    response = api_client.post("/api/v1/catalog/dropoff-points", json=payload)

    assert response.status_code == 422
    assert response.json()["violations"] == [{"field": "window_to", "message": WINDOW_ORDER_MESSAGE}]


def test_register_dropoff_point_for_unknown_client(api_client: TestClient, catalog: dict) -> None:
    response = api_client.post("/api/v1/catalog/dropoff-points", json={"client_id": "missing", "name": "Boedo"})

    assert response.status_code == 422
    assert [v["field"] for v in response.json()["violations"]] == ["client_id"]


def test_register_driver_with_duplicate_identification(api_client: TestClient, catalog: dict) -> None:
    created = api_client.post("/api/v1/catalog/drivers", json={"name": "Ana Pérez", "identification": "40123456"})
    assert created.status_code == 201

    response = api_client.post("/api/v1/catalog/drivers", json={"name": "Otra Ana", "identification": "40123456"})

    assert response.status_code == 409
    body = response.json()
    assert body["error_code"] == "uniqueness_conflict"
    assert body["details"] == {"field": "identification"}
    assert api_client.get("/api/v1/catalog/drivers").json()["count"] == 3


def test_drivers_without_identification_do_not_collide(api_client: TestClient, catalog: dict) -> None:
    first = api_client.post("/api/v1/catalog/drivers", json={"name": "Sin DNI", "identification": ""})
    second = api_client.post("/api/v1/catalog/drivers", json={"name": "Sin DNI 2"})

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["driver"]["identification"] is None


def test_health(api_client: TestClient) -> None:
    assert api_client.get("/health").json()["status"] == "healthy"
    assert api_client.get("/api/v1/").status_code == 200


def test_non_object_dropoff_body_is_a_root_violation(api_client: TestClient, catalog: dict) -> None:
    response = api_client.post("/api/v1/catalog/dropoff-points", json="Boedo")

    assert response.status_code == 422
    assert [v["field"] for v in response.json()["violations"]] == [""]
