import os

os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from rumbo.config.database import SessionLocal, create_tables, drop_tables
from rumbo.shared.database.models import Client, DeliveryPerson, Zone, DropOffPoint
from rumbo.shared.services.view_cache import view_cache


@pytest.fixture(autouse=True)
def database():
    create_tables()
    view_cache.clear()
    yield
    view_cache.clear()
    drop_tables()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def api_client() -> TestClient:
    from rumbo.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def catalog() -> dict:
    """Dos clientes con sus puntos de entrega, dos repartidores y una zona"""
    db = SessionLocal()
    espiga = Client(name="La Espiga", address="Av. Rivadavia 1234", phone="011-4555-1234")
    molino = Client(name="El Molino", address="Corrientes 900")
    db.add_all([espiga, molino])
    db.flush()

    centro = Zone(name="Centro")
    luis = DeliveryPerson(name="Luis Gómez", identification="30111222")
    marta = DeliveryPerson(name="Marta Ruiz", identification="28999111")
    caballito = DropOffPoint(
        client_id=espiga.id, name="Caballito", address="Pedro Goyena 450",
        window_from="08:00", window_to="11:00", tariff=Decimal("1500.00")
    )
    flores = DropOffPoint(client_id=espiga.id, name="Flores", window_from="09:30")
    almagro = DropOffPoint(client_id=molino.id, name="Almagro", window_to="18:00")
    db.add_all([centro, luis, marta, caballito, flores, almagro])
    db.flush()

    ids = {
        "client_id": espiga.id,
        "other_client_id": molino.id,
        "zone_id": centro.id,
        "driver_id": luis.id,
        "other_driver_id": marta.id,
        "caballito_id": caballito.id,
        "flores_id": flores.id,
        "almagro_id": almagro.id,
    }
    db.commit()
    db.close()
    return ids


def route_payload(catalog: dict, stops=None, **overrides) -> dict:
    payload = {
        "date": date.today().isoformat(),
        "driver_id": catalog["driver_id"],
        "client_id": catalog["client_id"],
        "zone_id": catalog["zone_id"],
        "batch": 1,
        "status": "pending",
        "notes": "",
        "stops": stops if stops is not None else [
            {"dropoff_point_id": catalog["caballito_id"], "amount": 60},
            {"dropoff_point_id": catalog["flores_id"], "amount": 40},
        ],
    }
    payload.update(overrides)
    return payload
