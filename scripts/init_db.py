"""
Script para crear las tablas y cargar datos de demostración
"""
import sys
from decimal import Decimal

from rumbo.config.database import SessionLocal, create_tables
from rumbo.modules.deliveries.service import today
from rumbo.shared.database.models import Client, DeliveryPerson, Zone, DropOffPoint, Route, Stop

def seed_demo_data():
    """Cargar zonas, un cliente con sus puntos de entrega, repartidores y un reparto del día"""

    db = SessionLocal()

    try:
        existing = db.query(Zone).count()
        if existing > 0:
            print(f"✅ Ya existen {existing} zonas en la base de datos, no se cargan datos")
            return

        zones = [Zone(name=name) for name in ["Centro", "Norte", "Sur", "Oeste"]]
        db.add_all(zones)

        client = Client(
            name="Panadería La Espiga",
            address="Av. Rivadavia 1234",
            phone="011-4555-1234",
            email="pedidos@laespiga.com"
        )
        db.add(client)
        db.flush()

        points = [
            DropOffPoint(client_id=client.id, name="Sucursal Caballito",
                         address="Av. Pedro Goyena 450", window_from="08:00", window_to="11:00",
                         tariff=Decimal("1500.00")),
            DropOffPoint(client_id=client.id, name="Sucursal Flores",
                         window_from="09:30", tariff=Decimal("1800.00"), phone="011-4611-0000"),
            DropOffPoint(client_id=client.id, name="Depósito Central",
                         address="Calle Falsa 742", window_to="18:00"),
        ]
        db.add_all(points)

        drivers = [
            DeliveryPerson(name="Luis Gómez", identification="30111222", phone="11-5555-0001", vehicle="Fiat Fiorino"),
            DeliveryPerson(name="Marta Ruiz", identification="28999111", phone="11-5555-0002", vehicle="Renault Kangoo"),
        ]
        db.add_all(drivers)
        db.flush()

        route = Route(
            date=today(),
            driver_id=drivers[0].id,
            client_id=client.id,
            zone_id=zones[0].id,
            batch=1,
            status="pending",
            notes="Primera tanda de la mañana",
            version=1
        )
        route.stops = [
            Stop(dropoff_point_id=point.id, visit_order=index,
                 amount=point.tariff, status="pending")
            for index, point in enumerate(points)
        ]
        db.add(route)

        db.commit()
        print(f"✅ Datos de demostración cargados: {len(zones)} zonas, {len(points)} puntos de entrega, "
              f"{len(drivers)} repartidores, reparto #{route.id}")

    except Exception as e:
        db.rollback()
        print(f"❌ Error cargando datos: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    print("🗄️  Creando tablas...")
    create_tables()
    if "--no-seed" not in sys.argv:
        seed_demo_data()
    print("🚀 Base de datos lista")
