# rumbo/modules/catalog/repository.py
from sqlalchemy.orm import Session, joinedload
from typing import Dict, Iterable, List, Optional
import logging

from rumbo.shared.database.models import Client, DeliveryPerson, Zone, DropOffPoint

logger = logging.getLogger(__name__)

class CatalogRepository:
    """Consultas de solo lectura sobre clientes, repartidores, zonas y puntos de entrega"""

    def __init__(self, db: Session):
        self.db = db

    def list_clients(self) -> List[Client]:
        return self.db.query(Client).order_by(Client.name.asc()).all()

    def list_drivers(self) -> List[DeliveryPerson]:
        return self.db.query(DeliveryPerson).order_by(DeliveryPerson.name.asc()).all()

    def list_zones(self) -> List[Zone]:
        return self.db.query(Zone).order_by(Zone.name.asc()).all()

    def get_client(self, client_id: str) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def get_driver(self, driver_id: str) -> Optional[DeliveryPerson]:
        return self.db.query(DeliveryPerson).filter(DeliveryPerson.id == driver_id).first()

    def get_zone(self, zone_id: int) -> Optional[Zone]:
        return self.db.query(Zone).filter(Zone.id == zone_id).first()

    def list_dropoff_points_for_client(self, client_id: str) -> List[DropOffPoint]:
        """Puntos de entrega recurrentes de un cliente principal"""
        return (
            self.db.query(DropOffPoint)
            .options(joinedload(DropOffPoint.client))
            .filter(DropOffPoint.client_id == client_id)
            .order_by(DropOffPoint.name.asc())
            .all()
        )

    def get_dropoff_points(self, ids: Iterable[int]) -> Dict[int, DropOffPoint]:
        ids = set(ids)
        if not ids:
            return {}
        points = self.db.query(DropOffPoint).filter(DropOffPoint.id.in_(ids)).all()
        return {point.id: point for point in points}

    def create_dropoff_point(self, data: Dict) -> DropOffPoint:
        point = DropOffPoint(**data)
        self.db.add(point)
        self.db.commit()
        self.db.refresh(point)
        return point

    def create_driver(self, data: Dict) -> DeliveryPerson:
        driver = DeliveryPerson(**data)
        self.db.add(driver)
        self.db.commit()
        self.db.refresh(driver)
        return driver
