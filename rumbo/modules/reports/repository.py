# rumbo/modules/reports/repository.py
from sqlalchemy.orm import Session, joinedload, selectinload
from typing import Optional

from rumbo.shared.database.models import Route, Stop, DropOffPoint

class ReportRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_route_for_report(self, route_id: int) -> Optional[Route]:
        """Reparto con repartidor, cliente, zona e ítems con su cliente de reparto"""
        return (
            self.db.query(Route)
            .options(
                joinedload(Route.driver),
                joinedload(Route.client),
                joinedload(Route.zone),
                selectinload(Route.stops)
                .joinedload(Stop.dropoff_point)
                .joinedload(DropOffPoint.client)
            )
            .filter(Route.id == route_id)
            .first()
        )
