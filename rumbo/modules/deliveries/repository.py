# rumbo/modules/deliveries/repository.py
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from datetime import date, datetime
import logging

from rumbo.shared.database.models import Route, Stop, DropOffPoint

logger = logging.getLogger(__name__)

class DeliveryRepository:
    def __init__(self, db: Session):
        self.db = db

    def _enriched_stops(self):
        return self.db.query(Stop).options(
            joinedload(Stop.dropoff_point).joinedload(DropOffPoint.client),
            joinedload(Stop.route)
        )

    def get_stop(self, stop_id: int) -> Optional[Stop]:
        """Ítem con su cliente de reparto y su reparto precargados"""
        return self._enriched_stops().filter(Stop.id == stop_id).first()

    def update_stop_status(self, stop: Stop, new_status: str) -> Stop:
        """Cambiar estado del ítem e incrementar la versión del reparto en la misma transacción"""
        try:
            stop.status = new_status
            stop.route.version = stop.route.version + 1
            stop.route.updated_at = datetime.now()
            self.db.commit()
            self.db.refresh(stop)
            return stop
        except SQLAlchemyError:
            logger.exception(f"Error actualizando estado del ítem {stop.id}")
            self.db.rollback()
            raise

    def list_stops_for_driver(self, driver_id: str, day: date) -> List[Stop]:
        """Ítems de todos los repartos del repartidor en el día, por tanda, reparto y orden de visita"""
        return (
            self._enriched_stops()
            .join(Route, Stop.route_id == Route.id)
            .filter(Route.driver_id == driver_id, Route.date == day)
            .order_by(Route.batch.asc(), Route.id.asc(), Stop.visit_order.asc())
            .all()
        )
