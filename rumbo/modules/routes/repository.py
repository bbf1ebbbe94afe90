# rumbo/modules/routes/repository.py
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func
from typing import List, Dict, Any, Optional
from datetime import date, datetime
import logging

from rumbo.core.exceptions import ConflictError, NotFoundError
from rumbo.shared.database.models import Route, Stop, DeliveryPerson, Client, Zone

logger = logging.getLogger(__name__)

class RouteRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_route(self, route_id: int) -> Optional[Route]:
        return (
            self.db.query(Route)
            .options(selectinload(Route.stops))
            .filter(Route.id == route_id)
            .first()
        )

    def get_route_by_submission_key(self, submission_key: str) -> Optional[Route]:
        return self.db.query(Route).filter(Route.submission_key == submission_key).first()

    def create_route_atomic(self, route_data: Dict[str, Any], stops_data: List[Dict[str, Any]]) -> Route:
        """
        Crear reparto y sus ítems en una sola transacción.

        orden_visita = posición del ítem en la lista enviada (0, 1, 2, ...).
        Si falla cualquier INSERT se hace rollback completo: nunca queda un
        reparto con cliente principal sin ítems.
        """
        try:
            route = Route(**route_data, version=1)
            route.stops = [
                Stop(visit_order=index, **stop_data)
                for index, stop_data in enumerate(stops_data)
            ]
            self.db.add(route)
            self.db.commit()
            logger.info(f"Reparto #{route.id} creado con {len(stops_data)} ítems")

            self.db.refresh(route)
            return route

        except SQLAlchemyError:
            logger.exception("Error en transacción de creación de reparto")
            self.db.rollback()
            raise

    def replace_route_atomic(
        self,
        route_id: int,
        route_data: Dict[str, Any],
        stops_data: List[Dict[str, Any]],
        expected_version: Optional[int] = None
    ) -> Route:
        """
        Actualizar cabecera y reemplazar la lista completa de ítems.

        Proceso (una transacción):
        1. SELECT FOR UPDATE del reparto (serializa ediciones concurrentes)
        2. Verificar versión si el editor la envió
        3. Actualizar cabecera e incrementar versión
        4. Borrar todos los ítems existentes
        5. Insertar los nuevos con orden_visita secuencial
        """
        try:
            route = (
                self.db.query(Route)
                .filter(Route.id == route_id)
                .with_for_update()
                .first()
            )
            if route is None:
                raise NotFoundError(f"Reparto {route_id} no encontrado")

            if expected_version is not None and route.version != expected_version:
                raise ConflictError(
                    f"El reparto #{route_id} fue modificado (versión actual {route.version}, "
                    f"enviada {expected_version})"
                )

            for field, value in route_data.items():
                setattr(route, field, value)
            route.version = route.version + 1
            route.updated_at = datetime.now()

            route.stops.clear()
            self.db.flush()

            route.stops.extend(
                Stop(visit_order=index, **stop_data)
                for index, stop_data in enumerate(stops_data)
            )
            self.db.commit()
            logger.info(f"Reparto #{route_id} actualizado - {len(stops_data)} ítems (v{route.version})")

            self.db.refresh(route)
            return route

        except (NotFoundError, ConflictError):
            self.db.rollback()
            raise
        except SQLAlchemyError:
            logger.exception(f"Error en transacción de actualización del reparto {route_id}")
            self.db.rollback()
            raise

    def delete_route(self, route: Route) -> None:
        """Eliminar reparto; los ítems se eliminan en cascada"""
        try:
            self.db.delete(route)
            self.db.commit()
        except SQLAlchemyError:
            logger.exception(f"Error eliminando reparto {route.id}")
            self.db.rollback()
            raise

    def list_route_summaries(
        self,
        route_date: Optional[date] = None,
        driver_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Repartos con nombres de repartidor, cliente y zona más cantidad de ítems"""
        stop_counts = (
            self.db.query(
                Stop.route_id.label("route_id"),
                func.count(Stop.id).label("item_count")
            )
            .group_by(Stop.route_id)
            .subquery()
        )

        query = (
            self.db.query(
                Route,
                DeliveryPerson.name.label("driver_name"),
                Client.name.label("client_name"),
                Zone.name.label("zone_name"),
                func.coalesce(stop_counts.c.item_count, 0).label("item_count")
            )
            .join(DeliveryPerson, Route.driver_id == DeliveryPerson.id)
            .outerjoin(Client, Route.client_id == Client.id)
            .outerjoin(Zone, Route.zone_id == Zone.id)
            .outerjoin(stop_counts, stop_counts.c.route_id == Route.id)
        )

        if route_date is not None:
            query = query.filter(Route.date == route_date)
        if driver_id is not None:
            query = query.filter(Route.driver_id == driver_id)

        rows = query.order_by(Route.date.desc(), Route.batch.asc(), Route.id.asc()).all()

        return [
            {
                'id': route.id,
                'date': route.date,
                'driver_id': route.driver_id,
                'driver_name': driver_name,
                'client_id': route.client_id,
                'client_name': client_name,
                'zone_id': route.zone_id,
                'zone_name': zone_name,
                'batch': route.batch,
                'status': route.status,
                'notes': route.notes,
                'item_count': int(item_count or 0),
            }
            for route, driver_name, client_name, zone_name, item_count in rows
        ]
