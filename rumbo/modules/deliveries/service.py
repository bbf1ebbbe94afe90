# rumbo/modules/deliveries/service.py
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from datetime import date, datetime
from zoneinfo import ZoneInfo
import logging

from .repository import DeliveryRepository
from .schemas import DriverTask, StopStatusResponse, DriverTasksResponse
from rumbo.config.settings import settings
from rumbo.core.exceptions import InvalidTransitionError, NotFoundError, PersistenceError
from rumbo.modules.catalog.repository import CatalogRepository
from rumbo.shared.database.models import Stop
from rumbo.shared.schemas.statuses import StopStatus, STOP_STATUS_LABELS, allowed
from rumbo.shared.services.view_cache import view_cache

logger = logging.getLogger(__name__)

# Estado de entrega -> sección de la lista del repartidor
TASK_BUCKETS: Dict[StopStatus, str] = {
    StopStatus.EN_ROUTE: "in_progress",
    StopStatus.PENDING: "assigned",
    StopStatus.DELIVERED: "completed",
}


def today() -> date:
    """Fecha actual en la zona horaria de la operación"""
    return datetime.now(ZoneInfo(settings.timezone)).date()


def stop_to_task(stop: Stop) -> DriverTask:
    point = stop.dropoff_point
    route = stop.route
    return DriverTask(
        stop_id=stop.id,
        route_id=stop.route_id,
        batch=route.batch,
        visit_order=stop.visit_order,
        status=stop.status,
        status_label=STOP_STATUS_LABELS.get(StopStatus(stop.status), stop.status),
        amount=float(stop.amount) if stop.amount is not None else None,
        notes=stop.notes,
        dropoff_point_id=stop.dropoff_point_id,
        dropoff_name=point.name,
        address=point.effective_address,
        time_window=point.time_window,
        phone=point.effective_phone,
        route_date=route.date,
        route_notes=route.notes
    )


class ItemStatusService:
    """Cambio de estado de una entrega, usado desde la app del repartidor"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = DeliveryRepository(db)

    async def set_status(self, stop_id: int, new_status: StopStatus) -> StopStatusResponse:
        stop = self.repository.get_stop(stop_id)
        if not stop:
            raise NotFoundError(f"Ítem de reparto {stop_id} no encontrado")

        previous = stop.status
        new_status = StopStatus(new_status)
        if not allowed(StopStatus(previous), new_status):
            logger.warning(f"Transición rechazada en ítem {stop_id}: {previous} -> {new_status.value}")
            raise InvalidTransitionError(previous, new_status.value)

        if previous != new_status.value:
            try:
                stop = self.repository.update_stop_status(stop, new_status.value)
            except SQLAlchemyError as e:
                raise PersistenceError("No se pudo actualizar el estado de la entrega") from e

            view_cache.invalidate_route(stop.route_id)
            logger.info(f"Ítem {stop_id} del reparto #{stop.route_id}: {previous} -> {new_status.value}")

        return StopStatusResponse(
            success=True,
            message=f"Entrega marcada como {STOP_STATUS_LABELS[new_status]}",
            stop=stop_to_task(stop),
            previous_status=previous
        )


class DriverTaskQuery:
    """Lista de tareas del día de un repartidor"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = DeliveryRepository(db)
        self.catalog = CatalogRepository(db)

    async def tasks_for_driver(self, driver_id: str, day: Optional[date] = None) -> DriverTasksResponse:
        """
        Ítems de los repartos del repartidor en el día, agrupados:

        - in_progress: en camino
        - assigned: pendientes
        - completed: entregados

        Los no entregados y cancelados no se muestran.
        """
        driver = self.catalog.get_driver(driver_id)
        if not driver:
            raise NotFoundError(f"Repartidor {driver_id} no encontrado")

        day = day or today()
        buckets: Dict[str, List[DriverTask]] = {name: [] for name in TASK_BUCKETS.values()}

        for stop in self.repository.list_stops_for_driver(driver_id, day):
            bucket = TASK_BUCKETS.get(StopStatus(stop.status))
            if bucket:
                buckets[bucket].append(stop_to_task(stop))

        total = sum(len(tasks) for tasks in buckets.values())
        return DriverTasksResponse(
            success=True,
            message=f"{total} entregas para {driver.name}",
            driver_id=driver.id,
            driver_name=driver.name,
            day=day,
            **buckets
        )
