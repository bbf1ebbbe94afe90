# rumbo/modules/catalog/service.py
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Any, Dict
import logging

from .repository import CatalogRepository
from .schemas import (
    ClientInfo, DriverInfo, ZoneInfo, DropOffPointInfo, DriverCreateRequest,
    ClientListResponse, DriverListResponse, ZoneListResponse,
    DropOffPointListResponse, DropOffPointResponse, DriverResponse
)
from rumbo.core.exceptions import (
    InputValidationError, NotFoundError, PersistenceError, UniquenessConflictError,
    is_unique_violation
)
from rumbo.shared.database.models import DropOffPoint
from rumbo.shared.schemas.common import Violation
from rumbo.shared.schemas.submissions import blank_to_none
from rumbo.shared.services.validation import validate_dropoff_submission

logger = logging.getLogger(__name__)


def dropoff_to_info(point: DropOffPoint) -> DropOffPointInfo:
    return DropOffPointInfo(
        id=point.id,
        client_id=point.client_id,
        name=point.name,
        address=point.effective_address,
        window_from=point.window_from,
        window_to=point.window_to,
        time_window=point.time_window,
        tariff=float(point.tariff) if point.tariff is not None else None,
        phone=point.effective_phone,
    )


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = CatalogRepository(db)

    async def list_clients(self) -> ClientListResponse:
        clients = [
            ClientInfo(id=c.id, name=c.name, address=c.address, phone=c.phone, email=c.email)
            for c in self.repository.list_clients()
        ]
        return ClientListResponse(success=True, message="Clientes", clients=clients, count=len(clients))

    async def list_drivers(self) -> DriverListResponse:
        drivers = [
            DriverInfo(id=d.id, name=d.name, identification=d.identification, phone=d.phone, vehicle=d.vehicle)
            for d in self.repository.list_drivers()
        ]
        return DriverListResponse(success=True, message="Repartidores", drivers=drivers, count=len(drivers))

    async def list_zones(self) -> ZoneListResponse:
        zones = [ZoneInfo(id=z.id, name=z.name) for z in self.repository.list_zones()]
        return ZoneListResponse(success=True, message="Zonas", zones=zones, count=len(zones))

    async def list_dropoff_points_for_client(self, client_id: str) -> DropOffPointListResponse:
        """Clientes de reparto de un cliente principal (alimenta el formulario de reparto)"""
        if not self.repository.get_client(client_id):
            raise NotFoundError(f"Cliente {client_id} no encontrado")

        points = [dropoff_to_info(p) for p in self.repository.list_dropoff_points_for_client(client_id)]
        return DropOffPointListResponse(
            success=True,
            message=f"Puntos de entrega del cliente",
            client_id=client_id,
            dropoff_points=points,
            count=len(points)
        )

    async def register_dropoff_point(self, payload: Any) -> DropOffPointResponse:
        submission, violations = validate_dropoff_submission(payload)
        if violations:
            raise InputValidationError(violations)

        if not self.repository.get_client(submission.client_id):
            raise InputValidationError([
                Violation(field="client_id", message="Debe seleccionar un cliente válido.")
            ])

        try:
            point = self.repository.create_dropoff_point(submission.model_dump())
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Error creando cliente de reparto")
            raise PersistenceError("No se pudo registrar el cliente de reparto") from e

        logger.info(f"Cliente de reparto #{point.id} creado para cliente {point.client_id}")
        return DropOffPointResponse(
            success=True,
            message="Cliente de reparto registrado",
            dropoff_point=dropoff_to_info(point)
        )

    async def register_driver(self, request: DriverCreateRequest) -> DriverResponse:
        data: Dict[str, Any] = request.model_dump()
        for field in ("identification", "phone", "vehicle"):
            data[field] = blank_to_none(data[field])

        try:
            driver = self.repository.create_driver(data)
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                logger.warning(f"Identificación de repartidor duplicada: {data['identification']}")
                raise UniquenessConflictError(
                    "Ya existe un repartidor con esa identificación",
                    field="identification"
                ) from e
            logger.exception("Error de integridad creando repartidor")
            raise PersistenceError("No se pudo registrar el repartidor") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Error creando repartidor")
            raise PersistenceError("No se pudo registrar el repartidor") from e

        return DriverResponse(
            success=True,
            message="Repartidor registrado",
            driver=DriverInfo(
                id=driver.id,
                name=driver.name,
                identification=driver.identification,
                phone=driver.phone,
                vehicle=driver.vehicle
            )
        )
