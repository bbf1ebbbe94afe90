# rumbo/modules/routes/service.py
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Tuple
from datetime import date
import logging

from .repository import RouteRepository
from .schemas import (
    RouteDetail, StopDetail, RouteSummary,
    RouteResponse, RouteListResponse, RouteDeletedResponse
)
from rumbo.core.exceptions import (
    InputValidationError, NotFoundError, PersistenceError, is_unique_violation
)
from rumbo.modules.catalog.repository import CatalogRepository
from rumbo.shared.database.models import Route
from rumbo.shared.schemas.common import Violation
from rumbo.shared.schemas.statuses import StopStatus
from rumbo.shared.schemas.submissions import RouteSubmission
from rumbo.shared.services.validation import validate_route_submission
from rumbo.shared.services.view_cache import view_cache, route_list_key

logger = logging.getLogger(__name__)


def route_to_detail(route: Route) -> RouteDetail:
    return RouteDetail(
        id=route.id,
        date=route.date,
        driver_id=route.driver_id,
        client_id=route.client_id,
        zone_id=route.zone_id,
        batch=route.batch,
        status=route.status,
        notes=route.notes,
        version=route.version,
        submission_key=route.submission_key,
        stops=[
            StopDetail(
                id=stop.id,
                route_id=stop.route_id,
                dropoff_point_id=stop.dropoff_point_id,
                visit_order=stop.visit_order,
                amount=float(stop.amount) if stop.amount is not None else None,
                notes=stop.notes,
                status=stop.status
            )
            for stop in sorted(route.stops, key=lambda s: s.visit_order)
        ]
    )


class RouteService:
    """Asignación de repartos: alta, edición con reemplazo de ítems, baja y listado"""

    def __init__(self, db: Session):
        self.db = db
        self.repository = RouteRepository(db)
        self.catalog = CatalogRepository(db)

    async def create_route(self, payload: Any) -> RouteResponse:
        """
        Crear reparto con sus ítems.

        Responsabilidades:
        - Validar entrada y referencias
        - Respetar la clave de idempotencia (reintentos seguros)
        - Delegar la transacción al repository
        - Invalidar listados cacheados
        """
        submission = self._validate(payload)

        if submission.submission_key:
            existing = self.repository.get_route_by_submission_key(submission.submission_key)
            if existing:
                logger.info(f"Reintento con clave {submission.submission_key} - reparto #{existing.id}")
                return self._replayed(existing)

        route_data, stops_data = self._to_rows(submission)
        route_data['submission_key'] = submission.submission_key

        try:
            route = self.repository.create_route_atomic(route_data, stops_data)
        except IntegrityError as e:
            # Dos envíos concurrentes con la misma clave: gana el primero
            if submission.submission_key and is_unique_violation(e):
                existing = self.repository.get_route_by_submission_key(submission.submission_key)
                if existing:
                    return self._replayed(existing)
            raise PersistenceError("No se pudo crear el reparto") from e
        except SQLAlchemyError as e:
            raise PersistenceError("No se pudo crear el reparto") from e

        view_cache.invalidate_route(route.id)

        return RouteResponse(
            success=True,
            message="Reparto creado exitosamente",
            route=route_to_detail(route),
            created=True
        )

    async def update_route(self, route_id: int, payload: Any) -> RouteResponse:
        """
        Actualizar reparto reemplazando la lista completa de ítems.

        Los ítems que no vienen en el envío se eliminan y todos los que vienen
        se recrean con nuevos IDs y orden_visita secuencial.
        """
        if not self.repository.get_route(route_id):
            raise NotFoundError(f"Reparto {route_id} no encontrado")

        submission = self._validate(payload)
        route_data, stops_data = self._to_rows(submission)

        try:
            route = self.repository.replace_route_atomic(
                route_id, route_data, stops_data, expected_version=submission.version
            )
        except SQLAlchemyError as e:
            raise PersistenceError("No se pudo actualizar el reparto") from e

        view_cache.invalidate_route(route_id)

        return RouteResponse(
            success=True,
            message="Reparto actualizado exitosamente",
            route=route_to_detail(route)
        )

    async def delete_route(self, route_id: int) -> RouteDeletedResponse:
        route = self.repository.get_route(route_id)
        if not route:
            raise NotFoundError(f"Reparto {route_id} no encontrado")

        try:
            self.repository.delete_route(route)
        except SQLAlchemyError as e:
            raise PersistenceError("No se pudo eliminar el reparto") from e

        view_cache.invalidate_route(route_id)
        logger.info(f"Reparto #{route_id} eliminado")

        return RouteDeletedResponse(success=True, message="Reparto eliminado", route_id=route_id)

    async def get_route(self, route_id: int) -> RouteResponse:
        route = self.repository.get_route(route_id)
        if not route:
            raise NotFoundError(f"Reparto {route_id} no encontrado")
        return RouteResponse(success=True, message=f"Reparto #{route_id}", route=route_to_detail(route))

    async def list_routes(
        self,
        route_date: Optional[date] = None,
        driver_id: Optional[str] = None
    ) -> RouteListResponse:
        """Listado de repartos (cacheado hasta la próxima escritura)"""
        key = route_list_key(date=route_date, driver_id=driver_id)
        summaries = view_cache.get_or_build(
            key,
            lambda: [
                RouteSummary(**row)
                for row in self.repository.list_route_summaries(route_date, driver_id)
            ]
        )
        return RouteListResponse(
            success=True,
            message="Repartos",
            routes=summaries,
            count=len(summaries)
        )

    # MÉTODOS PRIVADOS HELPERS

    def _validate(self, payload: Any) -> RouteSubmission:
        """Validación de formato y de referencias; lanza InputValidationError con todas las violaciones"""
        submission, violations = validate_route_submission(payload)
        if violations:
            raise InputValidationError(violations)

        violations = self._check_references(submission)
        if violations:
            raise InputValidationError(violations)
        return submission

    def _check_references(self, submission: RouteSubmission) -> List[Violation]:
        violations = []

        if not self.catalog.get_driver(submission.driver_id):
            violations.append(Violation(field="driver_id", message="Debe seleccionar un repartidor válido."))
        if not self.catalog.get_zone(submission.zone_id):
            violations.append(Violation(field="zone_id", message="Debe seleccionar una zona válida."))

        allowed_ids = None
        if submission.client_id:
            if not self.catalog.get_client(submission.client_id):
                violations.append(Violation(field="client_id", message="Debe seleccionar un cliente principal válido."))
            else:
                allowed_ids = {
                    point.id for point in self.catalog.list_dropoff_points_for_client(submission.client_id)
                }

        existing = self.catalog.get_dropoff_points(stop.dropoff_point_id for stop in submission.stops)
        for index, stop in enumerate(submission.stops):
            field = f"stops.{index}.dropoff_point_id"
            if stop.dropoff_point_id not in existing:
                violations.append(Violation(field=field, message="El cliente de reparto no existe."))
            elif allowed_ids is not None and stop.dropoff_point_id not in allowed_ids:
                violations.append(Violation(
                    field=field,
                    message="El cliente de reparto no pertenece al cliente principal."
                ))

        return violations

    def _to_rows(self, submission: RouteSubmission) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        route_data = {
            'date': submission.date,
            'driver_id': submission.driver_id,
            'client_id': submission.client_id,
            'zone_id': submission.zone_id,
            'batch': submission.batch,
            'status': submission.status.value,
            'notes': submission.notes,
        }
        stops_data = [
            {
                'dropoff_point_id': stop.dropoff_point_id,
                'amount': stop.amount,
                'notes': stop.notes,
                'status': (stop.status or StopStatus.PENDING).value,
            }
            for stop in submission.stops
        ]
        return route_data, stops_data

    def _replayed(self, route: Route) -> RouteResponse:
        return RouteResponse(
            success=True,
            message="Reparto ya registrado con esta clave",
            route=route_to_detail(route),
            created=False
        )
