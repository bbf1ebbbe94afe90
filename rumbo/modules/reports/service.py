# rumbo/modules/reports/service.py
from decimal import Decimal
from sqlalchemy.orm import Session
import logging

from .repository import ReportRepository
from .schemas import ReportStop, RouteReport, RouteReportResponse
from rumbo.core.exceptions import NotFoundError
from rumbo.shared.services.view_cache import view_cache, route_report_key

logger = logging.getLogger(__name__)

class ReportService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ReportRepository(db)

    async def build_report(self, route_id: int) -> RouteReportResponse:
        """Hoja de reparto para imprimir: cabecera, ítems en orden de visita y totales"""
        key = route_report_key(route_id)
        report = view_cache.get(key)
        if report is None:
            report = self._assemble(route_id)
            view_cache.set(key, report)

        return RouteReportResponse(
            success=True,
            message=f"Reporte del reparto #{route_id}",
            report=report
        )

    def _assemble(self, route_id: int) -> RouteReport:
        route = self.repository.get_route_for_report(route_id)
        if not route:
            raise NotFoundError(f"Reparto {route_id} no encontrado")

        stops = sorted(route.stops, key=lambda s: s.visit_order)
        total_amount = sum((stop.amount or Decimal("0") for stop in stops), Decimal("0"))

        logger.debug(f"Reporte armado para reparto #{route_id} ({len(stops)} ítems)")

        return RouteReport(
            route_id=route.id,
            date=route.date,
            batch=route.batch,
            status=route.status,
            notes=route.notes,
            driver_id=route.driver_id,
            driver_name=route.driver.name,
            client_id=route.client_id,
            client_name=route.client.name if route.client else None,
            zone_id=route.zone_id,
            zone_name=route.zone.name,
            stops=[
                ReportStop(
                    stop_id=stop.id,
                    visit_order=stop.visit_order,
                    dropoff_point_id=stop.dropoff_point_id,
                    dropoff_name=stop.dropoff_point.name,
                    address=stop.dropoff_point.effective_address,
                    time_window=stop.dropoff_point.time_window,
                    phone=stop.dropoff_point.effective_phone,
                    amount=float(stop.amount) if stop.amount is not None else None,
                    notes=stop.notes,
                    status=stop.status
                )
                for stop in stops
            ],
            total_stops=len(stops),
            total_amount=float(total_amount)
        )
