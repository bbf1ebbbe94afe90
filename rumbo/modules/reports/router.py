# rumbo/modules/reports/router.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from rumbo.config.database import get_db
from .service import ReportService
from .schemas import RouteReportResponse

router = APIRouter()

@router.get("/routes/{route_id}", response_model=RouteReportResponse)
async def get_route_report(
    route_id: int = Path(..., description="ID del reparto"),
    db: Session = Depends(get_db)
):
    """
    Reporte de un reparto.

    Incluye repartidor, cliente principal, zona, los ítems en orden de visita
    con dirección, horario y teléfono, total de ítems y valor total.
    """
    return await ReportService(db).build_report(route_id)
