# rumbo/modules/deliveries/router.py
from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from rumbo.config.database import get_db
from .service import ItemStatusService, DriverTaskQuery
from .schemas import StopStatusRequest, StopStatusResponse, DriverTasksResponse

router = APIRouter()

@router.patch("/stops/{stop_id}/status", response_model=StopStatusResponse)
async def set_stop_status(
    request: StopStatusRequest,
    stop_id: int = Path(..., description="ID del ítem de reparto"),
    db: Session = Depends(get_db)
):
    """
    Actualizar estado de una entrega.

    **Transiciones válidas:**
    - pending → en_route | cancelled
    - en_route → delivered | not_delivered | cancelled
    - Repetir el estado actual no tiene efecto
    - delivered, not_delivered y cancelled son finales (409)
    """
    return await ItemStatusService(db).set_status(stop_id, request.status)

@router.get("/drivers/{driver_id}/tasks", response_model=DriverTasksResponse)
async def get_driver_tasks(
    driver_id: str = Path(..., description="ID del repartidor"),
    day: Optional[date] = Query(None, description="Fecha (por defecto hoy)"),
    db: Session = Depends(get_db)
):
    """Entregas del día del repartidor: en camino, pendientes y entregadas"""
    return await DriverTaskQuery(db).tasks_for_driver(driver_id, day)
