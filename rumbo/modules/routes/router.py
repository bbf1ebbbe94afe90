# rumbo/modules/routes/router.py
from typing import Any, Optional
from datetime import date
from fastapi import APIRouter, Body, Depends, Path, Query, status
from sqlalchemy.orm import Session

from rumbo.config.database import get_db
from .service import RouteService
from .schemas import RouteResponse, RouteListResponse, RouteDeletedResponse

router = APIRouter()

@router.post("", response_model=RouteResponse, status_code=status.HTTP_201_CREATED)
async def create_route(
    payload: Any = Body(..., description="Cabecera del reparto y lista de ítems"),
    db: Session = Depends(get_db)
):
    """
    Crear reparto con sus ítems de entrega.

    **Proceso:**
    1. Validación de campos y referencias (repartidor, zona, cliente, clientes de reparto)
    2. Si hay cliente principal, debe haber al menos un ítem
    3. Cabecera e ítems se guardan en una sola transacción
    4. orden_visita = posición del ítem en la lista

    Un reintento con el mismo `submission_key` devuelve el reparto ya creado.
    """
    return await RouteService(db).create_route(payload)

@router.get("", response_model=RouteListResponse)
async def list_routes(
    route_date: Optional[date] = Query(None, alias="date", description="Fecha de reparto"),
    driver_id: Optional[str] = Query(None, description="Filtrar por repartidor"),
    db: Session = Depends(get_db)
):
    """Listado de repartos con nombres y cantidad de ítems"""
    return await RouteService(db).list_routes(route_date, driver_id)

@router.get("/{route_id}", response_model=RouteResponse)
async def get_route(
    route_id: int = Path(..., description="ID del reparto"),
    db: Session = Depends(get_db)
):
    return await RouteService(db).get_route(route_id)

@router.put("/{route_id}", response_model=RouteResponse)
async def update_route(
    route_id: int = Path(..., description="ID del reparto"),
    payload: Any = Body(..., description="Cabecera del reparto y lista completa de ítems"),
    db: Session = Depends(get_db)
):
    """
    Actualizar reparto.

    La lista de ítems enviada reemplaza por completo a la anterior.
    Si se envía `version` y no coincide con la actual se responde 409.
    """
    return await RouteService(db).update_route(route_id, payload)

@router.delete("/{route_id}", response_model=RouteDeletedResponse)
async def delete_route(
    route_id: int = Path(..., description="ID del reparto"),
    db: Session = Depends(get_db)
):
    """Eliminar reparto junto con todos sus ítems"""
    return await RouteService(db).delete_route(route_id)
