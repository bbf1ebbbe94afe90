# rumbo/modules/catalog/router.py
from typing import Any
from fastapi import APIRouter, Body, Depends, Path, status
from sqlalchemy.orm import Session

from rumbo.config.database import get_db
from .service import CatalogService
from .schemas import (
    ClientListResponse, DriverListResponse, ZoneListResponse,
    DropOffPointListResponse, DropOffPointResponse, DriverResponse, DriverCreateRequest
)

router = APIRouter()

@router.get("/clients", response_model=ClientListResponse)
async def list_clients(db: Session = Depends(get_db)):
    """Clientes principales ordenados por nombre"""
    return await CatalogService(db).list_clients()

@router.get("/drivers", response_model=DriverListResponse)
async def list_drivers(db: Session = Depends(get_db)):
    return await CatalogService(db).list_drivers()

@router.get("/zones", response_model=ZoneListResponse)
async def list_zones(db: Session = Depends(get_db)):
    return await CatalogService(db).list_zones()

@router.get("/clients/{client_id}/dropoff-points", response_model=DropOffPointListResponse)
async def list_dropoff_points_for_client(
    client_id: str = Path(..., description="ID del cliente principal"),
    db: Session = Depends(get_db)
):
    """
    Puntos de entrega (clientes de reparto) de un cliente principal.

    El formulario de reparto usa esta lista para elegir los ítems de entrega.
    """
    return await CatalogService(db).list_dropoff_points_for_client(client_id)

@router.post("/dropoff-points", response_model=DropOffPointResponse, status_code=status.HTTP_201_CREATED)
async def register_dropoff_point(
    payload: Any = Body(..., description="Datos del cliente de reparto"),
    db: Session = Depends(get_db)
):
    """
    Registrar un cliente de reparto.

    **Validaciones:**
    - Horarios en formato HH:MM
    - 'desde' no posterior a 'hasta' (error sobre window_to)
    - Tarifa no negativa
    """
    return await CatalogService(db).register_dropoff_point(payload)

@router.post("/drivers", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def register_driver(
    request: DriverCreateRequest,
    db: Session = Depends(get_db)
):
    """Registrar repartidor; la identificación debe ser única (409 si se repite)"""
    return await CatalogService(db).register_driver(request)
