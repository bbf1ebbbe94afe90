# rumbo/shared/schemas/submissions.py

"""
Modelos de entrada del planificador: reparto con sus ítems de entrega y
puntos de entrega (clientes de reparto).

Los textos opcionales vacíos ("") se tratan como ausentes, igual que los
formularios del panel.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from decimal import Decimal
from datetime import date as date_type

from .statuses import RouteStatus, StopStatus

TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class StopSubmission(BaseModel):
    """Ítem de entrega tal como lo envía el formulario de reparto"""
    model_config = ConfigDict(extra="ignore")

    dropoff_point_id: int = Field(..., description="ID del cliente de reparto a visitar")
    amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2, description="Valor a cobrar")
    notes: Optional[str] = Field(None, max_length=500, description="Detalle de la entrega")
    status: Optional[StopStatus] = Field(None, description="Estado inicial (por defecto pending)")

    @field_validator('amount', 'notes', 'status', mode='before')
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)


class RouteSubmission(BaseModel):
    """Reparto completo: cabecera más la lista ordenada de ítems"""
    model_config = ConfigDict(extra="ignore")

    date: date_type = Field(..., description="Fecha del reparto")
    driver_id: str = Field(..., min_length=1, description="ID del repartidor")
    client_id: Optional[str] = Field(None, description="Cliente principal (opcional)")
    zone_id: int = Field(..., description="ID de la zona")
    batch: int = Field(..., ge=1, description="Tanda")
    status: RouteStatus = Field(..., description="Estado del reparto")
    notes: Optional[str] = Field(None, max_length=500, description="Observaciones")
    stops: List[StopSubmission] = Field(default_factory=list, description="Ítems en orden de visita")
    submission_key: Optional[str] = Field(None, max_length=64, description="Clave de idempotencia")
    version: Optional[int] = Field(None, ge=1, description="Versión leída por el editor")

    @field_validator('client_id', 'notes', 'submission_key', mode='before')
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator('batch', mode='before')
    @classmethod
    def strip_batch(cls, v):
        if isinstance(v, bool):
            raise ValueError("La tanda debe ser un número entero")
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator('stops', mode='before')
    @classmethod
    def null_stops(cls, v):
        return [] if v is None else v


class DropOffPointSubmission(BaseModel):
    """Alta de cliente de reparto"""
    model_config = ConfigDict(extra="ignore")

    client_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = Field(None, max_length=255)
    window_from: Optional[str] = Field(None, pattern=TIME_PATTERN)
    window_to: Optional[str] = Field(None, pattern=TIME_PATTERN)
    tariff: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator('address', 'window_from', 'window_to', 'tariff', 'phone', mode='before')
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)
