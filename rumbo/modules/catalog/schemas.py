# rumbo/modules/catalog/schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from rumbo.shared.schemas.common import BaseResponse

class ClientInfo(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

class DriverInfo(BaseModel):
    id: str
    name: str
    identification: Optional[str] = None
    phone: Optional[str] = None
    vehicle: Optional[str] = None

class ZoneInfo(BaseModel):
    id: int
    name: str

class DropOffPointInfo(BaseModel):
    id: int
    client_id: str
    name: str
    address: Optional[str] = None
    window_from: Optional[str] = None
    window_to: Optional[str] = None
    time_window: Optional[str] = None
    tariff: Optional[float] = None
    phone: Optional[str] = None

class DriverCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Nombre del repartidor")
    identification: Optional[str] = Field(None, max_length=50, description="Documento (único)")
    phone: Optional[str] = Field(None, max_length=20)
    vehicle: Optional[str] = Field(None, max_length=100)

class ClientListResponse(BaseResponse):
    clients: List[ClientInfo]
    count: int

class DriverListResponse(BaseResponse):
    drivers: List[DriverInfo]
    count: int

class ZoneListResponse(BaseResponse):
    zones: List[ZoneInfo]
    count: int

class DropOffPointListResponse(BaseResponse):
    client_id: str
    dropoff_points: List[DropOffPointInfo]
    count: int

class DropOffPointResponse(BaseResponse):
    dropoff_point: DropOffPointInfo

class DriverResponse(BaseResponse):
    driver: DriverInfo
