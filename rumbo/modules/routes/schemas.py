# rumbo/modules/routes/schemas.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import date as date_type
from rumbo.shared.schemas.common import BaseResponse

class StopDetail(BaseModel):
    id: int
    route_id: int
    dropoff_point_id: int
    visit_order: int
    amount: Optional[float] = None
    notes: Optional[str] = None
    status: str

class RouteDetail(BaseModel):
    id: int
    date: date_type
    driver_id: str
    client_id: Optional[str] = None
    zone_id: int
    batch: int
    status: str
    notes: Optional[str] = None
    version: int
    submission_key: Optional[str] = None
    stops: List[StopDetail]

class RouteSummary(BaseModel):
    id: int
    date: date_type
    driver_id: str
    driver_name: Optional[str] = None
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    zone_id: int
    zone_name: Optional[str] = None
    batch: int
    status: str
    notes: Optional[str] = None
    item_count: int

class RouteResponse(BaseResponse):
    route: RouteDetail
    created: bool = False

class RouteListResponse(BaseResponse):
    routes: List[RouteSummary]
    count: int

class RouteDeletedResponse(BaseResponse):
    route_id: int
