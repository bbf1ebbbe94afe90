# rumbo/modules/reports/schemas.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import date as date_type
from rumbo.shared.schemas.common import BaseResponse

class ReportStop(BaseModel):
    stop_id: int
    visit_order: int
    dropoff_point_id: int
    dropoff_name: str
    address: Optional[str] = None
    time_window: Optional[str] = None
    phone: Optional[str] = None
    amount: Optional[float] = None
    notes: Optional[str] = None
    status: str

class RouteReport(BaseModel):
    route_id: int
    date: date_type
    batch: int
    status: str
    notes: Optional[str] = None
    driver_id: str
    driver_name: str
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    zone_id: int
    zone_name: str
    stops: List[ReportStop]
    total_stops: int
    total_amount: float

class RouteReportResponse(BaseResponse):
    report: RouteReport
