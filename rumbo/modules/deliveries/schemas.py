# rumbo/modules/deliveries/schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date as date_type
from rumbo.shared.schemas.common import BaseResponse
from rumbo.shared.schemas.statuses import StopStatus

class StopStatusRequest(BaseModel):
    status: StopStatus = Field(..., description="Nuevo estado de la entrega")

class DriverTask(BaseModel):
    """Ítem de reparto tal como lo ve el repartidor"""
    stop_id: int
    route_id: int
    batch: int
    visit_order: int
    status: str
    status_label: str
    amount: Optional[float] = None
    notes: Optional[str] = None
    dropoff_point_id: int
    dropoff_name: str
    address: Optional[str] = None
    time_window: Optional[str] = None
    phone: Optional[str] = None
    route_date: date_type
    route_notes: Optional[str] = None

class StopStatusResponse(BaseResponse):
    stop: DriverTask
    previous_status: str

class DriverTasksResponse(BaseResponse):
    driver_id: str
    driver_name: str
    day: date_type
    in_progress: List[DriverTask]
    assigned: List[DriverTask]
    completed: List[DriverTask]
