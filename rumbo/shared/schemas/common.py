# rumbo/shared/schemas/common.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

class BaseResponse(BaseModel):
    success: bool
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)

class ErrorResponse(BaseResponse):
    success: bool = False
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

class Violation(BaseModel):
    """Error de validación asociado a un campo (ruta con puntos, ej. stops.0.amount)"""
    field: str
    message: str

class ValidationErrorResponse(ErrorResponse):
    error_code: str = "validation"
    violations: List[Violation] = Field(default_factory=list)
