# rumbo/modules/reports/__init__.py
"""
Módulo Reportes - Hoja de reparto imprimible
"""

from .router import router
from .service import ReportService

__all__ = ["router", "ReportService"]
