# rumbo/modules/deliveries/__init__.py
"""
Módulo Entregas - Vista del repartidor

- Cambio de estado de cada entrega con tabla de transiciones
- Tareas del día agrupadas en en camino / pendientes / entregadas
"""

from .router import router
from .service import ItemStatusService, DriverTaskQuery
from .repository import DeliveryRepository

__all__ = [
    "router",
    "ItemStatusService",
    "DriverTaskQuery",
    "DeliveryRepository"
]
