# rumbo/modules/routes/__init__.py
"""
Módulo Repartos - Asignación de repartos a repartidores

- Alta de reparto con ítems en una sola transacción
- Edición con reemplazo completo de ítems y control de versión
- Baja en cascada
- Listado filtrado por fecha y repartidor
"""

from .router import router
from .service import RouteService
from .repository import RouteRepository

__all__ = [
    "router",
    "RouteService",
    "RouteRepository"
]
