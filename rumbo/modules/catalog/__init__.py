# rumbo/modules/catalog/__init__.py
"""
Módulo Catálogo - Consultas de apoyo para el planificador

- Listado de clientes, repartidores y zonas
- Clientes de reparto (puntos de entrega) de un cliente principal
- Alta de clientes de reparto y repartidores

Arquitectura:
- router.py: Endpoints del catálogo
- service.py: Lógica de negocio
- repository.py: Acceso a datos
- schemas.py: Modelos de request/response
"""

from .router import router
from .service import CatalogService
from .repository import CatalogRepository

__all__ = [
    "router",
    "CatalogService",
    "CatalogRepository"
]
