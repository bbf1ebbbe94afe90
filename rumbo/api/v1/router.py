# rumbo/api/v1/router.py
from fastapi import APIRouter
from rumbo.modules.catalog.router import router as catalog_router
from rumbo.modules.routes.router import router as routes_router
from rumbo.modules.deliveries.router import router as deliveries_router
from rumbo.modules.reports.router import router as reports_router


# Crear router principal de la API v1
api_router = APIRouter()

api_router.include_router(
    catalog_router,
    prefix="/catalog",
    tags=["Catálogo"]
)

api_router.include_router(
    routes_router,
    prefix="/routes",
    tags=["Repartos"]
)

api_router.include_router(
    deliveries_router,
    prefix="/deliveries",
    tags=["Entregas - Repartidor"]
)

api_router.include_router(
    reports_router,
    prefix="/reports",
    tags=["Reportes"]
)

@api_router.get("/")
async def api_root():
    return {
        "message": "Rumbo Envios API v1",
        "modules": ["catalog", "routes", "deliveries", "reports"]
    }
