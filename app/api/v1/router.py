# app/api/v1/router.py
from fastapi import APIRouter, Request

from app.config.settings import settings
from app.modules.ventas import ventas_router

# Crear router principal de la API v1
api_router = APIRouter(prefix="/api/v1")

# ==================== MÓDULOS ====================

api_router.include_router(ventas_router)

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": f"{settings.app_name} v1",
        "version": settings.version,
        "status": "active",
        "available_endpoints": {
            "ventas": "/api/v1/ventas",
            "stats": "/api/v1/ventas/stats",
            "autocomplete": "/api/v1/ventas/autocomplete?q=",
            "export": "/api/v1/ventas/export",
            "import": "/api/v1/ventas/import"
        }
    }

@api_router.get("/health")
async def health_check(request: Request):
    """Health check: estado de la API y del backend"""
    service = request.app.state.ventas_service
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version,
        "database": "connected" if service.initialized else "not_configured",
        "ventas_en_memoria": len(service.state.ventas)
    }
