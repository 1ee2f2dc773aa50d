import logging
from typing import Optional

from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.config.settings import settings
from app.config.loader import resolve_backend_config
from app.config.database import build_engine, build_session_factory
from app.core.middleware import setup_middleware
from app.api.v1.router import api_router
from app.api.config import router as config_router
from app.modules.ventas import LedgerState, VentasService

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

def init_ventas_service() -> VentasService:
    """
    Resolver configuración y crear el servicio.
    Sin configuración el servicio queda sin backend (solo memoria).
    """
    state = LedgerState()
    backend = resolve_backend_config(settings)
    if backend is None:
        logger.error("❌ No se pudo inicializar la base de datos")
        return VentasService(state)

    engine = build_engine(backend.database_url)
    logger.info(f"✅ Base de datos inicializada (config: {backend.source})")
    return VentasService(state, build_session_factory(engine))

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 TOR Bazar Ventas API Starting...")
    logger.info(f"📍 Version: {settings.version}")
    logger.info(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")

    if getattr(app.state, "ventas_service", None) is None:
        app.state.ventas_service = init_ventas_service()

    service = app.state.ventas_service
    if service.initialized:
        await service.load_ventas()

    yield

    # Shutdown
    logger.info("🛑 TOR Bazar Ventas API Shutting down...")

def create_app(ventas_service: Optional[VentasService] = None) -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        description="Registro de ventas con ganancia, margen y exportación Excel",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan
    )
    app.state.ventas_service = ventas_service

    # Setup middleware
    setup_middleware(app)

    # Include routers
    app.include_router(api_router)
    app.include_router(config_router)

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "message": "🚀 TOR Bazar Ventas API",
            "version": settings.version,
            "status": "running",
            "docs": "/docs" if settings.debug else "Disabled in production",
            "api": "/api/v1"
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
