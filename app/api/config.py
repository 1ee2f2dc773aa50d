# app/api/config.py
from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from app.config.settings import settings

router = APIRouter(prefix="/api", tags=["Config"])

@router.get("/config")
async def get_backend_config():
    """
    Servir la configuración del backend a otras instancias del ledger.
    Deshabilitado salvo EXPOSE_CONFIG=true.
    """
    if not settings.expose_config:
        raise HTTPException(status_code=404, detail="Not Found")

    if not settings.database_url:
        return JSONResponse(
            status_code=500,
            content={"error": "Database variables not configured in environment"}
        )

    return {"databaseUrl": settings.database_url}
