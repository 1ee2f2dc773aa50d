# app/modules/ventas/router.py
from fastapi import APIRouter, Depends, HTTPException, File, UploadFile, Request
from fastapi.responses import Response
from typing import Optional

from app.config.settings import settings
from .autocomplete import AutocompleteEngine
from .calculations import compute_totals, render_row, render_stats
from .excel import ExcelImportError
from .service import VentasService
from .schemas import (
    VentaCreateRequest, VentaMutationResponse, VentasListResponse,
    StatsResponse, AutocompleteResponse, SuggestionResponse,
    FormFillResponse, FocusMoveRequest, ImportResponse, SyncResult
)

router = APIRouter(prefix="/ventas", tags=["Ventas"])

IMPORT_ERROR_MESSAGE = (
    "Error al importar el archivo. Asegúrate de que sea un archivo Excel "
    "válido exportado desde TOR Bazar."
)

def get_service(request: Request) -> VentasService:
    """Servicio ligado al estado de la aplicación"""
    return request.app.state.ventas_service

def _stats(service: VentasService) -> StatsResponse:
    return render_stats(compute_totals(service.state.ventas))

def _autocomplete_response(engine: AutocompleteEngine) -> AutocompleteResponse:
    return AutocompleteResponse(
        open=engine.is_open,
        focus=engine.focus,
        suggestions=[
            SuggestionResponse(
                index=i,
                nombre=s.nombre,
                costo_unitario=s.info.costo_unitario,
                precio_venta=s.info.precio_venta,
                label=s.nombre,
                detail=s.detail,
                active=i == engine.focus
            )
            for i, s in enumerate(engine.suggestions)
        ]
    )

# ==================== TABLA Y ESTADÍSTICAS ====================

@router.get("", response_model=VentasListResponse)
async def list_ventas(service: VentasService = Depends(get_service)):
    """Tabla de ventas en el orden actual con totales"""
    return VentasListResponse(
        ventas=[render_row(i, v) for i, v in enumerate(service.state.ventas)],
        stats=_stats(service)
    )

@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: VentasService = Depends(get_service)):
    return _stats(service)

@router.post("/reload", response_model=VentasListResponse)
async def reload_ventas(service: VentasService = Depends(get_service)):
    """
    Recargar desde la base de datos (reemplaza la lista en memoria)
    """
    result = await service.load_ventas()
    if not result.ok:
        raise HTTPException(
            status_code=502,
            detail=f"Error al cargar datos. Verifica los logs. ({result.error})"
        )
    return await list_ventas(service)

# ==================== AUTOCOMPLETADO ====================

@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(q: Optional[str] = "", service: VentasService = Depends(get_service)):
    """Sugerencias por coincidencia parcial (sin distinguir mayúsculas)"""
    engine = service.state.autocomplete
    engine.suggest(q)
    return _autocomplete_response(engine)

@router.post("/autocomplete/focus", response_model=AutocompleteResponse)
async def move_autocomplete_focus(
    move: FocusMoveRequest,
    service: VentasService = Depends(get_service)
):
    engine = service.state.autocomplete
    engine.move_focus(1 if move.direction == "down" else -1)
    return _autocomplete_response(engine)

@router.post("/autocomplete/enter", response_model=Optional[FormFillResponse])
async def autocomplete_enter(service: VentasService = Depends(get_service)):
    """Enter sobre el ítem enfocado; null si no hay foco"""
    fill = service.state.autocomplete.enter()
    return FormFillResponse(**fill.__dict__) if fill else None

@router.post("/autocomplete/select/{index}", response_model=FormFillResponse)
async def autocomplete_select(index: int, service: VentasService = Depends(get_service)):
    fill = service.state.autocomplete.select(index)
    if fill is None:
        raise HTTPException(status_code=404, detail="Sugerencia no encontrada")
    return FormFillResponse(**fill.__dict__)

@router.delete("/autocomplete", response_model=AutocompleteResponse)
async def close_autocomplete(service: VentasService = Depends(get_service)):
    """Cerrar la lista (click fuera del campo)"""
    engine = service.state.autocomplete
    engine.close()
    return _autocomplete_response(engine)

# ==================== ALTA / BAJA ====================

@router.post("", response_model=VentaMutationResponse)
async def create_venta(
    venta_request: VentaCreateRequest,
    service: VentasService = Depends(get_service)
):
    """
    Registrar una venta.

    La venta queda en memoria aunque falle el guardado remoto;
    en ese caso la respuesta incluye `alert`.
    """
    index, venta, sync = await service.add_venta(venta_request)

    return VentaMutationResponse(
        success=True,
        venta=render_row(index, venta),
        stats=_stats(service),
        sync=sync,
        alert=None if sync.ok else f"Error al guardar en la base de datos: {sync.error}"
    )

@router.delete("/{index}", response_model=VentaMutationResponse)
async def delete_venta(index: int, service: VentasService = Depends(get_service)):
    """Eliminar por posición en la tabla"""
    venta, sync = await service.delete_venta(index)

    alert = None
    if sync is not None and not sync.ok:
        alert = f"Error al eliminar de la base de datos: {sync.error}"

    return VentaMutationResponse(
        success=True,
        venta=render_row(index, venta),
        stats=_stats(service),
        sync=sync,
        alert=alert
    )

@router.post("/sync", response_model=SyncResult)
async def sync_ventas(service: VentasService = Depends(get_service)):
    return await service.sync()

# ==================== EXCEL ====================

@router.get("/export")
async def export_ventas(service: VentasService = Depends(get_service)):
    content = service.export_excel(settings.export_sheet_name)
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{settings.export_filename}"'}
    )

@router.post("/import", response_model=ImportResponse)
async def import_ventas(
    file: UploadFile = File(..., description="Archivo .xlsx exportado desde TOR Bazar"),
    service: VentasService = Depends(get_service)
):
    """
    Importar ventas desde Excel.

    Los errores al guardar en la base solo se registran en logs.
    """
    content = await file.read()
    try:
        imported, failed = await service.import_excel(content)
    except ExcelImportError:
        raise HTTPException(status_code=400, detail=IMPORT_ERROR_MESSAGE)

    return ImportResponse(
        success=True,
        imported=imported,
        message=f"Se importaron {imported} productos correctamente",
        stats=_stats(service),
        failed_remote=failed
    )
