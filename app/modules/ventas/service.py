# app/modules/ventas/service.py
import asyncio
import logging
from datetime import date
from typing import Callable, List, Optional, Tuple, TypeVar

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

from app.shared.numbers import parse_number
from .excel import ExcelImportError, SUMMARY_MARKER, cell_to_fecha, export_workbook, read_workbook_rows
from .repository import VentasRepository
from .schemas import VentaCreateRequest, VentaRecord, VentaRow, SyncResult
from .state import LedgerState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackendNotConfiguredError(RuntimeError):
    """El backend no se inicializó (falta DATABASE_URL)"""

    def __init__(self):
        super().__init__("Base de datos no inicializada")


class VentasService:
    """
    Servicio del ledger de ventas.

    Cada mutación se aplica primero en memoria y luego se replica en la BD.
    Las llamadas remotas corren en un thread y devuelven un SyncResult;
    un fallo remoto nunca revierte el estado en memoria.
    """

    def __init__(self, state: LedgerState, session_factory: Optional[sessionmaker] = None):
        self.state = state
        self.session_factory = session_factory

    @property
    def initialized(self) -> bool:
        return self.session_factory is not None

    # ==================== ACCESO REMOTO ====================

    def _with_repository(self, operation: Callable[[VentasRepository], T]) -> T:
        if self.session_factory is None:
            raise BackendNotConfiguredError()
        db = self.session_factory()
        try:
            return operation(VentasRepository(db))
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    async def _remote(self, operation: Callable[[VentasRepository], T]) -> T:
        return await asyncio.to_thread(self._with_repository, operation)

    async def insert_remote(self, venta: VentaRecord) -> SyncResult:
        try:
            await self._remote(lambda repo: repo.insert(venta))
        except Exception as e:
            logger.error(f"❌ Error guardando venta: {e}")
            return SyncResult(ok=False, error=str(e))
        logger.info("✅ Venta guardada en la base de datos")
        return SyncResult(ok=True)

    async def delete_remote(self, venta_id: int) -> SyncResult:
        try:
            await self._remote(lambda repo: repo.delete_by_id(venta_id))
        except Exception as e:
            logger.error(f"❌ Error eliminando venta: {e}")
            return SyncResult(ok=False, error=str(e))
        logger.info("✅ Venta eliminada de la base de datos")
        return SyncResult(ok=True)

    # ==================== CARGA ====================

    async def load_ventas(self) -> SyncResult:
        """
        Reemplazar la lista completa con lo que hay en la BD
        y reconstruir el índice de productos
        """
        if not self.initialized:
            logger.error("❌ Base de datos no inicializada")
            return SyncResult(ok=False, error=str(BackendNotConfiguredError()))

        logger.info("📥 Cargando ventas desde la base de datos...")
        try:
            rows = await self._remote(
                lambda repo: [VentaRow.model_validate(r) for r in repo.list_all()]
            )
        except Exception as e:
            logger.error(f"❌ Error cargando desde la base de datos: {e}")
            return SyncResult(ok=False, error=str(e))

        self.state.replace_all(row.to_record() for row in rows)
        logger.info(f"✅ Cargadas {len(self.state.ventas)} ventas")
        return SyncResult(ok=True)

    # ==================== ALTA / BAJA ====================

    def build_venta(self, request: VentaCreateRequest) -> VentaRecord:
        cantidad = parse_number(request.cantidad)
        costo_unitario = parse_number(request.costo_unitario)
        precio_venta = parse_number(request.precio_venta)

        if cantidad <= 0 or costo_unitario < 0 or precio_venta < 0:
            raise HTTPException(status_code=400, detail="Por favor, ingresa valores válidos")

        return VentaRecord(
            fecha=request.fecha or date.today().isoformat(),
            producto=request.producto,
            cantidad=cantidad,
            costo_unitario=costo_unitario,
            precio_venta=precio_venta,
        )

    async def add_venta(self, request: VentaCreateRequest) -> Tuple[int, VentaRecord, SyncResult]:
        venta = self.build_venta(request)
        index = self.state.add(venta)
        sync = await self.insert_remote(venta)
        return index, venta, sync

    async def delete_venta(self, index: int) -> Tuple[VentaRecord, Optional[SyncResult]]:
        """
        Baja optimista: se quita de memoria antes de la llamada remota.
        Sin ID no hay llamada remota.
        """
        venta = self.state.remove(index)
        if venta is None:
            raise HTTPException(status_code=404, detail="Venta no encontrada")

        if venta.id is None:
            return venta, None
        return venta, await self.delete_remote(venta.id)

    # ==================== EXCEL ====================

    def export_excel(self, sheet_name: str) -> bytes:
        if not self.state.ventas:
            raise HTTPException(status_code=400, detail="No hay datos para exportar")
        return export_workbook(self.state.ventas, sheet_name=sheet_name)

    async def import_excel(self, content: bytes) -> Tuple[int, int]:
        """
        Importar filas válidas, agregarlas en memoria y replicarlas en la BD.
        Retorna (importados, fallidos_en_bd).
        """
        rows = read_workbook_rows(content)

        importados: List[VentaRecord] = []
        try:
            for row in rows:
                fecha = row.get("Fecha")
                producto = row.get("Producto")
                if not fecha or fecha == SUMMARY_MARKER or not producto:
                    continue

                venta = VentaRecord(
                    fecha=cell_to_fecha(fecha),
                    producto=str(producto),
                    cantidad=parse_number(row.get("Cantidad")),
                    costo_unitario=parse_number(row.get("Costo Unitario")),
                    precio_venta=parse_number(row.get("Precio Venta")),
                )
                self.state.add(venta)
                importados.append(venta)
        except ValidationError as e:
            raise ExcelImportError(f"Fila inválida: {e}") from e

        results = await asyncio.gather(*(self.insert_remote(v) for v in importados))
        failed = sum(1 for r in results if not r.ok)
        if failed:
            logger.error(f"❌ Error guardando importados en la base de datos: {failed} de {len(importados)}")

        return len(importados), failed

    async def sync(self) -> SyncResult:
        """
        Cada cambio ya se replica individualmente; esto solo confirma
        """
        logger.info("📤 Sincronizando...")
        logger.info("✅ Sincronización completada")
        return SyncResult(ok=True)
