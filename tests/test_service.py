import asyncio
from io import BytesIO

import pytest
from fastapi import HTTPException
from openpyxl import Workbook

from app.modules.ventas import LedgerState, VentasService
from app.modules.ventas.repository import VentasRepository
from app.modules.ventas.excel import ExcelImportError, export_workbook
from app.modules.ventas.schemas import VentaCreateRequest, VentaRecord, SyncResult


def request(**overrides):
    data = {
        "fecha": "2025-03-01",
        "producto": "Mate",
        "cantidad": "2",
        "costo_unitario": "1.500",
        "precio_venta": "2.250,50",
    }
    data.update(overrides)
    return VentaCreateRequest(**data)


def test_add_venta_parses_and_persists(service, session_factory):
    index, venta, sync = asyncio.run(service.add_venta(request()))

    assert index == 0
    assert venta.costo_unitario == 1500
    assert venta.precio_venta == 2250.5
    assert venta.id is None
    assert sync.ok
    assert service.state.productos["Mate"].precio_venta == 2250.5

    fresh = VentasService(LedgerState(), session_factory)
    assert asyncio.run(fresh.load_ventas()).ok
    [loaded] = fresh.state.ventas
    assert loaded.id is not None
    assert loaded.fecha == "2025-03-01"
    assert loaded.ganancia == venta.ganancia


def test_add_venta_rejects_invalid_values(service):
    for bad in (request(cantidad="0"), request(costo_unitario="-1"), request(precio_venta="-5")):
        with pytest.raises(HTTPException) as exc:
            asyncio.run(service.add_venta(bad))
        assert exc.value.status_code == 400
    assert service.state.ventas == []


def test_add_venta_defaults_fecha_to_today(service):
    _, venta, _ = asyncio.run(service.add_venta(request(fecha=None)))
    assert len(venta.fecha) == 10


def test_remote_failure_keeps_record(offline_service):
    _, venta, sync = asyncio.run(offline_service.add_venta(request()))
    assert not sync.ok
    assert "no inicializada" in sync.error
    assert offline_service.state.ventas == [venta]


def test_broken_backend_insert_reports_error(broken_service):
    service = broken_service
    _, _, sync = asyncio.run(service.add_venta(request()))
    assert sync == SyncResult(ok=False, error="sin conexión")
    assert len(service.state.ventas) == 1


def test_load_failure_leaves_state_untouched(broken_service):
    service = broken_service
    service.state.add(VentaRecord(fecha="2025-03-01", producto="Mate", cantidad=1, costo_unitario=1, precio_venta=2))
    result = asyncio.run(service.load_ventas())
    assert not result.ok
    assert len(service.state.ventas) == 1


def test_load_rebuilds_product_index(service, session_factory):
    asyncio.run(service.add_venta(request(fecha="2025-03-01", precio_venta="100")))
    asyncio.run(service.add_venta(request(fecha="2025-03-05", precio_venta="120")))

    fresh = VentasService(LedgerState(), session_factory)
    fresh.state.update_producto("Obsoleto", 1, 1)
    asyncio.run(fresh.load_ventas())
    assert [v.precio_venta for v in fresh.state.ventas] == [120, 100]
    assert fresh.state.productos["Mate"].precio_venta == 120
    assert "Obsoleto" not in fresh.state.productos


class RecordingService(VentasService):
    def __init__(self):
        super().__init__(LedgerState())
        self.deleted = []

    async def delete_remote(self, venta_id):
        self.deleted.append(venta_id)
        return SyncResult(ok=True)


def test_delete_without_id_makes_no_remote_call():
    service = RecordingService()
    service.state.add(VentaRecord(fecha="2025-03-01", producto="Mate", cantidad=1, costo_unitario=1, precio_venta=2))
    venta, sync = asyncio.run(service.delete_venta(0))
    assert sync is None
    assert service.deleted == []
    assert service.state.ventas == []
    assert "Mate" in service.state.productos


def test_delete_with_id_makes_one_remote_call():
    service = RecordingService()
    service.state.add(VentaRecord(id=42, fecha="2025-03-01", producto="Mate", cantidad=1, costo_unitario=1, precio_venta=2))
    _, sync = asyncio.run(service.delete_venta(0))
    assert sync.ok
    assert service.deleted == [42]


def test_delete_out_of_range():
    service = RecordingService()
    with pytest.raises(HTTPException) as exc:
        asyncio.run(service.delete_venta(3))
    assert exc.value.status_code == 404


def test_delete_remote_against_database(service, session_factory):
    asyncio.run(service.add_venta(request()))
    asyncio.run(service.load_ventas())
    _, sync = asyncio.run(service.delete_venta(0))
    assert sync.ok

    fresh = VentasService(LedgerState(), session_factory)
    asyncio.run(fresh.load_ventas())
    assert fresh.state.ventas == []


def test_export_requires_records(service):
    with pytest.raises(HTTPException) as exc:
        service.export_excel("Ventas")
    assert exc.value.status_code == 400
    assert exc.value.detail == "No hay datos para exportar"


def test_export_then_import_preserves_inputs(service, session_factory):
    asyncio.run(service.add_venta(request()))
    asyncio.run(service.add_venta(request(producto="Bombilla", cantidad="3", costo_unitario="2.125", precio_venta="3,5")))
    content = service.export_excel("Ventas")

    target = VentasService(LedgerState(), session_factory)
    imported, failed = asyncio.run(target.import_excel(content))

    assert (imported, failed) == (2, 0)
    fields = ("fecha", "producto", "cantidad", "costo_unitario", "precio_venta", "ganancia", "margen")
    for original, copy in zip(service.state.ventas, target.state.ventas):
        for field in fields:
            assert getattr(copy, field) == getattr(original, field)
    assert target.state.productos["Bombilla"].costo_unitario == 2125


def test_import_remote_failures_are_only_counted(broken_service):
    source = [VentaRecord(fecha="2025-03-01", producto="Mate", cantidad=1, costo_unitario=1, precio_venta=2)]
    service = broken_service
    imported, failed = asyncio.run(service.import_excel(export_workbook(source)))
    assert imported == 1
    assert failed == 1
    assert len(service.state.ventas) == 1


def test_import_malformed_file(service):
    with pytest.raises(ExcelImportError):
        asyncio.run(service.import_excel(b"no es un excel"))
    assert service.state.ventas == []


def test_sync_always_confirms(offline_service):
    assert asyncio.run(offline_service.sync()).ok


def test_import_invalid_row_keeps_earlier_rows_without_remote_inserts(service, session_factory):
    wb = Workbook()
    ws = wb.active
    ws.append(["Fecha", "Producto", "Cantidad", "Costo Unitario", "Precio Venta"])
    ws.append(["2025-03-01", "Mate", "2", "100", "150"])
    ws.append(["2025-03-02", "Termo", "-3", "100", "150"])
    buffer = BytesIO()
    wb.save(buffer)

    with pytest.raises(ExcelImportError):
        asyncio.run(service.import_excel(buffer.getvalue()))

    assert [v.producto for v in service.state.ventas] == ["Mate"]
    with session_factory() as db:
        assert VentasRepository(db).list_all() == []
