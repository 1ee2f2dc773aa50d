# app/modules/ventas/excel.py
"""
Exportación / importación de ventas en .xlsx (openpyxl).

El archivo exportado tiene una hoja con una fila por venta, una fila vacía
y una fila RESUMEN con los totales. La importación acepta cualquier libro
con los encabezados Fecha, Producto, Cantidad, Costo Unitario y Precio Venta.
"""
from datetime import date, datetime
from io import BytesIO
from typing import Any, Dict, List, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from .calculations import compute_totals
from .schemas import VentaRecord, format_fecha

SUMMARY_MARKER = "RESUMEN"

HEADERS = [
    "Fecha",
    "Producto",
    "Cantidad",
    "Costo Unitario",
    "Total Invertido",
    "Precio Venta",
    "Total Venta",
    "Ganancia",
    "Margen %",
]

IMPORT_COLUMNS = ["Fecha", "Producto", "Cantidad", "Costo Unitario", "Precio Venta"]


class ExcelImportError(ValueError):
    """El archivo no es un libro Excel legible"""


def export_workbook(ventas: Sequence[VentaRecord], sheet_name: str = "Ventas") -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    ws.append(HEADERS)
    for col in range(1, len(HEADERS) + 1):
        ws.cell(row=1, column=col).font = Font(bold=True)

    for v in ventas:
        ws.append([
            v.fecha,
            v.producto,
            v.cantidad,
            v.costo_unitario,
            v.total_invertido,
            v.precio_venta,
            v.total_venta,
            v.ganancia,
            round(v.margen, 2),
        ])

    totals = compute_totals(ventas)
    ws.append([])
    ws.append([
        SUMMARY_MARKER,
        "",
        "",
        "",
        totals.total_invertido,
        "",
        totals.total_vendido,
        totals.ganancia_total,
        "",
    ])
    ws.cell(row=ws.max_row, column=1).font = Font(bold=True)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def read_workbook_rows(content: bytes) -> List[Dict[str, Any]]:
    """
    Filas de la primera hoja como dicts {encabezado: valor}.
    Solo se conservan las columnas reconocidas; las filas vacías se omiten.
    """
    try:
        wb = load_workbook(BytesIO(content), data_only=True, read_only=True)
    except Exception as e:
        raise ExcelImportError(f"No se pudo leer el archivo XLSX: {e}") from e

    # En modo read_only las filas se parsean al iterar
    try:
        rows = wb.worksheets[0].iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return []

        headers = [str(h).strip() if h is not None else "" for h in header_row]
        index_by_name = {name: idx for idx, name in enumerate(headers) if name in IMPORT_COLUMNS}

        result: List[Dict[str, Any]] = []
        for row in rows:
            if row is None or all(cell is None or cell == "" for cell in row):
                continue
            record = {}
            for name, idx in index_by_name.items():
                value = row[idx] if idx < len(row) else None
                if value is not None and value != "":
                    record[name] = value
            result.append(record)
    except Exception as e:
        raise ExcelImportError(f"No se pudo leer el archivo XLSX: {e}") from e
    finally:
        wb.close()

    return result


def cell_to_fecha(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return format_fecha(value)
    return str(value).strip()
