# app/modules/ventas/calculations.py
from dataclasses import dataclass
from typing import Iterable, Dict, Any

from app.shared.numbers import format_currency, format_percent
from .schemas import VentaRecord, VentaRowResponse, StatsResponse


@dataclass(frozen=True)
class VentasTotals:
    total_invertido: float
    total_vendido: float
    ganancia_total: float
    cantidad_productos: float


def compute_totals(ventas: Iterable[VentaRecord]) -> VentasTotals:
    """Totales sobre la lista actual, sin caché"""
    total_invertido = 0.0
    total_vendido = 0.0
    cantidad = 0.0
    for venta in ventas:
        total_invertido += venta.total_invertido
        total_vendido += venta.total_venta
        cantidad += venta.cantidad

    return VentasTotals(
        total_invertido=total_invertido,
        total_vendido=total_vendido,
        ganancia_total=total_vendido - total_invertido,
        cantidad_productos=cantidad,
    )


def sign_class(value: float) -> str:
    return "positive" if value >= 0 else "negative"


def format_quantity(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def render_row(index: int, venta: VentaRecord) -> VentaRowResponse:
    """Fila de la tabla con valores crudos y formateados"""
    display: Dict[str, Any] = {
        "fecha": venta.fecha,
        "producto": venta.producto,
        "cantidad": format_quantity(venta.cantidad),
        "costo_unitario": format_currency(venta.costo_unitario),
        "total_invertido": format_currency(venta.total_invertido),
        "precio_venta": format_currency(venta.precio_venta),
        "total_venta": format_currency(venta.total_venta),
        "ganancia": format_currency(venta.ganancia),
        "margen": format_percent(venta.margen),
    }
    return VentaRowResponse(
        index=index,
        display=display,
        css_class=sign_class(venta.ganancia),
        **venta.model_dump(),
    )


def render_stats(totals: VentasTotals) -> StatsResponse:
    return StatsResponse(
        total_invertido=totals.total_invertido,
        total_vendido=totals.total_vendido,
        ganancia_total=totals.ganancia_total,
        cantidad_productos=totals.cantidad_productos,
        display={
            "total_invertido": format_currency(totals.total_invertido),
            "total_vendido": format_currency(totals.total_vendido),
            "ganancia_total": format_currency(totals.ganancia_total),
            "cantidad_productos": format_quantity(totals.cantidad_productos),
        },
        ganancia_class=sign_class(totals.ganancia_total),
    )
