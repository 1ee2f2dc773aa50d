import math
from pydantic import BaseModel, Field, ConfigDict, field_validator, computed_field
from typing import List, Optional, Any
from datetime import date, datetime

# ==================== MODELO DE DOMINIO ====================

class VentaRecord(BaseModel):
    """
    Registro de venta en memoria.
    Los campos derivados se recalculan siempre desde cantidad/costo/precio.
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    fecha: str
    producto: str
    cantidad: float = Field(..., ge=0)
    costo_unitario: float = Field(..., ge=0)
    precio_venta: float = Field(..., ge=0)

    @computed_field
    @property
    def total_invertido(self) -> float:
        return self.cantidad * self.costo_unitario

    @computed_field
    @property
    def total_venta(self) -> float:
        return self.cantidad * self.precio_venta

    @computed_field
    @property
    def ganancia(self) -> float:
        return self.total_venta - self.total_invertido

    @computed_field
    @property
    def margen(self) -> float:
        if self.total_invertido > 0:
            return self.ganancia / self.total_invertido * 100
        return 0.0


class ProductoInfo(BaseModel):
    """Último costo/precio usado para un producto"""
    model_config = ConfigDict(frozen=True)

    costo_unitario: float
    precio_venta: float

# ==================== FRONTERA CON LA BD ====================

class VentaRow(BaseModel):
    """
    Validación de filas leídas del backend.
    Numéricos nulos o inválidos se convierten en 0.
    """
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    created_at: Optional[Any] = None
    producto: Optional[str] = ""
    cantidad: float = 0.0
    costo_unit: float = 0.0
    precio_venta: float = 0.0

    @field_validator("cantidad", "costo_unit", "precio_venta", mode="before")
    @classmethod
    def coerce_number(cls, v: Any):
        if v is None:
            return 0.0
        try:
            number = float(v)
        except (TypeError, ValueError):
            return 0.0
        return number if math.isfinite(number) else 0.0

    @field_validator("producto", mode="before")
    @classmethod
    def coerce_producto(cls, v: Any):
        return v or ""

    def to_record(self) -> VentaRecord:
        return VentaRecord(
            id=self.id,
            fecha=format_fecha(self.created_at),
            producto=self.producto,
            cantidad=max(self.cantidad, 0.0),
            costo_unitario=max(self.costo_unit, 0.0),
            precio_venta=max(self.precio_venta, 0.0),
        )


def format_fecha(value: Any) -> str:
    """Fecha ISO (YYYY-MM-DD) para fechas, ISO completo si trae hora"""
    if value is None:
        return ""
    if isinstance(value, datetime):
        if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)

# ==================== REQUEST SCHEMAS ====================

class VentaCreateRequest(BaseModel):
    fecha: Optional[str] = Field(None, description="Fecha de la venta (YYYY-MM-DD), hoy si se omite")
    producto: str = Field(..., min_length=1, description="Nombre del producto")
    cantidad: str = Field(..., description="Cantidad, formato es-AR")
    costo_unitario: str = Field(..., description="Costo unitario, formato es-AR")
    precio_venta: str = Field(..., description="Precio de venta, formato es-AR")

    @field_validator("cantidad", "costo_unitario", "precio_venta", mode="before")
    @classmethod
    def stringify(cls, v: Any):
        return "" if v is None else str(v)

    @field_validator("producto")
    @classmethod
    def validate_producto(cls, v: str):
        if not v.strip():
            raise ValueError("El producto no puede estar vacío")
        return v


class FocusMoveRequest(BaseModel):
    direction: str = Field(..., pattern="^(up|down)$", description="Flecha arriba/abajo")

# ==================== RESPONSE SCHEMAS ====================

class SyncResult(BaseModel):
    """Resultado de una llamada remota"""
    ok: bool
    error: Optional[str] = None


class VentaRowResponse(BaseModel):
    index: int
    id: Optional[int]
    fecha: str
    producto: str
    cantidad: float
    costo_unitario: float
    total_invertido: float
    precio_venta: float
    total_venta: float
    ganancia: float
    margen: float

    # Valores formateados para la tabla
    display: dict
    css_class: str


class StatsResponse(BaseModel):
    total_invertido: float
    total_vendido: float
    ganancia_total: float
    cantidad_productos: float
    display: dict
    ganancia_class: str


class VentaMutationResponse(BaseModel):
    success: bool
    venta: Optional[VentaRowResponse] = None
    stats: StatsResponse
    sync: Optional[SyncResult] = None
    alert: Optional[str] = None


class VentasListResponse(BaseModel):
    ventas: List[VentaRowResponse]
    stats: StatsResponse


class SuggestionResponse(BaseModel):
    index: int
    nombre: str
    costo_unitario: float
    precio_venta: float
    label: str
    detail: str
    active: bool


class AutocompleteResponse(BaseModel):
    open: bool
    focus: int
    suggestions: List[SuggestionResponse]


class FormFillResponse(BaseModel):
    producto: str
    costo_unitario: str
    precio_venta: str


class ImportResponse(BaseModel):
    success: bool
    imported: int
    message: str
    stats: StatsResponse
    failed_remote: int = 0
