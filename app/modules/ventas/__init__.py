# app/modules/ventas/__init__.py
"""
Módulo de Ventas - Ledger de ventas de TOR Bazar

Funcionalidades:
- Registro de ventas con cálculo de ganancia y margen
- Tabla y estadísticas acumuladas
- Autocompletado de productos con último costo/precio
- Exportación / importación Excel
- Réplica de cada cambio en la base de datos

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio y llamadas remotas
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic
- state.py: Estado de la sesión (ventas, productos, autocompletado)
- calculations.py: Totales y formato de filas
- autocomplete.py: Motor de sugerencias
- excel.py: Lectura / escritura .xlsx
"""

from .router import router as ventas_router
from .service import VentasService, BackendNotConfiguredError
from .repository import VentasRepository
from .state import LedgerState

__all__ = [
    "ventas_router",
    "VentasService",
    "BackendNotConfiguredError",
    "VentasRepository",
    "LedgerState"
]
