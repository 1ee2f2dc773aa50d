# app/modules/ventas/state.py
from typing import Dict, Iterable, List, Optional

from .autocomplete import AutocompleteEngine
from .schemas import VentaRecord, ProductoInfo


class LedgerState:
    """
    Estado de la sesión: lista de ventas, índice de productos y autocompletado.

    El orden de la lista es el orden de la tabla. El índice de productos
    no se limpia al eliminar ventas: conserva el último precio conocido.
    """

    def __init__(self):
        self.ventas: List[VentaRecord] = []
        self.productos: Dict[str, ProductoInfo] = {}
        self.autocomplete = AutocompleteEngine(self.productos)

    def update_producto(self, producto: str, costo_unitario: float, precio_venta: float):
        self.productos[producto] = ProductoInfo(
            costo_unitario=costo_unitario,
            precio_venta=precio_venta,
        )

    def add(self, venta: VentaRecord) -> int:
        self.ventas.append(venta)
        self.update_producto(venta.producto, venta.costo_unitario, venta.precio_venta)
        return len(self.ventas) - 1

    def remove(self, index: int) -> Optional[VentaRecord]:
        if index < 0 or index >= len(self.ventas):
            return None
        return self.ventas.pop(index)

    def replace_all(self, ventas: Iterable[VentaRecord]):
        self.ventas = list(ventas)
        self.productos.clear()
        # La lista viene de más nueva a más vieja: gana el uso más reciente
        for venta in reversed(self.ventas):
            if venta.producto:
                self.update_producto(venta.producto, venta.costo_unitario, venta.precio_venta)
        self.autocomplete.close()
