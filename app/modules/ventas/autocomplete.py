# app/modules/ventas/autocomplete.py
from dataclasses import dataclass
from typing import Dict, List, Optional

from app.shared.numbers import format_currency, to_input_value
from .schemas import ProductoInfo


@dataclass(frozen=True)
class Suggestion:
    nombre: str
    info: ProductoInfo

    @property
    def detail(self) -> str:
        return (
            f"Último costo: {format_currency(self.info.costo_unitario)} | "
            f"Último precio: {format_currency(self.info.precio_venta)}"
        )


@dataclass(frozen=True)
class FormFill:
    """Valores con los que se completa el formulario al elegir una sugerencia"""
    producto: str
    costo_unitario: str
    precio_venta: str


class AutocompleteEngine:
    """
    Sugerencias de productos sobre el índice de productos únicos.

    Mantiene la lista abierta y el índice enfocado (-1 = ninguno).
    Las flechas recorren la lista de forma circular.
    """

    def __init__(self, productos: Dict[str, ProductoInfo]):
        self._productos = productos
        self.suggestions: List[Suggestion] = []
        self.focus = -1

    @property
    def is_open(self) -> bool:
        return bool(self.suggestions)

    def suggest(self, text: Optional[str]) -> List[Suggestion]:
        self.close()
        if not text:
            return []

        needle = text.lower()
        self.suggestions = [
            Suggestion(nombre=nombre, info=info)
            for nombre, info in self._productos.items()
            if needle in nombre.lower()
        ]
        return self.suggestions

    def move_focus(self, delta: int) -> int:
        if not self.suggestions:
            return self.focus

        self.focus += delta
        if self.focus >= len(self.suggestions):
            self.focus = 0
        if self.focus < 0:
            self.focus = len(self.suggestions) - 1
        return self.focus

    def enter(self) -> Optional[FormFill]:
        if self.focus > -1 and self.focus < len(self.suggestions):
            return self.select(self.focus)
        return None

    def select(self, index: int) -> Optional[FormFill]:
        if index < 0 or index >= len(self.suggestions):
            return None

        item = self.suggestions[index]
        fill = FormFill(
            producto=item.nombre,
            costo_unitario=to_input_value(item.info.costo_unitario),
            precio_venta=to_input_value(item.info.precio_venta),
        )
        self.close()
        return fill

    def close(self):
        self.suggestions = []
        self.focus = -1
