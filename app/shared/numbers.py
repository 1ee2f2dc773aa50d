# app/shared/numbers.py
"""
Parseo y formato de números en convención es-AR
(coma decimal, punto de miles).
"""
import math
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from app.config.settings import settings

_WHITESPACE = re.compile(r"\s+")
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> float:
    """
    Convertir texto con formato mixto a float.

    - Con coma: los puntos son miles y la coma es decimal ("1.234,56" -> 1234.56)
    - Solo puntos, más de uno: todos son miles ("1.234.567" -> 1234567)
    - Un solo punto seguido de exactamente 3 caracteres: miles ("1.234" -> 1234)
    - Un solo punto en otro caso: decimal ("12.5" -> 12.5)

    Vacío o no parseable retorna 0.
    """
    if not value:
        return 0.0

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    text = _WHITESPACE.sub("", str(value))

    if "," in text:
        text = text.replace(".", "").replace(",", ".", 1)
    elif "." in text:
        if text.count(".") > 1:
            text = text.replace(".", "")
        else:
            decimals = text.split(".", 1)[1]
            if len(decimals) == 3:
                text = text.replace(".", "")

    match = _NUMERIC_PREFIX.match(text)
    if not match:
        return 0.0

    try:
        number = float(match.group(0))
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def format_currency(value: float) -> str:
    """$ + monto con separador de miles '.' y dos decimales con ','"""
    # Redondeo comercial (mitad hacia arriba) sobre la representación decimal corta
    rounded = Decimal(str(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    grouped = f"{abs(rounded):,.2f}"
    localized = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{settings.currency_symbol}{sign}{localized}"


def format_percent(value: float) -> str:
    return f"{float(value):.2f}%"


def to_input_value(value: float) -> str:
    """Valor para precargar un input del formulario (decimal con coma)"""
    number = float(value)
    text = str(int(number)) if number.is_integer() else repr(number)
    return text.replace(".", ",")
