# app/modules/ventas/repository.py
from datetime import datetime, date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc

from app.shared.database.models import Venta
from .schemas import VentaRecord

class VentasRepository:
    """
    Repositorio para la tabla ventas
    """

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Venta]:
        """
        Todas las ventas, más recientes primero
        """
        return self.db.query(Venta).order_by(desc(Venta.created_at)).all()

    def insert(self, venta: VentaRecord) -> Venta:
        """
        Insertar una venta con sus campos derivados
        """
        row = Venta(
            producto=venta.producto,
            cantidad=venta.cantidad,
            costo_unit=venta.costo_unitario,
            total_invertido=venta.total_invertido,
            precio_venta=venta.precio_venta,
            total_venta=venta.total_venta,
            ganancia=venta.ganancia,
            margen=round(venta.margen, 2)
        )
        created_at = parse_fecha(venta.fecha)
        if created_at is not None:
            row.created_at = created_at

        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)

        return row

    def delete_by_id(self, venta_id: int) -> bool:
        """
        Eliminar venta por ID. Retorna False si no existía.
        """
        deleted = self.db.query(Venta).filter(Venta.id == venta_id).delete()
        self.db.commit()
        return deleted > 0


def parse_fecha(fecha: str) -> Optional[datetime]:
    """
    Fecha del formulario (YYYY-MM-DD o ISO completo) a datetime.
    None deja que la BD use now().
    """
    if not fecha:
        return None
    try:
        return datetime.fromisoformat(fecha)
    except ValueError:
        pass
    try:
        return datetime.combine(date.fromisoformat(fecha[:10]), datetime.min.time())
    except ValueError:
        return None
