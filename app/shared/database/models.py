from sqlalchemy import Column, Integer, String, DateTime, Float
from sqlalchemy.sql import func
from app.config.database import Base

# ===== VENTAS =====

class Venta(Base):
    """Modelo de Venta - EXACTO A BD (tabla ventas)"""
    __tablename__ = "ventas"

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    producto = Column(String(255))
    cantidad = Column(Float, default=0.0)
    costo_unit = Column(Float, default=0.0)
    total_invertido = Column(Float, default=0.0)
    precio_venta = Column(Float, default=0.0)
    total_venta = Column(Float, default=0.0)
    ganancia = Column(Float, default=0.0)
    margen = Column(Float, default=0.0)
