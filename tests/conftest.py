import zipfile
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from app.config.database import Base, build_session_factory
from app.shared.database import models  # noqa: F401  registra la tabla ventas
from app.main import create_app
from app.modules.ventas import LedgerState, VentasService
from app.modules.ventas.excel import export_workbook
from app.modules.ventas.schemas import VentaRecord


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ventas.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def service(session_factory):
    return VentasService(LedgerState(), session_factory)


@pytest.fixture
def offline_service():
    """Servicio sin backend configurado"""
    return VentasService(LedgerState())


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


def _broken_session_factory():
    raise RuntimeError("sin conexión")


@pytest.fixture
def broken_service():
    """Servicio cuyo backend falla en cada llamada"""
    return VentasService(LedgerState(), _broken_session_factory)


@pytest.fixture
def corrupted_workbook():
    """Libro exportado con la hoja cortada después de la fila de encabezados"""
    content = export_workbook([
        VentaRecord(fecha="2025-03-01", producto="Mate", cantidad=2, costo_unitario=100, precio_venta=150),
    ])
    source = zipfile.ZipFile(BytesIO(content))
    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w") as target:
        for item in source.infolist():
            data = source.read(item.filename)
            if item.filename == "xl/worksheets/sheet1.xml":
                xml = data.decode("utf-8")
                cut = xml.index("</row>") + len("</row>")
                data = (xml[:cut] + '<row r="2"><c r="A2" t="inlineStr"><is><t>&').encode("utf-8")
            target.writestr(item, data)
    return buffer.getvalue()
