from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from .settings import settings

# Base class for models
Base = declarative_base()

def build_engine(database_url: str) -> Engine:
    """Crear engine para la URL resuelta al iniciar"""
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        echo=settings.debug
    )

def build_session_factory(engine: Engine) -> sessionmaker:
    """Session factory ligada a un engine"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
