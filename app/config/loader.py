# app/config/loader.py
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendConfig:
    database_url: str
    source: str


def _fetch_remote_config(url: str, timeout: float) -> Optional[str]:
    """
    GET a un endpoint de configuración.
    Retorna databaseUrl o None si el endpoint no responde o no la trae.
    """
    try:
        res = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        logger.info(f"ℹ️ {url} no disponible: {e}")
        return None

    if not res.ok:
        logger.info(f"ℹ️ {url} respondió {res.status_code}")
        return None

    try:
        payload = res.json()
    except ValueError:
        logger.info(f"ℹ️ {url} no devolvió JSON válido")
        return None

    database_url = payload.get("databaseUrl") if isinstance(payload, dict) else None
    return database_url or None


def resolve_backend_config(settings: Settings) -> Optional[BackendConfig]:
    """
    Resolver configuración del backend en orden:
    1. Endpoint local (LOCAL_CONFIG_URL)
    2. Función serverless (FUNCTION_CONFIG_URL)
    3. Variables de entorno / .env (DATABASE_URL)

    Gana la primera que responda. Si ninguna, retorna None y el ledger
    queda sin inicializar.
    """
    endpoints = [
        ("local", settings.local_config_url),
        ("function", settings.function_config_url),
    ]
    for source, url in endpoints:
        if not url:
            continue
        database_url = _fetch_remote_config(url, settings.config_request_timeout)
        if database_url:
            logger.info(f"✅ Config cargada desde {url} ({source})")
            return BackendConfig(database_url=database_url, source=source)

    if settings.database_url:
        logger.info("✅ Config cargada desde variables de entorno")
        return BackendConfig(database_url=settings.database_url, source="env")

    logger.error("❌ Error: DATABASE_URL no configurada. Revisa:")
    logger.error("   1. LOCAL_CONFIG_URL / FUNCTION_CONFIG_URL")
    logger.error("   2. O definir DATABASE_URL en el entorno o en .env")
    return None
