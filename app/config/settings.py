from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # App Info
    app_name: str = "TOR Bazar Ventas API"
    version: str = "1.0.0"
    debug: bool = False

    # Database (inyectada por entorno / .env)
    database_url: Optional[str] = None

    # Resolución de configuración remota
    local_config_url: Optional[str] = Field(
        default=None,
        description="Endpoint local de configuración, ej: http://localhost:3000/api/config"
    )
    function_config_url: Optional[str] = Field(
        default=None,
        description="Función serverless que sirve la configuración"
    )
    config_request_timeout: float = 5.0
    expose_config: bool = Field(
        default=False,
        description="Servir /api/config a otras instancias"
    )

    # Formato
    currency_symbol: str = "$"

    # Excel
    export_filename: str = "TOR_Bazar_Ventas.xlsx"
    export_sheet_name: str = "Ventas"

    # CORS
    allowed_origins: List[str] = ["http://localhost:3000", "http://localhost:8888"]

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
