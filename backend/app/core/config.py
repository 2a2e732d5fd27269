"""Carga de configuración de la aplicación.

Usa `pydantic-settings` para leer valores desde `.env` o variables de
entorno. Se respetan los nombres clásicos del despliegue (`PORT`,
`NODE_ENV`, `FRONTEND_URL`, `OPENAI_API_KEY`, `LOG_LEVEL`) para no tener que
tocar la infraestructura existente.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:5000",
    "http://localhost:3000",
    "https://ismyjobcooked.com",
    "https://www.ismyjobcooked.com",
]


class Settings(BaseSettings):
    """Contenedor tipado para todas las opciones configurables."""

    app_name: str = "IsMyJobCooked API"
    version: str = "1.0.0"
    port: int = 3000
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("NODE_ENV", "ENVIRONMENT"),
    )

    # CORS: el frontend desplegado se añade a la lista fija
    frontend_url: str | None = None
    allow_credentials: bool = True

    # Clave externa; sin ella el analizador trabaja sólo con heurísticas
    openai_api_key: str | None = None
    openai_model: str = "gpt-3.5-turbo"
    openai_timeout_seconds: float = 30.0
    openai_temperature: float = 0.3
    openai_max_tokens: int = 500

    # Logging
    log_level: str = "info"
    log_dir: Path | None = None  # None = sólo consola

    # Límite de peticiones por IP sobre /api/
    rate_limit_enabled: bool = True
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max_requests: int = 100

    # Frontend estático servido en producción
    static_dir: Path = Path("public")

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, populate_by_name=True, extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        """Orígenes CORS: los fijos más `FRONTEND_URL` si está definido."""
        origins = list(DEFAULT_ALLOWED_ORIGINS)
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins


@lru_cache
def get_settings() -> Settings:
    """Crea (y memoriza) la configuración de forma perezosa.

    Usamos `lru_cache` para que sólo se construya una instancia por proceso,
    evitando relecturas repetidas de `.env`.
    """

    return Settings()
