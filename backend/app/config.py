"""
Configuration centrale de l'application via variables d'environnement.
Charger depuis un fichier .env en développement.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseBackend(str, Enum):
    SQLITE = "sqlite"
    POSTGRES = "postgres"


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Préfixes d'URL SQLAlchemy acceptés pour chaque moteur
_URL_SCHEMES = {
    DatabaseBackend.SQLITE: ("sqlite",),
    DatabaseBackend.POSTGRES: ("postgresql", "postgres"),
}


class Settings(BaseSettings):
    # Base de données
    DATABASE_BACKEND: DatabaseBackend = DatabaseBackend.SQLITE
    DATABASE_URL: str = "sqlite:///./ratings.db"
    DB_TIMEOUT: float = 10.0

    # Cache Redis (optionnel), absent : lectures directes en base
    CACHE_URL: Optional[str] = None
    CACHE_TTL: int = 10  # secondes
    CACHE_TIMEOUT: float = 5.0

    # Journalisation
    LOG_LEVEL: LogLevel = LogLevel.INFO

    # Environnement
    ENV: str = "development"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("DATABASE_BACKEND", "LOG_LEVEL", mode="before")
    @classmethod
    def lowercase_enum(cls, v):
        return v.lower() if isinstance(v, str) else v

    @field_validator("CACHE_URL")
    @classmethod
    def empty_cache_url_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("CACHE_TTL")
    @classmethod
    def ttl_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("CACHE_TTL doit être strictement positif.")
        return v

    @model_validator(mode="after")
    def url_matches_backend(self) -> "Settings":
        scheme = self.DATABASE_URL.split(":", 1)[0].split("+", 1)[0]
        if scheme not in _URL_SCHEMES[self.DATABASE_BACKEND]:
            raise ValueError(
                f"DATABASE_URL ({scheme}://...) incompatible avec le moteur "
                f"'{self.DATABASE_BACKEND.value}'."
            )
        return self


def configure_logging(level: LogLevel) -> None:
    """Applique le niveau de log configuré à la racine du logging."""
    logging.basicConfig(
        level=getattr(logging, level.value.upper()),
        format="%(asctime)s %(levelname)s %(name)s : %(message)s",
    )


settings = Settings()
