"""
Configuracion central del exportador.
Lee variables de entorno (y .env) y las valida una sola vez al inicio.

Los componentes del pipeline nunca leen el entorno: reciben un ExportConfig
ya validado.
"""
import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from loguru import logger
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from mongo_sheets_sync.domain.entities import DedupStrategy
from mongo_sheets_sync.shared.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Clase de configuracion del exportador.
    Lee variables de entorno y proporciona valores por defecto.

    Requeridas: MONGO_URI, SPREADSHEET_ID y una de GSA_KEY_JSON / GSA_KEY_FILE.
    """

    # MongoDB (origen)
    MONGO_URI: str = Field(default="")
    MONGO_DB: str = Field(default="prod")
    MONGO_COLLECTION: str = Field(default="ipcregistrations")
    MONGO_TIMEOUT_MS: int = Field(default=10000)

    # Google Sheets (destino)
    SPREADSHEET_ID: str = Field(default="")
    SHEET_NAME: str = Field(default="Sheet1")

    # Service account: JSON inline tiene prioridad sobre el archivo
    GSA_KEY_JSON: str = Field(default="")
    GSA_KEY_FILE: str = Field(default="")

    # Politica de exportacion
    LOOKBACK_HOURS: float = Field(default=6.0)
    DEDUP_STRATEGY: str = Field(default=DedupStrategy.IDENTIFIERS.value)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="")

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        """Acepta el nivel en cualquier capitalizacion (info -> INFO)."""
        name = value.strip().upper()
        try:
            logger.level(name)
        except ValueError:
            raise ValueError(f"nivel de log desconocido: '{value}'") from None
        return name

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


@dataclass(frozen=True)
class ExportConfig:
    """Configuracion validada que se pasa explicitamente a cada componente."""

    mongo_uri: str
    mongo_db: str
    mongo_collection: str
    spreadsheet_id: str
    sheet_name: str
    lookback: timedelta
    dedup_strategy: DedupStrategy
    key_json: Optional[str] = None
    key_file: Optional[str] = None
    mongo_timeout_ms: int = 10000


def load_settings(**overrides) -> Settings:
    """
    Construye Settings desde el entorno.

    Un valor con tipo invalido (p.ej. LOOKBACK_HOURS=abc) se reporta como
    ConfigurationError para abortar antes de cualquier I/O.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Configuracion invalida en: {', '.join(fields)}",
            missing=fields,
        ) from e


def build_export_config(
    settings: Settings,
    *,
    lookback_hours: Optional[float] = None,
    dedup_strategy: Optional[str] = None,
) -> ExportConfig:
    """
    Valida Settings y retorna el ExportConfig inmutable de la corrida.

    Los overrides vienen de la CLI y ganan sobre el entorno.
    """
    missing = []
    if not settings.MONGO_URI.strip():
        missing.append("MONGO_URI")
    if not settings.SPREADSHEET_ID.strip():
        missing.append("SPREADSHEET_ID")
    if not settings.GSA_KEY_JSON.strip() and not settings.GSA_KEY_FILE.strip():
        missing.append("GSA_KEY_JSON/GSA_KEY_FILE")
    if missing:
        raise ConfigurationError(
            f"Faltan variables de entorno obligatorias: {', '.join(missing)}",
            missing=missing,
        )

    hours = settings.LOOKBACK_HOURS if lookback_hours is None else lookback_hours
    if not math.isfinite(hours) or hours <= 0:
        raise ConfigurationError(f"LOOKBACK_HOURS debe ser un numero finito > 0. Valor actual: {hours}")
    try:
        lookback = timedelta(hours=hours)
    except OverflowError:
        raise ConfigurationError(f"LOOKBACK_HOURS fuera de rango: {hours}") from None

    if settings.MONGO_TIMEOUT_MS <= 0:
        raise ConfigurationError(
            f"MONGO_TIMEOUT_MS debe ser > 0. Valor actual: {settings.MONGO_TIMEOUT_MS}"
        )

    raw_strategy = (dedup_strategy or settings.DEDUP_STRATEGY).strip().lower()
    try:
        strategy = DedupStrategy(raw_strategy)
    except ValueError:
        valid = ", ".join(s.value for s in DedupStrategy)
        raise ConfigurationError(
            f"DEDUP_STRATEGY invalida: '{raw_strategy}'. Valores validos: {valid}"
        ) from None

    sheet_name = settings.SHEET_NAME.strip()
    if not sheet_name:
        raise ConfigurationError("SHEET_NAME no puede estar vacio", missing=["SHEET_NAME"])

    return ExportConfig(
        mongo_uri=settings.MONGO_URI.strip(),
        mongo_db=settings.MONGO_DB.strip(),
        mongo_collection=settings.MONGO_COLLECTION.strip(),
        spreadsheet_id=settings.SPREADSHEET_ID.strip(),
        sheet_name=sheet_name,
        lookback=lookback,
        dedup_strategy=strategy,
        key_json=settings.GSA_KEY_JSON.strip() or None,
        key_file=settings.GSA_KEY_FILE.strip() or None,
        mongo_timeout_ms=settings.MONGO_TIMEOUT_MS,
    )
