"""
Excepciones del pipeline Mongo -> Google Sheets.

Cada familia de fallo tiene su propio código de salida para que el
scheduler (cron / task scheduler) pueda distinguirlas.
"""
from typing import Any, Optional

from mongo_sheets_sync.shared.exceptions.base import AppException


class ConfigurationError(AppException):
    """Falta o es inválida una variable de configuración. Se detecta antes de cualquier I/O."""

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        details = {"missing": missing} if missing else None
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
            exit_code=2
        )


class CredentialError(AppException):
    """La clave de la service account no se puede leer, parsear o le faltan campos."""

    def __init__(self, message: str, key_path: Optional[str] = None):
        details = {"key_path": key_path} if key_path else None
        super().__init__(
            message=message,
            error_code="CREDENTIAL_ERROR",
            details=details,
            exit_code=3
        )


class StoreError(AppException):
    """Fallo de conexión o consulta contra MongoDB."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="STORE_ERROR",
            details=details,
            exit_code=4
        )


class SinkReadError(AppException):
    """Fallo al leer la hoja destino (red, auth, rango inválido)."""

    def __init__(self, message: str, range_a1: Optional[str] = None):
        details = {"range": range_a1} if range_a1 else None
        super().__init__(
            message=message,
            error_code="SINK_READ_ERROR",
            details=details,
            exit_code=5
        )


class SinkWriteError(AppException):
    """Fallo al escribir en la hoja destino. No se reintenta."""

    def __init__(self, message: str, range_a1: Optional[str] = None):
        details = {"range": range_a1} if range_a1 else None
        super().__init__(
            message=message,
            error_code="SINK_WRITE_ERROR",
            details=details,
            exit_code=5
        )
