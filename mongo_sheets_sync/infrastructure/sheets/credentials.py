"""
Carga y validación de la clave de la service account de Google.

Fuentes soportadas (en orden de prioridad):
- GSA_KEY_JSON: el JSON completo inline.
- GSA_KEY_FILE: ruta al archivo .json (se resuelve a ruta absoluta).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from mongo_sheets_sync.shared.exceptions import CredentialError

REQUIRED_KEY_FIELDS = ("client_email", "private_key")


@dataclass(frozen=True)
class ServiceAccountKey:
    info: dict[str, Any]
    source: str
    key_path: Optional[Path] = None

    @property
    def client_email(self) -> str:
        return str(self.info.get("client_email", ""))

    @property
    def private_key_length(self) -> int:
        return len(str(self.info.get("private_key", "")))


def resolve_key_path(key_file: str) -> Path:
    return Path(key_file).expanduser().resolve()


def _parse_key_json(raw: str, *, key_path: Optional[Path] = None) -> dict[str, Any]:
    where = str(key_path) if key_path else None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CredentialError(f"La clave no es JSON valido: {e}", key_path=where) from e

    if not isinstance(data, dict):
        raise CredentialError("La clave debe ser un objeto JSON", key_path=where)

    missing = [f for f in REQUIRED_KEY_FIELDS if not data.get(f)]
    if missing:
        raise CredentialError(
            f"A la clave le faltan campos requeridos: {', '.join(missing)}",
            key_path=where,
        )
    return data


def load_service_account_key(
    *,
    key_json: Optional[str] = None,
    key_file: Optional[str] = None,
) -> ServiceAccountKey:
    """Retorna la clave parseada y validada, o lanza CredentialError."""
    if key_json:
        return ServiceAccountKey(info=_parse_key_json(key_json), source="GSA_KEY_JSON")

    if not key_file:
        raise CredentialError("No hay fuente de credenciales: define GSA_KEY_JSON o GSA_KEY_FILE")

    key_path = resolve_key_path(key_file)
    if not key_path.exists():
        raise CredentialError("Archivo de clave no encontrado", key_path=str(key_path))

    try:
        raw = key_path.read_text(encoding="utf-8")
    except OSError as e:
        raise CredentialError(f"No se pudo leer el archivo de clave: {e}", key_path=str(key_path)) from e

    return ServiceAccountKey(
        info=_parse_key_json(raw, key_path=key_path),
        source="GSA_KEY_FILE",
        key_path=key_path,
    )
