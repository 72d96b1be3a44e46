"""
Cliente mínimo de Google Sheets API v4 (googleapiclient + service account).

Requisitos cubiertos:
- leer un rango A1 distinguiendo "sin valores" de un error real
- sobrescribir un rango (valueInputOption=RAW)
- agregar filas con INSERT_ROWS

Sin reintentos: un fallo aborta la corrida y la próxima ejecución se apoya
en el dedup por ids.
"""

from __future__ import annotations

from typing import Any, Sequence

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from mongo_sheets_sync.domain.entities import SheetRead
from mongo_sheets_sync.infrastructure.sheets.credentials import ServiceAccountKey
from mongo_sheets_sync.shared.exceptions import CredentialError, SinkReadError, SinkWriteError

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def build_sheets_service(key: ServiceAccountKey) -> Any:
    """Retorna un recurso `sheets` v4 autenticado con la service account."""
    try:
        credentials = service_account.Credentials.from_service_account_info(key.info, scopes=SCOPES)
    except (ValueError, GoogleAuthError) as e:
        where = str(key.key_path) if key.key_path else None
        raise CredentialError(f"La clave fue rechazada por google-auth: {e}", key_path=where) from e
    return build("sheets", "v4", credentials=credentials, cache_discovery=False)


def _describe_http_error(e: HttpError) -> str:
    status = getattr(e.resp, "status", "?")
    reason = getattr(e, "reason", None) or str(e)
    return f"HTTP {status}: {reason}"


class GoogleSheetsClient:
    """Implementa TabularSink sobre un spreadsheet concreto."""

    def __init__(self, service: Any, spreadsheet_id: str) -> None:
        self._service = service
        self._spreadsheet_id = spreadsheet_id

    def _values(self) -> Any:
        return self._service.spreadsheets().values()

    def read_range(self, range_a1: str) -> SheetRead:
        try:
            res = self._values().get(spreadsheetId=self._spreadsheet_id, range=range_a1).execute()
        except (HttpError, GoogleAuthError) as e:
            detail = _describe_http_error(e) if isinstance(e, HttpError) else str(e)
            raise SinkReadError(f"No se pudo leer {range_a1}: {detail}", range_a1=range_a1) from e

        # La API omite "values" cuando el rango está vacío.
        values = res.get("values") or []
        if not values:
            return SheetRead.empty()
        return SheetRead(rows=[[str(cell) for cell in row] for row in values])

    def update_range(self, range_a1: str, values: Sequence[Sequence[Any]]) -> None:
        try:
            self._values().update(
                spreadsheetId=self._spreadsheet_id,
                range=range_a1,
                valueInputOption="RAW",
                body={"values": [list(row) for row in values]},
            ).execute()
        except (HttpError, GoogleAuthError) as e:
            detail = _describe_http_error(e) if isinstance(e, HttpError) else str(e)
            raise SinkWriteError(f"No se pudo escribir {range_a1}: {detail}", range_a1=range_a1) from e

    def append_rows(self, range_a1: str, rows: Sequence[Sequence[Any]]) -> int:
        if not rows:
            return 0
        try:
            self._values().append(
                spreadsheetId=self._spreadsheet_id,
                range=range_a1,
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [list(row) for row in rows]},
            ).execute()
        except (HttpError, GoogleAuthError) as e:
            detail = _describe_http_error(e) if isinstance(e, HttpError) else str(e)
            raise SinkWriteError(f"No se pudo agregar filas en {range_a1}: {detail}", range_a1=range_a1) from e
        return len(rows)
