"""
Contratos del exportador hacia sus colaboradores externos.

Este contrato existe para:
- Mantener Clean Architecture: los casos de uso no dependen de pymongo ni de
  googleapiclient directamente.
- Facilitar tests unitarios sin Mongo ni Google Sheets reales.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from bson import ObjectId

from mongo_sheets_sync.domain.entities import Record, SheetRead


class RecordStore(Protocol):
    """
    Origen de documentos ordenado por _id.

    Implementaciones:
    - MongoRecordRepository (pymongo).
    - Fakes en memoria para tests.
    """

    def find_since(self, min_id: ObjectId) -> list[Record]:
        """
        Retorna todos los documentos con _id >= min_id, ordenados asc por _id.

        Lista vacía si no hay nada en la ventana. Cualquier fallo de conexión
        o consulta debe lanzar StoreError.
        """


class TabularSink(Protocol):
    """
    Destino tipo hoja de cálculo, direccionado con notación A1.

    Implementaciones:
    - GoogleSheetsClient (Sheets API v4).
    - Fakes en memoria para tests.
    """

    def read_range(self, range_a1: str) -> SheetRead:
        """Lee un rango. Rango sin valores -> SheetRead vacío; fallos -> SinkReadError."""

    def update_range(self, range_a1: str, values: Sequence[Sequence[Any]]) -> None:
        """Sobrescribe el rango con los valores dados. Fallos -> SinkWriteError."""

    def append_rows(self, range_a1: str, rows: Sequence[Sequence[Any]]) -> int:
        """
        Agrega filas después del contenido existente, desplazando filas
        (INSERT_ROWS) en lugar de sobrescribir. Retorna filas agregadas.
        """
