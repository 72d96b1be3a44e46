"""
Repositorio MongoDB (pymongo) para leer documentos por ventana de _id.

Se abre un MongoClient por corrida y se cierra al terminar (context manager).
Ningún recurso sobrevive entre corridas.
"""

from __future__ import annotations

from typing import Any, Optional

from bson import ObjectId
from pymongo import ASCENDING, MongoClient
from pymongo.errors import ConfigurationError as MongoConfigurationError
from pymongo.errors import PyMongoError

from mongo_sheets_sync.domain.entities import ID_FIELD, Record
from mongo_sheets_sync.shared.exceptions import ConfigurationError, StoreError


class MongoRecordRepository:
    def __init__(
        self,
        uri: str,
        database: str,
        collection: str,
        *,
        timeout_ms: int = 10000,
        client: Optional[MongoClient] = None,
    ) -> None:
        self._uri = uri
        self._database = database
        self._collection = collection
        self._timeout_ms = timeout_ms
        self._client = client

    def connect(self) -> "MongoRecordRepository":
        """
        Abre la conexión y verifica que el servidor responde.

        MongoClient conecta de forma perezosa; el ping hace que un URI
        inaccesible falle aquí y no a mitad de la consulta. Un URI mal formado
        (InvalidURI) es un error de configuración, no del store.
        """
        if self._client is None:
            try:
                self._client = MongoClient(self._uri, serverSelectionTimeoutMS=self._timeout_ms)
                self._client.admin.command("ping")
            except MongoConfigurationError as e:
                self.close()
                raise ConfigurationError(
                    f"MONGO_URI invalido: {e}",
                    missing=["MONGO_URI"],
                ) from e
            except PyMongoError as e:
                self.close()
                raise StoreError(
                    f"No se pudo conectar a MongoDB: {e}",
                    details={"database": self._database},
                ) from e
        return self

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "MongoRecordRepository":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def _collection_handle(self) -> Any:
        if self._client is None:
            raise StoreError("MongoRecordRepository usado sin conectar")
        return self._client[self._database][self._collection]

    def find_since(self, min_id: ObjectId) -> list[Record]:
        """Todos los documentos con _id >= min_id, ordenados asc por _id."""
        try:
            cursor = (
                self._collection_handle()
                .find({ID_FIELD: {"$gte": min_id}})
                .sort(ID_FIELD, ASCENDING)
            )
            return list(cursor)
        except PyMongoError as e:
            raise StoreError(
                f"Consulta a MongoDB falló: {e}",
                details={"database": self._database, "collection": self._collection},
            ) from e
