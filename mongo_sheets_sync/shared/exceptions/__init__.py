from mongo_sheets_sync.shared.exceptions.base import AppException
from mongo_sheets_sync.shared.exceptions.sync import (
    ConfigurationError,
    CredentialError,
    SinkReadError,
    SinkWriteError,
    StoreError,
)

__all__ = [
    "AppException",
    "ConfigurationError",
    "CredentialError",
    "SinkReadError",
    "SinkWriteError",
    "StoreError",
]
