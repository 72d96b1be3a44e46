from __future__ import annotations

from datetime import timedelta

import pytest

from fakes import FakeSheet, InMemoryRecordStore, oid_at
from mongo_sheets_sync import cli
from mongo_sheets_sync.domain.entities import utc_now
from mongo_sheets_sync.shared.exceptions import StoreError


class _FakeRepository:
    store = InMemoryRecordStore()
    fail_with: Exception | None = None

    def __init__(self, uri, database, collection, *, timeout_ms=10000) -> None:
        self.uri = uri

    def __enter__(self):
        if self.fail_with:
            raise self.fail_with
        return self.store

    def __exit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def configured_env(clean_env, key_file):
    clean_env.setenv("MONGO_URI", "mongodb://localhost:27017")
    clean_env.setenv("SPREADSHEET_ID", "sheet-123")
    clean_env.setenv("GSA_KEY_FILE", str(key_file))
    return clean_env


@pytest.fixture
def fake_io(configured_env):
    sheet = FakeSheet()
    _FakeRepository.store = InMemoryRecordStore([
        {"_id": oid_at(utc_now() - timedelta(hours=1)), "name": "Ana"},
    ])
    _FakeRepository.fail_with = None
    configured_env.setattr(cli, "build_sheets_service", lambda key: object())
    configured_env.setattr(cli, "GoogleSheetsClient", lambda service, spreadsheet_id: sheet)
    configured_env.setattr(cli, "MongoRecordRepository", _FakeRepository)
    return sheet


def test_missing_configuration_exits_before_any_io(clean_env, monkeypatch) -> None:
    def _boom(*args, **kwargs):
        raise AssertionError("no deberia conectar")

    monkeypatch.setattr(cli, "MongoRecordRepository", _boom)
    monkeypatch.setattr(cli, "build_sheets_service", _boom)

    assert cli.main([]) == 2


def test_invalid_key_exits_with_credential_code(configured_env, key_file) -> None:
    key_file.write_text('{"client_email": "x"}', encoding="utf-8")
    configured_env.setattr(cli, "MongoRecordRepository", _FakeRepository)
    assert cli.main([]) == 3


def test_check_credentials_reports_valid_key(configured_env) -> None:
    assert cli.main(["--check-credentials"]) == 0


def test_check_credentials_without_source_fails(clean_env) -> None:
    assert cli.main(["--check-credentials"]) == 3


def test_full_run_appends_and_exits_zero(fake_io) -> None:
    assert cli.main([]) == 0
    assert fake_io.header == ["_id", "name"]
    assert fake_io.data_rows[0][1] == "Ana"

    # Segunda corrida: nada nuevo, sigue siendo exito.
    assert cli.main([]) == 0
    assert len(fake_io.data_rows) == 1


def test_dry_run_flag(fake_io) -> None:
    assert cli.main(["--dry-run", "-v"]) == 0
    assert fake_io.grid == []


def test_store_fault_exits_with_store_code(fake_io) -> None:
    _FakeRepository.fail_with = StoreError("No se pudo conectar a MongoDB")
    assert cli.main([]) == 4


def test_unexpected_error_exits_one(fake_io) -> None:
    _FakeRepository.fail_with = RuntimeError("inesperado")
    assert cli.main([]) == 1


def test_lower_case_log_level_is_accepted(configured_env, fake_io, capsys) -> None:
    configured_env.setenv("LOG_LEVEL", "info")

    assert cli.main([]) == 0
    assert "Sync OK" in capsys.readouterr().err


def test_unknown_log_level_exits_with_config_code_and_reports_it(configured_env, fake_io, capsys) -> None:
    configured_env.setenv("LOG_LEVEL", "chatty")

    assert cli.main([]) == 2
    err = capsys.readouterr().err
    assert "CONFIGURATION_ERROR" in err
    assert "LOG_LEVEL" in err
    assert fake_io.grid == []
