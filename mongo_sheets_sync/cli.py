"""
CLI: MongoDB -> Google Sheets (append incremental, sin duplicados).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer) con cadencia menor a la ventana.
  - No ejecutar dos corridas en paralelo: no hay lock entre corridas.

Variables de entorno requeridas:
  - MONGO_URI
  - SPREADSHEET_ID
  - GSA_KEY_JSON o GSA_KEY_FILE

Ejecución:
  mongo-sheets-sync
  mongo-sheets-sync --dry-run -v
  mongo-sheets-sync --check-credentials
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from dotenv import find_dotenv, load_dotenv
from loguru import logger

from mongo_sheets_sync.application.use_cases.export_use_cases import MongoToSheetsExport
from mongo_sheets_sync.core.config import Settings, build_export_config, load_settings
from mongo_sheets_sync.core.logging_config import configure_logging
from mongo_sheets_sync.domain.entities import DedupStrategy
from mongo_sheets_sync.infrastructure.mongo.record_repository import MongoRecordRepository
from mongo_sheets_sync.infrastructure.sheets.credentials import (
    load_service_account_key,
    resolve_key_path,
)
from mongo_sheets_sync.infrastructure.sheets.sheets_client import (
    GoogleSheetsClient,
    build_sheets_service,
)
from mongo_sheets_sync.shared.exceptions import AppException


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mongo-sheets-sync",
        description="Exporta a Google Sheets los documentos Mongo recientes sin duplicar filas.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Calcula header y filas pero no escribe en la hoja.",
    )
    parser.add_argument(
        "--lookback-hours",
        type=float,
        default=None,
        help="Tamaño de la ventana en horas (default: LOOKBACK_HOURS o 6).",
    )
    parser.add_argument(
        "--dedup-strategy",
        choices=[s.value for s in DedupStrategy],
        default=None,
        help="ids: lee los _id existentes en la hoja. window: confía solo en la ventana.",
    )
    parser.add_argument(
        "--check-credentials",
        action="store_true",
        help="Solo valida la clave de la service account (no conecta a Mongo ni a Sheets).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Mostrar mensajes de debug",
    )
    return parser


def check_credentials(settings: Settings) -> int:
    """
    Diagnóstico de la configuración de credenciales.

    Nunca imprime secretos: solo presencia, ruta resuelta, client_email y el
    largo de la private_key.
    """
    logger.info("---- Variables de entorno ----")
    logger.info(f"GSA_KEY_JSON presente? {bool(settings.GSA_KEY_JSON.strip())}")
    logger.info(f"GSA_KEY_FILE = {settings.GSA_KEY_FILE or '<missing>'}")
    logger.info(f"SPREADSHEET_ID = {'<present>' if settings.SPREADSHEET_ID else '<missing>'}")
    logger.info(f"MONGO_URI presente? {bool(settings.MONGO_URI)}")

    if not settings.GSA_KEY_JSON.strip() and settings.GSA_KEY_FILE.strip():
        logger.info(f"Ruta resuelta de la clave = {resolve_key_path(settings.GSA_KEY_FILE.strip())}")

    key = load_service_account_key(
        key_json=settings.GSA_KEY_JSON.strip() or None,
        key_file=settings.GSA_KEY_FILE.strip() or None,
    )
    logger.info(f"Clave cargada desde {key.source}. Campos requeridos presentes.")
    logger.info(f"client_email: {key.client_email}")
    logger.info(f"private_key length: {key.private_key_length}")
    logger.success("La clave de la service account es valida.")
    return 0


def run_export(settings: Settings, args: argparse.Namespace) -> int:
    config = build_export_config(
        settings,
        lookback_hours=args.lookback_hours,
        dedup_strategy=args.dedup_strategy,
    )

    key = load_service_account_key(key_json=config.key_json, key_file=config.key_file)
    sink = GoogleSheetsClient(build_sheets_service(key), config.spreadsheet_id)

    logger.info("Iniciando sync Mongo -> Google Sheets...")
    with MongoRecordRepository(
        config.mongo_uri,
        config.mongo_db,
        config.mongo_collection,
        timeout_ms=config.mongo_timeout_ms,
    ) as store:
        result = MongoToSheetsExport(store=store, sink=sink, config=config).run_once(dry_run=args.dry_run)

    logger.info(
        f"Sync OK: candidatos={result.candidates}, nuevos={result.new_records}, "
        f"filas_agregadas={result.appended_rows}, header_actualizado={result.header_updated}"
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    # .env del directorio de trabajo; las variables ya definidas ganan.
    load_dotenv(find_dotenv(usecwd=True), override=False)

    configure_logging("DEBUG" if args.verbose else "INFO")

    try:
        settings = load_settings()
        configure_logging("DEBUG" if args.verbose else settings.LOG_LEVEL, settings.LOG_FILE or None)

        if args.check_credentials:
            return check_credentials(settings)
        return run_export(settings, args)
    except AppException as e:
        logger.error(f"{e.error_code}: {e.message}")
        if e.details:
            logger.debug(f"Detalles: {e.details}")
        return e.exit_code
    except Exception as e:
        logger.exception(f"Error fatal: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
