"""
Configuracion de loguru para las corridas del exportador.
"""
import sys
from typing import Optional

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Reemplaza el sink por defecto de loguru.

    El nivel se valida antes de tocar los sinks: con un nivel desconocido
    se lanza ValueError y la configuracion anterior sigue activa.

    Args:
        level: Nivel minimo (DEBUG, INFO, ...), sin distinguir mayusculas
        log_file: Archivo opcional con rotacion
    """
    level = level.strip().upper()
    logger.level(level)

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_file:
        logger.add(
            log_file,
            rotation="500 MB",
            retention="10 days",
            level=level
        )
