"""
Servicio de logging siguiendo principio Single Responsibility
"""
import logging
import sys
from datetime import datetime
from typing import List
from .config import Config


class LoggerService:
    """Loggers por componente del backup, compartiendo formato y destino"""

    _loggers = {}

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Obtiene o crea el logger de un componente (DumpRunner, Archiver...)

        Args:
            name: Nombre del componente

        Returns:
            Logger bajo el espacio de nombres dbcourier
        """
        if name not in cls._loggers:
            cls._loggers[name] = cls._setup_logger(name)
        return cls._loggers[name]

    @classmethod
    def _setup_logger(cls, name: str) -> logging.Logger:
        logger = logging.getLogger(f"dbcourier.{name}")
        logger.setLevel(Config.LOG_LEVEL)

        if logger.handlers:
            return logger

        formatter = logging.Formatter(Config.LOG_FORMAT)
        for handler in cls._build_handlers(name):
            handler.setLevel(Config.LOG_LEVEL)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    @classmethod
    def _build_handlers(cls, name: str) -> List[logging.Handler]:
        """
        Consola siempre; archivo diario en LOG_DIR si LOG_TO_FILE está activo

        El archivo se abre con el primer mensaje (delay=True), de modo que un
        componente que no registra nada no deja archivos vacíos.
        """
        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if Config.LOG_TO_FILE:
            Config.ensure_directories()
            log_file = Config.LOG_DIR / f"{name}_{datetime.now().strftime('%Y%m%d')}.log"
            handlers.append(logging.FileHandler(log_file, encoding='utf-8', delay=True))
        return handlers
