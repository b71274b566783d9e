"""
Estrategia base para construir comandos de volcado (Strategy Pattern)
"""
from abc import ABC, abstractmethod
from typing import List
from ..logger import LoggerService
from ..models import BackupConfig, DumpCommand


class BackupStrategy(ABC):
    """Interfaz abstracta para estrategias de volcado (Open/Closed Principle)"""

    def __init__(self):
        """Inicializa la estrategia"""
        self.logger = LoggerService.get_logger(self.__class__.__name__)

    @abstractmethod
    def build_commands(self, config: BackupConfig) -> List[DumpCommand]:
        """
        Construye los comandos de volcado para la configuración

        Args:
            config: Configuración de la base de datos

        Returns:
            Lista de comandos, uno por proceso a lanzar
        """
        pass

